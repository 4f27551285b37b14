import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.requests import HTTPConnection

from socialnet.config import Settings
from socialnet.database.connection import mongo_db_dependency
from socialnet.repositories.comment_repository import CommentRepository
from socialnet.repositories.conversation_repository import ConversationRepository
from socialnet.repositories.message_repository import MessageRepository
from socialnet.repositories.post_repository import PostRepository
from socialnet.repositories.story_repository import StoryRepository
from socialnet.repositories.user_repository import UserRepository
from socialnet.services.chat_service import ChatService
from socialnet.services.comment_service import CommentService
from socialnet.services.post_service import PostService
from socialnet.services.story_service import StoryService
from socialnet.services.user_service import UserService
from socialnet.utils.delivery import DeliveryFanout
from socialnet.utils.presence import PresenceRegistry
from socialnet.utils.security import decode_access_token


bearer_scheme = HTTPBearer(auto_error=False)


def get_app_settings(conn: HTTPConnection) -> Settings:
    # the settings create_app was built with, not the process-wide default
    return conn.app.state.settings


def get_presence(conn: HTTPConnection) -> PresenceRegistry:
    return conn.app.state.presence


def get_chat_service(db = Depends(mongo_db_dependency), presence: PresenceRegistry = Depends(get_presence)) -> ChatService:
    return ChatService(
        MessageRepository(db),
        ConversationRepository(db),
        UserRepository(db),
        DeliveryFanout(presence),
    )


def get_user_service(db = Depends(mongo_db_dependency), settings: Settings = Depends(get_app_settings)) -> UserService:
    return UserService(UserRepository(db), settings)


def get_post_service(db = Depends(mongo_db_dependency)) -> PostService:
    return PostService(PostRepository(db), CommentRepository(db), UserRepository(db))


def get_comment_service(db = Depends(mongo_db_dependency)) -> CommentService:
    return CommentService(CommentRepository(db), PostRepository(db), UserRepository(db))


def get_story_service(db = Depends(mongo_db_dependency), settings: Settings = Depends(get_app_settings)) -> StoryService:
    return StoryService(StoryRepository(db), UserRepository(db), settings.STORY_TTL_SECONDS)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db = Depends(mongo_db_dependency),
    settings: Settings = Depends(get_app_settings),
) -> dict:
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="No token, authorization denied")
    try:
        payload = decode_access_token(credentials.credentials, settings)
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token is not valid")
    user = await UserRepository(db).get_user_by_id(payload.get("sub", ""))
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token is not valid")
    return user
