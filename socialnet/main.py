import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorDatabase
from starlette.exceptions import HTTPException as StarletteHTTPException

from socialnet.config import Settings, get_settings
from socialnet.database.connection import close_mongo_connection, connect_to_mongo, mongo_db_dependency
from socialnet.logging_config import configure_logging
from socialnet.repositories.comment_repository import CommentRepository
from socialnet.repositories.conversation_repository import ConversationRepository
from socialnet.repositories.message_repository import MessageRepository
from socialnet.repositories.post_repository import PostRepository
from socialnet.repositories.story_repository import StoryRepository
from socialnet.repositories.user_repository import UserRepository
from socialnet.routers.auth import router as auth_router
from socialnet.routers.chat import router as chat_router
from socialnet.routers.comments import router as comments_router
from socialnet.routers.conversations import router as conversations_router
from socialnet.routers.posts import router as posts_router
from socialnet.routers.presence import router as presence_router
from socialnet.routers.presence import ws_router
from socialnet.routers.stories import router as stories_router
from socialnet.routers.users import router as users_router
from socialnet.services.story_service import StoryService, sweep_expired_stories
from socialnet.utils.presence import PresenceRegistry


logger = logging.getLogger(__name__)


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    await UserRepository(db).ensure_indexes()
    await ConversationRepository(db).ensure_indexes()
    await MessageRepository(db).ensure_indexes()
    await PostRepository(db).ensure_indexes()
    await CommentRepository(db).ensure_indexes()
    await StoryRepository(db).ensure_indexes()


def create_app(settings: Optional[Settings] = None, database: Optional[AsyncIOMotorDatabase] = None) -> FastAPI:
    """
    Build the API.

    ``database`` replaces the Motor connection normally opened at startup,
    which is how the tests run against an in-memory database.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = database if database is not None else await connect_to_mongo(settings)
        await ensure_indexes(db)
        app.state.db = db
        app.state.presence = PresenceRegistry()
        sweeper = None
        if settings.STORY_SWEEP_INTERVAL_SECONDS > 0:
            stories = StoryService(StoryRepository(db), UserRepository(db), settings.STORY_TTL_SECONDS)
            sweeper = asyncio.create_task(sweep_expired_stories(stories, settings.STORY_SWEEP_INTERVAL_SECONDS))
        logger.info("%s started", settings.APP_NAME)
        try:
            yield
        finally:
            if sweeper is not None:
                sweeper.cancel()
                try:
                    await sweeper
                except asyncio.CancelledError:
                    pass
            app.state.presence.clear()
            if database is None:
                await close_mongo_connection()
            logger.info("%s stopped", settings.APP_NAME)

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.settings = settings

    origins = settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if "*" in origins else origins,
        allow_credentials="*" not in origins,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(chat_router)
    app.include_router(conversations_router)
    app.include_router(posts_router)
    app.include_router(comments_router)
    app.include_router(stories_router)
    app.include_router(presence_router)
    app.include_router(ws_router)

    register_error_handlers(app)

    @app.get("/")
    async def root(db = Depends(mongo_db_dependency)):

        collections = await db.list_collection_names()
        return {"message": "Connected to MongoDB!", "collections": collections}

    return app


def register_error_handlers(app: FastAPI) -> None:
    # every failure leaves as {"message": "..."} with its status code

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"message": str(exc.detail)}, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = "Invalid request"
        if errors:
            first = errors[0]
            field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
            message = f"{field}: {first.get('msg')}" if field else first.get("msg", message)
        return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"message": message})

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"message": "An unknown error occurred"})


app = create_app()
