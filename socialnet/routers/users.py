from typing import List

from fastapi import APIRouter, Depends

from socialnet.schemas.post import PostPublic
from socialnet.schemas.user import FollowResult, ProfileUpdate, UserPublic
from socialnet.services.post_service import PostService
from socialnet.services.user_service import UserService
from socialnet.utils.dependencies import get_current_user, get_post_service, get_user_service
from socialnet.utils.errors import NotFoundError, PermissionDenied, ValidationError, to_http_exception


router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[UserPublic])
async def list_users(current_user: dict = Depends(get_current_user), service: UserService = Depends(get_user_service)):
    return await service.list_profiles(exclude_id=current_user["_id"])


# declared before /{user_id} so "bookmarks" is not read as an id
@router.get("/bookmarks", response_model=List[PostPublic])
async def list_bookmarks(current_user: dict = Depends(get_current_user), service: PostService = Depends(get_post_service)):
    return await service.list_bookmarks(current_user["_id"])


@router.get("/{user_id}", response_model=UserPublic)
async def get_user(user_id: str, current_user: dict = Depends(get_current_user), service: UserService = Depends(get_user_service)):
    try:
        return await service.get_profile(user_id)
    except NotFoundError as exc:
        raise to_http_exception(exc)


@router.patch("/{user_id}", response_model=UserPublic)
async def edit_user(user_id: str, body: ProfileUpdate, current_user: dict = Depends(get_current_user), service: UserService = Depends(get_user_service)):
    try:
        return await service.edit_profile(current_user["_id"], user_id, body)
    except (NotFoundError, PermissionDenied) as exc:
        raise to_http_exception(exc)


@router.post("/{user_id}/follow-unfollow", response_model=FollowResult)
async def follow_unfollow(user_id: str, current_user: dict = Depends(get_current_user), service: UserService = Depends(get_user_service)):
    try:
        return await service.toggle_follow(current_user["_id"], user_id)
    except (ValidationError, NotFoundError) as exc:
        raise to_http_exception(exc)


@router.get("/{user_id}/posts", response_model=List[PostPublic])
async def user_posts(user_id: str, current_user: dict = Depends(get_current_user), service: PostService = Depends(get_post_service)):
    try:
        return await service.list_user_posts(user_id)
    except NotFoundError as exc:
        raise to_http_exception(exc)
