from typing import List

from fastapi import APIRouter, Depends, status

from socialnet.schemas.post import BookmarkResult, LikeResult, PostCreate, PostDetail, PostPublic, PostUpdate
from socialnet.services.post_service import PostService
from socialnet.utils.dependencies import get_current_user, get_post_service
from socialnet.utils.errors import NotFoundError, PermissionDenied, ValidationError, to_http_exception


router = APIRouter(prefix="/posts", tags=["posts"])


@router.post("", response_model=PostPublic, status_code=status.HTTP_201_CREATED)
async def create_post(body: PostCreate, current_user: dict = Depends(get_current_user), service: PostService = Depends(get_post_service)):
    try:
        return await service.create_post(current_user["_id"], body.body, body.image)
    except ValidationError as exc:
        raise to_http_exception(exc)


@router.get("", response_model=List[PostPublic])
async def list_posts(current_user: dict = Depends(get_current_user), service: PostService = Depends(get_post_service)):
    return await service.list_posts()


@router.get("/following", response_model=List[PostPublic])
async def following_posts(current_user: dict = Depends(get_current_user), service: PostService = Depends(get_post_service)):
    return await service.list_following_posts(current_user["_id"])


@router.get("/{post_id}", response_model=PostDetail)
async def get_post(post_id: str, current_user: dict = Depends(get_current_user), service: PostService = Depends(get_post_service)):
    try:
        return await service.get_post(post_id)
    except NotFoundError as exc:
        raise to_http_exception(exc)


@router.patch("/{post_id}", response_model=PostPublic)
async def update_post(post_id: str, body: PostUpdate, current_user: dict = Depends(get_current_user), service: PostService = Depends(get_post_service)):
    try:
        return await service.update_post(current_user["_id"], post_id, body.body)
    except (ValidationError, NotFoundError, PermissionDenied) as exc:
        raise to_http_exception(exc)


@router.delete("/{post_id}", response_model=PostPublic)
async def delete_post(post_id: str, current_user: dict = Depends(get_current_user), service: PostService = Depends(get_post_service)):
    try:
        return await service.delete_post(current_user["_id"], post_id)
    except (NotFoundError, PermissionDenied) as exc:
        raise to_http_exception(exc)


@router.post("/{post_id}/like", response_model=LikeResult)
async def like_post(post_id: str, current_user: dict = Depends(get_current_user), service: PostService = Depends(get_post_service)):
    try:
        return await service.toggle_like(current_user["_id"], post_id)
    except NotFoundError as exc:
        raise to_http_exception(exc)


@router.post("/{post_id}/bookmark", response_model=BookmarkResult)
async def bookmark_post(post_id: str, current_user: dict = Depends(get_current_user), service: PostService = Depends(get_post_service)):
    try:
        return await service.toggle_bookmark(current_user["_id"], post_id)
    except NotFoundError as exc:
        raise to_http_exception(exc)
