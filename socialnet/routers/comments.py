from typing import List

from fastapi import APIRouter, Depends, status

from socialnet.schemas.comment import CommentCreate, CommentPublic
from socialnet.services.comment_service import CommentService
from socialnet.utils.dependencies import get_comment_service, get_current_user
from socialnet.utils.errors import NotFoundError, PermissionDenied, ValidationError, to_http_exception


router = APIRouter(prefix="/comments", tags=["comments"])


@router.post("/{post_id}", response_model=CommentPublic, status_code=status.HTTP_201_CREATED)
async def create_comment(post_id: str, body: CommentCreate, current_user: dict = Depends(get_current_user), service: CommentService = Depends(get_comment_service)):
    try:
        return await service.create_comment(current_user["_id"], post_id, body.comment)
    except (ValidationError, NotFoundError) as exc:
        raise to_http_exception(exc)


@router.get("/{post_id}", response_model=List[CommentPublic])
async def list_comments(post_id: str, current_user: dict = Depends(get_current_user), service: CommentService = Depends(get_comment_service)):
    try:
        return await service.list_comments(post_id)
    except NotFoundError as exc:
        raise to_http_exception(exc)


@router.delete("/{comment_id}", response_model=CommentPublic)
async def delete_comment(comment_id: str, current_user: dict = Depends(get_current_user), service: CommentService = Depends(get_comment_service)):
    try:
        return await service.delete_comment(current_user["_id"], comment_id)
    except (NotFoundError, PermissionDenied) as exc:
        raise to_http_exception(exc)
