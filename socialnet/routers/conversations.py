from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from socialnet.schemas.message import ConversationPage
from socialnet.services.chat_service import ChatService
from socialnet.utils.dependencies import get_chat_service, get_current_user
from socialnet.utils.errors import ValidationError


router = APIRouter(prefix="/conversations", tags=["chat"])


@router.get("", response_model=ConversationPage)
async def list_conversations(limit: Optional[int] = Query(None, ge=1, le=100), cursor: Optional[str] = None, current_user: dict = Depends(get_current_user), service: ChatService = Depends(get_chat_service)):
    try:
        items, next_cursor = await service.list_conversations(current_user["_id"], limit=limit, cursor=cursor)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return {"items": items, "next_cursor": next_cursor}
