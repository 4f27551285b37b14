from fastapi import APIRouter, Depends, HTTPException, status

from socialnet.schemas.message import MessageCreate, MessageHistory, MessagePublic
from socialnet.services.chat_service import ChatService
from socialnet.utils.dependencies import get_chat_service, get_current_user
from socialnet.utils.errors import ConversationNotFound, UserNotFound, ValidationError


router = APIRouter(prefix="/messages", tags=["chat"])


@router.post("/{receiver_id}", response_model=MessagePublic)
async def send_message(receiver_id: str, body: MessageCreate, current_user: dict = Depends(get_current_user), service: ChatService = Depends(get_chat_service)):
    try:
        return await service.send_message(current_user["_id"], receiver_id, body.message_body)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    except UserNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)


@router.get("/{receiver_id}", response_model=MessageHistory)
async def get_history(receiver_id: str, current_user: dict = Depends(get_current_user), service: ChatService = Depends(get_chat_service)):
    try:
        messages = await service.get_history(current_user["_id"], receiver_id)
    except ValidationError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    except ConversationNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.message)
    return {"messages": messages}
