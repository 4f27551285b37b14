from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from socialnet.schemas.user import UserPublic


class MessageCreate(BaseModel):

    model_config = ConfigDict(populate_by_name=True)

    message_body: str = Field(alias="messageBody")


class MessagePublic(BaseModel):

    id: str
    conversation_id: str
    sender_id: str
    text: str
    created_at: datetime


class LastMessage(BaseModel):

    text: str
    sender_id: str


class ConversationSummary(BaseModel):

    id: str
    participant: Optional[UserPublic] = None
    last_message: LastMessage
    created_at: datetime
    last_message_at: datetime


class MessageHistory(BaseModel):

    messages: List[MessagePublic]


class ConversationPage(BaseModel):

    items: List[ConversationSummary]
    next_cursor: Optional[str] = None
