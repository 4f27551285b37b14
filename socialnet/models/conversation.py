from datetime import datetime
from typing import List, TypedDict


class LastMessage(TypedDict):
    text: str
    sender_id: str


class ConversationDocument(TypedDict, total=False):
    _id: str
    # ordered as [first sender, first receiver]
    participants: List[str]
    # sorted "a:b" form of participants, unique per pair
    pair_key: str
    last_message: LastMessage
    created_at: datetime
    last_message_at: datetime
