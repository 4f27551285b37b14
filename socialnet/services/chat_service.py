import logging
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId

from socialnet.repositories.conversation_repository import ConversationRepository
from socialnet.repositories.message_repository import MessageRepository
from socialnet.repositories.user_repository import UserRepository
from socialnet.schemas.message import ConversationSummary, LastMessage, MessagePublic
from socialnet.services.user_service import to_public
from socialnet.utils.dates import as_utc
from socialnet.utils.delivery import DeliveryFanout
from socialnet.utils.errors import ConversationNotFound, UserNotFound, ValidationError


logger = logging.getLogger(__name__)


def _check_user_id(user_id: str) -> None:
    if not ObjectId.is_valid(user_id):
        raise ValidationError(f"Invalid user id: {user_id}")


class ChatService:
    """
    Send and read direct messages between two users.

    Sending always runs in this order: resolve the conversation, store the
    message, overwrite the conversation's ``last_message``, then push to the
    receiver if they are online. ``last_message`` is a denormalized copy and
    can fall behind the message log if its update fails; nothing reconciles it.
    """

    def __init__(
        self,
        message_repo: MessageRepository,
        conversation_repo: ConversationRepository,
        user_repo: UserRepository,
        fanout: DeliveryFanout,
    ) -> None:
        self._message_repo = message_repo
        self._conversation_repo = conversation_repo
        self._user_repo = user_repo
        self._fanout = fanout

    async def send_message(self, sender_id: str, receiver_id: str, text: str) -> MessagePublic:
        """Not idempotent: calling it twice stores two messages."""
        if not text or not text.strip():
            raise ValidationError("Message text cannot be empty")
        _check_user_id(receiver_id)
        if sender_id == receiver_id:
            raise ValidationError("Cannot send a message to yourself")
        if not await self._user_repo.get_user_by_id(receiver_id):
            raise UserNotFound("Receiver not found")

        convo, created = await self._conversation_repo.get_or_create_one_to_one(sender_id, receiver_id, text)
        if created:
            logger.info("Created conversation %s between %s and %s", convo["_id"], sender_id, receiver_id)
        saved = await self._message_repo.save_message(convo["_id"], sender_id, text)
        await self._conversation_repo.update_last_message(convo["_id"], text, sender_id)

        message = self._message_out(saved)
        await self._fanout.deliver(receiver_id, message.model_dump(mode="json"))
        return message

    async def get_history(self, user_id: str, other_id: str) -> List[MessagePublic]:
        _check_user_id(other_id)
        convo = await self._conversation_repo.find_between(user_id, other_id)
        if not convo:
            raise ConversationNotFound()
        docs = await self._message_repo.get_messages_by_conversation(convo["_id"])
        return [self._message_out(d) for d in docs]

    async def list_conversations(self, user_id: str, limit: Optional[int] = None, cursor: Optional[str] = None) -> Tuple[List[ConversationSummary], Optional[str]]:
        items, next_cursor = await self._conversation_repo.list_for_user(user_id, limit=limit, cursor=cursor)
        others = {self._other_participant(c, user_id) for c in items}
        profiles = await self._user_repo.get_public_profiles(o for o in others if o)

        summaries = []
        for c in items:
            other_id = self._other_participant(c, user_id)
            profile = profiles.get(other_id) if other_id else None
            summaries.append(ConversationSummary(
                id=c["_id"],
                participant=to_public(profile) if profile else None,
                last_message=LastMessage(**c["last_message"]),
                created_at=as_utc(c["created_at"]),
                last_message_at=as_utc(c["last_message_at"]),
            ))
        return summaries, next_cursor

    @staticmethod
    def _other_participant(convo: Dict[str, Any], user_id: str) -> Optional[str]:
        for p in convo.get("participants", []):
            if p != user_id:
                return p
        return None

    @staticmethod
    def _message_out(doc: Dict[str, Any]) -> MessagePublic:
        return MessagePublic(
            id=doc["_id"],
            conversation_id=doc["conversation_id"],
            sender_id=doc["sender_id"],
            text=doc["text"],
            created_at=as_utc(doc["created_at"]),
        )
