import logging
from typing import Any, Dict

from starlette.websockets import WebSocketDisconnect

from socialnet.utils.presence import PresenceRegistry, encode_event


logger = logging.getLogger(__name__)

NEW_MESSAGE_EVENT = "newMessage"


class DeliveryFanout:
    """Pushes a freshly stored message to the receiver's live session, if any.

    Best effort and at most once: offline receivers get nothing pushed and
    will see the message on their next history or conversation read.
    """

    def __init__(self, presence: PresenceRegistry) -> None:
        self._presence = presence

    async def deliver(self, receiver_id: str, message: Dict[str, Any]) -> bool:
        conn = self._presence.lookup(receiver_id)
        if conn is None:
            logger.debug("Receiver %s offline, message %s not pushed", receiver_id, message.get("id"))
            return False
        try:
            await conn.send_text(encode_event(NEW_MESSAGE_EVENT, message))
        except (WebSocketDisconnect, RuntimeError):
            # socket closed before the disconnect handler ran
            logger.warning("Stale session for %s, dropping it", receiver_id)
            await self._presence.unregister(receiver_id, conn)
            return False
        logger.debug("Pushed message %s to %s", message.get("id"), receiver_id)
        return True
