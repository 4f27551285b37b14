import json
import logging
from typing import Dict, List, Optional

from fastapi import WebSocket


logger = logging.getLogger(__name__)

ONLINE_USERS_EVENT = "getOnlineUsers"


def encode_event(event: str, data) -> str:
    return json.dumps({"event": event, "data": data})


class PresenceRegistry:
    """
    In-memory map of user id -> live WebSocket.

    One session per user: a new connection replaces the previous one.
    Owned by the running app (see ``socialnet.main``) and lost on restart.
    """

    def __init__(self) -> None:
        self._sessions: Dict[str, WebSocket] = {}

    async def register(self, user_id: str, websocket: WebSocket) -> None:
        self._sessions[user_id] = websocket
        logger.info("User %s connected (%d online)", user_id, len(self._sessions))
        await self.broadcast_online_users()

    async def unregister(self, user_id: str, websocket: Optional[WebSocket] = None) -> None:
        current = self._sessions.get(user_id)
        if current is None:
            return
        if websocket is not None and current is not websocket:
            # an older socket closing after it was replaced
            return
        del self._sessions[user_id]
        logger.info("User %s disconnected (%d online)", user_id, len(self._sessions))
        await self.broadcast_online_users()

    def lookup(self, user_id: str) -> Optional[WebSocket]:
        return self._sessions.get(user_id)

    def online_users(self) -> List[str]:
        return list(self._sessions.keys())

    def clear(self) -> None:
        self._sessions.clear()

    async def broadcast_online_users(self) -> None:
        snapshot = dict(self._sessions)
        payload = encode_event(ONLINE_USERS_EVENT, list(snapshot.keys()))
        for user_id, conn in snapshot.items():
            try:
                await conn.send_text(payload)
            except Exception:
                logger.warning("Could not send online users to %s", user_id, exc_info=True)
