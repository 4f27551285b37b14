import jwt
from fastapi import APIRouter, Depends, WebSocket

from socialnet.config import Settings
from socialnet.utils.dependencies import get_app_settings, get_presence
from socialnet.utils.presence import PresenceRegistry
from socialnet.utils.security import decode_access_token


router = APIRouter(prefix="/presence", tags=["presence"])
ws_router = APIRouter(tags=["presence"])

WS_CLOSE_UNAUTHORIZED = 4401
WS_CLOSE_FORBIDDEN = 4403


@router.get("")
async def online_users(presence: PresenceRegistry = Depends(get_presence)):
    return {"online": presence.online_users()}


@router.get("/{user_id}")
async def user_presence(user_id: str, presence: PresenceRegistry = Depends(get_presence)):
    return {"user_id": user_id, "online": presence.lookup(user_id) is not None}


@ws_router.websocket("/ws/{user_id}")
async def realtime_socket(
    websocket: WebSocket,
    user_id: str,
    presence: PresenceRegistry = Depends(get_presence),
    settings: Settings = Depends(get_app_settings),
):
    # identity is checked once, at connect: ?token=<jwt> whose sub is user_id
    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=WS_CLOSE_UNAUTHORIZED)
        return
    try:
        payload = decode_access_token(token, settings)
    except jwt.InvalidTokenError:
        await websocket.close(code=WS_CLOSE_UNAUTHORIZED)
        return
    if payload.get("sub") != user_id:
        await websocket.close(code=WS_CLOSE_FORBIDDEN)
        return

    await websocket.accept()
    await presence.register(user_id, websocket)
    try:
        while True:
            # inbound frames, text or binary, carry nothing yet; only a disconnect matters
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
    finally:
        await presence.unregister(user_id, websocket)
