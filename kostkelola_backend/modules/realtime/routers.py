"""Realtime websocket routes."""

from fastapi import APIRouter, WebSocket, WebSocketDisconnect, status

from ...core.logging import get_logger
from ..auth.dependencies import user_from_token
from .schemas import Channel

logger = get_logger(__name__)

router = APIRouter(prefix="/realtime", tags=["Realtime"])


@router.websocket("/{channel}")
async def subscribe_channel(websocket: WebSocket, channel: str, token: str = ""):
    """Stream change events of one channel to an authenticated client.

    Authenticate with ``?token=<access token>``. Clients only send pings; any
    text they send is ignored.
    """
    try:
        feed = Channel(channel)
    except ValueError:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    user = user_from_token(token)
    if user is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    broker = websocket.app.state.broker
    await websocket.accept()
    subscriber = await broker.subscribe(feed, websocket, user.id)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.debug("Client disconnected", extra={"channel": feed.value})
    finally:
        await broker.unsubscribe(feed, subscriber)
