# This project was developed with assistance from AI tools.
"""Real-time workflow notifications over WebSocket.

Authenticates from the session cookie on an accepted socket, then forwards
every event published to the user's topics as ``{"event", "data"}`` JSON.
Client messages are ignored; they only keep the connection alive.
"""

import asyncio
import logging

from db.database import SessionLocal
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from ..middleware.auth import get_websocket_user
from ..services.notifications import Subscription, get_notification_hub, topics_for

logger = logging.getLogger(__name__)

router = APIRouter()


async def _forward(ws: WebSocket, sub: Subscription) -> None:
    while True:
        message = await sub.next_event()
        await ws.send_json(message)


@router.websocket("/ws")
async def notifications_websocket(ws: WebSocket):
    await ws.accept()

    async with SessionLocal() as session:
        user = await get_websocket_user(ws, session)
    if user is None:
        await ws.close(code=4001, reason="Not logged in")
        return

    hub = get_notification_hub()
    sub = hub.subscribe(*topics_for(user.user_id, user.role))
    forwarder = asyncio.create_task(_forward(ws, sub))
    logger.info("Notification socket opened: user=%s topics=%s", user.user_id, sorted(sub.topics))

    try:
        while True:
            await ws.receive_text()
    except WebSocketDisconnect:
        logger.info("Notification socket closed: user=%s", user.user_id)
    finally:
        forwarder.cancel()
        hub.unsubscribe(sub)
