"""Realtime alert events.

A homeowner's house scope is resolved when the socket connects. Houses
assigned to them afterwards are only pushed once they reconnect.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, Query
from sqlalchemy.ext.asyncio import async_sessionmaker

from smarthomecloud.db import crud
from smarthomecloud.db.engine import get_session_factory
from smarthomecloud.services.access import STAFF_ROLES
from smarthomecloud.services.auth import SESSION_COOKIE_NAME, validate_session
from smarthomecloud.services.ws_manager import ws_manager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["websocket"])


@router.websocket("/api/ws/alerts")
async def alerts_websocket(
    websocket: WebSocket,
    token: str = Query(default=""),
    session_factory: async_sessionmaker = Depends(get_session_factory),
):
    token = token or websocket.cookies.get(SESSION_COOKIE_NAME, "")
    if not token:
        await websocket.close(code=4001, reason="Unauthorized")
        return

    # the session is closed before the socket starts idling
    async with session_factory() as db:
        user = await validate_session(token, db)
        if not user:
            await websocket.close(code=4001, reason="Unauthorized")
            return
        if user.role in STAFF_ROLES:
            house_ids = None
        else:
            house_ids = set(await crud.list_house_ids_for_owner(db, user.id))

    sub = await ws_manager.connect(websocket, house_ids)
    try:
        while True:
            if await websocket.receive_text() == "ping":
                await websocket.send_json({"event": "pong"})
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("Alert websocket for user %s failed", user.id)
    finally:
        ws_manager.disconnect(sub)
