"""
Real-time chat relay.

Each authenticated socket joins the room of its account id. A
``send-message`` frame is pushed to every socket in the receiver's room.
Delivery is fire-and-forget: nothing is persisted or acknowledged here, and
persisted chat history lives in the chat endpoints.
"""
import json
import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from app.db.base import utcnow
from app.db.session import SessionLocal
from app.middleware.auth import resolve_user_from_token
from app.schemas.chat_schemas import RelayMessageIn, RelayMessageOut

logger = logging.getLogger(__name__)

router = APIRouter()


class ConnectionManager:
    def __init__(self):
        self.active: Dict[int, List[WebSocket]] = {}

    async def connect(self, user_id: int, websocket: WebSocket):
        await websocket.accept()
        self.active.setdefault(user_id, []).append(websocket)

    def disconnect(self, user_id: int, websocket: WebSocket):
        sockets = self.active.get(user_id, [])
        if websocket in sockets:
            sockets.remove(websocket)
        if not sockets:
            self.active.pop(user_id, None)

    async def send_to_user(self, user_id: int, message: dict) -> int:
        """Push *message* to every socket of *user_id*; returns how many got it."""
        delivered = 0
        for ws in list(self.active.get(user_id, [])):
            try:
                await ws.send_json(message)
                delivered += 1
            except Exception as exc:
                logger.debug(f"Dropping dead socket for user {user_id}: {exc}")
                self.disconnect(user_id, ws)
        return delivered


manager = ConnectionManager()


def _authenticate(token: Optional[str]) -> Optional[int]:
    db = SessionLocal()
    try:
        user = resolve_user_from_token(db, token)
        return user.id if user else None
    finally:
        db.close()


@router.websocket("/ws")
async def relay_socket(websocket: WebSocket, token: Optional[str] = Query(None)):
    user_id = await run_in_threadpool(_authenticate, token)
    if user_id is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await manager.connect(user_id, websocket)
    logger.info(f"User {user_id} joined their room")
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", status.WS_1000_NORMAL_CLOSURE))

            raw = message.get("text")
            try:
                if raw is None:
                    raise ValueError("binary frame")
                frame = RelayMessageIn.model_validate(json.loads(raw))
            except (ValueError, ValidationError):
                await websocket.send_json({"event": "error", "detail": "Invalid frame"})
                continue

            outbound = RelayMessageOut(
                sender_id=user_id,
                message=frame.message,
                timestamp=utcnow(),
            )
            await manager.send_to_user(frame.receiver_id, outbound.model_dump(mode="json"))
    except WebSocketDisconnect:
        logger.info(f"User {user_id} disconnected")
    finally:
        manager.disconnect(user_id, websocket)
