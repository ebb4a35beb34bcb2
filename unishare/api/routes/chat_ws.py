"""Chat WebSocket transport

One socket per client and room, authenticated by ``?token=<access token>``.
Every event that changes state goes through its use case first; only what the
use case returns is broadcast to the room.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError

from ...api.chat_broadcaster import broadcaster
from ...api.dependencies import get_presence_registry, get_unit_of_work, load_user_from_token
from ...api.errors import failure_body
from ...application.dtos.chat_dtos import SendMessageDto
from ...application.result import Failure
from ...application.use_cases.chat_use_cases import (
    SendMessageUseCase,
    DeleteMessageUseCase,
    JoinRoomUseCase,
    GetActiveUsersUseCase,
)
from ...domain.entities.chat_message import room_id_for
from ...domain.entities.user import User
from ...domain.exceptions import InvalidInputError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.presence import IPresenceRegistry
from ...domain.value_objects.entity_ids import MessageId

logger = logging.getLogger(__name__)

router = APIRouter()

CLOSE_INVALID_TOKEN = 4001


async def _send_error(websocket: WebSocket, failure: Failure) -> None:
    await websocket.send_json({"event": "error", **failure_body(failure)})


async def _send_invalid(websocket: WebSocket, message: str) -> None:
    await websocket.send_json({"event": "error", "success": False, "kind": "validation_error", "message": message})


async def _broadcast_active_users(
    room_id: str,
    department: str,
    semester: str,
    unit_of_work: IUnitOfWork,
    presence: IPresenceRegistry
) -> None:
    result = await GetActiveUsersUseCase(unit_of_work, presence).execute(department, semester)
    if result.ok:
        await broadcaster.notify(room_id, "active_users", result.data.model_dump())


@router.websocket("/ws/chat/{department}/{semester}")
async def websocket_chat(
    websocket: WebSocket,
    department: str,
    semester: str,
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    presence: IPresenceRegistry = Depends(get_presence_registry)
):
    user: Optional[User] = await load_user_from_token(websocket.query_params.get("token"), unit_of_work)
    if not user:
        await websocket.close(code=CLOSE_INVALID_TOKEN)
        return

    room_id = room_id_for(department, semester)
    await websocket.accept()
    broadcaster.subscribe(room_id, websocket)
    joined = False

    try:
        while True:
            try:
                data = await websocket.receive_json()
            except ValueError:
                # Frame was not JSON; the connection stays usable
                await _send_invalid(websocket, "invalid_payload")
                continue
            event = data.get("event") if isinstance(data, dict) else None

            if event == "join_room":
                result = await JoinRoomUseCase(unit_of_work, presence).execute(user.id, department, semester)
                if not result.ok:
                    await _send_error(websocket, result)
                    continue
                joined = True
                await websocket.send_json(jsonable_encoder({"event": "joined", "room_id": room_id}))
                await broadcaster.notify(room_id, "active_users", result.data.model_dump())

            elif event == "send_message":
                try:
                    request = SendMessageDto(**{**data, "department": department, "semester": semester})
                except ValidationError:
                    await _send_invalid(websocket, "invalid_payload")
                    continue
                result = await SendMessageUseCase(unit_of_work).execute(user.id, request)
                if not result.ok:
                    await _send_error(websocket, result)
                    continue
                await broadcaster.notify(room_id, "new_message", {"message": result.data.model_dump()})

            elif event == "delete_message":
                try:
                    message_id = MessageId.from_str(data.get("message_id"))
                except InvalidInputError:
                    await _send_invalid(websocket, "invalid_message_id")
                    continue
                result = await DeleteMessageUseCase(unit_of_work).execute(message_id, user.id)
                if not result.ok:
                    await _send_error(websocket, result)
                    continue
                await broadcaster.notify(
                    result.data.room_id, "message_deleted", {"message": result.data.message.model_dump()}
                )

            elif event in ("typing", "stop_typing"):
                await broadcaster.notify(
                    room_id,
                    "user_typing" if event == "typing" else "user_stop_typing",
                    {"user_id": str(user.id), "user_name": user.full_name},
                    exclude=websocket,
                )

            elif event == "leave_room":
                await websocket.close(code=1000)
                break

            else:
                await _send_invalid(websocket, "unknown_event")

    except WebSocketDisconnect:
        pass
    finally:
        broadcaster.unsubscribe(room_id, websocket)
        if joined:
            await presence.leave(room_id, user.id)
            await _broadcast_active_users(room_id, department, semester, unit_of_work, presence)
        logger.debug(f"User {user.id} left chat room {room_id}")
