"""Chat REST routes

Sends and deletes made here are pushed to the room's WebSocket listeners too.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from ...api.chat_broadcaster import broadcaster
from ...api.dependencies import get_current_user, get_presence_registry, get_unit_of_work
from ...api.errors import unwrap
from ...application.dtos.chat_dtos import (
    SendMessageDto,
    SendMessageResponse,
    RoomMessagesResponse,
    UnreadCountResponse,
    ActiveUsersResponse,
    DEFAULT_PAGE_SIZE,
)
from ...application.dtos.user_dtos import MessageResponse
from ...application.use_cases.chat_use_cases import (
    GetRoomMessagesUseCase,
    SendMessageUseCase,
    DeleteMessageUseCase,
    GetUnreadCountUseCase,
    MarkRoomReadUseCase,
    GetActiveUsersUseCase,
)
from ...domain.entities.user import User
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.presence import IPresenceRegistry
from ...domain.value_objects.entity_ids import MessageId

router = APIRouter()


@router.get("/{department}/{semester}/messages", response_model=RoomMessagesResponse)
async def room_messages(
    department: str,
    semester: str,
    limit: int = Query(DEFAULT_PAGE_SIZE),
    before: Optional[datetime] = Query(None),
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Latest messages of a room, oldest first"""
    use_case = GetRoomMessagesUseCase(unit_of_work)
    return unwrap(await use_case.execute(department, semester, limit=limit, before=before))


@router.post("/messages", response_model=SendMessageResponse, status_code=status.HTTP_201_CREATED)
async def send_message(
    request: SendMessageDto,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    message = unwrap(await SendMessageUseCase(unit_of_work).execute(current_user.id, request))
    await broadcaster.notify(message.room_id, "new_message", {"message": message.model_dump()})
    return SendMessageResponse(message=message)


@router.delete("/messages/{message_id}", response_model=MessageResponse)
async def delete_message(
    message_id: UUID,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    """Soft delete one of your own messages"""
    result = unwrap(await DeleteMessageUseCase(unit_of_work).execute(MessageId(message_id), current_user.id))
    await broadcaster.notify(result.room_id, "message_deleted", {"message": result.message.model_dump()})
    return MessageResponse(message="Message deleted successfully")


@router.get("/{department}/{semester}/unread", response_model=UnreadCountResponse)
async def unread_count(
    department: str,
    semester: str,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    use_case = GetUnreadCountUseCase(unit_of_work)
    return unwrap(await use_case.execute(current_user.id, department, semester))


@router.post("/mark-read", response_model=MessageResponse)
async def mark_read(
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work)
):
    return unwrap(await MarkRoomReadUseCase(unit_of_work).execute(current_user.id))


@router.get("/{department}/{semester}/active-users", response_model=ActiveUsersResponse)
async def active_users(
    department: str,
    semester: str,
    current_user: User = Depends(get_current_user),
    unit_of_work: IUnitOfWork = Depends(get_unit_of_work),
    presence: IPresenceRegistry = Depends(get_presence_registry)
):
    use_case = GetActiveUsersUseCase(unit_of_work, presence)
    return unwrap(await use_case.execute(department, semester))
