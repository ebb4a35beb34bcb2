"""Per-room chat: history, sending, soft delete, unread tracking and presence

Messages are persisted here first; the WebSocket transport only broadcasts
what these use cases return.
"""

from datetime import datetime
from typing import Callable, Optional

from ...domain.entities.chat_message import ChatMessage, DELETED_MESSAGE_TEXT, room_id_for
from ...domain.exceptions import InvalidInputError, NotFoundError, UnauthorizedError
from ...domain.repositories.unit_of_work import IUnitOfWork
from ...domain.services.presence import IPresenceRegistry
from ...domain.value_objects.entity_ids import MessageId, UserId
from ..dtos.chat_dtos import (
    SendMessageDto,
    ChatMessageDto,
    RoomMessagesResponse,
    UnreadCountResponse,
    ActiveUserDto,
    ActiveUsersResponse,
    DeleteMessageResult,
    DEFAULT_PAGE_SIZE,
)
from ..dtos.user_dtos import MessageResponse
from ..result import as_result

MAX_PAGE_SIZE = 200


class GetRoomMessagesUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    @as_result
    async def execute(
        self,
        department: str,
        semester: str,
        limit: int = DEFAULT_PAGE_SIZE,
        before: Optional[datetime] = None
    ) -> RoomMessagesResponse:
        if limit < 1 or limit > MAX_PAGE_SIZE:
            raise InvalidInputError(f"limit must be between 1 and {MAX_PAGE_SIZE}", field="limit")

        async with self.unit_of_work:
            latest_first = await self.unit_of_work.chat.list_room(
                room_id_for(department, semester), limit, before
            )

        messages = [ChatMessageDto.from_entity(m) for m in reversed(latest_first)]
        return RoomMessagesResponse(
            count=len(messages),
            messages=messages,
            has_more=len(messages) == limit
        )


class SendMessageUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    @as_result
    async def execute(self, sender_id: UserId, request: SendMessageDto) -> ChatMessageDto:
        async with self.unit_of_work:
            sender = await self.unit_of_work.users.get_by_id(sender_id)
            if not sender:
                raise NotFoundError("User not found")

            reply_to = None
            if request.reply_to is not None:
                reply_to = MessageId(request.reply_to)
                if not await self.unit_of_work.chat.get_by_id(reply_to):
                    raise NotFoundError("Message being replied to was not found")

            message = ChatMessage.compose(
                department=request.department,
                semester=request.semester,
                message=request.message,
                user_id=sender.id,
                user_name=sender.full_name,
                user_email=str(sender.email),
                message_type=request.message_type,
                file_url=request.file_url,
                file_name=request.file_name,
                reply_to=reply_to,
            )
            message = await self.unit_of_work.chat.add(message)
            await self.unit_of_work.commit()

        return ChatMessageDto.from_entity(message)


class DeleteMessageUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, clock: Callable[[], datetime] = datetime.utcnow):
        self.unit_of_work = unit_of_work
        self.clock = clock

    @as_result
    async def execute(self, message_id: MessageId, actor_id: UserId) -> DeleteMessageResult:
        """Soft delete: the row stays, its text is replaced"""
        now = self.clock()

        async with self.unit_of_work:
            chat = self.unit_of_work.chat
            message = await chat.get_by_id(message_id)
            if not message:
                raise NotFoundError("Message not found")
            if message.user_id != actor_id:
                raise UnauthorizedError("Not authorized to delete this message")

            if not await chat.soft_delete(message_id, actor_id, now, DELETED_MESSAGE_TEXT):
                raise NotFoundError("Message not found")
            await self.unit_of_work.commit()

        message.is_deleted = True
        message.deleted_at = now
        message.message = DELETED_MESSAGE_TEXT
        return DeleteMessageResult(message=ChatMessageDto.from_entity(message), room_id=message.room_id)


class GetUnreadCountUseCase:

    def __init__(self, unit_of_work: IUnitOfWork):
        self.unit_of_work = unit_of_work

    @as_result
    async def execute(self, user_id: UserId, department: str, semester: str) -> UnreadCountResponse:
        """Messages from others since the account last opened the chat"""
        async with self.unit_of_work:
            user = await self.unit_of_work.users.get_by_id(user_id)
            if not user:
                raise NotFoundError("User not found")
            count = await self.unit_of_work.chat.count_unread(
                room_id_for(department, semester), user.id, user.last_chat_visit
            )
        return UnreadCountResponse(unread_count=count)


class MarkRoomReadUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, clock: Callable[[], datetime] = datetime.utcnow):
        self.unit_of_work = unit_of_work
        self.clock = clock

    @as_result
    async def execute(self, user_id: UserId) -> MessageResponse:
        async with self.unit_of_work:
            await self.unit_of_work.users.touch_chat_visit(user_id, self.clock())
            await self.unit_of_work.commit()
        return MessageResponse(message="Marked as read")


class JoinRoomUseCase:

    def __init__(
        self,
        unit_of_work: IUnitOfWork,
        presence: IPresenceRegistry,
        clock: Callable[[], datetime] = datetime.utcnow
    ):
        self.unit_of_work = unit_of_work
        self.presence = presence
        self.clock = clock

    @as_result
    async def execute(self, user_id: UserId, department: str, semester: str) -> ActiveUsersResponse:
        room_id = room_id_for(department, semester)
        async with self.unit_of_work:
            await self.unit_of_work.users.touch_last_active(user_id, self.clock())
            await self.unit_of_work.commit()

        await self.presence.join(room_id, user_id)
        return await _active_users(self.unit_of_work, self.presence, room_id)


class GetActiveUsersUseCase:

    def __init__(self, unit_of_work: IUnitOfWork, presence: IPresenceRegistry):
        self.unit_of_work = unit_of_work
        self.presence = presence

    @as_result
    async def execute(self, department: str, semester: str) -> ActiveUsersResponse:
        return await _active_users(self.unit_of_work, self.presence, room_id_for(department, semester))


async def _active_users(unit_of_work: IUnitOfWork, presence: IPresenceRegistry, room_id: str) -> ActiveUsersResponse:
    member_ids = await presence.members(room_id)
    users = []
    async with unit_of_work:
        for member_id in member_ids:
            user = await unit_of_work.users.get_by_id(member_id)
            if user:
                users.append(ActiveUserDto(
                    id=user.id.value,
                    full_name=user.full_name,
                    email=str(user.email),
                    last_active=user.last_active
                ))
    users.sort(key=lambda u: u.full_name.lower())
    return ActiveUsersResponse(count=len(users), users=users)
