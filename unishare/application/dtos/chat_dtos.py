"""Chat DTOs"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from uuid import UUID

from ...domain.entities.chat_message import ChatMessage
from ...domain.enums import MessageType

DEFAULT_PAGE_SIZE = 50


class SendMessageDto(BaseModel):
    department: str
    semester: str
    message: str
    message_type: MessageType = MessageType.TEXT
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    reply_to: Optional[UUID] = None


class ChatMessageDto(BaseModel):
    id: UUID
    room_id: str
    department: str
    semester: str
    message: str
    message_type: str
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    reply_to: Optional[UUID] = None
    user_id: UUID
    user_name: str
    user_email: str
    is_deleted: bool
    deleted_at: Optional[datetime] = None
    created_at: datetime

    @classmethod
    def from_entity(cls, message: ChatMessage) -> 'ChatMessageDto':
        return cls(
            id=message.id.value,
            room_id=message.room_id,
            department=message.department,
            semester=message.semester,
            message=message.message,
            message_type=message.message_type.value,
            file_url=message.file_url,
            file_name=message.file_name,
            reply_to=message.reply_to.value if message.reply_to else None,
            user_id=message.user_id.value,
            user_name=message.user_name,
            user_email=message.user_email,
            is_deleted=message.is_deleted,
            deleted_at=message.deleted_at,
            created_at=message.created_at
        )


class RoomMessagesResponse(BaseModel):
    success: bool = True
    count: int
    messages: List[ChatMessageDto]
    has_more: bool


class SendMessageResponse(BaseModel):
    success: bool = True
    message: ChatMessageDto


class UnreadCountResponse(BaseModel):
    success: bool = True
    unread_count: int


class ActiveUserDto(BaseModel):
    id: UUID
    full_name: str
    email: str
    last_active: Optional[datetime] = None


class ActiveUsersResponse(BaseModel):
    success: bool = True
    count: int
    users: List[ActiveUserDto]


class DeleteMessageResult(BaseModel):
    message: ChatMessageDto
    room_id: str
