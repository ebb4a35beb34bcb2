"""Chat message repository implementation"""

from datetime import datetime
from typing import Optional, List

from sqlalchemy import update
from sqlalchemy.orm import Session

from ...domain.repositories.chat_repository import IChatRepository
from ...domain.entities.chat_message import ChatMessage
from ...domain.enums import MessageType
from ...domain.value_objects.entity_ids import MessageId, UserId
from ..orm.chat_message_model import ChatMessageModel


class ChatRepositoryImpl(IChatRepository):

    def __init__(self, session: Session):
        self.session = session

    async def get_by_id(self, message_id: MessageId) -> Optional[ChatMessage]:
        model = self.session.query(ChatMessageModel).filter(ChatMessageModel.id == message_id.value).first()
        return self._map_to_entity(model) if model else None

    async def add(self, message: ChatMessage) -> ChatMessage:
        model = ChatMessageModel(
            id=message.id.value,
            room_id=message.room_id,
            department=message.department,
            semester=message.semester,
            message=message.message,
            message_type=message.message_type,
            file_url=message.file_url,
            file_name=message.file_name,
            reply_to=message.reply_to.value if message.reply_to else None,
            user_id=message.user_id.value,
            user_name=message.user_name,
            user_email=message.user_email,
            is_deleted=message.is_deleted,
            deleted_at=message.deleted_at,
            created_at=message.created_at,
            updated_at=message.updated_at,
        )
        self.session.add(model)
        self.session.flush()
        return message

    async def list_room(self, room_id: str, limit: int, before: Optional[datetime] = None) -> List[ChatMessage]:
        query = self.session.query(ChatMessageModel).filter(
            ChatMessageModel.room_id == room_id,
            ChatMessageModel.is_deleted.is_(False)
        )
        if before is not None:
            query = query.filter(ChatMessageModel.created_at < before)
        models = query.order_by(ChatMessageModel.created_at.desc()).limit(limit).all()
        return [self._map_to_entity(model) for model in models]

    async def soft_delete(self, message_id: MessageId, owner_id: UserId, now: datetime, placeholder: str) -> bool:
        result = self.session.execute(
            update(ChatMessageModel)
            .where(ChatMessageModel.id == message_id.value, ChatMessageModel.user_id == owner_id.value)
            .values(is_deleted=True, deleted_at=now, message=placeholder, updated_at=now)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount == 1

    async def count_unread(self, room_id: str, user_id: UserId, since: Optional[datetime]) -> int:
        query = self.session.query(ChatMessageModel).filter(
            ChatMessageModel.room_id == room_id,
            ChatMessageModel.is_deleted.is_(False),
            ChatMessageModel.user_id != user_id.value
        )
        if since is not None:
            query = query.filter(ChatMessageModel.created_at > since)
        return query.count()

    def _map_to_entity(self, model: ChatMessageModel) -> ChatMessage:
        return ChatMessage(
            id=MessageId(model.id),
            room_id=model.room_id,
            department=model.department,
            semester=model.semester,
            message=model.message,
            user_id=UserId(model.user_id),
            user_name=model.user_name,
            user_email=model.user_email,
            message_type=MessageType(model.message_type),
            file_url=model.file_url,
            file_name=model.file_name,
            reply_to=MessageId(model.reply_to) if model.reply_to else None,
            is_deleted=model.is_deleted,
            deleted_at=model.deleted_at,
            created_at=model.created_at,
            updated_at=model.updated_at
        )
