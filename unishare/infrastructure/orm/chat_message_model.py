"""Chat message ORM Model"""

from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Text, Uuid, Index
from sqlalchemy.sql import func

from ...db.models import Base, enum_column
from ...domain.enums import MessageType


class ChatMessageModel(Base):
    __tablename__ = 'chat_messages'
    __table_args__ = (
        Index('ix_chat_messages_room_created', 'room_id', 'created_at'),
    )

    id = Column(Uuid, primary_key=True)
    room_id = Column(String, nullable=False, index=True)
    department = Column(String, nullable=False)
    semester = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    message_type = Column(enum_column(MessageType, 'message_type'), default=MessageType.TEXT, nullable=False)
    file_url = Column(String, nullable=True)
    file_name = Column(String, nullable=True)
    reply_to = Column(Uuid, ForeignKey('chat_messages.id', ondelete='SET NULL'), nullable=True)

    # Sender, denormalized so history renders without a join
    user_id = Column(Uuid, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    user_name = Column(String, nullable=False)
    user_email = Column(String, nullable=False)

    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
