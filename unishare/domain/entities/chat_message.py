"""Chat message entity"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..value_objects.entity_ids import MessageId, UserId
from ..enums import MessageType
from ..exceptions import InvalidInputError

MAX_MESSAGE_LENGTH = 2000
DELETED_MESSAGE_TEXT = "This message was deleted"


def room_id_for(department: str, semester: str) -> str:
    """Chat rooms are one per department + semester pair."""
    return f"{department}_{semester}"


@dataclass
class ChatMessage:
    id: MessageId
    room_id: str
    department: str
    semester: str
    message: str
    user_id: UserId
    user_name: str
    user_email: str
    message_type: MessageType = MessageType.TEXT
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    reply_to: Optional[MessageId] = None
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def compose(
        cls,
        department: str,
        semester: str,
        message: str,
        user_id: UserId,
        user_name: str,
        user_email: str,
        message_type: MessageType = MessageType.TEXT,
        file_url: Optional[str] = None,
        file_name: Optional[str] = None,
        reply_to: Optional[MessageId] = None,
    ) -> 'ChatMessage':
        department = (department or "").strip()
        semester = (semester or "").strip()
        text = (message or "").strip()
        if not department or not semester or not text:
            raise InvalidInputError("Department, semester, and message are required")
        if len(text) > MAX_MESSAGE_LENGTH:
            raise InvalidInputError(f"Message must be at most {MAX_MESSAGE_LENGTH} characters", field="message")

        return cls(
            id=MessageId.generate(),
            room_id=room_id_for(department, semester),
            department=department,
            semester=semester,
            message=text,
            user_id=user_id,
            user_name=user_name,
            user_email=user_email,
            message_type=message_type,
            file_url=file_url,
            file_name=file_name,
            reply_to=reply_to,
        )
