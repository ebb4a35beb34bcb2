"""Infrastructure ORM Models"""

from .user_model import UserModel
from .resource_model import ResourceModel
from .staff_model import StaffModel
from .chat_message_model import ChatMessageModel

__all__ = [
    'UserModel',
    'ResourceModel',
    'StaffModel',
    'ChatMessageModel'
]
