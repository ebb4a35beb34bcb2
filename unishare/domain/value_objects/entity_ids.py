"""Entity ID value objects"""

from dataclasses import dataclass
from uuid import UUID, uuid4

from ..exceptions import InvalidInputError


@dataclass(frozen=True)
class _EntityId:
    value: UUID

    def __post_init__(self):
        if not isinstance(self.value, UUID):
            raise InvalidInputError(f"{type(self).__name__} must be a valid UUID")

    @classmethod
    def generate(cls):
        """Generate a new random UUID"""
        return cls(uuid4())

    @classmethod
    def from_str(cls, uuid_str: str):
        """Create the id from its string representation"""
        try:
            return cls(UUID(str(uuid_str)))
        except ValueError:
            raise InvalidInputError(f"Invalid identifier: {uuid_str}")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class UserId(_EntityId):
    pass


@dataclass(frozen=True)
class ResourceId(_EntityId):
    pass


@dataclass(frozen=True)
class StaffId(_EntityId):
    pass


@dataclass(frozen=True)
class MessageId(_EntityId):
    pass
