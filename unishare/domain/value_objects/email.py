"""Email value object"""

import re
from dataclasses import dataclass

from ..exceptions import InvalidInputError

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]{2,}$")


@dataclass(frozen=True)
class Email:
    """Email address, normalized to lower case so lookups are case-insensitive"""

    value: str

    def __post_init__(self):
        normalized = (self.value or "").strip().lower()
        if not _EMAIL_PATTERN.match(normalized):
            raise InvalidInputError("Please provide a valid email")
        object.__setattr__(self, "value", normalized)

    def __str__(self) -> str:
        return self.value
