"""Single-use token value objects"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class IssuedToken:
    """A pending verification or reset: the stored token value and its expiry.

    For password resets ``value`` is the SHA-256 of the token handed to the
    user, never the token itself.
    """

    value: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now
