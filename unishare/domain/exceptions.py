"""Domain exceptions

Every expected failure of a business operation is one of these. Use cases let
them propagate; the result boundary in ``application.result`` turns them into
``Failure`` values carrying the same ``kind``.
"""

from datetime import datetime
from typing import Any, Dict


class DomainError(Exception):
    kind = "domain_error"

    def __init__(self, message: str, **detail: Any):
        super().__init__(message)
        self.message = message
        self.detail: Dict[str, Any] = detail


class NotFoundError(DomainError):
    kind = "not_found"


class AlreadyExistsError(DomainError):
    kind = "already_exists"


class InvalidCredentialError(DomainError):
    kind = "invalid_credential"


class AccountLockedError(DomainError):
    kind = "account_locked"

    def __init__(self, message: str, lock_until: datetime, remaining_attempts: int = 0):
        super().__init__(message, lock_until=lock_until, remaining_attempts=remaining_attempts)
        self.lock_until = lock_until


class TokenInvalidOrExpiredError(DomainError):
    kind = "token_invalid_or_expired"

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message)


class RateLimitedError(DomainError):
    kind = "rate_limited"

    def __init__(self, message: str, retry_after: datetime, wait_seconds: int):
        super().__init__(message, retry_after=retry_after, wait_seconds=wait_seconds)
        self.retry_after = retry_after
        self.wait_seconds = wait_seconds


class InvalidStateError(DomainError):
    kind = "invalid_state"


class UnauthorizedError(DomainError):
    kind = "unauthorized"


class InvalidInputError(DomainError):
    kind = "validation_error"
