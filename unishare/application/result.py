"""Discriminated results returned by every use case

``execute`` methods are wrapped with :func:`as_result`, so callers get either
``Success(data)`` or ``Failure(kind, message, detail)`` and never an exception
for an expected condition.
"""

import functools
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, TypeVar, Union

from sqlalchemy.exc import SQLAlchemyError

from ..domain.exceptions import DomainError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    INVALID_CREDENTIAL = "invalid_credential"
    ACCOUNT_LOCKED = "account_locked"
    TOKEN_INVALID_OR_EXPIRED = "token_invalid_or_expired"
    RATE_LIMITED = "rate_limited"
    INVALID_STATE = "invalid_state"
    UNAUTHORIZED = "unauthorized"
    VALIDATION_ERROR = "validation_error"
    INTERNAL = "internal"


@dataclass(frozen=True)
class Success(Generic[T]):
    data: T
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class Failure:
    kind: ErrorKind
    message: str
    detail: Dict[str, Any] = field(default_factory=dict)
    ok: bool = field(default=False, init=False)

    @classmethod
    def from_error(cls, error: DomainError) -> 'Failure':
        return cls(kind=ErrorKind(error.kind), message=error.message, detail=dict(error.detail))


Result = Union[Success[T], Failure]


def as_result(func):
    """Wrap an async ``execute`` so domain errors come back as ``Failure``"""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs) -> Result:
        try:
            return Success(await func(*args, **kwargs))
        except DomainError as e:
            return Failure.from_error(e)
        except SQLAlchemyError as e:
            logger.exception(f"Storage failure in {func.__qualname__}: {e}")
            return Failure(kind=ErrorKind.INTERNAL, message="Internal storage error")

    return wrapper
