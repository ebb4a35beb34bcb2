"""Mapping of use-case results onto HTTP responses"""

from typing import Dict

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from ..application.result import ErrorKind, Failure, Result

STATUS_BY_KIND: Dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorKind.INVALID_CREDENTIAL: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.ACCOUNT_LOCKED: status.HTTP_423_LOCKED,
    ErrorKind.TOKEN_INVALID_OR_EXPIRED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorKind.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorKind.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorKind.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class FailureResponse(Exception):
    """Raised by routes for a ``Failure``; rendered by :func:`failure_handler`"""

    def __init__(self, failure: Failure):
        super().__init__(failure.message)
        self.failure = failure


def unwrap(result: Result):
    """Return the payload of a ``Success`` or raise for a ``Failure``"""
    if not result.ok:
        raise FailureResponse(result)
    return result.data


def failure_body(failure: Failure) -> dict:
    body = {"success": False, "kind": failure.kind.value, "message": failure.message}
    body.update(jsonable_encoder(failure.detail))
    return body


def failure_to_response(failure: Failure) -> JSONResponse:
    headers = None
    if failure.kind == ErrorKind.RATE_LIMITED and "wait_seconds" in failure.detail:
        headers = {"Retry-After": str(failure.detail["wait_seconds"])}
    return JSONResponse(
        status_code=STATUS_BY_KIND.get(failure.kind, status.HTTP_500_INTERNAL_SERVER_ERROR),
        content=failure_body(failure),
        headers=headers,
    )


async def failure_handler(request: Request, exc: FailureResponse) -> JSONResponse:
    return failure_to_response(exc.failure)
