"""Application error taxonomy.

Every failure that reaches a caller is an `AppError`; the API layer renders it
as a `{success: false, ...}` envelope with `status_code`.
"""

import inspect
from collections.abc import Mapping
from enum import Enum, IntEnum
from typing import Any
from uuid import uuid4


class AppErrorCode(str, Enum):
    E_INVALID_REQUEST = "E_INVALID_REQUEST"
    E_INVALID_PARAMS = "E_INVALID_PARAMS"
    E_BAD_TOKEN = "E_BAD_TOKEN"
    E_FORBIDDEN = "E_FORBIDDEN"
    E_STREAMING_NOT_FOUND = "E_STREAMING_NOT_FOUND"
    E_PLAYLIST_NOT_FOUND = "E_PLAYLIST_NOT_FOUND"
    E_TERMINAL_STATE = "E_TERMINAL_STATE"
    E_INVALID_TRANSITION = "E_INVALID_TRANSITION"
    E_OPERATION_FAILED = "E_OPERATION_FAILED"
    E_PERSISTENCE_FAILED = "E_PERSISTENCE_FAILED"
    E_TRANSMISSION_BUSY = "E_TRANSMISSION_BUSY"
    E_LOCK_UNAVAILABLE = "E_LOCK_UNAVAILABLE"
    E_INTERNAL_ERROR = "E_INTERNAL_ERROR"

    def __str__(self) -> str:
        return self.value


class HttpStatusCode(IntEnum):
    OK = 200
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    INTERNAL_SERVER_ERROR = 500


def _caller_info() -> str:
    # First frame outside this module is the raise site
    frame = inspect.currentframe()
    while frame is not None and frame.f_globals.get("__name__") == __name__:
        frame = frame.f_back
    if frame is None:
        return "unknown"
    return f"{frame.f_globals.get('__name__')}:{frame.f_code.co_name}:{frame.f_lineno}"


class AppError(Exception):
    """Base application error.

    Args:
        errcode: Stable machine-readable code.
        errmesg: Human readable summary, rendered as `message`.
        status_code: HTTP status used by the API layer.
        error: Underlying failure text echoed to the caller as `error`.
            Defaults to `errmesg`.
        details: Extra fields merged into the failure envelope (e.g. the
            control-service payload that caused the failure).
    """

    default_errcode: AppErrorCode = AppErrorCode.E_INTERNAL_ERROR
    default_status_code: HttpStatusCode = HttpStatusCode.INTERNAL_SERVER_ERROR

    def __init__(
        self,
        errcode: AppErrorCode | str | None = None,
        errmesg: str = "",
        status_code: HttpStatusCode | int | None = None,
        *,
        error: str | None = None,
        details: Mapping[str, Any] | None = None,
    ):
        errcode = errcode or self.default_errcode
        self.errcode = errcode.value if isinstance(errcode, AppErrorCode) else str(errcode)
        self.errmesg = errmesg
        self.status_code = int(status_code or self.default_status_code)
        self.error = error if error is not None else errmesg
        self.details = dict(details or {})
        self.erresid = uuid4().hex[:10]
        self.caller_info = _caller_info()
        super().__init__(errmesg)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.errcode}, {self.errmesg!r}, {self.status_code})"


class ValidationError(AppError):
    """A required field is missing or malformed."""

    default_errcode = AppErrorCode.E_INVALID_REQUEST
    default_status_code = HttpStatusCode.BAD_REQUEST


class AuthenticationError(AppError):
    default_errcode = AppErrorCode.E_BAD_TOKEN
    default_status_code = HttpStatusCode.UNAUTHORIZED


class AuthorizationError(AppError):
    """Caller role is not in the required set."""

    default_errcode = AppErrorCode.E_FORBIDDEN
    default_status_code = HttpStatusCode.FORBIDDEN


class NotFoundError(AppError):
    default_errcode = AppErrorCode.E_STREAMING_NOT_FOUND
    default_status_code = HttpStatusCode.NOT_FOUND


class TerminalStateError(AppError):
    """Transition requested on an entity that reached a terminal status."""

    default_errcode = AppErrorCode.E_TERMINAL_STATE
    default_status_code = HttpStatusCode.CONFLICT


class OperationError(AppError):
    """Control service or persistence rejected the operation."""

    default_errcode = AppErrorCode.E_OPERATION_FAILED
    default_status_code = HttpStatusCode.INTERNAL_SERVER_ERROR


class InternalError(AppError):
    default_errcode = AppErrorCode.E_INTERNAL_ERROR
    default_status_code = HttpStatusCode.INTERNAL_SERVER_ERROR


__all__ = [
    "AppError",
    "AppErrorCode",
    "AuthenticationError",
    "AuthorizationError",
    "HttpStatusCode",
    "InternalError",
    "NotFoundError",
    "OperationError",
    "TerminalStateError",
    "ValidationError",
]
