"""Error used when an oath is created on an aborted controller."""
from __future__ import annotations

from .error_code import ErrorCode
from .oath_error import OathError


class AlreadyAbortedError(OathError):
    """The supplied controller's signal was aborted before the oath started."""

    code = ErrorCode.ALREADY_ABORTED

    def __init__(self, message: str = "AbortController is already aborted") -> None:
        super().__init__(message)


__all__ = ["AlreadyAbortedError"]
