"""Error used when a start function returns something other than a cleanup."""
from __future__ import annotations

from .error_code import ErrorCode
from .oath_error import OathError


class InvalidCleanupError(OathError, TypeError):
    code = ErrorCode.INVALID_CLEANUP

    def __init__(
        self, message: str = "Return value from function must be falsey or a function"
    ) -> None:
        super().__init__(message)


__all__ = ["InvalidCleanupError"]
