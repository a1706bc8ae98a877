"""
Base exception type for the oaths library.

Every error produced by oath construction, breaking, or combinators derives
from `OathError` and carries a normalized `ErrorCode`.
"""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode


class OathError(Exception):
    """Base class for library errors.

    Attributes:
        message: Human-readable message (also the ``str()`` of the error).
        code: Normalized :class:`ErrorCode` classification.
    """

    code: ErrorCode = ErrorCode.INTERNAL

    def __init__(self, message: str, *, code: Optional[ErrorCode] = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


__all__ = ["OathError"]
