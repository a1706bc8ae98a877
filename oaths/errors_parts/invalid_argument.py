"""Error raised for malformed oath or combinator arguments."""
from __future__ import annotations

from .error_code import ErrorCode
from .oath_error import OathError


class InvalidArgumentError(OathError, TypeError):
    """A start function, controller, or oath group had the wrong type."""

    code = ErrorCode.VALIDATION


__all__ = ["InvalidArgumentError"]
