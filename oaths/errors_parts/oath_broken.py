"""
Error delivered to an oath that is broken before it settles.

The optional ``reason`` mirrors the reason passed to ``break_()`` (or to the
controller's ``abort``) so callers can tell deliberate teardown apart from a
combinator sweep.
"""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode
from .oath_error import OathError


class OathBrokenError(OathError):
    """Raised by awaiting an oath that was broken while still pending."""

    code = ErrorCode.BROKEN

    def __init__(self, message: str = "Oath broken", *, reason: Optional[str] = None) -> None:
        super().__init__(message)
        self.reason = reason


__all__ = ["OathBrokenError"]
