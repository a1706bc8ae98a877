"""
Error classification helper mapping exceptions to normalized ErrorCode values.

Used by the logging layer so every structured event carries an ``error_code``
regardless of whether the failure came from this library, from asyncio, or
from a caller's start function.
"""
from __future__ import annotations

import asyncio

from .abort_error import AbortError
from .error_code import ErrorCode
from .oath_error import OathError


def classify_exception(exc: BaseException) -> ErrorCode:
    """Return the normalized :class:`ErrorCode` for ``exc``.

    Library errors report their own ``code``; ``AbortError``, asyncio
    cancellation and timeouts get dedicated codes; everything else is
    ``UNKNOWN``.
    """
    if isinstance(exc, OathError):
        return exc.code
    if isinstance(exc, AbortError):
        return ErrorCode.ABORTED
    if isinstance(exc, asyncio.CancelledError):
        return ErrorCode.CANCELLED
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError)):
        return ErrorCode.TIMEOUT
    return ErrorCode.UNKNOWN


__all__ = ["classify_exception"]
