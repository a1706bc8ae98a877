"""
Normalized oath error codes (taxonomy).

Defines the `ErrorCode` enumeration attached to every library error and used
by structured logging. Values are lowercase snake_case and are considered a
stable public contract.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    VALIDATION = "validation"
    ALREADY_ABORTED = "already_aborted"
    INVALID_CLEANUP = "invalid_cleanup"
    BROKEN = "broken"
    AGGREGATE = "aggregate"
    ABORTED = "aborted"
    CANCELLED = "cancelled"
    TIMEOUT = "timeout"
    INTERNAL = "internal"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
