"""Abort error type.

Defines the public ``AbortError`` raised by ``AbortSignal.raise_if_aborted`` so
cooperative code polling a signal can bail out with a recognizable exception.
"""

from __future__ import annotations


class AbortError(RuntimeError):
    """Raised when code observes an aborted signal cooperatively.

    Distinguishes a requested abort from other runtime failures, so callers can
    map it to a structured status or skip retry logic.
    """


__all__ = ["AbortError"]
