"""Internal state holder for abort signals.

Dataclass used by ``AbortSignal`` to track the abort flag and the optional
reason supplied to ``AbortController.abort``. Kept separate so the signal class
stays focused on listener dispatch.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class State:
    """Internal state for abort signals."""

    aborted: bool = False
    reason: Optional[str] = None


__all__ = ["State"]
