"""Abort controller implementation.

Exposes ``AbortController``, the write side of the cancellation handle. Each
oath owns one unless the caller injects its own; child controllers inherit
aborts from their parent.
"""

from __future__ import annotations

from typing import List

from .abort_signal import AbortSignal


class AbortController:
    """Owns an ``AbortSignal`` and the right to trip it.

    Aborting is idempotent: the first call records the reason and notifies the
    signal's callbacks, later calls do nothing. Child controllers are aborted
    with the parent's reason.
    """

    def __init__(self, *, parent: "AbortController | None" = None) -> None:
        self._signal = AbortSignal()
        self._children: List[AbortController] = []
        if parent is not None:
            parent.link_child(self)

    @property
    def signal(self) -> AbortSignal:
        return self._signal

    def abort(self, reason: str | None = None) -> None:
        """Abort the signal and cascade to children."""
        if not self._signal._trip(reason):
            return
        children = list(self._children)
        for child in children:
            child.abort(reason)

    def link_child(self, controller: "AbortController") -> "AbortController":
        """Link a child controller so parent aborts cascade (returns child)."""
        self._children.append(controller)
        if self._signal.aborted:
            controller.abort(self._signal.reason)
        return controller

    def child(self) -> "AbortController":
        """Create and link a child controller (shortcut)."""
        return AbortController(parent=self)

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"AbortController(aborted={self._signal.aborted}, "
            f"reason={self._signal.reason!r}, children={len(self._children)})"
        )


__all__ = ["AbortController"]
