"""Abort signal implementation.

The ``AbortSignal`` is the read side of an ``AbortController``: start functions
receive it, inspect ``aborted``, register listeners, or await ``wait()``. Only
the owning controller may trip it.
"""

from __future__ import annotations

import asyncio
from typing import Callable, List, Optional

from ..errors_parts.classification import classify_exception
from ..logging import get_logger, log_event
from ..errors_parts.abort_error import AbortError
from .state import State

AbortListener = Callable[["AbortSignal"], object]

logger = get_logger("oaths.cancellation")


class AbortSignal:
    """One-shot abort notification shared between an oath and its creator.

    ``onabort`` is a single callback slot fired first; listeners added with
    ``add_listener`` fire afterwards in registration order. Every callback runs
    at most once. A callback that raises is logged and does not stop the rest.
    """

    def __init__(self) -> None:
        self._state = State()
        self._listeners: List[AbortListener] = []
        self.onabort: Optional[AbortListener] = None

    @property
    def aborted(self) -> bool:  # noqa: D401 - short form
        """Whether the owning controller has aborted."""
        return self._state.aborted

    @property
    def reason(self) -> str | None:  # noqa: D401 - short form
        """Reason string supplied at abort time (if any)."""
        return self._state.reason

    def add_listener(self, listener: AbortListener) -> None:
        """Register ``listener(signal)`` to run once when the signal aborts.

        Listeners added after the abort are not called; check ``aborted``
        first when that matters.
        """
        if not callable(listener):
            raise TypeError("listener must be callable")
        self._listeners.append(listener)

    def remove_listener(self, listener: AbortListener) -> None:
        """Unregister ``listener``; unknown listeners are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def raise_if_aborted(self) -> None:
        """Raise ``AbortError`` if the signal is aborted."""
        if self._state.aborted:
            raise AbortError(self._state.reason or "operation aborted")

    async def wait(self) -> None:
        """Suspend until the signal aborts (returns at once if it already has)."""
        if self._state.aborted:
            return
        waiter = asyncio.get_running_loop().create_future()

        def _wake(_signal: "AbortSignal") -> None:
            if not waiter.done():
                waiter.set_result(None)

        self.add_listener(_wake)
        try:
            await waiter
        finally:
            self.remove_listener(_wake)

    def _trip(self, reason: str | None) -> bool:
        """Flip to aborted and dispatch callbacks; ``False`` if already aborted."""
        if self._state.aborted:
            return False
        self._state.aborted = True
        self._state.reason = reason
        callbacks = [self.onabort] if self.onabort is not None else []
        callbacks.extend(self._listeners)
        self.onabort = None
        self._listeners.clear()
        for callback in callbacks:
            try:
                callback(self)
            except Exception as exc:  # listener failures must not stop the abort
                log_event(
                    logger,
                    "signal.listener_failed",
                    level="WARNING",
                    listener=getattr(callback, "__qualname__", repr(callback)),
                    error=repr(exc),
                    error_code=classify_exception(exc).value,
                )
        return True

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return (
            f"AbortSignal(aborted={self._state.aborted}, "
            f"reason={self._state.reason!r}, listeners={len(self._listeners)})"
        )


__all__ = ["AbortSignal", "AbortListener"]
