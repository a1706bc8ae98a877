"""Breakable asyncio computations ("oaths").

Purpose
-------
An :class:`Oath` pairs an ``asyncio.Future`` with an ``AbortController``. It is
awaitable like a future and adds ``break_()``, which aborts the controller,
runs the start function's cleanup routine once, and rejects the oath with
``OathBrokenError`` when it has not settled yet.

Construction goes through :func:`oath` (callback style, mirroring a promise
executor) or :func:`spawn` (coroutine style). Both always return an ``Oath``:
argument errors are delivered as an already-rejected oath, never raised.

Notes
-----
- Must be called with an event loop running; the settlement future is created
  on the running loop.
- Settlement is first-wins: later ``resolve``/``reject`` calls are ignored and
  a break after settlement never overrides the result.
- Cancelling the oath's future through asyncio (for example, cancelling a task
  that awaits it) is treated as a break so cleanup still runs.
"""
from __future__ import annotations

import asyncio
import itertools
from typing import Any, Awaitable, Callable, Generator, Optional

from .cancellation import AbortController, AbortSignal
from .errors import (
    AlreadyAbortedError,
    InvalidArgumentError,
    InvalidCleanupError,
    OathBrokenError,
    OathError,
    classify_exception,
)
from .logging import LogContext, get_logger, log_event

Resolve = Callable[..., None]
Reject = Callable[[BaseException], None]
Cleanup = Callable[[], Any]
StartFn = Callable[[Resolve, Reject, AbortSignal], Optional[Cleanup]]

logger = get_logger("oaths.oath")

_ids = itertools.count(1)


class Oath:
    """An awaitable, breakable wrapper around one asynchronous computation.

    Instances are produced by :func:`oath` and :func:`spawn`; combinators only
    accept ``Oath`` instances so every member of a group can be broken.
    """

    def __init__(
        self,
        future: asyncio.Future,
        controller: AbortController,
        name: Optional[str] = None,
    ) -> None:
        self._future = future
        self._controller = controller
        self._name = name or f"oath-{next(_ids)}"
        future.add_done_callback(self._on_future_done)

    @property
    def future(self) -> asyncio.Future:
        return self._future

    @property
    def controller(self) -> AbortController:
        return self._controller

    @property
    def signal(self) -> AbortSignal:
        return self._controller.signal

    @property
    def name(self) -> str:
        return self._name

    def break_(self, reason: Optional[str] = None) -> None:
        """Abort the oath's controller. Safe to call any number of times."""
        self._controller.abort(reason)

    def done(self) -> bool:
        return self._future.done()

    def cancelled(self) -> bool:
        return self._future.cancelled()

    def result(self) -> Any:
        return self._future.result()

    def exception(self) -> Optional[BaseException]:
        return self._future.exception()

    def add_done_callback(self, fn: Callable[["Oath"], Any]) -> None:
        """Call ``fn(oath)`` once the oath settles."""
        self._future.add_done_callback(lambda _fut: fn(self))

    def __await__(self) -> Generator[Any, None, Any]:
        return self._future.__await__()

    def _on_future_done(self, future: asyncio.Future) -> None:
        if future.cancelled():
            self._controller.abort("future cancelled")

    def __repr__(self) -> str:
        if not self._future.done():
            state = "pending"
        elif self._future.cancelled():
            state = "cancelled"
        elif self._future.exception() is not None:
            state = "rejected"
        else:
            state = "fulfilled"
        return f"<Oath {self._name} {state} aborted={self.signal.aborted}>"


def _rejected(
    error: BaseException,
    controller: Optional[AbortController] = None,
    name: Optional[str] = None,
) -> Oath:
    future = asyncio.get_running_loop().create_future()
    future.set_exception(error)
    return Oath(future, controller or AbortController(), name)


def oath(
    start: StartFn,
    controller: Optional[AbortController] = None,
    *,
    name: Optional[str] = None,
) -> Oath:
    """Run ``start(resolve, reject, signal)`` and return a breakable oath.

    ``start`` runs synchronously and may return a zero-argument cleanup
    callable (or nothing). The cleanup runs once, when the oath is broken,
    whether or not the oath has already settled.

    Failures are reported through the returned oath:

    - ``InvalidArgumentError`` when ``start`` is not callable or ``controller``
      is not an ``AbortController``;
    - ``AlreadyAbortedError`` when ``controller`` is already aborted (``start``
      is not called);
    - ``InvalidCleanupError`` when ``start`` returns a truthy non-callable;
    - whatever ``start`` raises.
    """
    if not callable(start):
        return _rejected(InvalidArgumentError("First argument must be a function"), name=name)
    if controller is None:
        controller = AbortController()
    elif not isinstance(controller, AbortController):
        return _rejected(InvalidArgumentError("Second argument must be an AbortController"), name=name)
    if controller.signal.aborted:
        return _rejected(AlreadyAbortedError(), controller, name)

    future = asyncio.get_running_loop().create_future()
    promise = Oath(future, controller, name)

    def resolve(value: Any = None) -> None:
        if not future.done():
            future.set_result(value)

    def reject(error: BaseException) -> None:
        if future.done():
            return
        if not isinstance(error, BaseException):
            error = OathError(f"Oath rejected with non-exception value: {error!r}")
        future.set_exception(error)

    try:
        cleanup = start(resolve, reject, controller.signal)
    except Exception as exc:
        reject(exc)
        return promise

    if cleanup and not callable(cleanup):
        if asyncio.iscoroutine(cleanup):
            cleanup.close()
        reject(InvalidCleanupError())
        return promise

    def on_abort(signal: AbortSignal) -> None:
        if cleanup:
            _run_cleanup(promise, cleanup)
        settled = future.done()
        log_event(
            logger,
            "oath.broken",
            LogContext(oath=promise.name),
            level="DEBUG",
            reason=signal.reason,
            settled=settled,
        )
        if settled:
            return
        future.set_exception(OathBrokenError(reason=signal.reason))
        # a requested break is never an unobserved failure
        future.exception()

    if controller.signal.aborted:
        # aborted from inside start
        on_abort(controller.signal)
    else:
        controller.signal.add_listener(on_abort)
    return promise


def _run_cleanup(promise: Oath, cleanup: Cleanup) -> None:
    """Run a cleanup routine; failures are logged and do not stop the break."""
    try:
        cleanup()
    except Exception as exc:
        log_event(
            logger,
            "oath.cleanup_failed",
            LogContext(oath=promise.name),
            level="WARNING",
            error=repr(exc),
            error_code=classify_exception(exc).value,
        )


def spawn(
    coro_fn: Callable[[AbortSignal], Awaitable[Any]],
    controller: Optional[AbortController] = None,
    *,
    name: Optional[str] = None,
) -> Oath:
    """Run ``coro_fn(signal)`` as an asyncio task wrapped in an oath.

    The task's result or exception settles the oath. Breaking the oath cancels
    the task. A task cancelled by anything else rejects the oath with
    ``OathBrokenError``.
    """
    if not callable(coro_fn):
        return _rejected(InvalidArgumentError("First argument must be a function"), name=name)

    def start(resolve: Resolve, reject: Reject, signal: AbortSignal) -> Cleanup:
        task = asyncio.ensure_future(coro_fn(signal))

        def relay(done: asyncio.Future) -> None:
            if done.cancelled():
                reject(OathBrokenError(reason=signal.reason or "task cancelled"))
                return
            error = done.exception()
            if error is not None:
                reject(error)
            else:
                resolve(done.result())

        task.add_done_callback(relay)
        return task.cancel

    return oath(start, controller, name=name)


__all__ = ["Oath", "oath", "spawn", "StartFn", "Cleanup", "Resolve", "Reject"]
