"""oaths package

Breakable asyncio computations and the group combinators that tear them down.

Purpose:
    Wrap an asynchronous computation in an awaitable ``Oath`` that can be
    broken from outside: breaking aborts its signal, runs its cleanup routine
    once, and rejects it if it has not settled. ``all_``, ``any_`` and
    ``race`` combine oaths and break every member once the outcome is known.

Public API (re-exported):
    - Construction: :func:`oath`, :func:`spawn`, :class:`Oath`
    - Combinators: :func:`all_`, :func:`any_`, :func:`race`,
      :func:`check_oaths`
    - Cancellation: :class:`AbortController`, :class:`AbortSignal`,
      :class:`AbortError`
    - Errors: :class:`OathError` and subclasses, :class:`ErrorCode`,
      :func:`classify_exception`

Example:
    >>> async def main():
    ...     loop = asyncio.get_running_loop()
    ...     def later(resolve, reject, signal):
    ...         handle = loop.call_later(1.0, resolve, "slow")
    ...         return handle.cancel
    ...     fast = oath(lambda resolve, reject, signal: resolve("fast"))
    ...     return await race([oath(later), fast])
"""

from .cancellation import AbortController, AbortError, AbortSignal
from .combinators import all_, any_, check_oaths, race
from .errors import (
    AggregateError,
    AlreadyAbortedError,
    ErrorCode,
    InvalidArgumentError,
    InvalidCleanupError,
    OathBrokenError,
    OathError,
    classify_exception,
)
from .oath import Oath, oath, spawn

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "Oath",
    "oath",
    "spawn",
    "all_",
    "any_",
    "race",
    "check_oaths",
    "AbortController",
    "AbortSignal",
    "AbortError",
    "OathError",
    "InvalidArgumentError",
    "AlreadyAbortedError",
    "InvalidCleanupError",
    "OathBrokenError",
    "AggregateError",
    "ErrorCode",
    "classify_exception",
]
