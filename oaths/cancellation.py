"""Cancellation primitives (public API facade).

Purpose
-------
Expose the cancellation handle used by oaths via the canonical
``oaths.cancellation`` import path while the concrete implementations live
under ``cancellation_parts``.

Notes
-----
- ``AbortController`` is the handle an oath's creator keeps; ``break_()`` on
	an oath simply aborts its controller.
- ``AbortSignal`` is handed to start functions so collaborators (timers, HTTP
	clients) can react to an abort.
- ``AbortError`` is raised by code that polls a signal and finds it aborted.
"""

from .cancellation_parts.abort_controller import AbortController
from .errors_parts.abort_error import AbortError
from .cancellation_parts.abort_signal import AbortListener, AbortSignal

__all__ = ["AbortController", "AbortError", "AbortListener", "AbortSignal"]
