"""Cancellation parts package.

Prefer importing from ``oaths.cancellation`` for the stable surface.
"""

from .abort_controller import AbortController
from ..errors_parts.abort_error import AbortError
from .abort_signal import AbortSignal

__all__ = ["AbortController", "AbortError", "AbortSignal"]
