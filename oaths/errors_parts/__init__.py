"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `oaths.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .oath_error import OathError
from .invalid_argument import InvalidArgumentError
from .already_aborted import AlreadyAbortedError
from .invalid_cleanup import InvalidCleanupError
from .oath_broken import OathBrokenError
from .aggregate_error import AggregateError
from .abort_error import AbortError
from .classification import classify_exception

__all__ = [
    "ErrorCode",
    "OathError",
    "InvalidArgumentError",
    "AlreadyAbortedError",
    "InvalidCleanupError",
    "OathBrokenError",
    "AggregateError",
    "AbortError",
    "classify_exception",
]
