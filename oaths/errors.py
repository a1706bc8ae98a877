"""Oath error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``oaths.errors_parts`` to keep a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.oath_error import OathError
from .errors_parts.invalid_argument import InvalidArgumentError
from .errors_parts.already_aborted import AlreadyAbortedError
from .errors_parts.invalid_cleanup import InvalidCleanupError
from .errors_parts.oath_broken import OathBrokenError
from .errors_parts.aggregate_error import AggregateError
from .errors_parts.abort_error import AbortError
from .errors_parts.classification import classify_exception

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
