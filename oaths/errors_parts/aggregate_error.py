"""
Composite error raised by ``any_`` when every oath in the group rejects.
"""
from __future__ import annotations

from typing import Iterable, Tuple

from .error_code import ErrorCode
from .oath_error import OathError


class AggregateError(OathError):
    """Bundles member failures in group order.

    Attributes:
        errors: Tuple of the member exceptions, one per oath, in input order.
    """

    code = ErrorCode.AGGREGATE

    def __init__(
        self,
        message: str = "All oaths were rejected",
        errors: Iterable[BaseException] = (),
    ) -> None:
        super().__init__(message)
        self.errors: Tuple[BaseException, ...] = tuple(errors)

    def __str__(self) -> str:
        if not self.errors:
            return self.message
        return f"{self.message} ({len(self.errors)} errors)"


__all__ = ["AggregateError"]
