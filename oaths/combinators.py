"""Group combinators over oaths: ``all_``, ``any_`` and ``race``.

Each combinator validates its group with :func:`check_oaths`, waits for the
decisive settlement, then breaks every member ("sweep") so timers, sockets and
tasks owned by the losers are released before the combinator returns.

Outcomes
--------
all_
    Values in input order once every oath fulfills (then sweep), or the first
    rejection in settlement order (sweep, then raise).
any_
    First fulfillment (then sweep), or ``AggregateError`` with every member
    error in input order when all reject (no sweep: every member has settled).
race
    First settlement, fulfilled or rejected; sweep on both paths.

Failures of other members after the outcome is known are suppressed: they are
marked retrieved so asyncio never reports them and this module never logs
them. If the task awaiting a combinator is cancelled, the group is swept and
``asyncio.CancelledError`` propagates.
"""
from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any, Callable, Dict, List, Optional

from .errors import AggregateError, InvalidArgumentError, OathBrokenError
from .logging import LogContext, get_logger, log_event
from .oath import Oath

logger = get_logger("oaths.combinators")


def check_oaths(oaths: Any) -> None:
    """Raise ``InvalidArgumentError`` unless ``oaths`` is a sequence of ``Oath``."""
    valid = (
        isinstance(oaths, Sequence)
        and not isinstance(oaths, (str, bytes, bytearray))
        and all(isinstance(item, Oath) for item in oaths)
    )
    if not valid:
        raise InvalidArgumentError("Argument must be a sequence of oaths")


def _failure(member: Oath) -> Optional[BaseException]:
    if member.cancelled():
        # a member cancelled through asyncio was broken, not the caller
        return OathBrokenError(reason="future cancelled")
    return member.exception()


class _Settlements:
    """Records the order in which group members settle.

    Future done-callbacks run in settlement order, so ``order`` is the order
    the event loop delivered outcomes. ``wait()`` returns as soon as
    ``decided`` is true for the recorded prefix.
    """

    def __init__(self, oaths: Sequence[Oath], decided: Callable[["_Settlements"], bool]) -> None:
        self._by_future: Dict[asyncio.Future, Oath] = {o.future: o for o in oaths}
        self._futures = list(self._by_future)
        self.size = len(self._futures)
        self.order: List[Oath] = []
        self._decided = decided
        self._waiter = asyncio.get_running_loop().create_future()
        for future in self._futures:
            future.add_done_callback(self._on_settled)
        self._check()

    def _on_settled(self, future: asyncio.Future) -> None:
        member = self._by_future[future]
        if member not in self.order:
            self.order.append(member)
        self._check()

    def _check(self) -> None:
        if not self._waiter.done() and self._decided(self):
            self._waiter.set_result(None)

    def first_failure(self) -> Optional[BaseException]:
        for member in self.order:
            error = _failure(member)
            if error is not None:
                return error
        return None

    def first_success(self) -> Optional[Oath]:
        for member in self.order:
            if _failure(member) is None:
                return member
        return None

    async def wait(self) -> None:
        try:
            await self._waiter
        finally:
            for future in self._futures:
                future.remove_done_callback(self._on_settled)


def _sweep(oaths: Sequence[Oath], combinator: str, outcome: str) -> None:
    """Break every member and silence failures nobody will observe."""
    for member in oaths:
        member.break_()
    for member in oaths:
        if member.done() and not member.cancelled():
            member.exception()
    log_event(
        logger,
        "group.swept",
        LogContext(combinator=combinator, group_size=len(oaths)),
        level="DEBUG",
        outcome=outcome,
    )


async def all_(oaths: Sequence[Oath]) -> List[Any]:
    """Wait for every oath to fulfill; break the group and re-raise on the first rejection."""
    check_oaths(oaths)
    watch = _Settlements(
        oaths,
        lambda s: len(s.order) == s.size or s.first_failure() is not None,
    )
    try:
        await watch.wait()
        error = watch.first_failure()
        if error is not None:
            raise error
        values = [member.result() for member in oaths]
    except BaseException:
        _sweep(oaths, "all", "rejected")
        raise
    _sweep(oaths, "all", "fulfilled")
    return values


async def any_(oaths: Sequence[Oath]) -> Any:
    """Return the first fulfilled value and break the rest of the group.

    Raises ``AggregateError`` when every oath rejects.
    """
    check_oaths(oaths)
    watch = _Settlements(
        oaths,
        lambda s: len(s.order) == s.size or s.first_success() is not None,
    )
    try:
        await watch.wait()
    except BaseException:
        _sweep(oaths, "any", "cancelled")
        raise
    winner = watch.first_success()
    if winner is None:
        raise AggregateError(errors=[_failure(member) for member in oaths])
    value = winner.result()
    _sweep(oaths, "any", "fulfilled")
    return value


async def race(oaths: Sequence[Oath]) -> Any:
    """Adopt the first settlement of the group and break every member."""
    check_oaths(oaths)
    if not oaths:
        raise InvalidArgumentError("Argument must be a non-empty sequence of oaths")
    watch = _Settlements(oaths, lambda s: len(s.order) > 0)
    try:
        await watch.wait()
        winner = watch.order[0]
        error = _failure(winner)
        if error is not None:
            raise error
        value = winner.result()
    except BaseException:
        _sweep(oaths, "race", "rejected")
        raise
    _sweep(oaths, "race", "fulfilled")
    return value


__all__ = ["check_oaths", "all_", "any_", "race"]
