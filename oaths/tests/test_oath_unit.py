"""Unit tests for oath construction, settlement and breaking."""
from __future__ import annotations

import asyncio
import gc
import json

import pytest

from oaths import (
    AbortController,
    AbortSignal,
    AlreadyAbortedError,
    InvalidArgumentError,
    InvalidCleanupError,
    Oath,
    OathBrokenError,
    OathError,
    oath,
)
from oaths.logging import get_logger
from oaths.tests.helpers import capture_loop_errors, timed


async def _failure_of(promise: Oath) -> BaseException:
    with pytest.raises(BaseException) as info:
        await asyncio.wait_for(promise, timeout=1.0)
    return info.value


@pytest.mark.parametrize("start", [{}, None, 42, "start", [lambda: None]])
def test_rejects_non_callable_start(start):
    async def scenario():
        promise = oath(start)
        assert isinstance(promise, Oath)  # nosec B101 - never raised synchronously
        return await _failure_of(promise)

    err = asyncio.run(scenario())
    assert isinstance(err, InvalidArgumentError)  # nosec B101
    assert isinstance(err, TypeError)  # nosec B101
    assert str(err) == "First argument must be a function"  # nosec B101


@pytest.mark.parametrize("handle", [object(), AbortSignal(), "controller"])
def test_rejects_non_controller(handle):
    async def scenario():
        return await _failure_of(oath(lambda resolve, reject, signal: None, handle))

    err = asyncio.run(scenario())
    assert isinstance(err, InvalidArgumentError)  # nosec B101
    assert str(err) == "Second argument must be an AbortController"  # nosec B101


def test_rejects_already_aborted_controller_without_starting():
    started = []

    async def scenario():
        controller = AbortController()
        controller.abort()
        promise = oath(lambda resolve, reject, signal: started.append(True), controller)
        assert promise.controller is controller  # nosec B101
        return await _failure_of(promise)

    err = asyncio.run(scenario())
    assert isinstance(err, AlreadyAbortedError)  # nosec B101
    assert str(err) == "AbortController is already aborted"  # nosec B101
    assert started == []  # nosec B101


@pytest.mark.parametrize("returned", [{"k": 1}, 1, "cleanup", [1], object()])
def test_rejects_truthy_non_callable_return(returned):
    async def scenario():
        return await _failure_of(oath(lambda resolve, reject, signal: returned))

    err = asyncio.run(scenario())
    assert isinstance(err, InvalidCleanupError)  # nosec B101
    assert str(err) == "Return value from function must be falsey or a function"  # nosec B101


@pytest.mark.parametrize("returned", [None, 0, "", False, [], {}])
def test_falsey_return_is_accepted(returned):
    async def scenario():
        def start(resolve, reject, signal):
            resolve("ok")
            return returned

        return await oath(start)

    assert asyncio.run(scenario()) == "ok"  # nosec B101


def test_async_start_function_is_rejected_as_invalid_cleanup(recwarn):
    async def start(resolve, reject, signal):  # pragma: no cover - never awaited
        resolve("never")

    async def scenario():
        return await _failure_of(oath(start))

    err = asyncio.run(scenario())
    gc.collect()
    assert isinstance(err, InvalidCleanupError)  # nosec B101
    assert not [w for w in recwarn if issubclass(w.category, RuntimeWarning)]  # nosec B101


def test_exception_from_start_rejects_the_oath():
    def start(resolve, reject, signal):
        raise ValueError("boom")

    async def scenario():
        return await _failure_of(oath(start))

    err = asyncio.run(scenario())
    assert isinstance(err, ValueError) and str(err) == "boom"  # nosec B101


def test_first_settlement_wins():
    async def scenario():
        def start(resolve, reject, signal):
            resolve(1)
            resolve(2)
            reject(RuntimeError("late"))

        return await oath(start)

    assert asyncio.run(scenario()) == 1  # nosec B101


def test_reject_wraps_non_exception_values():
    async def scenario():
        return await _failure_of(oath(lambda resolve, reject, signal: reject("nope")))

    err = asyncio.run(scenario())
    assert isinstance(err, OathError)  # nosec B101
    assert "nope" in str(err)  # nosec B101


def test_break_pending_oath_runs_cleanup_once_and_rejects():
    async def scenario():
        cleanups = {}
        flags = {}
        promise = timed(0.05, "late", flags=flags, key="t", cleanups=cleanups)
        for _ in range(3):
            promise.break_()
        err = await _failure_of(promise)
        await asyncio.sleep(0.08)
        return err, cleanups, flags, promise.signal.aborted

    err, cleanups, flags, aborted = asyncio.run(scenario())
    assert isinstance(err, OathBrokenError)  # nosec B101
    assert str(err) == "Oath broken"  # nosec B101
    assert cleanups == {"t": 1}  # nosec B101
    assert flags == {"t": False}  # nosec B101
    assert aborted is True  # nosec B101


def test_break_reason_is_carried_on_the_error():
    async def scenario():
        promise = oath(lambda resolve, reject, signal: None)
        promise.break_("user hit stop")
        return await _failure_of(promise)

    err = asyncio.run(scenario())
    assert isinstance(err, OathBrokenError)  # nosec B101
    assert err.reason == "user hit stop"  # nosec B101


def test_break_after_settlement_keeps_result_but_runs_cleanup():
    async def scenario():
        cleaned = []

        def start(resolve, reject, signal):
            resolve("done")
            return lambda: cleaned.append(True)

        promise = oath(start)
        assert await promise == "done"  # nosec B101
        promise.break_()
        promise.break_()
        return await promise, cleaned, promise.signal.aborted

    value, cleaned, aborted = asyncio.run(scenario())
    assert value == "done"  # nosec B101
    assert cleaned == [True]  # nosec B101
    assert aborted is True  # nosec B101


def test_breaking_a_rejected_oath_keeps_its_error():
    async def scenario():
        promise = oath(lambda resolve, reject, signal: reject(KeyError("k")))
        promise.break_()
        return await _failure_of(promise)

    assert isinstance(asyncio.run(scenario()), KeyError)  # nosec B101


def test_break_of_unawaited_oath_is_not_reported_as_unretrieved():
    async def scenario():
        captured = capture_loop_errors()
        promise = oath(lambda resolve, reject, signal: None)
        promise.break_()
        del promise
        gc.collect()
        await asyncio.sleep(0)
        gc.collect()
        return captured

    assert asyncio.run(scenario()) == []  # nosec B101


def test_cleanup_failure_is_logged_and_break_completes(capsys):
    get_logger()  # bind the console handler to the captured stderr

    async def scenario():
        def start(resolve, reject, signal):
            def cleanup():
                raise RuntimeError("cleanup exploded")

            return cleanup

        promise = oath(start, name="fragile")
        promise.break_()
        return await _failure_of(promise), promise.signal.aborted

    err, aborted = asyncio.run(scenario())
    assert isinstance(err, OathBrokenError)  # nosec B101
    assert aborted is True  # nosec B101
    lines = [json.loads(line) for line in capsys.readouterr().err.strip().splitlines()]
    events = [line for line in lines if line.get("event") == "oath.cleanup_failed"]
    assert len(events) == 1  # nosec B101
    assert events[0]["oath"] == "fragile"  # nosec B101
    assert events[0]["level"] == "WARNING"  # nosec B101
    assert events[0]["error_code"] == "unknown"  # nosec B101


def test_shared_controller_breaks_every_oath_using_it():
    async def scenario():
        controller = AbortController()
        first = oath(lambda resolve, reject, signal: None, controller)
        second = oath(lambda resolve, reject, signal: None, controller)
        first.break_()
        return await _failure_of(first), await _failure_of(second)

    first_err, second_err = asyncio.run(scenario())
    assert isinstance(first_err, OathBrokenError)  # nosec B101
    assert isinstance(second_err, OathBrokenError)  # nosec B101


def test_abort_from_inside_start_still_breaks():
    async def scenario():
        controller = AbortController()
        cleaned = []

        def start(resolve, reject, signal):
            controller.abort("self-destruct")
            return lambda: cleaned.append(True)

        err = await _failure_of(oath(start, controller))
        return err, cleaned

    err, cleaned = asyncio.run(scenario())
    assert isinstance(err, OathBrokenError)  # nosec B101
    assert cleaned == [True]  # nosec B101


def test_cancelling_an_awaiting_task_breaks_the_oath():
    async def scenario():
        cleanups = {}
        promise = timed(1.0, flags={}, key="slow", cleanups=cleanups)

        async def waiter():
            return await promise

        task = asyncio.ensure_future(waiter())
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        await asyncio.sleep(0)
        return promise, cleanups

    promise, cleanups = asyncio.run(scenario())
    assert promise.cancelled()  # nosec B101
    assert promise.signal.aborted  # nosec B101
    assert cleanups == {"slow": 1}  # nosec B101


def test_done_callback_receives_the_oath_and_repr_tracks_state():
    async def scenario():
        seen = []
        promise = timed(0.01, "v", key="cb")
        promise.add_done_callback(seen.append)
        pending_repr = repr(promise)
        await asyncio.wait_for(promise, timeout=1.0)
        await asyncio.sleep(0)
        return promise, seen, pending_repr

    promise, seen, pending_repr = asyncio.run(scenario())
    assert seen == [promise]  # nosec B101
    assert "pending" in pending_repr and "cb" in pending_repr  # nosec B101
    assert "fulfilled" in repr(promise)  # nosec B101
    assert promise.done() and promise.result() == "v" and promise.exception() is None  # nosec B101
