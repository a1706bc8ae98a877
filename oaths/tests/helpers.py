"""Shared helpers for oath tests.

``timed`` builds an oath settled by ``loop.call_later`` whose cleanup cancels
the timer; the optional ``flags`` mapping records whether the timer actually
fired, which is how tests prove a broken oath stopped its work.
"""
from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

from oaths import Oath, oath


def timed(
    delay: float,
    value: Any = None,
    *,
    error: Optional[BaseException] = None,
    flags: Optional[Dict[str, bool]] = None,
    key: str = "",
    cleanups: Optional[Dict[str, int]] = None,
) -> Oath:
    loop = asyncio.get_running_loop()
    if flags is not None:
        flags.setdefault(key, False)

    def start(resolve, reject, signal):
        def fire():
            if error is not None:
                reject(error)
            else:
                resolve(value)
            if flags is not None:
                flags[key] = True

        handle = loop.call_later(delay, fire)

        def cleanup():
            if cleanups is not None:
                cleanups[key] = cleanups.get(key, 0) + 1
            handle.cancel()

        return cleanup

    return oath(start, name=key or None)


def immediate(value: Any = None, *, error: Optional[BaseException] = None) -> Oath:
    def start(resolve, reject, signal):
        if error is not None:
            reject(error)
        else:
            resolve(value)

    return oath(start)


def capture_loop_errors() -> list:
    """Record contexts passed to the running loop's exception handler."""
    captured: list = []
    asyncio.get_running_loop().set_exception_handler(lambda _loop, ctx: captured.append(ctx))
    return captured
