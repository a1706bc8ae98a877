"""Race timers against a streamed HTTP request.

Usage::

    python -m oaths.examples.ident [--url URL] [--fast-delay SECONDS]

Four oaths are combined with ``any_``: a fast timer, a timer that rejects, a
slow timer, and a streamed GET of a public IP echo service. Whichever fulfills
first is printed; every other oath is broken, which clears the timers and
cancels the in-flight request.

``fetch_text`` and ``timer`` are reusable; tests drive them with
``httpx.MockTransport``.
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Any, List, Optional, Sequence

import httpx

from oaths import AbortController, AbortSignal, Oath, any_, oath, spawn
from oaths.logging import get_logger, log_event

DEFAULT_URL = "https://v4.ident.me/"

logger = get_logger("oaths.examples.ident")


def timer(delay: float, value: Any = None, *, error: Optional[BaseException] = None) -> Oath:
    """Oath settled by ``loop.call_later``; breaking it cancels the timer."""
    loop = asyncio.get_running_loop()

    def start(resolve, reject, signal):
        if error is not None:
            handle = loop.call_later(delay, reject, error)
        else:
            handle = loop.call_later(delay, resolve, value)
        return handle.cancel

    return oath(start)


async def _stream_text(client: httpx.AsyncClient, url: str, signal: AbortSignal) -> str:
    chunks: List[str] = []
    async with client.stream("GET", url) as response:
        response.raise_for_status()
        async for chunk in response.aiter_text():
            signal.raise_if_aborted()
            chunks.append(chunk)
    log_event(logger, "fetch.complete", url=url, chars=sum(map(len, chunks)))
    return "".join(chunks)


def fetch_text(
    client: httpx.AsyncClient,
    url: str,
    controller: Optional[AbortController] = None,
) -> Oath:
    """Stream the body of ``GET url``; breaking the oath cancels the request."""
    return spawn(lambda signal: _stream_text(client, url, signal), controller, name=f"fetch:{url}")


def fetch_address(client: httpx.AsyncClient, url: str = DEFAULT_URL) -> Oath:
    async def run(signal: AbortSignal) -> str:
        text = await _stream_text(client, url, signal)
        return "Address: " + text.strip()

    return spawn(run, name=f"address:{url}")


async def first_result(client: httpx.AsyncClient, url: str, fast_delay: float = 0.001) -> str:
    """Return the first fulfilled value among the demo oaths."""
    group = [
        timer(fast_delay, "foo"),
        timer(2.0, error=RuntimeError("bar")),
        timer(3.0, "baz"),
        fetch_address(client, url),
    ]
    return await any_(group)


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="oaths-ident", description=__doc__.splitlines()[0])
    parser.add_argument("--url", default=DEFAULT_URL, help="address echo endpoint")
    parser.add_argument(
        "--fast-delay",
        type=float,
        default=0.001,
        help="seconds before the fast timer fulfills (make it large to let the request win)",
    )
    return parser.parse_args(argv)


async def _main(args: argparse.Namespace) -> str:
    async with httpx.AsyncClient(timeout=10.0) as client:
        return await first_result(client, args.url, args.fast_delay)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    try:
        print(asyncio.run(_main(args)))
    except Exception as exc:  # surface any failure as exit status
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
