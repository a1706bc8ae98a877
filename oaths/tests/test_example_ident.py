"""Example script tests driven by ``httpx.MockTransport`` (no network)."""
from __future__ import annotations

import asyncio

import httpx

from oaths import race
from oaths.examples import ident
from oaths.tests.helpers import immediate


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_fetch_text_streams_the_body():
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="203.0.113.7\n")

    async def scenario():
        async with _client(handler) as client:
            return await ident.fetch_text(client, "https://ident.test/")

    assert asyncio.run(scenario()) == "203.0.113.7\n"  # nosec B101


def test_fetch_text_rejects_on_http_error():
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="down")

    async def scenario():
        async with _client(handler) as client:
            try:
                await ident.fetch_text(client, "https://ident.test/")
            except httpx.HTTPStatusError as exc:
                return exc.response.status_code
        return None

    assert asyncio.run(scenario()) == 503  # nosec B101


def test_race_cancels_in_flight_request():
    seen = {"cancelled": False, "completed": False}

    async def handler(request: httpx.Request) -> httpx.Response:
        try:
            await asyncio.sleep(1.0)
        except asyncio.CancelledError:
            seen["cancelled"] = True
            raise
        seen["completed"] = True
        return httpx.Response(200, text="late")

    async def scenario():
        async with _client(handler) as client:
            request = ident.fetch_text(client, "https://ident.test/")
            await asyncio.sleep(0.01)  # request is in flight
            result = await race([immediate("ok"), request])
            await asyncio.sleep(0.01)
            return result

    assert asyncio.run(scenario()) == "ok"  # nosec B101
    assert seen == {"cancelled": True, "completed": False}  # nosec B101


def test_first_result_prefers_fast_timer():
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(1.0)
        return httpx.Response(200, text="198.51.100.1")

    async def scenario():
        async with _client(handler) as client:
            return await ident.first_result(client, "https://ident.test/", fast_delay=0.001)

    assert asyncio.run(scenario()) == "foo"  # nosec B101


def test_first_result_reports_address_when_request_wins():
    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text=" 198.51.100.1\n")

    async def scenario():
        async with _client(handler) as client:
            return await ident.first_result(client, "https://ident.test/", fast_delay=5.0)

    assert asyncio.run(scenario()) == "Address: 198.51.100.1"  # nosec B101


def test_main_prints_result(monkeypatch, capsys):
    async def fake_main(args):
        return f"result for {args.url}"

    monkeypatch.setattr(ident, "_main", fake_main)
    assert ident.main(["--url", "https://ident.test/"]) == 0  # nosec B101
    assert capsys.readouterr().out.strip() == "result for https://ident.test/"  # nosec B101


def test_main_reports_failures(monkeypatch, capsys):
    async def failing_main(args):
        raise RuntimeError("offline")

    monkeypatch.setattr(ident, "_main", failing_main)
    assert ident.main([]) == 1  # nosec B101
    assert "error: offline" in capsys.readouterr().err  # nosec B101
