from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from adapters.p2wdb import PIN_APP_ID, P2WDBPin, P2WDBWrite, bch_to_satoshis
from conftest import FakeWallet, FakeWriter

COST_ADDRESS = "bitcoincash:qqsrke9lh257tqen99dkyy2emh4uty0vky9y0z0lsr"


def _p2wdb_transport(calls: list[httpx.Request], write_response: dict | None = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if request.url.path == "/entry/cost/bch":
            return httpx.Response(200, json={"success": True, "bchCost": 0.00001, "address": COST_ADDRESS})
        if request.url.path == "/entry/write/bch":
            return httpx.Response(200, json=write_response or {"success": True, "hash": "zdpu-written"})
        if request.url.path == "/pin/json":
            return httpx.Response(200, json={"success": True, "cid": "bafyreiextracted"})
        return httpx.Response(404, json={"error": "not found"})

    return httpx.MockTransport(handler)


def test_bch_to_satoshis() -> None:
    assert bch_to_satoshis(0.00001) == 1000
    assert bch_to_satoshis("0.1") == 10_000_000


def test_post_entry_pays_then_writes(settings) -> None:
    calls: list[httpx.Request] = []
    wallet = FakeWallet()
    write = P2WDBWrite(
        wallet=wallet,
        server_url="http://p2wdb.test/",
        settings=settings,
        transport=_p2wdb_transport(calls),
    )

    result = asyncio.run(write.post_entry({"name": "token"}, "token-data-001"))

    assert result.zcid() == "zdpu-written"
    assert wallet.sent == [(COST_ADDRESS, 1000)]
    assert wallet.broadcasts == ["0200send_hex"]

    body = json.loads(calls[1].content)
    assert body["txid"] == "a" * 64
    assert body["appId"] == "token-data-001"
    assert json.loads(body["data"]) == {"name": "token"}
    assert body["signature"] == f"sig({body['message']})"


def test_post_entry_rejected_by_server(settings) -> None:
    write = P2WDBWrite(
        wallet=FakeWallet(),
        server_url="http://p2wdb.test",
        settings=settings,
        transport=_p2wdb_transport([], {"success": False, "message": "Invalid signature"}),
    )

    with pytest.raises(ValueError, match="Invalid signature"):
        asyncio.run(write.post_entry({"a": 1}, "app"))


def test_post_entry_requires_app_id(settings) -> None:
    write = P2WDBWrite(wallet=FakeWallet(), server_url="http://p2wdb.test", settings=settings)

    with pytest.raises(ValueError, match="app_id"):
        asyncio.run(write.post_entry({"a": 1}, ""))


def test_pin_json_returns_extracted_cid(settings) -> None:
    calls: list[httpx.Request] = []
    pin = P2WDBPin(
        writer=FakeWriter(),
        server_url="http://p2wdb.test",
        settings=settings,
        transport=_p2wdb_transport(calls),
    )

    cid = asyncio.run(pin.json("zdpu-entry"))

    assert cid == "bafyreiextracted"
    assert json.loads(calls[0].content) == {"zcid": "zdpu-entry"}


def test_pin_cid_writes_pin_entry(settings) -> None:
    writer = FakeWriter()
    pin = P2WDBPin(writer=writer, server_url="http://p2wdb.test", settings=settings)

    result = asyncio.run(pin.cid("bafybeigdyrzt"))

    assert result.zcid() == "zdpu-entry-1"
    assert writer.calls == [({"cid": "bafybeigdyrzt"}, PIN_APP_ID)]
