"""P2WDB write and pin clients.

Writing an entry is a two step exchange with the P2WDB server:

1. Pay the write cost in BCH to the address the server advertises
   (`GET /entry/cost/bch`).
2. Post the entry with the payment TXID and a signed timestamp
   (`POST /entry/write/bch`). The server answers with the entry hash (zcid).

Pinning reuses the write path: pinning a CID is a P2WDB entry under the
`p2wdb-pin-001` app id, picked up by every node of the pinning cluster.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

import httpx

from adapters.http_client import build_async_client, json_or_raise
from core.config import AppSettings
from core.domain.models import WriteResult
from core.interfaces.clients import P2WDBWriter, Wallet

logger = logging.getLogger(__name__)

PIN_APP_ID = "p2wdb-pin-001"
SATS_PER_BCH = Decimal(100_000_000)


def bch_to_satoshis(amount: Any) -> int:
    return int((Decimal(str(amount)) * SATS_PER_BCH).to_integral_value())


class P2WDBWrite:
    """Writes JSON entries to the P2WDB, paying with `wallet`."""

    def __init__(
        self,
        *,
        wallet: Wallet,
        server_url: str,
        settings: AppSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self.wallet = wallet
        self.server_url = server_url.rstrip("/")
        self._transport = transport

    async def get_write_cost(self) -> tuple[int, str]:
        """Return `(satoshis, address)` the server charges for one write."""

        async with build_async_client(self._settings, transport=self._transport) as client:
            response = await client.get(f"{self.server_url}/entry/cost/bch")
        body = json_or_raise(response)

        address = body.get("address") if isinstance(body, dict) else None
        cost = body.get("bchCost") if isinstance(body, dict) else None
        if not address or cost is None:
            raise ValueError(f"Unexpected write cost response: {body!r}")
        return bch_to_satoshis(cost), str(address)

    async def post_entry(self, data: Any, app_id: str) -> WriteResult:
        try:
            if not app_id or not isinstance(app_id, str):
                raise ValueError("app_id must be a non-empty string.")

            satoshis, address = await self.get_write_cost()
            logger.info("P2WDB write cost: %d sats to %s", satoshis, address)

            hex = await self.wallet.build_send_tx(address, satoshis)
            txid = await self.wallet.broadcast(hex)
            logger.info("Write cost paid with TXID %s", txid)

            message = datetime.now(timezone.utc).isoformat()
            signature = self.wallet.sign_message(message)

            body = {
                "txid": txid,
                "message": message,
                "signature": signature,
                "appId": app_id,
                "data": json.dumps(data),
            }
            async with build_async_client(self._settings, transport=self._transport) as client:
                response = await client.post(f"{self.server_url}/entry/write/bch", json=body)
            result = json_or_raise(response)

            if isinstance(result, dict) and result.get("success") is False:
                raise ValueError(str(result.get("message") or "P2WDB write rejected."))
            return WriteResult.model_validate(result)
        except Exception:
            logger.error("Error in post_entry()")
            raise


class P2WDBPin:
    """Asks the P2WDB pinning cluster to pin content."""

    def __init__(
        self,
        *,
        writer: P2WDBWriter,
        server_url: str,
        settings: AppSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self.writer = writer
        self.server_url = server_url.rstrip("/")
        self._transport = transport

    async def json(self, zcid: str) -> str:
        """Extract the JSON of P2WDB entry `zcid` into its own IPFS CID."""

        try:
            if not zcid or not isinstance(zcid, str):
                raise ValueError("zcid must be a non-empty string.")

            async with build_async_client(self._settings, transport=self._transport) as client:
                response = await client.post(f"{self.server_url}/pin/json", json={"zcid": zcid})
            body = json_or_raise(response)

            cid = body.get("cid") if isinstance(body, dict) else body
            if not isinstance(cid, str) or not cid:
                raise ValueError(f"Unexpected pin/json response: {body!r}")
            return cid
        except Exception:
            logger.error("Error in json()")
            raise

    async def cid(self, cid: str) -> WriteResult:
        """Pin `cid` across the cluster by writing a pin entry to the P2WDB."""

        if not cid or not isinstance(cid, str):
            raise ValueError("cid must be a non-empty string.")
        return await self.writer.post_entry({"cid": cid}, PIN_APP_ID)
