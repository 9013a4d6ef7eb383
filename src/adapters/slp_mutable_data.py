"""SLP mutable data updates (PS002).

https://github.com/Permissionless-Software-Foundation/specifications/blob/master/ps002-slp-mutable-data.md

A token's mutable data is updated by a transaction from the Mutable Data
Address (MDA) whose OP_RETURN holds `{"cid": "ipfs://...", "ts": <ms>}`.
Only transactions paid by the MDA are honoured by indexers.
"""

from __future__ import annotations

import json
import logging
import time

from core.interfaces.clients import Wallet

logger = logging.getLogger(__name__)


def mutable_data_payload(cid: str, ts: int | None = None) -> str:
    ts = int(time.time() * 1000) if ts is None else ts
    return json.dumps({"cid": cid, "ts": ts}, separators=(",", ":"))


class SlpMutableData:
    def __init__(self, *, wallet: Wallet) -> None:
        self.wallet = wallet

    async def write_cid_to_op_return(self, cid: str) -> str:
        """Build (but do not broadcast) the update tx. Returns the tx hex."""

        if not cid or not isinstance(cid, str):
            raise ValueError("cid must be a non-empty string.")

        payload = mutable_data_payload(cid)
        logger.debug("OP_RETURN payload: %s", payload)
        return await self.wallet.build_op_return_tx(payload)
