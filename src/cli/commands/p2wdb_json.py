"""Upload raw JSON to IPFS through the P2WDB pinning service.

Two steps:

1. The JSON is written to the P2WDB.
2. The pinning service extracts it from the P2WDB entry into its own IPFS
   CID, which is then pinned by every node in the P2WDB pinning cluster.

Used to attach mutable and immutable data to tokens.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from rich.console import Console

from adapters.bch_wallet import BchWallet
from adapters.p2wdb import P2WDBPin, P2WDBWrite
from cli.commands.base import Command, CommandFlags
from core.config import AppSettings
from core.services.wallet_util import WalletUtil

logger = logging.getLogger(__name__)

TOKEN_DATA_APP_ID = "token-data-001"


class P2WDBJson(Command):
    command_name = "p2wdb-json"

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        wallet_util: WalletUtil | None = None,
        write_cls: Any = P2WDBWrite,
        pin_cls: Any = P2WDBPin,
        console: Console | None = None,
    ) -> None:
        super().__init__(settings, wallet_util=wallet_util, console=console)
        self.Write = write_cls
        self.Pin = pin_cls
        self.wallet: BchWallet | None = None
        self.write = None
        self.pin = None

    def validate_flags(self, flags: CommandFlags) -> bool:
        super().validate_flags(flags)
        if not flags.json:
            raise ValueError("You must specify a JSON string with the -j flag.")
        return True

    async def execute(self, flags: CommandFlags) -> str:
        await self.instantiate_write(flags)
        await self.instantiate_pin(flags)

        cid = await self.pin_json(flags)
        self.console.print(f"JSON data pinned to IPFS with this CID: {cid}", highlight=False)
        return cid

    async def instantiate_write(self, flags: CommandFlags) -> bool:
        try:
            self.wallet = await self.wallet_util.instance_wallet(flags.name)
            self.write = self.Write(
                wallet=self.wallet,
                server_url=self.wallet_util.get_p2wdb_server(),
                settings=self.settings,
            )
            return True
        except Exception:
            logger.error("Error in instantiate_write()")
            raise

    async def instantiate_pin(self, flags: CommandFlags) -> bool:
        try:
            self.pin = self.Pin(
                writer=self.write,
                server_url=self.wallet_util.get_p2wdb_server(),
                settings=self.settings,
            )
            return True
        except Exception:
            logger.error("Error in instantiate_pin()")
            raise

    async def pin_json(self, flags: CommandFlags) -> str:
        """Write the JSON to the P2WDB, pin it, return its IPFS CID."""

        try:
            json_data = json.loads(flags.json)

            result1 = await self.write.post_entry(json_data, TOKEN_DATA_APP_ID)
            zcid1 = result1.zcid()
            self.console.print(f"Data added to P2WDB with this zcid: {zcid1}", highlight=False)
            self.console.print(f"{self.entry_url(zcid1)}\n", highlight=False)

            # The pinning service extracts the data into a CID (bafy...).
            cid = await self.pin.json(zcid1)
            self.console.print(f"JSON CID: {cid}\n", highlight=False)

            result2 = await self.pin.cid(cid)
            zcid2 = result2.zcid()
            self.console.print("Data pinned across the P2WDB Pinning Cluster.")
            self.console.print(f"{self.entry_url(zcid2)}\n", highlight=False)

            return cid
        except Exception:
            logger.error("Error in pin_json()")
            raise
