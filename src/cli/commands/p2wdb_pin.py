"""Pin an IPFS CID using the P2WDB pinning service.

Only files of 1MB or less are currently supported by the cluster.
"""

from __future__ import annotations

import logging
from typing import Any

from rich.console import Console

from adapters.p2wdb import P2WDBPin as PinClient
from adapters.p2wdb import P2WDBWrite
from cli.commands.base import Command, CommandFlags
from core.config import AppSettings
from core.services.wallet_util import WalletUtil

logger = logging.getLogger(__name__)


class P2WDBPin(Command):
    command_name = "p2wdb-pin"

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        wallet_util: WalletUtil | None = None,
        write_cls: Any = P2WDBWrite,
        pin_cls: Any = PinClient,
        console: Console | None = None,
    ) -> None:
        super().__init__(settings, wallet_util=wallet_util, console=console)
        self.Write = write_cls
        self.Pin = pin_cls
        self.pin = None

    def validate_flags(self, flags: CommandFlags) -> bool:
        super().validate_flags(flags)
        if not flags.cid:
            raise ValueError("You must specify an IPFS CID with the -c flag.")
        return True

    async def execute(self, flags: CommandFlags) -> str:
        await self.instantiate_pin(flags)

        hash = await self.pin_cid(flags)
        self.console.print(self.entry_url(hash), highlight=False)
        return hash

    async def instantiate_pin(self, flags: CommandFlags) -> bool:
        try:
            wallet = await self.wallet_util.instance_wallet(flags.name)
            server_url = self.wallet_util.get_p2wdb_server()

            write = self.Write(
                wallet=wallet,
                server_url=server_url,
                settings=self.settings,
            )
            self.pin = self.Pin(writer=write, server_url=server_url, settings=self.settings)
            return True
        except Exception:
            logger.error("Error in instantiate_pin()")
            raise

    async def pin_cid(self, flags: CommandFlags) -> str:
        """Pin the CID and return the hash of the resulting P2WDB entry."""

        try:
            result = await self.pin.cid(flags.cid)
            logger.debug("pin result: %s", result)
            return result.zcid()
        except Exception:
            logger.error("Error in pin_cid()")
            raise
