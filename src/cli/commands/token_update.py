"""Update the mutable data of a token.

New mutable data follows PS002: JSON (matching the PS007 token data schema)
is uploaded to IPFS, e.g. with `p2wdb-json`, and the resulting CID is written
to an OP_RETURN in a transaction paid by the Mutable Data Address (MDA).

https://github.com/Permissionless-Software-Foundation/specifications/blob/master/ps002-slp-mutable-data.md
https://github.com/Permissionless-Software-Foundation/specifications/blob/master/ps007-token-data-schema.md
"""

from __future__ import annotations

import logging
from typing import Any

from rich.console import Console

from adapters.bch_wallet import BchWallet
from adapters.slp_mutable_data import SlpMutableData
from cli.commands.base import Command, CommandFlags
from core.config import AppSettings
from core.services.wallet_util import WalletUtil

logger = logging.getLogger(__name__)

IPFS_SCHEME = "ipfs://"


def normalize_cid(cid: str) -> str:
    """Prefix `ipfs://` unless the CID already carries it."""

    if IPFS_SCHEME in cid:
        return cid
    return f"{IPFS_SCHEME}{cid}"


class TokenUpdate(Command):
    command_name = "token-update"

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        wallet_util: WalletUtil | None = None,
        slp_mutable_data_cls: Any = SlpMutableData,
        console: Console | None = None,
    ) -> None:
        super().__init__(settings, wallet_util=wallet_util, console=console)
        self.SlpMutableData = slp_mutable_data_cls
        self.wallet: BchWallet | None = None
        self.slp_mutable_data = None

    def validate_flags(self, flags: CommandFlags) -> bool:
        super().validate_flags(flags)
        if not flags.cid:
            raise ValueError("You must specify a CID with the -c flag.")
        return True

    async def execute(self, flags: CommandFlags) -> str:
        await self.instantiate_slp_data(flags)

        hex = await self.update_mutable_data(flags)
        txid = await self.wallet_util.broadcast_tx(self.wallet, hex)

        self.console.print(f"Mutable data updated with TXID: {txid}", highlight=False)
        self.console.print(f"{self.settings.explorer_tx_url.rstrip('/')}/{txid}", highlight=False)
        return txid

    async def instantiate_slp_data(self, flags: CommandFlags) -> bool:
        try:
            self.wallet = await self.wallet_util.instance_wallet(flags.name)
            self.slp_mutable_data = self.SlpMutableData(wallet=self.wallet)
            return True
        except Exception:
            logger.error("Error in instantiate_slp_data()")
            raise

    async def update_mutable_data(self, flags: CommandFlags) -> str:
        """Build the mutable data update tx, returned as hex."""

        try:
            cid_str = normalize_cid(flags.cid)
            logger.debug("cid_str: %s", cid_str)
            return await self.slp_mutable_data.write_cid_to_op_return(cid_str)
        except Exception:
            logger.error("Error in update_mutable_data()")
            raise
