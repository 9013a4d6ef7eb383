"""Shared shape of the command handlers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from rich.console import Console
from rich.markup import escape

from core.config import AppSettings
from core.services.wallet_util import WalletUtil

logger = logging.getLogger(__name__)


@dataclass
class CommandFlags:
    """Parsed command-line flags (`-n`, `-j`, `-c`)."""

    name: str | None = None
    json: str | None = None
    cid: str | None = None


class Command:
    """Base handler: `run()` never raises, failures return `0`."""

    command_name = "command"

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        wallet_util: WalletUtil | None = None,
        console: Console | None = None,
    ) -> None:
        self.settings = settings or AppSettings()
        self.wallet_util = wallet_util or WalletUtil(self.settings)
        self.console = console or Console()

    async def run(self, flags: CommandFlags) -> Any:
        try:
            self.validate_flags(flags)
            return await self.execute(flags)
        except Exception as err:
            logger.debug("%s failed", self.command_name, exc_info=True)
            self.console.print(f"[red]Error in {self.command_name}:[/red] {escape(str(err))}", highlight=False)
            return 0

    async def execute(self, flags: CommandFlags) -> Any:
        raise NotImplementedError

    def validate_flags(self, flags: CommandFlags) -> bool:
        if not flags.name:
            raise ValueError("You must specify a wallet with the -n flag.")
        return True

    def entry_url(self, zcid: str) -> str:
        return f"{self.settings.p2wdb_explorer_url.rstrip('/')}/entry/hash/{zcid}"
