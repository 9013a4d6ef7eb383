"""Check for messages received by a wallet."""

from __future__ import annotations

import logging
from typing import Iterable

from rich.console import Console

from adapters.messages import MemoMessages
from cli.commands.base import Command, CommandFlags
from cli.ui_components import build_messages_table
from core.config import AppSettings
from core.domain.models import SignalMessage
from core.interfaces.clients import MessageReader
from core.services.wallet_util import WalletUtil

logger = logging.getLogger(__name__)


class MsgCheck(Command):
    command_name = "msg-check"

    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        wallet_util: WalletUtil | None = None,
        messages_lib: MessageReader | None = None,
        console: Console | None = None,
    ) -> None:
        super().__init__(settings, wallet_util=wallet_util, console=console)
        self.messages_lib = messages_lib or MemoMessages(
            self.wallet_util.wallet_service,
            settings=self.settings,
        )

    async def execute(self, flags: CommandFlags) -> bool:
        return await self.msg_check(flags.name)

    async def msg_check(self, name: str | None) -> bool:
        """Print received messages. Returns False when there are none."""

        try:
            if not name or not isinstance(name, str):
                raise ValueError("wallet name is required.")

            wallet_file = self.wallet_util.load_wallet_file(name)
            cash_address = wallet_file.wallet.cash_address

            messages = await self.messages_lib.read_msg_signal(cash_address)
            received = self.filter_messages(cash_address, messages)
            if not received:
                self.console.print("No Messages Found!")
                return False

            self.display_table(received)
            return True
        except Exception:
            logger.error("Error in msg_check()")
            raise

    def display_table(self, messages: Iterable[SignalMessage]):
        table = build_messages_table()
        for message in messages:
            table.add_row(message.subject, message.txid)
        self.console.print(table)
        return table

    def filter_messages(self, bch_address: str, messages: list[SignalMessage]) -> list[SignalMessage]:
        """Drop messages sent by `bch_address` itself, keeping received ones."""

        if not bch_address or not isinstance(bch_address, str):
            raise ValueError("bchAddress must be a string.")
        if not isinstance(messages, list):
            raise ValueError("messages must be an array.")

        return [message for message in messages if message.sender != bch_address]
