from __future__ import annotations

import io
import json
from pathlib import Path

import pytest
from rich.console import Console

from core.config import AppSettings
from core.domain.models import WriteResult

ADDRESS = "bitcoincash:qpdh9s677ya8tnx7zdhfrn8qfyvy22wj4qa7nwqa5v"
OTHER_ADDRESS = "bitcoincash:qr2u4f2a8ngt5hsqhs5xr5dxfyx6dx9kcclrz8nsm7"


class FakeWallet:
    """Records the calls the P2WDB and mutable-data clients make."""

    def __init__(self, cash_address: str = ADDRESS) -> None:
        self._cash_address = cash_address
        self.sent: list[tuple[str, int]] = []
        self.op_returns: list[str] = []
        self.broadcasts: list[str] = []

    @property
    def cash_address(self) -> str:
        return self._cash_address

    @property
    def wif(self) -> str:
        return "L1-fake-wif"

    async def build_op_return_tx(self, message: str) -> str:
        self.op_returns.append(message)
        return "0200op_return_hex"

    async def build_send_tx(self, address: str, satoshis: int) -> str:
        self.sent.append((address, satoshis))
        return "0200send_hex"

    def sign_message(self, message: str) -> str:
        return f"sig({message})"

    async def broadcast(self, hex: str) -> str:
        self.broadcasts.append(hex)
        return "a" * 64


class FakeWriter:
    def __init__(self, hashes: list[object] | None = None) -> None:
        self.calls: list[tuple[object, str]] = []
        self._hashes = list(hashes or ["zdpu-entry-1", "zdpu-entry-2"])

    async def post_entry(self, data, app_id: str) -> WriteResult:
        self.calls.append((data, app_id))
        return WriteResult(hash=self._hashes.pop(0))


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    return AppSettings(
        wallets_dir=tmp_path / ".wallets",
        wallet_service_url="http://wallet.test/bch",
        p2wdb_server_url="http://p2wdb.test",
        p2wdb_explorer_url="https://p2wdb.example.com",
        explorer_tx_url="https://explorer.example.com/tx",
        selected_service=None,
        _env_file=None,
    )


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def wallet_file(settings: AppSettings) -> Path:
    path = Path(settings.wallets_dir) / "test.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(
            {
                "wallet": {
                    "mnemonic": "abandon abandon abandon",
                    "privateKey": "L1-fake-wif",
                    "cashAddress": ADDRESS,
                    "slpAddress": "simpleledger:qpdh9s677ya8tnx7zdhfrn8qfyvy22wj4q0mq8ujhs",
                },
                "description": "test wallet",
            }
        ),
        encoding="utf-8",
    )
    return path


def output(console: Console) -> str:
    return console.file.getvalue()
