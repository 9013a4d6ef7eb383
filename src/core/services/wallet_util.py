"""Wallet file access and shared endpoint lookups for the commands."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from adapters.bch_wallet import BchWallet
from adapters.wallet_service import WalletService
from core.config import AppSettings
from core.domain.models import RestServer, WalletFile
from core.interfaces.clients import Wallet

logger = logging.getLogger(__name__)


class WalletUtil:
    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        wallet_service: WalletService | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self.wallet_service = wallet_service or WalletService(self._settings)

    def wallet_path(self, name: str) -> Path:
        return Path(self._settings.wallets_dir) / f"{name}.json"

    def load_wallet_file(self, name: str) -> WalletFile:
        """Read and validate `.wallets/<name>.json`."""

        path = self.wallet_path(name)
        if not path.is_file():
            raise FileNotFoundError(f"Wallet file for '{name}' not found: {path}")
        data = json.loads(path.read_text(encoding="utf-8"))
        return WalletFile.model_validate(data)

    async def instance_wallet(self, name: str) -> BchWallet:
        """Instantiate a BCH wallet from a wallet file."""

        try:
            wallet_file = self.load_wallet_file(name)
            wallet = BchWallet(
                wallet_file.wallet.private_key,
                wallet_service=self.wallet_service,
                settings=self._settings,
            )
            if wallet.cash_address != wallet_file.wallet.cash_address:
                logger.warning(
                    "Wallet file address %s does not match its private key (%s)",
                    wallet_file.wallet.cash_address,
                    wallet.cash_address,
                )
            return wallet
        except Exception:
            logger.error("Error in instance_wallet()")
            raise

    def get_p2wdb_server(self) -> str:
        return self._settings.p2wdb_server_url

    def get_rest_server(self) -> RestServer:
        return RestServer(
            rest_url=self._settings.rest_url,
            interface=self._settings.rest_interface,
        )

    async def broadcast_tx(self, wallet: Wallet, hex: str) -> str:
        """Broadcast a hex-encoded transaction, returning its TXID."""

        try:
            return await wallet.broadcast(hex)
        except Exception:
            logger.error("Error in broadcast_tx()")
            raise
