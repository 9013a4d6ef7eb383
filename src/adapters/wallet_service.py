"""Client for the ipfs-bch-wallet-consumer REST API.

https://github.com/Permissionless-Software-Foundation/ipfs-bch-wallet-consumer

Provides the chain access the BCH wallet needs: balances, UTXOs, broadcast,
transaction history/data and the RPC pubkey lookup relayed to a selected
wallet service.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from adapters.http_client import build_async_client, json_or_raise
from core.config import AppSettings

logger = logging.getLogger(__name__)

MAX_ADDRESSES = 20
MAX_TXIDS = 20


class WalletServiceError(RuntimeError):
    """The wallet service answered with `success: false`."""


class WalletService:
    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport
        self._base_url = self._settings.wallet_service_url.rstrip("/")

    async def _post(self, path: str, body: dict[str, Any]) -> Any:
        async with build_async_client(self._settings, transport=self._transport) as client:
            response = await client.post(f"{self._base_url}{path}", json=body)
        return json_or_raise(response)

    def check_service_id(self) -> str:
        service_id = self._settings.selected_service
        if not service_id:
            raise WalletServiceError("Wallet service ID does not exist in config.")
        return service_id

    async def get_balances(self, addrs: list[str]) -> Any:
        """Get balances for up to 20 addresses."""

        try:
            if addrs is None or not isinstance(addrs, list) or len(addrs) > MAX_ADDRESSES:
                raise ValueError(
                    "addrs input to get_balances() must be an array, of up to 20 addresses."
                )
            return await self._post("/balance", {"addresses": addrs})
        except Exception:
            logger.error("Error in get_balances()")
            raise

    async def get_utxos(self, addr: str) -> Any:
        """Get hydrated UTXOs for an address."""

        try:
            if not addr or not isinstance(addr, str):
                raise ValueError("get_utxos() input address must be a string.")
            return await self._post("/utxos", {"address": addr})
        except Exception:
            logger.error("Error in get_utxos()")
            raise

    async def send_tx(self, hex: str) -> Any:
        """Broadcast a transaction to the network."""

        try:
            if not hex or not isinstance(hex, str):
                raise ValueError("send_tx() input hex must be a string.")
            return await self._post("/broadcast", {"hex": hex})
        except Exception:
            logger.error("Error in send_tx()")
            raise

    async def get_pub_key(self, bch_address: str) -> Any:
        """Obtain the public key of a BCH address through the selected service."""

        try:
            if not bch_address or not isinstance(bch_address, str):
                raise ValueError("get_pub_key() input bch_address must be a string.")
            service_id = self.check_service_id()
            logger.debug("service_id: %s", service_id)

            data = await self._post(
                "",
                {
                    "sendTo": service_id,
                    "rpcData": {"endpoint": "pubkey", "address": bch_address},
                },
            )
            if isinstance(data, dict) and data.get("success") is False:
                raise WalletServiceError(str(data.get("message") or "pubkey lookup failed"))
            return data
        except Exception:
            logger.error("Error in get_pub_key()")
            raise

    async def get_tx_history(self, addr: str) -> Any:
        """Transaction history (txids + heights) of an address."""

        try:
            if not addr or not isinstance(addr, str):
                raise ValueError("get_tx_history() input address must be a string.")
            return await self._post("/txHistory", {"address": addr})
        except Exception:
            logger.error("Error in get_tx_history()")
            raise

    async def get_tx_data(self, txids: list[str]) -> Any:
        """Expanded transaction data for up to 20 txids."""

        try:
            if not isinstance(txids, list) or len(txids) > MAX_TXIDS:
                raise ValueError("get_tx_data() input txids must be an array of up to 20 txids.")
            return await self._post("/txData", {"txids": txids})
        except Exception:
            logger.error("Error in get_tx_data()")
            raise
