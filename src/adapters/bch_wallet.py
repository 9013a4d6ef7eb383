"""BCH wallet backed by `bitcash` for transaction construction.

UTXOs are fetched from the wallet service instead of bitcash's own network
APIs, so every transaction is built offline and broadcast through
`WalletService.send_tx`. Message signatures use the Bitcoin signed-message
format (base64 compact recoverable signature), the same format the P2WDB
server verifies.
"""

from __future__ import annotations

import base64
import logging
from typing import Any

from bitcash import PrivateKey
from bitcash.format import wif_to_bytes
from bitcash.network.meta import Unspent
from bitcointx.signmessage import BitcoinMessage
from coincurve import PrivateKey as EcPrivateKey

from adapters.wallet_service import WalletService
from core.config import AppSettings
from core.domain.models import Utxo

logger = logging.getLogger(__name__)

MAX_OP_RETURN_BYTES = 220


def signed_message_digest(message: str) -> bytes:
    """Double-SHA256 of the magic-prefixed message."""

    return bytes(BitcoinMessage(message).GetHash())


def parse_bch_utxos(payload: Any) -> list[Utxo]:
    """Extract `bchUtxos` from a wallet-service `/utxos` response.

    The service answers either with a list (one entry per address) or with a
    single mapping.
    """

    entries = payload if isinstance(payload, list) else [payload]
    utxos: list[Utxo] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        for raw in entry.get("bchUtxos") or []:
            if isinstance(raw, dict):
                utxos.append(Utxo.model_validate(raw))
    return utxos


class BchWallet:
    """A wallet bound to one WIF and the wallet service."""

    def __init__(
        self,
        wif: str,
        *,
        wallet_service: WalletService | None = None,
        settings: AppSettings | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._key = PrivateKey(wif)
        self._wif = wif
        self.wallet_service = wallet_service or WalletService(self._settings)

    @property
    def cash_address(self) -> str:
        return self._key.address

    @property
    def wif(self) -> str:
        return self._wif

    async def get_utxos(self) -> list[Unspent]:
        """Spendable BCH UTXOs of this wallet as bitcash `Unspent` objects."""

        payload = await self.wallet_service.get_utxos(self.cash_address)
        script = self._key.scriptcode.hex()
        return [
            Unspent(utxo.value, 1 if utxo.height > 0 else 0, script, utxo.tx_hash, utxo.tx_pos)
            for utxo in parse_bch_utxos(payload)
        ]

    async def _create_transaction(
        self,
        outputs: list[tuple[str, int, str]],
        *,
        message: str | None = None,
    ) -> str:
        unspents = await self.get_utxos()
        if not unspents:
            raise ValueError(f"No UTXOs available to pay for the transaction from {self.cash_address}")
        logger.debug("Building tx from %d UTXOs of %s", len(unspents), self.cash_address)

        return self._key.create_transaction(
            outputs,
            fee=self._settings.fee_rate,
            leftover=self.cash_address,
            message=message,
            unspents=unspents,
        )

    async def build_op_return_tx(self, message: str) -> str:
        """Signed hex of a tx carrying `message` in an OP_RETURN, change back to self."""

        if len(message.encode("utf-8")) > MAX_OP_RETURN_BYTES:
            raise ValueError(f"OP_RETURN data can not exceed {MAX_OP_RETURN_BYTES} bytes.")
        return await self._create_transaction([], message=message)

    async def build_send_tx(self, address: str, satoshis: int) -> str:
        """Signed hex of a tx paying `satoshis` to `address`."""

        if satoshis <= 0:
            raise ValueError("satoshis must be a positive integer.")
        return await self._create_transaction([(address, satoshis, "satoshi")])

    def sign_message(self, message: str) -> str:
        secret, compressed, _ = wif_to_bytes(self._wif)
        signature = EcPrivateKey(secret).sign_recoverable(
            signed_message_digest(message),
            hasher=None,
        )
        header = 27 + signature[64] + (4 if compressed else 0)
        return base64.b64encode(bytes([header]) + signature[:64]).decode("ascii")

    async def broadcast(self, hex: str) -> str:
        """Broadcast a signed tx through the wallet service and return its TXID."""

        result = await self.wallet_service.send_tx(hex)
        return extract_txid(result)


def extract_txid(result: Any) -> str:
    """Normalize the `/broadcast` response (bare TXID or `{"txid": ...}`)."""

    if isinstance(result, str) and result:
        return result
    if isinstance(result, dict):
        if result.get("success") is False:
            raise ValueError(str(result.get("message") or "Broadcast failed."))
        txid = result.get("txid")
        if isinstance(txid, str) and txid:
            return txid
    raise ValueError(f"Unexpected broadcast response: {result!r}")
