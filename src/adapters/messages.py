"""On-chain message signals (memo protocol), read side.

A message signal is a transaction sent to the receiver whose OP_RETURN is a
memo post (prefix `0x6d02`) with the text::

    MSG IPFS <cid> <subject ...>

The encrypted message body lives on IPFS under `<cid>`; this module only
discovers the signals.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from bitcointx.core.script import OP_RETURN, CScript, CScriptInvalidError, CScriptOp

from adapters.wallet_service import MAX_TXIDS, WalletService
from core.config import AppSettings
from core.domain.models import SignalMessage

logger = logging.getLogger(__name__)

MEMO_POST_PREFIX = bytes.fromhex("6d02")
SIGNAL_PREFIX = "MSG IPFS "


def decode_op_return(script_hex: str) -> list[bytes] | None:
    """Split an OP_RETURN output script into its data pushes.

    OP_1..OP_16 count as one-byte pushes and OP_0 as an empty one.
    Returns None when the script is not a well-formed OP_RETURN.
    """

    try:
        elements = list(CScript(bytes.fromhex(script_hex)))
    except (ValueError, CScriptInvalidError):
        return None
    if not elements or elements[0] != OP_RETURN:
        return None

    pushes: list[bytes] = []
    for element in elements[1:]:
        if isinstance(element, bytes):
            pushes.append(bytes(element))
        elif isinstance(element, CScriptOp):
            # Any non-push opcode ends the data carrier.
            return None
        else:
            # OP_0 and OP_1..OP_16 come back as small ints.
            pushes.append(bytes([element]) if element else b"")
    return pushes


def parse_signal_text(pushes: list[bytes]) -> tuple[str, str] | None:
    """Return `(ipfs_hash, subject)` for a memo `MSG IPFS` post, else None."""

    if len(pushes) < 2 or pushes[0] != MEMO_POST_PREFIX:
        return None
    text = pushes[1].decode("utf-8", errors="replace")
    if not text.startswith(SIGNAL_PREFIX):
        return None
    rest = text[len(SIGNAL_PREFIX) :].strip()
    if not rest:
        return None
    ipfs_hash, _, subject = rest.partition(" ")
    return ipfs_hash, subject.strip()


def _as_list(payload: Any, key: str) -> list[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict) and isinstance(payload.get(key), list):
        return payload[key]
    return []


def _history_txids(history: Iterable[Any], limit: int) -> list[str]:
    entries = [h for h in history if isinstance(h, dict)]

    # Unconfirmed (height <= 0) first, then newest blocks.
    def sort_key(entry: dict[str, Any]) -> int:
        height = entry.get("height") or 0
        return -(10**12) if height <= 0 else -int(height)

    entries.sort(key=sort_key)
    txids: list[str] = []
    for entry in entries:
        txid = entry.get("tx_hash") or entry.get("txid")
        if isinstance(txid, str) and txid not in txids:
            txids.append(txid)
        if len(txids) >= limit:
            break
    return txids


def signal_from_tx(tx: dict[str, Any]) -> SignalMessage | None:
    """Build a `SignalMessage` from expanded tx data, if the tx is a signal."""

    parsed = None
    for vout in tx.get("vout") or []:
        script = (vout.get("scriptPubKey") or {}).get("hex") if isinstance(vout, dict) else None
        if not isinstance(script, str):
            continue
        pushes = decode_op_return(script)
        if pushes is None:
            continue
        parsed = parse_signal_text(pushes)
        if parsed:
            break
    if not parsed:
        return None

    vin = tx.get("vin") or []
    sender = vin[0].get("address") if vin and isinstance(vin[0], dict) else None
    if not isinstance(sender, str) or not sender:
        return None

    ipfs_hash, subject = parsed
    time = tx.get("time") or tx.get("blocktime")
    return SignalMessage(
        sender=sender,
        txid=str(tx.get("txid")),
        ipfs_hash=ipfs_hash,
        subject=subject,
        time=int(time) if time else None,
    )


class MemoMessages:
    def __init__(
        self,
        wallet_service: WalletService | None = None,
        *,
        settings: AppSettings | None = None,
        limit: int = MAX_TXIDS,
    ) -> None:
        self._settings = settings or AppSettings()
        self.wallet_service = wallet_service or WalletService(self._settings)
        self._limit = min(limit, MAX_TXIDS)

    async def read_msg_signal(self, address: str) -> list[SignalMessage]:
        """Message signals found in the most recent transactions of `address`."""

        try:
            if not address or not isinstance(address, str):
                raise ValueError("address must be a string.")

            history = await self.wallet_service.get_tx_history(address)
            txids = _history_txids(_as_list(history, "txs"), self._limit)
            logger.debug("Reading %d transactions for %s", len(txids), address)
            if not txids:
                return []

            tx_data = await self.wallet_service.get_tx_data(txids)
            messages: list[SignalMessage] = []
            for tx in _as_list(tx_data, "txData"):
                if not isinstance(tx, dict):
                    continue
                message = signal_from_tx(tx)
                if message:
                    messages.append(message)
            return messages
        except Exception:
            logger.error("Error in read_msg_signal()")
            raise
