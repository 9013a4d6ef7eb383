"""Domain models (Pydantic v2).

These models describe *what* the data is (wallet files, UTXOs, P2WDB write
results, on-chain message signals), not *how* it is fetched. Remote payloads
use camelCase keys, so most models accept both alias and field name.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, Field
from pydantic.config import ConfigDict


class WalletInfo(BaseModel):
    """Key material and addresses stored in a `.wallets/<name>.json` file."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    cash_address: str = Field(
        ...,
        alias="cashAddress",
        min_length=1,
        description="CashAddr of the wallet (bitcoincash:q...).",
    )
    private_key: str = Field(
        ...,
        alias="privateKey",
        min_length=1,
        description="WIF-encoded private key.",
    )
    public_key: str | None = Field(default=None, alias="publicKey")
    slp_address: str | None = Field(default=None, alias="slpAddress")
    legacy_address: str | None = Field(default=None, alias="legacyAddress")
    mnemonic: str | None = Field(default=None)
    hd_path: str | None = Field(default=None, alias="hdPath")


class WalletFile(BaseModel):
    """Top-level wallet file document."""

    model_config = ConfigDict(extra="ignore")

    wallet: WalletInfo
    description: str | None = None


class Utxo(BaseModel):
    """A BCH UTXO as returned by the wallet service (`bchUtxos` entries)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    tx_hash: str = Field(
        ...,
        min_length=64,
        max_length=64,
        validation_alias=AliasChoices("tx_hash", "txid"),
    )
    tx_pos: int = Field(..., ge=0, validation_alias=AliasChoices("tx_pos", "vout"))
    value: int = Field(..., ge=0, description="Amount in satoshis.")
    height: int = Field(default=0)


class RestServer(BaseModel):
    """REST endpoint handed to P2WDB clients that need chain access."""

    rest_url: str = Field(..., min_length=1)
    interface: str = Field(default="consumer-api")


class WriteResult(BaseModel):
    """Response of a P2WDB write.

    `hash` is usually the zcid string; older pinning servers nest it as
    `{"hash": "<zcid>"}`.
    """

    model_config = ConfigDict(extra="allow")

    success: bool = Field(default=True)
    hash: str | dict[str, Any]

    def zcid(self) -> str:
        if isinstance(self.hash, dict) and self.hash.get("hash"):
            return str(self.hash["hash"])
        return str(self.hash)


class SignalMessage(BaseModel):
    """A `MSG IPFS <cid> <subject>` memo signal found on chain."""

    sender: str = Field(..., description="Address of the first input of the signal tx.")
    txid: str = Field(..., min_length=1)
    ipfs_hash: str = Field(..., min_length=1)
    subject: str = Field(default="")
    time: int | None = Field(default=None, description="Block time (unix seconds), if mined.")
