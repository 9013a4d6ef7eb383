"""Contracts for the remote collaborators used by the commands.

Protocols are structural: the httpx/bitcash adapters satisfy them, and so do
the small fakes used in tests.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from core.domain.models import SignalMessage, WriteResult


@runtime_checkable
class Wallet(Protocol):
    """A funded BCH wallet able to build and sign transactions."""

    @property
    def cash_address(self) -> str: ...

    @property
    def wif(self) -> str: ...

    async def build_op_return_tx(self, message: str) -> str: ...

    async def build_send_tx(self, address: str, satoshis: int) -> str: ...

    def sign_message(self, message: str) -> str: ...

    async def broadcast(self, hex: str) -> str: ...


@runtime_checkable
class MessageReader(Protocol):
    async def read_msg_signal(self, address: str) -> list[SignalMessage]: ...


@runtime_checkable
class P2WDBWriter(Protocol):
    async def post_entry(self, data: Any, app_id: str) -> WriteResult: ...


@runtime_checkable
class P2WDBPinner(Protocol):
    async def json(self, zcid: str) -> str: ...

    async def cid(self, cid: str) -> WriteResult: ...


@runtime_checkable
class MutableDataWriter(Protocol):
    async def write_cid_to_op_return(self, cid: str) -> str: ...
