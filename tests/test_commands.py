from __future__ import annotations

import asyncio

import pytest

from cli.commands import MsgCheck, P2WDBJson, P2WDBPin, TokenUpdate
from cli.commands.base import CommandFlags
from cli.commands.token_update import normalize_cid
from conftest import ADDRESS, OTHER_ADDRESS, FakeWallet, FakeWriter, output
from core.domain.models import SignalMessage, WriteResult
from core.services.wallet_util import WalletUtil


class FakeWalletUtil(WalletUtil):
    """Real wallet-file handling, fake wallet instances."""

    def __init__(self, settings, wallet: FakeWallet | None = None) -> None:
        super().__init__(settings)
        self.wallet = wallet or FakeWallet()
        self.instanced: list[str] = []

    async def instance_wallet(self, name: str):
        self.load_wallet_file(name)
        self.instanced.append(name)
        return self.wallet


class FakeReader:
    def __init__(self, messages: list[SignalMessage]) -> None:
        self.messages = messages
        self.addresses: list[str] = []

    async def read_msg_signal(self, address: str):
        self.addresses.append(address)
        return self.messages


def _message(txid: str, sender: str, subject: str = "Hi") -> SignalMessage:
    return SignalMessage(sender=sender, txid=txid, ipfs_hash="bafy", subject=subject)


# Flag validation


@pytest.mark.parametrize(
    ("command_cls", "flags", "message"),
    [
        (MsgCheck, CommandFlags(), "You must specify a wallet with the -n flag."),
        (P2WDBJson, CommandFlags(), "You must specify a wallet with the -n flag."),
        (P2WDBJson, CommandFlags(name="test"), "You must specify a JSON string with the -j flag."),
        (P2WDBPin, CommandFlags(name=""), "You must specify a wallet with the -n flag."),
        (P2WDBPin, CommandFlags(name="test"), "You must specify an IPFS CID with the -c flag."),
        (TokenUpdate, CommandFlags(cid="bafy"), "You must specify a wallet with the -n flag."),
        (TokenUpdate, CommandFlags(name="test"), "You must specify a CID with the -c flag."),
    ],
)
def test_validate_flags_messages(settings, command_cls, flags, message) -> None:
    with pytest.raises(ValueError) as exc:
        command_cls(settings).validate_flags(flags)

    assert str(exc.value) == message


def test_run_returns_zero_and_prints_error(settings, console) -> None:
    result = asyncio.run(P2WDBPin(settings, console=console).run(CommandFlags(name="test")))

    assert result == 0
    assert "Error in p2wdb-pin: You must specify an IPFS CID with the -c flag." in output(console)


def test_run_returns_zero_for_missing_wallet_file(settings, console) -> None:
    command = TokenUpdate(settings, console=console)

    result = asyncio.run(command.run(CommandFlags(name="nope", cid="bafy")))

    assert result == 0
    assert "Wallet file for 'nope' not found" in output(console)


# msg-check


def test_filter_messages_drops_sent_messages(settings) -> None:
    messages = [_message("t1", OTHER_ADDRESS), _message("t2", ADDRESS), _message("t3", OTHER_ADDRESS)]

    received = MsgCheck(settings, messages_lib=FakeReader([])).filter_messages(ADDRESS, messages)

    assert [m.txid for m in received] == ["t1", "t3"]


def test_filter_messages_validates_input(settings) -> None:
    command = MsgCheck(settings, messages_lib=FakeReader([]))

    with pytest.raises(ValueError, match="bchAddress must be a string."):
        command.filter_messages("", [])
    with pytest.raises(ValueError, match="messages must be an array."):
        command.filter_messages(ADDRESS, None)  # type: ignore[arg-type]


def test_msg_check_displays_received_messages(settings, console, wallet_file) -> None:
    reader = FakeReader([_message("t1", OTHER_ADDRESS, "Invoice"), _message("t2", ADDRESS, "Mine")])
    command = MsgCheck(settings, messages_lib=reader, console=console)

    result = asyncio.run(command.run(CommandFlags(name="test")))

    assert result is True
    assert reader.addresses == [ADDRESS]
    text = output(console)
    assert "Subject" in text and "Transaction ID" in text
    assert "Invoice" in text and "t1" in text
    assert "Mine" not in text


def test_msg_check_without_messages(settings, console, wallet_file) -> None:
    command = MsgCheck(settings, messages_lib=FakeReader([_message("t2", ADDRESS)]), console=console)

    result = asyncio.run(command.run(CommandFlags(name="test")))

    assert result is False
    assert "No Messages Found!" in output(console)


# p2wdb-json


class RecordingWrite:
    instances: list["RecordingWrite"] = []

    def __init__(self, *, wallet, server_url, settings) -> None:
        self.wallet = wallet
        self.server_url = server_url
        self.writer = FakeWriter(["zdpu-json", "zdpu-pin"])
        RecordingWrite.instances.append(self)

    async def post_entry(self, data, app_id):
        return await self.writer.post_entry(data, app_id)


class RecordingPin:
    def __init__(self, *, writer, server_url, settings) -> None:
        self.writer = writer
        self.server_url = server_url
        self.zcids: list[str] = []

    async def json(self, zcid: str) -> str:
        self.zcids.append(zcid)
        return "bafyreijson"

    async def cid(self, cid: str) -> WriteResult:
        return await self.writer.post_entry({"cid": cid}, "p2wdb-pin-001")


def test_p2wdb_json_writes_then_pins(settings, console, wallet_file) -> None:
    wallet_util = FakeWalletUtil(settings)
    command = P2WDBJson(
        settings,
        wallet_util=wallet_util,
        write_cls=RecordingWrite,
        pin_cls=RecordingPin,
        console=console,
    )

    cid = asyncio.run(command.run(CommandFlags(name="test", json='{"about": "token data"}')))

    assert cid == "bafyreijson"
    assert wallet_util.instanced == ["test"]
    assert command.write.server_url == "http://p2wdb.test"
    assert command.write.writer.calls == [
        ({"about": "token data"}, "token-data-001"),
        ({"cid": "bafyreijson"}, "p2wdb-pin-001"),
    ]
    assert command.pin.zcids == ["zdpu-json"]

    text = output(console)
    assert "Data added to P2WDB with this zcid: zdpu-json" in text
    assert "https://p2wdb.example.com/entry/hash/zdpu-pin" in text
    assert "JSON data pinned to IPFS with this CID: bafyreijson" in text


def test_p2wdb_json_invalid_json_returns_zero(settings, console, wallet_file) -> None:
    command = P2WDBJson(
        settings,
        wallet_util=FakeWalletUtil(settings),
        write_cls=RecordingWrite,
        pin_cls=RecordingPin,
        console=console,
    )

    assert asyncio.run(command.run(CommandFlags(name="test", json="{not json"))) == 0
    assert "Error in p2wdb-json:" in output(console)


# p2wdb-pin


class NestedHashPin:
    def __init__(self, *, writer, server_url, settings) -> None:
        self.pinned: list[str] = []

    async def cid(self, cid: str) -> WriteResult:
        self.pinned.append(cid)
        return WriteResult(hash={"hash": "zdpu-nested"})


def test_p2wdb_pin_unwraps_nested_hash(settings, console, wallet_file) -> None:
    command = P2WDBPin(
        settings,
        wallet_util=FakeWalletUtil(settings),
        write_cls=RecordingWrite,
        pin_cls=NestedHashPin,
        console=console,
    )

    result = asyncio.run(command.run(CommandFlags(name="test", cid="bafybeipin")))

    assert result == "zdpu-nested"
    assert command.pin.pinned == ["bafybeipin"]
    assert "https://p2wdb.example.com/entry/hash/zdpu-nested" in output(console)


def test_p2wdb_pin_flat_hash(settings, console, wallet_file) -> None:
    command = P2WDBPin(
        settings,
        wallet_util=FakeWalletUtil(settings),
        write_cls=RecordingWrite,
        pin_cls=RecordingPin,
        console=console,
    )

    assert asyncio.run(command.run(CommandFlags(name="test", cid="bafybeipin"))) == "zdpu-json"


# token-update


def test_normalize_cid() -> None:
    assert normalize_cid("bafyabc") == "ipfs://bafyabc"
    assert normalize_cid("ipfs://bafyabc") == "ipfs://bafyabc"


class RecordingSlpMutableData:
    def __init__(self, *, wallet) -> None:
        self.wallet = wallet
        self.cids: list[str] = []

    async def write_cid_to_op_return(self, cid: str) -> str:
        self.cids.append(cid)
        return "0200mutable"


def test_token_update_broadcasts_op_return_tx(settings, console, wallet_file) -> None:
    wallet = FakeWallet()
    command = TokenUpdate(
        settings,
        wallet_util=FakeWalletUtil(settings, wallet),
        slp_mutable_data_cls=RecordingSlpMutableData,
        console=console,
    )

    txid = asyncio.run(command.run(CommandFlags(name="test", cid="bafyabc")))

    assert txid == "a" * 64
    assert command.slp_mutable_data.cids == ["ipfs://bafyabc"]
    assert wallet.broadcasts == ["0200mutable"]
    text = output(console)
    assert f"Mutable data updated with TXID: {txid}" in text
    assert f"https://explorer.example.com/tx/{txid}" in text
