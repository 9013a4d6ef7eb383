"""Typer application: `bch-p2wdb` entry point."""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import typer
from rich.console import Console

from cli import doctor
from cli.commands import MsgCheck, P2WDBJson, P2WDBPin, TokenUpdate
from cli.commands.base import Command, CommandFlags
from cli.ui_components import print_banner
from core.config import AppSettings
from core.log import configure_logging

app = typer.Typer(
    invoke_without_command=True,
    help="Wallet, P2WDB and IPFS pinning commands for Bitcoin Cash.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()

NAME_HELP = "Name of wallet"


def _settings(ctx: typer.Context) -> AppSettings:
    if isinstance(ctx.obj, AppSettings):
        return ctx.obj
    return AppSettings()


def _run(command: Command, flags: CommandFlags) -> Any:
    return asyncio.run(command.run(flags))


@app.callback()
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level (DEBUG, INFO, WARNING, ERROR). Defaults to BCH_P2WDB_LOG_LEVEL.",
    ),
) -> None:
    settings = AppSettings()
    ctx.obj = settings
    try:
        configure_logging(log_level or settings.log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc

    if ctx.invoked_subcommand is None:
        print_banner(_console)
        _console.print(ctx.get_help())


@app.command("msg-check")
def msg_check(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", "-n", help=NAME_HELP),
) -> None:
    """Check signed messages received by a wallet."""

    _run(MsgCheck(_settings(ctx), console=_console), CommandFlags(name=name))


@app.command("p2wdb-json")
def p2wdb_json(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", "-n", help=NAME_HELP),
    json: Optional[str] = typer.Option(
        None,
        "--json",
        "-j",
        help="A JSON string. Encase this argument in single quotes.",
    ),
) -> None:
    """Upload JSON to IPFS.

    The JSON is written to the P2WDB, extracted into its own IPFS CID and
    pinned across the P2WDB pinning cluster. Prints the CID.
    """

    _run(P2WDBJson(_settings(ctx), console=_console), CommandFlags(name=name, json=json))


@app.command("p2wdb-pin")
def p2wdb_pin(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", "-n", help=NAME_HELP),
    cid: Optional[str] = typer.Option(None, "--cid", "-c", help="IPFS CID to pin"),
) -> None:
    """Pin an IPFS CID using the P2WDB pinning service.

    Currently only files 1MB or less are supported.
    """

    _run(P2WDBPin(_settings(ctx), console=_console), CommandFlags(name=name, cid=cid))


@app.command("token-update")
def token_update(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", "-n", help=NAME_HELP),
    cid: Optional[str] = typer.Option(
        None,
        "--cid",
        "-c",
        help="A CID that resolves to the new mutable data JSON",
    ),
) -> None:
    """Update token mutable data.

    Writes a new CID to an OP_RETURN in a transaction published from the
    Mutable Data Address (MDA), as described in PS002. The wallet must
    control the MDA, otherwise the update is ignored. Use p2wdb-json to get
    a CID for the new data.
    """

    _run(TokenUpdate(_settings(ctx), console=_console), CommandFlags(name=name, cid=cid))


def run() -> None:
    app()
