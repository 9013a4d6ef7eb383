"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import build_async_client
from core.config import AppSettings, write_user_env_vars
from core.services.wallet_util import WalletUtil

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_http(url: str, settings: AppSettings) -> tuple[bool, str]:
    try:
        async with build_async_client(settings) as client:
            response = await client.get(url)
        return True, f"HTTP {response.status_code}"
    except Exception as exc:
        return False, str(exc)


def _check_wallets_dir(path: Path) -> tuple[bool, str]:
    if not path.is_dir():
        return False, f"{path} does not exist"
    names = sorted(p.stem for p in path.glob("*.json"))
    if not names:
        return False, f"{path} has no wallet files"
    return True, ", ".join(names)


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="bch-p2wdb-cli Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    # Config
    table.add_row("Wallet service", "OK", settings.wallet_service_url)
    if settings.selected_service:
        table.add_row("Selected service", "OK", settings.selected_service)
    else:
        table.add_row("Selected service", "OPTIONAL", "Not set -> pubkey lookups disabled")
    table.add_row("P2WDB server", "OK", settings.p2wdb_server_url)
    rest_server = WalletUtil(settings).get_rest_server()
    table.add_row("REST server", "OK", f"{rest_server.rest_url} ({rest_server.interface})")

    ok_wallets, detail_wallets = _check_wallets_dir(Path(settings.wallets_dir))
    table.add_row("Wallets", "OK" if ok_wallets else "FAIL", detail_wallets)

    # Connectivity (best-effort)
    ok_ws, detail_ws = asyncio.run(_check_http(settings.wallet_service_url, settings))
    table.add_row("Wallet service connectivity", "OK" if ok_ws else "FAIL", detail_ws)

    cost_url = f"{settings.p2wdb_server_url.rstrip('/')}/entry/cost/bch"
    ok_p2wdb, detail_p2wdb = asyncio.run(_check_http(cost_url, settings))
    table.add_row("P2WDB connectivity", "OK" if ok_p2wdb else "FAIL", detail_p2wdb)

    _console.print(table)

    if not ok_ws:
        _console.print(
            "\n[yellow]Note:[/yellow] Start ipfs-bch-wallet-consumer locally or set BCH_P2WDB_WALLET_SERVICE_URL."
        )


@app.command(name="set-service")
def set_service(
    service_id: str = typer.Argument(..., help="IPFS ID of the wallet service to use."),
) -> None:
    """Persist the selected wallet service ID in the user config .env."""

    service_id = service_id.strip()
    if not service_id:
        raise typer.BadParameter("service_id is required")

    env_path = write_user_env_vars({"BCH_P2WDB_SELECTED_SERVICE": service_id})
    _console.print(f"[green]Saved wallet service to:[/green] {env_path}")
