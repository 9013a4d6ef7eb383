"""Rich UI components for the CLI.

Keeps visual details (tables, banner) out of the command handlers.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text


def print_banner(console: Console) -> None:
    """Print the welcome banner (skipped when running sub-commands)."""

    title = Text("bch-p2wdb-cli", style="bold cyan")
    subtitle = Text("BCH wallet • P2WDB • IPFS pinning", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_messages_table() -> Table:
    """Table of received message signals."""

    table = Table(title="Messages")
    table.add_column("Subject", style="cyan", width=25)
    table.add_column("Transaction ID", style="white", width=80, no_wrap=True)
    return table
