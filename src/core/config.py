"""Core configuration.

Centralizes environment variables (pydantic-settings) so adapters (wallet
service, P2WDB, wallet files) read their endpoints the same way, without the
CLI layer having to pass URLs around.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_NAME = "bch-p2wdb-cli"


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env file."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# bch-p2wdb-cli user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application settings.

    Values come from `BCH_P2WDB_*` environment variables, the project `.env`
    and then the user config `.env` (see `get_user_env_file`).
    """

    model_config = SettingsConfigDict(
        env_prefix="BCH_P2WDB_",
        extra="ignore",
        case_sensitive=False,
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    wallet_service_url: str = Field(
        default="http://localhost:5001/bch",
        min_length=8,
        description="Base URL of the ipfs-bch-wallet-consumer REST API.",
    )
    selected_service: str | None = Field(
        default=None,
        description="IPFS ID of the wallet service used for RPC lookups (pubkey).",
    )

    p2wdb_server_url: str = Field(
        default="https://p2wdb.fullstack.cash",
        min_length=8,
        description="P2WDB server used for writes and pinning.",
    )
    p2wdb_explorer_url: str = Field(
        default="https://p2wdb.fullstack.cash",
        min_length=8,
        description="Public P2WDB host used to build entry links.",
    )

    rest_url: str = Field(
        default="https://free-bch.fullstack.cash",
        min_length=8,
        description="REST URL handed to P2WDB clients that need chain access.",
    )
    rest_interface: str = Field(
        default="consumer-api",
        description="Interface type of `rest_url` (consumer-api or rest-api).",
    )

    explorer_tx_url: str = Field(
        default="https://blockchair.com/bitcoin-cash/transaction",
        min_length=8,
        description="Block explorer prefix for transaction links.",
    )

    wallets_dir: Path = Field(
        default_factory=lambda: Path.cwd() / ".wallets",
        description="Directory holding `<name>.json` wallet files (defaults to `./.wallets`).",
    )

    fee_rate: int = Field(
        default=1,
        ge=1,
        le=100,
        description="Transaction fee rate (satoshis per byte).",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )
    user_agent: str = Field(
        default="bch-p2wdb-cli/0.1",
        min_length=1,
        description="User-Agent header sent to remote services.",
    )

    log_level: str = Field(
        default="WARNING",
        description="Root log level (DEBUG, INFO, WARNING, ERROR).",
    )
