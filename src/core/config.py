"""Core configuration.

Centralizes environment variables (pydantic-settings) so the CLI and the
adapters (HTTP/DNS) read the same contract.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "paymail-inspector"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "paymail-inspector"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "paymail-inspector"
    return Path.home() / ".config" / "paymail-inspector"


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


def write_user_env_vars(values: dict[str, str | None]) -> Path:
    """Write/update variables in the user's global .env file."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        try:
            existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError):
            existing = {}

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# paymail-inspector user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application settings.

    Values come from `PAYMAIL_INSPECTOR_*` environment variables, the
    project `.env` and then the user's global `.env`.
    """

    model_config = SettingsConfigDict(
        env_prefix="PAYMAIL_INSPECTOR_",
        extra="ignore",
        case_sensitive=False,
        # Project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Deadline for every request to a paymail provider (seconds).",
    )
    user_agent: str = Field(
        default="paymail-inspector/0.1 (+https://bsvalias.org)",
        min_length=1,
        description="User-Agent sent to paymail providers.",
    )

    dns_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Lifetime of the _bsvalias._tcp SRV lookup (seconds).",
    )
    dns_nameservers: list[str] = Field(
        default_factory=list,
        description="Nameservers for SRV lookups (empty: system resolver).",
    )

    sender_handle: str | None = Field(
        default=None,
        description="Default sender paymail handle for resolution requests.",
    )
    sender_name: str | None = Field(
        default=None,
        description="Default sender name for resolution requests.",
    )
