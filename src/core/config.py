"""Application configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without polluting the CLI.
- Adapters (keychain, password cache, editor) read the same settings object.
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
        return base / "sym"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "sym"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "sym"
    return Path.home() / ".config" / "sym"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Central application settings.

    Command-line flags always win over these values; settings only provide
    defaults for what the flags leave unspecified.
    """

    model_config = SettingsConfigDict(
        env_prefix="SYM_",
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the per-user config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    password_timeout_seconds: int = Field(
        default=300,
        ge=0,
        description="Seconds a key password stays in the cache when -M is not given.",
    )
    password_cache: bool = Field(
        default=True,
        description="Global switch for the keyring-backed password cache.",
    )
    keychain_service: str = Field(
        default="sym",
        min_length=1,
        description="Service name under which keys are stored in the OS keychain.",
    )
    keychain_enabled: bool | None = Field(
        default=None,
        description="Force keychain support on/off. None means auto-detect.",
    )
    editor: str | None = Field(
        default=None,
        description="Editor command for --edit. Falls back to $VISUAL/$EDITOR.",
    )
    no_color: bool = Field(
        default=False,
        description="Disable colored output even without -N.",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional file that receives a copy of the log records.",
    )
