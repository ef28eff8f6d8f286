"""Doctor command for environment diagnostics."""

from __future__ import annotations

import os

import typer
from rich.console import Console
from rich.table import Table

from adapters.crypto_engine import AesGcmCryptoService
from adapters.keychain import keychain_backend_name, keychain_supported
from cli.parser import build_command, flag_dictionary
from core.config import AppSettings, get_user_config_dir, get_user_env_file

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _check_crypto() -> tuple[bool, str]:
    """Generate a key and round-trip a short message through it."""

    engine = AesGcmCryptoService()
    try:
        key = engine.generate_key()
        ok = engine.decrypt(engine.encrypt(b"doctor", key), key) == b"doctor"
        return ok, "AES-256-GCM round trip" if ok else "round trip mismatch"
    except Exception as exc:
        return False, str(exc)


def _editor(settings: AppSettings) -> str:
    return settings.editor or os.environ.get("VISUAL") or os.environ.get("EDITOR") or "(platform default)"


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="sym doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    supported = keychain_supported(settings)
    table.add_row("Keychain", "OK" if supported else "UNAVAILABLE", keychain_backend_name())
    if settings.keychain_enabled is not None:
        table.add_row("Keychain override", "SET", f"SYM_KEYCHAIN_ENABLED={settings.keychain_enabled}")

    if settings.password_cache and supported:
        table.add_row("Password cache", "OK", f"default timeout {settings.password_timeout_seconds}s")
    else:
        table.add_row("Password cache", "OFF", "passwords are prompted every time")

    table.add_row("Editor", "OK", _editor(settings))
    table.add_row("Config dir", "OK", str(get_user_config_dir()))
    table.add_row(
        "User .env",
        "OK" if get_user_env_file().exists() else "OPTIONAL",
        str(get_user_env_file()),
    )

    ok_crypto, detail_crypto = _check_crypto()
    table.add_row("Crypto self-test", "OK" if ok_crypto else "FAIL", detail_crypto)

    _console.print(table)

    if not supported:
        _console.print(
            "\n[yellow]Note:[/yellow] without a keychain backend, -x/--keychain is not offered."
            " Install a keyring backend or set SYM_KEYCHAIN_ENABLED=true."
        )
    if not ok_crypto:
        raise typer.Exit(code=1)


@app.command(name="flags")
def flags() -> None:
    """Print the flags `sym` offers on this system."""

    command = build_command(keychain=keychain_supported(AppSettings()))
    _console.print(" ".join(flag_dictionary(command)), soft_wrap=True)
