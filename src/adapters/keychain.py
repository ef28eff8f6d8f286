"""OS keychain access through `keyring`.

The capability is resolved once at startup: when no usable keyring backend
exists (or SYM_KEYCHAIN_ENABLED=false), -x/--keychain is not offered at all.
"""

from __future__ import annotations

import keyring
from keyring.errors import KeyringError

from core.config import AppSettings
from core.domain.errors import ExecutionError, KeyResolutionError


def keychain_supported(settings: AppSettings | None = None) -> bool:
    settings = settings or AppSettings()
    if settings.keychain_enabled is not None:
        return settings.keychain_enabled
    backend = keyring.get_keyring()
    return getattr(backend, "priority", 0) > 0


def keychain_backend_name() -> str:
    backend = keyring.get_keyring()
    return f"{type(backend).__module__}.{type(backend).__name__}"


class KeyringKeychain:
    """Stores keys as passwords of `service` with the key label as user name."""

    def __init__(self, service: str = "sym"):
        self.service = service

    def read(self, label: str) -> str | None:
        try:
            return keyring.get_password(self.service, label)
        except KeyringError as exc:
            raise KeyResolutionError(f"Keychain lookup for '{label}' failed: {exc}") from exc

    def write(self, label: str, key: str) -> None:
        try:
            keyring.set_password(self.service, label, key)
        except KeyringError as exc:
            raise ExecutionError(f"Could not store '{label}' in the keychain: {exc}") from exc
