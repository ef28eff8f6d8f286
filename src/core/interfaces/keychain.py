"""Keychain service contract (only offered on platforms that support it)."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class KeychainService(Protocol):
    def read(self, label: str) -> str | None:
        """Return the key stored under `label`, or None when absent."""

        ...

    def write(self, label: str, key: str) -> None:
        ...
