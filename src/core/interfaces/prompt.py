"""Interactive input contracts (secret prompt and external editor)."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class SecretPrompt(Protocol):
    def prompt_secret(self, label: str, *, confirm: bool = False) -> str:
        """Read a secret without echoing it; raises `InteractiveAbort`."""

        ...


@runtime_checkable
class EditorLauncher(Protocol):
    def edit(self, path: Path) -> None:
        """Open `path` in the user's editor and block until it exits."""

        ...


@runtime_checkable
class PasswordCache(Protocol):
    def get(self, fingerprint: str) -> str | None:
        ...

    def put(self, fingerprint: str, password: str, *, timeout: int) -> None:
        ...
