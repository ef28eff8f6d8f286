"""Execution of a resolved `ExecutionPlan`.

The CLI layer hands over the plan plus a `Services` bundle of collaborators;
nothing here prints. Results come back as a `CommandResult` that the output
writer routes to the selected sink.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import typer

from core.domain.errors import ExecutionError, KeyResolutionError, WriteError
from core.domain.models import (
    CommandKind,
    ExecutionPlan,
    FileInput,
    InputSource,
    StdinInput,
    StringInput,
)
from core.interfaces.crypto import CryptoService
from core.interfaces.keychain import KeychainService
from core.interfaces.prompt import EditorLauncher, PasswordCache, SecretPrompt
from core.services.key_resolver import acquire_key

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Collaborators used while executing a plan."""

    crypto: CryptoService
    prompt: SecretPrompt
    editor: EditorLauncher
    keychain: KeychainService | None = None
    password_cache: PasswordCache | None = None


@dataclass
class CommandResult:
    """What a command produced.

    `payload` goes to the output sink; `message` is an incidental status line
    for the user (suppressed by --quiet).
    """

    payload: bytes | None = None
    message: str | None = None


def backup_path(path: Path) -> Path:
    return path.with_name(path.name + ".bak")


def _text_payload(text: str) -> bytes:
    return (text if text.endswith("\n") else text + "\n").encode("utf-8")


def read_input(source: InputSource | None) -> bytes:
    if isinstance(source, StringInput):
        return source.value.encode("utf-8")
    if isinstance(source, FileInput):
        try:
            return source.path.read_bytes()
        except OSError as exc:
            raise ExecutionError(f"Can not read {source.path}: {exc.strerror or exc}") from exc
    if isinstance(source, StdinInput):
        return typer.get_binary_stream("stdin").read()
    raise ExecutionError("This command reads no input")


def _as_ciphertext(data: bytes) -> str:
    try:
        return data.decode("ascii").strip()
    except UnicodeDecodeError as exc:
        raise ExecutionError("Input is not valid encrypted data") from exc


def _key_for(plan: ExecutionPlan, services: Services) -> str:
    return acquire_key(
        plan.key,
        crypto=services.crypto,
        prompt=services.prompt,
        keychain=services.keychain,
        password_cache=services.password_cache,
    )


def run_generate(plan: ExecutionPlan, services: Services) -> CommandResult:
    key = services.crypto.generate_key()
    if plan.key.password_protect:
        password = services.prompt.prompt_secret("New password", confirm=True)
        if not password:
            raise KeyResolutionError("The key password can not be empty")
        key = services.crypto.protect_key(key, password)
        logger.info("New key is protected with a password")

    label = plan.key.store_in_keychain
    if label:
        if services.keychain is None:
            raise ExecutionError("The keychain is not supported on this system")
        services.keychain.write(label, key)
        logger.info("New key stored in the keychain as '%s'", label)
    return CommandResult(payload=_text_payload(key))


def run_encrypt(plan: ExecutionPlan, services: Services) -> CommandResult:
    key = _key_for(plan, services)
    data = read_input(plan.input)
    logger.debug("Encrypting %d bytes", len(data))
    return CommandResult(payload=_text_payload(services.crypto.encrypt(data, key)))


def run_decrypt(plan: ExecutionPlan, services: Services) -> CommandResult:
    key = _key_for(plan, services)
    ciphertext = _as_ciphertext(read_input(plan.input))
    logger.debug("Decrypting %d characters", len(ciphertext))
    return CommandResult(payload=services.crypto.decrypt(ciphertext, key))


def _write_back(path: Path, data: bytes) -> None:
    try:
        path.write_bytes(data)
    except OSError as exc:
        raise WriteError(f"Can not write {path}: {exc.strerror or exc}") from exc


def run_edit(plan: ExecutionPlan, services: Services) -> CommandResult:
    """Decrypt to a private temp file, edit it, re-encrypt on change."""

    if not isinstance(plan.input, FileInput):
        raise ExecutionError("--edit needs an encrypted file")
    path = plan.input.path

    key = _key_for(plan, services)
    plaintext = services.crypto.decrypt(_as_ciphertext(read_input(plan.input)), key)

    if plan.backup:
        target = backup_path(path)
        try:
            shutil.copy2(path, target)
        except OSError as exc:
            raise WriteError(f"Can not write backup {target}: {exc.strerror or exc}") from exc
        logger.info("Backup saved to %s", target)

    fd, tmp_name = tempfile.mkstemp(prefix="sym-", suffix=path.suffix or ".txt")
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(plaintext)
        services.editor.edit(tmp)
        edited = tmp.read_bytes()
    finally:
        tmp.unlink(missing_ok=True)

    if edited == plaintext:
        return CommandResult(message=f"No changes made to {path}")

    _write_back(path, _text_payload(services.crypto.encrypt(edited, key)))
    return CommandResult(message=f"Saved encrypted changes to {path}")


_RUNNERS: dict[CommandKind, Callable[[ExecutionPlan, Services], CommandResult]] = {
    CommandKind.GENERATE: run_generate,
    CommandKind.ENCRYPT: run_encrypt,
    CommandKind.DECRYPT: run_decrypt,
    CommandKind.EDIT: run_edit,
}


def execute(plan: ExecutionPlan, services: Services) -> CommandResult:
    logger.info("Running %s", plan.command.value)
    return _RUNNERS[plan.command](plan, services)
