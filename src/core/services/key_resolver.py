"""Private key resolution.

Two steps, kept apart on purpose:
- `resolve_key_plan` is a pure function of the options: it picks exactly one
  `KeySource` following a fixed precedence and carries the caching knobs.
- `acquire_key` performs the run-time I/O (prompt, key file, keychain) and
  unlocks password-protected keys.

Precedence (first match wins, the rest are reported as ignored):
--generate > --interactive > --private-key > --keyfile > --keychain
"""

from __future__ import annotations

import hashlib
import logging

from core.domain.errors import (
    InvalidKeyPassword,
    KeychainKeyNotFound,
    KeyFileNotFound,
    KeyResolutionError,
    NoKeySpecified,
)
from core.domain.models import (
    GeneratedSource,
    InlineKeySource,
    InteractiveSource,
    KeychainSource,
    KeyFileSource,
    KeyPlan,
    KeySource,
    OptionModel,
)
from core.interfaces.crypto import CryptoService
from core.interfaces.keychain import KeychainService
from core.interfaces.prompt import PasswordCache, SecretPrompt

logger = logging.getLogger(__name__)


def key_candidates(options: OptionModel) -> list[tuple[str, KeySource]]:
    """Every key source present in `options`, highest precedence first."""

    found: list[tuple[str, KeySource]] = []
    if options.generate:
        found.append(("--generate", GeneratedSource()))
    if options.interactive:
        found.append(("--interactive", InteractiveSource()))
    if options.private_key is not None:
        found.append(("--private-key", InlineKeySource(value=options.private_key)))
    if options.keyfile is not None:
        found.append(("--keyfile", KeyFileSource(path=options.keyfile)))
    # With --generate the keychain is a destination, not a source.
    if options.keychain is not None and not options.generate:
        found.append(("--keychain", KeychainSource(label=options.keychain)))
    return found


def resolve_key_plan(
    options: OptionModel,
    *,
    default_timeout: int,
    cache_enabled: bool = True,
) -> KeyPlan:
    candidates = key_candidates(options)
    if not candidates:
        raise NoKeySpecified()

    timeout = options.password_timeout if options.password_timeout is not None else default_timeout
    return KeyPlan(
        source=candidates[0][1],
        password_protect=options.password,
        store_in_keychain=options.keychain if options.generate else None,
        password_timeout=timeout,
        password_cache=cache_enabled and not options.no_password_cache,
        ignored_sources=tuple(flag for flag, _ in candidates[1:]),
    )


def key_fingerprint(key: str) -> str:
    return hashlib.sha256(key.encode("utf-8")).hexdigest()[:16]


def _read_key_file(source: KeyFileSource) -> str:
    try:
        key = source.path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as exc:
        raise KeyFileNotFound(source.path) from exc
    if not key:
        raise KeyResolutionError(f"Key file {source.path} is empty")
    return key


def _read_raw_key(
    source: KeySource,
    *,
    prompt: SecretPrompt,
    keychain: KeychainService | None,
) -> str:
    if isinstance(source, InteractiveSource):
        key = prompt.prompt_secret("Private key").strip()
        if not key:
            raise KeyResolutionError("No private key was entered")
        return key
    if isinstance(source, InlineKeySource):
        key = source.value.get_secret_value().strip()
        if not key:
            raise KeyResolutionError("The private key given with --private-key is empty")
        return key
    if isinstance(source, KeyFileSource):
        return _read_key_file(source)
    if isinstance(source, KeychainSource):
        if keychain is None:
            raise KeyResolutionError("The keychain is not supported on this system")
        key = keychain.read(source.label)
        if not key:
            raise KeychainKeyNotFound(source.label)
        return key.strip()
    raise KeyResolutionError(f"Key source '{source.kind}' can not be read")


def _unlock(
    key: str,
    plan: KeyPlan,
    *,
    crypto: CryptoService,
    prompt: SecretPrompt,
    password_cache: PasswordCache | None,
) -> str:
    fingerprint = key_fingerprint(key)
    cache = password_cache if plan.password_cache else None

    if cache is not None:
        cached = cache.get(fingerprint)
        if cached is not None:
            try:
                return crypto.unprotect_key(key, cached)
            except InvalidKeyPassword:
                logger.info("Cached password for key %s was rejected", fingerprint)

    password = prompt.prompt_secret("Password")
    unlocked = crypto.unprotect_key(key, password)
    if cache is not None and plan.password_timeout:
        cache.put(fingerprint, password, timeout=plan.password_timeout)
        logger.debug("Cached password for key %s for %ss", fingerprint, plan.password_timeout)
    return unlocked


def acquire_key(
    plan: KeyPlan,
    *,
    crypto: CryptoService,
    prompt: SecretPrompt,
    keychain: KeychainService | None = None,
    password_cache: PasswordCache | None = None,
) -> str:
    """Obtain the usable (unlocked) private key described by `plan`."""

    key = _read_raw_key(plan.source, prompt=prompt, keychain=keychain)
    logger.debug("Private key read from %s source", plan.source.kind)
    if crypto.is_protected(key):
        key = _unlock(key, plan, crypto=crypto, prompt=prompt, password_cache=password_cache)
    return key
