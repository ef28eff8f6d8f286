"""Keyring-backed cache of key passwords with an expiry.

Entries live under a dedicated service name, keyed by key fingerprint. Any
backend failure degrades to "not cached": the user is simply prompted.
"""

from __future__ import annotations

import json
import logging
import time
from typing import Callable

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

logger = logging.getLogger(__name__)


class KeyringPasswordCache:
    def __init__(
        self,
        service: str = "sym-password-cache",
        *,
        clock: Callable[[], float] = time.time,
    ):
        self.service = service
        self.clock = clock

    def get(self, fingerprint: str) -> str | None:
        try:
            raw = keyring.get_password(self.service, fingerprint)
        except KeyringError as exc:
            logger.debug("Password cache unavailable: %s", exc)
            return None
        if not raw:
            return None

        try:
            entry = json.loads(raw)
            expires_at = float(entry["expires_at"])
            password = str(entry["password"])
        except (ValueError, KeyError, TypeError):
            logger.debug("Dropping malformed password cache entry %s", fingerprint)
            self._forget(fingerprint)
            return None

        if expires_at <= self.clock():
            logger.debug("Password cache entry %s expired", fingerprint)
            self._forget(fingerprint)
            return None
        return password

    def put(self, fingerprint: str, password: str, *, timeout: int) -> None:
        if timeout <= 0:
            return
        entry = json.dumps({"password": password, "expires_at": self.clock() + timeout})
        try:
            keyring.set_password(self.service, fingerprint, entry)
        except KeyringError as exc:
            logger.debug("Could not cache password: %s", exc)

    def _forget(self, fingerprint: str) -> None:
        try:
            keyring.delete_password(self.service, fingerprint)
        except (PasswordDeleteError, KeyringError) as exc:
            logger.debug("Could not drop cache entry %s: %s", fingerprint, exc)
