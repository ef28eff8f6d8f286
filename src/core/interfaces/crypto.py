"""Cryptography service contract.

Why Protocol:
- The Core decides *when* to encrypt/decrypt; the cipher, key format and
  key-derivation function belong to the adapter.
- Tests can swap in a trivial implementation.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CryptoService(Protocol):
    """Symmetric encryption with text-encoded keys.

    Rules:
    - Keys and ciphertexts are ASCII text (safe to print, store or paste).
    - Failures (wrong key, corrupted data) raise `ExecutionError`.
    """

    def generate_key(self) -> str:
        ...

    def encrypt(self, plaintext: bytes, key: str) -> str:
        ...

    def decrypt(self, ciphertext: str, key: str) -> bytes:
        ...

    def is_protected(self, key: str) -> bool:
        """Whether `key` is itself encrypted with a password."""

        ...

    def protect_key(self, key: str, password: str) -> str:
        ...

    def unprotect_key(self, key: str, password: str) -> str:
        """Unlock a protected key; raises `InvalidKeyPassword` on mismatch."""

        ...
