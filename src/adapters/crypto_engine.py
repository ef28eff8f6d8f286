"""Cryptography service backed by the `cryptography` package.

Formats (all urlsafe base64 text):
- key:           32 random bytes (AES-256)
- ciphertext:    MAGIC | nonce(12) | AES-GCM(zlib(plaintext))
- protected key: KEY_MAGIC | salt(16) | nonce(12) | AES-GCM(key) under a
                 PBKDF2-HMAC-SHA256 derived key
"""

from __future__ import annotations

import base64
import binascii
import os
import zlib

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from core.domain.errors import ExecutionError, InvalidKeyPassword

MAGIC = b"SYM1"
KEY_MAGIC = b"SYMK1"
KEY_BYTES = 32
NONCE_BYTES = 12
SALT_BYTES = 16


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii")


def _b64decode(text: str) -> bytes:
    try:
        return base64.urlsafe_b64decode(text.strip().encode("ascii"))
    except (binascii.Error, ValueError) as exc:
        raise ExecutionError("Data is not valid base64") from exc


class AesGcmCryptoService:
    def __init__(self, iterations: int = 200_000):
        self.iterations = iterations

    def derive_key(self, password: str, salt: bytes) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_BYTES,
            salt=salt,
            iterations=self.iterations,
        )
        return kdf.derive(password.encode("utf-8"))

    def generate_key(self) -> str:
        return _b64encode(os.urandom(KEY_BYTES))

    def _key_bytes(self, key: str) -> bytes:
        try:
            raw = _b64decode(key)
        except ExecutionError as exc:
            raise ExecutionError("The private key is malformed") from exc
        if len(raw) != KEY_BYTES:
            raise ExecutionError("The private key is malformed")
        return raw

    def encrypt(self, plaintext: bytes, key: str) -> str:
        nonce = os.urandom(NONCE_BYTES)
        ct = AESGCM(self._key_bytes(key)).encrypt(nonce, zlib.compress(plaintext), MAGIC)
        return _b64encode(MAGIC + nonce + ct)

    def decrypt(self, ciphertext: str, key: str) -> bytes:
        aes = AESGCM(self._key_bytes(key))
        raw = _b64decode(ciphertext)
        if not raw.startswith(MAGIC) or len(raw) <= len(MAGIC) + NONCE_BYTES:
            raise ExecutionError("Data was not encrypted by sym")
        body = raw[len(MAGIC):]
        try:
            compressed = aes.decrypt(body[:NONCE_BYTES], body[NONCE_BYTES:], MAGIC)
        except InvalidTag as exc:
            raise ExecutionError("Decryption failed: wrong key or corrupted data") from exc
        try:
            return zlib.decompress(compressed)
        except zlib.error as exc:
            raise ExecutionError("Decrypted data is corrupted") from exc

    def is_protected(self, key: str) -> bool:
        try:
            raw = _b64decode(key)
        except ExecutionError:
            return False
        return len(raw) != KEY_BYTES and raw.startswith(KEY_MAGIC)

    def protect_key(self, key: str, password: str) -> str:
        self._key_bytes(key)
        salt = os.urandom(SALT_BYTES)
        nonce = os.urandom(NONCE_BYTES)
        ct = AESGCM(self.derive_key(password, salt)).encrypt(nonce, key.encode("ascii"), KEY_MAGIC)
        return _b64encode(KEY_MAGIC + salt + nonce + ct)

    def unprotect_key(self, key: str, password: str) -> str:
        raw = _b64decode(key)
        if not raw.startswith(KEY_MAGIC):
            raise ExecutionError("The private key is not password protected")
        body = raw[len(KEY_MAGIC):]
        salt, nonce, ct = body[:SALT_BYTES], body[SALT_BYTES:SALT_BYTES + NONCE_BYTES], body[SALT_BYTES + NONCE_BYTES:]
        try:
            return AESGCM(self.derive_key(password, salt)).decrypt(nonce, ct, KEY_MAGIC).decode("ascii")
        except InvalidTag as exc:
            raise InvalidKeyPassword() from exc
