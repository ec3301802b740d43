# tiermedia/services/crypto/media_cipher.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from tiermedia.domain.errors import MediaIntegrityError

IV_BYTES = 12
KEY_BYTES = (16, 24, 32)
PBKDF2_ITERATIONS = 100_000


@dataclass(frozen=True)
class EncryptedMedia:
    """Ciphertext (with the GCM tag appended) and the IV it was sealed with."""
    ciphertext: bytes
    iv: bytes

    @property
    def iv_hex(self) -> str:
        return self.iv.hex()

    @classmethod
    def from_hex(cls, ciphertext: bytes, iv_hex: str) -> "EncryptedMedia":
        return cls(ciphertext=ciphertext, iv=_iv_bytes(iv_hex))


def _check_key(key: bytes) -> bytes:
    if not isinstance(key, (bytes, bytearray)) or len(key) not in KEY_BYTES:
        raise ValueError("key must be 16, 24 or 32 raw bytes")
    return bytes(key)


def _iv_bytes(iv: bytes | str) -> bytes:
    if isinstance(iv, str):
        try:
            iv = bytes.fromhex(iv)
        except ValueError as e:
            raise MediaIntegrityError("IV is not valid hex", details=str(e)) from e
    if len(iv) != IV_BYTES:
        raise MediaIntegrityError(f"IV must be {IV_BYTES} bytes, got {len(iv)}")
    return bytes(iv)


class MediaCipher:
    """
    AES-GCM sealing of raw media bytes with a per-item key.

    A fresh random 96-bit IV is drawn for every ``encrypt`` call; it is not
    secret but has to be stored next to the ciphertext. ``decrypt`` raises
    ``MediaIntegrityError`` instead of returning garbage when the ciphertext,
    IV or key do not match.
    """

    @staticmethod
    def generate_key(bit_length: int = 256) -> bytes:
        return AESGCM.generate_key(bit_length=bit_length)

    @staticmethod
    def derive_key(passphrase: str, salt: bytes, iterations: int = PBKDF2_ITERATIONS) -> bytes:
        """Derive a 256-bit key from a passphrase (PBKDF2-HMAC-SHA256)."""
        if not salt:
            raise ValueError("salt is required")
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=iterations,
        )
        return kdf.derive(passphrase.encode("utf-8"))

    def encrypt(self, data: bytes, key: bytes, associated_data: Optional[bytes] = None) -> EncryptedMedia:
        aes = AESGCM(_check_key(key))
        iv = os.urandom(IV_BYTES)
        return EncryptedMedia(ciphertext=aes.encrypt(iv, bytes(data), associated_data), iv=iv)

    def decrypt(
        self,
        ciphertext: bytes,
        iv: bytes | str,
        key: bytes,
        associated_data: Optional[bytes] = None,
    ) -> bytes:
        aes = AESGCM(_check_key(key))
        try:
            return aes.decrypt(_iv_bytes(iv), bytes(ciphertext), associated_data)
        except InvalidTag as e:
            raise MediaIntegrityError(
                "Encrypted media failed authentication",
                details="ciphertext, IV or key does not match",
            ) from e
