"""
Deterministic symmetric cipher for sensitive document fields.

Demonstrates:
- AES-256-CTR via the `cryptography` package
- Key and IV derived from the secret (OpenSSL EVP_BytesToKey, MD5, no salt)
- Lowercase hex text as the stored representation

The same secret and plaintext always produce the same ciphertext. Values
already stored by earlier releases depend on this, so the derivation must not
change.
"""

from __future__ import annotations

import binascii

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from fieldcrypt.errors import InvalidSecret, MalformedCiphertext

KEY_LENGTH = 32
IV_LENGTH = 16


def derive_key_and_iv(secret: str | bytes) -> tuple[bytes, bytes]:
    """Stretch the secret into an AES-256 key and a CTR initial counter block."""
    if not isinstance(secret, (str, bytes, bytearray)):
        raise InvalidSecret(f"Encryption secret must be str or bytes, got {type(secret).__name__}")
    if not secret:
        raise InvalidSecret("Encryption secret must not be empty")
    password = secret.encode("utf-8") if isinstance(secret, str) else bytes(secret)

    material = b""
    block = b""
    while len(material) < KEY_LENGTH + IV_LENGTH:
        digest = hashes.Hash(hashes.MD5())
        digest.update(block + password)
        block = digest.finalize()
        material += block
    return material[:KEY_LENGTH], material[KEY_LENGTH : KEY_LENGTH + IV_LENGTH]


class CipherEngine:
    """Wraps AES-256-CTR with a key and IV fixed by the secret."""

    def __init__(self, secret: str | bytes):
        self._key, self._iv = derive_key_and_iv(secret)

    def _cipher(self) -> Cipher:
        return Cipher(algorithms.AES(self._key), modes.CTR(self._iv))

    def encrypt(self, plaintext: bytes) -> bytes:
        encryptor = self._cipher().encryptor()
        return encryptor.update(plaintext) + encryptor.finalize()

    def decrypt(self, ciphertext: bytes) -> bytes:
        decryptor = self._cipher().decryptor()
        return decryptor.update(ciphertext) + decryptor.finalize()

    def encrypt_text(self, plaintext: str) -> str:
        """Encrypt a string and return lowercase hex ciphertext."""
        return self.encrypt(plaintext.encode("utf-8")).hex()

    def decrypt_text(self, ciphertext: str) -> str:
        """Decrypt hex ciphertext back to the original string."""
        if not isinstance(ciphertext, str):
            raise MalformedCiphertext(
                f"Ciphertext must be hex text, got {type(ciphertext).__name__}"
            )
        try:
            raw = binascii.unhexlify(ciphertext)
        except (binascii.Error, ValueError) as exc:
            raise MalformedCiphertext(f"Ciphertext is not valid hex: {exc}") from exc
        try:
            return self.decrypt(raw).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedCiphertext(
                "Ciphertext did not decrypt to UTF-8 text (wrong secret or tampered value)"
            ) from exc


def encrypt(secret: str | bytes, plaintext: str) -> str:
    return CipherEngine(secret).encrypt_text(plaintext)


def decrypt(secret: str | bytes, ciphertext: str) -> str:
    return CipherEngine(secret).decrypt_text(ciphertext)
