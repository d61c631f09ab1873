"""
Single-field encode/decode on top of the cipher engine.

Only string values are ever encrypted. Anything else (missing, numbers,
nested objects) is rejected instead of being coerced or skipped, so sensitive
non-string data never ends up stored unprotected without a signal.
"""

from __future__ import annotations

from typing import Any, MutableMapping

from fieldcrypt.errors import MalformedCiphertext, UnsupportedFieldType
from fieldcrypt.services.cipher import CipherEngine

_MISSING = object()


def encrypt_field(
    document: MutableMapping[str, Any], field_name: str, cipher: CipherEngine
) -> bool:
    """Replace the field with its hex ciphertext. Returns the new encrypted state."""
    value = document.get(field_name, _MISSING)
    if not isinstance(value, str):
        raise UnsupportedFieldType(field_name, None if value is _MISSING else value)
    document[field_name] = cipher.encrypt_text(value)
    return True


def decrypt_field(
    document: MutableMapping[str, Any], field_name: str, cipher: CipherEngine
) -> bool:
    """
    Replace the field's ciphertext with plaintext. Returns the new encrypted state.
    The document is untouched when the stored value cannot be decrypted.
    """
    value = document.get(field_name, _MISSING)
    if value is _MISSING:
        raise MalformedCiphertext(f"Field '{field_name}' is flagged encrypted but missing")
    try:
        plaintext = cipher.decrypt_text(value)
    except MalformedCiphertext as exc:
        raise MalformedCiphertext(f"Field '{field_name}': {exc}") from exc
    document[field_name] = plaintext
    return False
