"""
Document-level encryption state machine.

Each configured field is either Plaintext or Encrypted, as recorded by its
`__enc_<field>` flag on the document:

    Plaintext --encrypt_fields--> Encrypted
    Encrypted --decrypt_fields--> Plaintext

Encrypting an Encrypted field or decrypting a Plaintext one is a no-op, which
makes both calls idempotent.

Fields are processed in configured order and errors propagate immediately.
Fields transformed before the failing one are NOT rolled back; the caller must
not persist a document whose transformer call raised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, MutableMapping

from fieldcrypt.errors import InvalidFieldConfig, InvalidSecret
from fieldcrypt.services import state
from fieldcrypt.services.cipher import CipherEngine
from fieldcrypt.services.codec import decrypt_field, encrypt_field
from fieldcrypt.services.validation import (
    FIELDS_SCHEMA,
    split_option_errors,
    validate_against_schema,
)


@dataclass(frozen=True)
class FieldEncryptionConfig:
    """Fields to protect for one document type, plus the secret."""

    fields: tuple[str, ...]
    secret: str = field(repr=False)
    cipher: CipherEngine = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not isinstance(self.secret, str) or not self.secret:
            raise InvalidSecret("Encryption secret must be a non-empty string")
        if isinstance(self.fields, (str, bytes)) or not isinstance(self.fields, Iterable):
            raise InvalidFieldConfig("fields must be a sequence of field names")
        fields = tuple(self.fields)
        errors = validate_against_schema(list(fields), FIELDS_SCHEMA)
        if errors:
            raise InvalidFieldConfig("; ".join(errors))
        object.__setattr__(self, "fields", fields)
        object.__setattr__(self, "cipher", CipherEngine(self.secret))

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> FieldEncryptionConfig:
        """Build a config from an options mapping: {"fields": [...], "secret": "..."}."""
        if not isinstance(options, Mapping):
            raise InvalidFieldConfig(
                f"Options must be a mapping, got {type(options).__name__}"
            )
        secret_errors, field_errors = split_option_errors(dict(options))
        if secret_errors:
            raise InvalidSecret("; ".join(secret_errors))
        if field_errors:
            raise InvalidFieldConfig("; ".join(field_errors))
        return cls(fields=tuple(options["fields"]), secret=options["secret"])


def encrypt_fields(document: MutableMapping[str, Any], config: FieldEncryptionConfig) -> list[str]:
    """Encrypt every configured field still in plaintext. Returns the fields changed."""
    changed = []
    for name in config.fields:
        if state.is_encrypted(document, name):
            continue
        state.set_encrypted(document, name, encrypt_field(document, name, config.cipher))
        changed.append(name)
    return changed


def decrypt_fields(document: MutableMapping[str, Any], config: FieldEncryptionConfig) -> list[str]:
    """Decrypt every configured field flagged encrypted. Returns the fields changed."""
    changed = []
    for name in config.fields:
        if not state.is_encrypted(document, name):
            continue
        state.set_encrypted(document, name, decrypt_field(document, name, config.cipher))
        changed.append(name)
    return changed


def strip_markers(
    document: MutableMapping[str, Any], config: FieldEncryptionConfig
) -> MutableMapping[str, Any]:
    """Drop the `__enc_` flags, e.g. before handing a decrypted document to a client."""
    for name in config.fields:
        state.clear_flag(document, name)
    return document
