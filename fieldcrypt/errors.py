"""Exceptions raised by the field encryption core."""


class FieldEncryptionError(Exception):
    """Base class for every error raised by fieldcrypt."""


class InvalidSecret(FieldEncryptionError, ValueError):
    """The secret is missing or empty."""


class InvalidFieldConfig(FieldEncryptionError, ValueError):
    """The configured field list is empty, malformed or has duplicates."""


class UnsupportedFieldType(FieldEncryptionError, TypeError):
    """A configured field does not hold a string when encryption is attempted."""

    def __init__(self, field_name: str, value: object):
        self.field_name = field_name
        self.value_type = type(value).__name__
        super().__init__(
            f"Field '{field_name}' must be a string to be encrypted, got {self.value_type}"
        )


class MalformedCiphertext(FieldEncryptionError, ValueError):
    """The value is not something this engine could have produced."""
