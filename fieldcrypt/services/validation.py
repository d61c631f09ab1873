"""
JSON Schema validation of field encryption options.

Options arrive as a plain mapping, e.g. from settings or a JSON file:
    {"fields": ["ssn", "notes"], "secret": "..."}
All errors are collected rather than failing on the first one.
"""

from typing import Any

import jsonschema

FIELDS_SCHEMA: dict[str, Any] = {
    "type": "array",
    "minItems": 1,
    "uniqueItems": True,
    "items": {"type": "string", "minLength": 1, "not": {"pattern": "^__enc_"}},
}

SECRET_SCHEMA: dict[str, Any] = {"type": "string", "minLength": 1}

OPTIONS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {"fields": FIELDS_SCHEMA, "secret": SECRET_SCHEMA},
    "required": ["fields", "secret"],
    "additionalProperties": False,
}


def validate_against_schema(data: Any, schema: dict[str, Any]) -> list[str]:
    """
    Validate a value against a JSON schema.
    Returns a list of error messages (empty list = valid).
    """
    validator = jsonschema.Draft7Validator(schema)
    return [error.message for error in validator.iter_errors(data)]


def split_option_errors(options: dict[str, Any]) -> tuple[list[str], list[str]]:
    """Validate an options mapping. Returns (secret_errors, field_errors)."""
    validator = jsonschema.Draft7Validator(OPTIONS_SCHEMA)
    secret_errors: list[str] = []
    field_errors: list[str] = []
    for error in validator.iter_errors(options):
        path = list(error.absolute_path)
        about_secret = (path[:1] == ["secret"]) or (
            error.validator == "required" and "'secret'" in error.message
        )
        (secret_errors if about_secret else field_errors).append(error.message)
    return secret_errors, field_errors
