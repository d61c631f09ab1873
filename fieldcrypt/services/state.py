"""Per-field encryption flags stored on the document itself."""

from __future__ import annotations

from typing import Any, MutableMapping

FLAG_PREFIX = "__enc_"


def flag_name(field_name: str) -> str:
    return f"{FLAG_PREFIX}{field_name}"


def is_flag_name(name: str) -> bool:
    return name.startswith(FLAG_PREFIX)


def is_encrypted(document: MutableMapping[str, Any], field_name: str) -> bool:
    """Only a boolean True flag means encrypted; absent or anything else is plaintext."""
    return document.get(flag_name(field_name)) is True


def set_encrypted(document: MutableMapping[str, Any], field_name: str, encrypted: bool) -> None:
    document[flag_name(field_name)] = bool(encrypted)


def clear_flag(document: MutableMapping[str, Any], field_name: str) -> None:
    document.pop(flag_name(field_name), None)
