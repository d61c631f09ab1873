"""
Wires the document transformer into SQLAlchemy's ORM lifecycle.

- before persist: `before_insert` / `before_update` encrypt the configured fields
- after load:     `load` / `refresh` decrypt them again

Core `update()` statements bypass these events. Whatever they write is read
back according to the stored flags, so a field rewritten as plaintext with
its flag set to False is returned untouched.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import event

from fieldcrypt.services.transformer import (
    FieldEncryptionConfig,
    decrypt_fields,
    encrypt_fields,
)

logger = logging.getLogger(__name__)

_HOOKS_ATTR = "__field_encryption__"


class FieldEncryptionHooks:
    """Event handlers bound to one model and one config."""

    def __init__(self, config: FieldEncryptionConfig, attribute: str = "body"):
        self.config = config
        self.attribute = attribute
        self.listeners = [
            ("before_insert", self.before_persist),
            ("before_update", self.before_persist),
            ("load", self.after_load),
            ("refresh", self.after_refresh),
        ]

    def _document(self, target: Any):
        return getattr(target, self.attribute, None)

    def before_persist(self, mapper, connection, target) -> None:
        document = self._document(target)
        if document is None:
            return
        changed = encrypt_fields(document, self.config)
        if changed:
            logger.debug("Encrypted %s on %s before persist", changed, type(target).__name__)

    def after_load(self, target, context) -> None:
        document = self._document(target)
        if document is None:
            return
        changed = decrypt_fields(document, self.config)
        if changed:
            logger.debug("Decrypted %s on %s after load", changed, type(target).__name__)

    def after_refresh(self, target, context, attrs) -> None:
        if attrs is None or self.attribute in attrs:
            self.after_load(target, context)


def register_field_encryption(
    model: type, config: FieldEncryptionConfig, attribute: str = "body"
) -> FieldEncryptionHooks:
    """
    Encrypt `model.<attribute>` before every flush and decrypt it after every load.
    Calling this again for the same model replaces the previous registration.
    """
    unregister_field_encryption(model)
    hooks = FieldEncryptionHooks(config, attribute)
    for identifier, fn in hooks.listeners:
        event.listen(model, identifier, fn, propagate=True)
    setattr(model, _HOOKS_ATTR, hooks)
    logger.info(
        "Field encryption enabled on %s.%s for %s",
        model.__name__,
        attribute,
        list(config.fields),
    )
    return hooks


def unregister_field_encryption(model: type) -> None:
    hooks = model.__dict__.get(_HOOKS_ATTR)
    if hooks is None:
        return
    for identifier, fn in hooks.listeners:
        if event.contains(model, identifier, fn):
            event.remove(model, identifier, fn)
    delattr(model, _HOOKS_ATTR)


def get_field_encryption(model: type) -> FieldEncryptionConfig | None:
    hooks = model.__dict__.get(_HOOKS_ATTR)
    return hooks.config if hooks else None
