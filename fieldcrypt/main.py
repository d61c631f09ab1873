"""
FastAPI application entrypoint.

Run locally:  uvicorn fieldcrypt.main:app --reload
Requires FIELD_ENCRYPTION_SECRET and ENCRYPTED_FIELDS (comma-separated).
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.engine import Engine

from fieldcrypt.api.routes import router
from fieldcrypt.config import settings
from fieldcrypt.models.database import init_db
from fieldcrypt.models.document import Document
from fieldcrypt.models.hooks import register_field_encryption
from fieldcrypt.services.transformer import FieldEncryptionConfig

logging.basicConfig(
    level=settings.LOG_LEVEL, format="%(levelname)s | %(name)s | %(message)s"
)


def create_app(
    config: FieldEncryptionConfig | None = None, engine: Engine | None = None
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Misconfiguration is fatal here, before any request is served
        field_config = config or FieldEncryptionConfig.from_options(
            settings.field_encryption_options()
        )
        register_field_encryption(Document, field_config)
        init_db(engine)
        yield

    app = FastAPI(
        title="fieldcrypt",
        description=(
            "Document store with deterministic field-level encryption: "
            "configured string fields are encrypted before persist and "
            "decrypted after load."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )
    app.include_router(router, prefix="/api/v1")
    return app


app = create_app()
