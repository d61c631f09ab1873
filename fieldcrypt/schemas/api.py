"""Pydantic models for API request/response serialization."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

class DocumentCreate(BaseModel):
    """Incoming document – configured fields are encrypted before it is stored."""
    collection: str = Field(..., min_length=1, max_length=128)
    data: dict[str, Any] = Field(..., min_length=1)


class DocumentResponse(BaseModel):
    """Decrypted document, without the internal `__enc_` markers."""
    id: UUID
    collection: str
    data: dict[str, Any]
    created_at: datetime


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

class HealthResponse(BaseModel):
    status: str = "healthy"
    environment: str
    database: str = "connected"
    encrypted_fields: list[str] = []
