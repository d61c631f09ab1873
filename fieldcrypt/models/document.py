"""
Document storage model.

Each row holds one open-shaped JSON document. Sensitive fields inside `body`
are encrypted in place by the hooks in `fieldcrypt.models.hooks`, with their
`__enc_<field>` flags stored next to them in the same JSON object.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, Index, String, Uuid

from fieldcrypt.models.database import Base


class Document(Base):
    __tablename__ = "documents"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    collection = Column(String(128), nullable=False, comment="Logical document type")
    body = Column(JSON, nullable=False, comment="Document fields, sensitive ones hex-encrypted")
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), nullable=False)

    __table_args__ = (Index("ix_documents_collection", "collection"),)
