"""
FastAPI routes – a thin document store in front of the field encryption hooks.

Sensitive fields are encrypted by the ORM hooks when a document is flushed and
decrypted when it is loaded; the routes never call the cipher directly.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.orm import Session

from fieldcrypt.config import settings
from fieldcrypt.errors import MalformedCiphertext, UnsupportedFieldType
from fieldcrypt.models.database import get_db
from fieldcrypt.models.document import Document
from fieldcrypt.models.hooks import get_field_encryption
from fieldcrypt.schemas.api import DocumentCreate, DocumentResponse, HealthResponse
from fieldcrypt.services.state import is_flag_name
from fieldcrypt.services.transformer import strip_markers

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_response(document: Document) -> DocumentResponse:
    data = dict(document.body)
    config = get_field_encryption(Document)
    if config is not None:
        strip_markers(data, config)
    return DocumentResponse(
        id=document.id,
        collection=document.collection,
        data=data,
        created_at=document.created_at,
    )


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

@router.get("/health", response_model=HealthResponse)
def health_check(db: Session = Depends(get_db)):
    """Basic health endpoint – verifies DB connectivity."""
    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception:
        logger.exception("Database health check failed")
        db_status = "disconnected"
    config = get_field_encryption(Document)
    return HealthResponse(
        status="healthy",
        environment=settings.ENVIRONMENT,
        database=db_status,
        encrypted_fields=list(config.fields) if config else [],
    )


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

@router.post("/documents", response_model=DocumentResponse, status_code=201)
def create_document(request: DocumentCreate, db: Session = Depends(get_db)):
    """
    Store a document. Configured fields are encrypted before the write; a
    configured field holding anything but a string rejects the whole document.
    """
    reserved = sorted(key for key in request.data if is_flag_name(key))
    if reserved:
        raise HTTPException(status_code=422, detail=f"Reserved field names: {reserved}")

    document = Document(collection=request.collection, body=dict(request.data))
    db.add(document)
    try:
        db.commit()
    except UnsupportedFieldType as exc:
        db.rollback()
        logger.warning("Rejected %s document: %s", request.collection, exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    db.refresh(document)
    return _to_response(document)


@router.get("/documents/{document_id}", response_model=DocumentResponse)
def get_document(document_id: UUID, db: Session = Depends(get_db)):
    """Retrieve a document by ID with its sensitive fields decrypted."""
    try:
        document = db.get(Document, document_id)
    except MalformedCiphertext as exc:
        logger.error("Stored document %s could not be decrypted: %s", document_id, exc)
        raise HTTPException(status_code=500, detail="Stored document could not be decrypted") from exc
    if not document:
        raise HTTPException(status_code=404, detail="Document not found")
    return _to_response(document)


@router.get("/documents", response_model=list[DocumentResponse])
def list_documents(collection: str | None = None, db: Session = Depends(get_db)):
    """List documents, optionally restricted to one collection."""
    query = db.query(Document)
    if collection:
        query = query.filter(Document.collection == collection)
    try:
        documents = query.order_by(Document.created_at).all()
    except MalformedCiphertext as exc:
        logger.error("Stored documents could not be decrypted: %s", exc)
        raise HTTPException(status_code=500, detail="Stored document could not be decrypted") from exc
    return [_to_response(document) for document in documents]
