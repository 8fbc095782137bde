"""
Receipt extraction pipeline.

Orchestrates: parse (document → markdown) → extract (markdown → fields)
→ store receipt. Stages run strictly in order, none is retried, and the
first failure ends the request.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi.concurrency import run_in_threadpool
from jsonschema import Draft7Validator
from pydantic import ValidationError
from sqlalchemy.orm import Session

from receiptvault.errors import (
    ExtractFailed,
    MissingFile,
    MissingUser,
    PersistenceError,
    SchemaMismatch,
    ServiceUnauthenticated,
)
from receiptvault.pipeline.client import ExtractionClient
from receiptvault.pipeline.schema import EXTRACTION_SCHEMA
from receiptvault.receipts import create_receipt
from receiptvault.schemas import Extraction, ExtractionResult

logger = logging.getLogger(__name__)

_VALIDATOR = Draft7Validator(EXTRACTION_SCHEMA)


def _unwrap(body: dict[str, Any]) -> dict[str, Any]:
    # The service may nest the fields under "extraction" next to its metadata
    inner = body.get("extraction")
    return inner if isinstance(inner, dict) else body


def _check_schema(payload: dict[str, Any]) -> None:
    errors = sorted(_VALIDATOR.iter_errors(payload), key=lambda e: list(e.path))
    if errors:
        first = errors[0]
        where = "/".join(str(p) for p in first.path) or "<root>"
        raise SchemaMismatch(detail=f"{len(errors)} schema errors, first at {where}: {first.message}")


def to_extraction(body: dict[str, Any], validate_schema: bool = False) -> Extraction:
    payload = _unwrap(body)
    if validate_schema:
        _check_schema(payload)
    try:
        return Extraction.model_validate(payload)
    except ValidationError as e:
        raise ExtractFailed(detail=f"extract response has wrong shape: {e}") from e


async def run_extraction(
    db: Session,
    client: ExtractionClient,
    file_bytes: Optional[bytes],
    filename: Optional[str],
    user_id: Optional[str],
    *,
    content_type: Optional[str] = None,
    validate_schema: bool = False,
) -> ExtractionResult:
    """Run the full pipeline on one uploaded receipt image/PDF.

    Raises MissingFile / MissingUser / ServiceUnauthenticated before any
    network call, ParseFailed / ExtractFailed for upstream failures, and
    PersistenceError (carrying the extraction payload) if the receipt row
    could not be written.
    """
    if not file_bytes:
        raise MissingFile()
    if not user_id:
        raise MissingUser()
    if not client.api_key:
        raise ServiceUnauthenticated(detail="EXTRACT_API_KEY is empty")

    filename = filename or "document"
    logger.info("Pipeline start — parse %s (%d bytes) for user %s", filename, len(file_bytes), user_id)
    markdown = await client.parse(file_bytes, filename, content_type)
    logger.info("Parse done: %d chars of markdown", len(markdown))

    logger.info("Pipeline — extract fields")
    body = await client.extract(markdown, EXTRACTION_SCHEMA)
    extraction = to_extraction(body, validate_schema=validate_schema)
    logger.info("Extracted %d items", len(extraction.itemList))

    logger.info("Pipeline — store receipt")
    try:
        # Blocking insert, kept off the event loop
        receipt = await run_in_threadpool(create_receipt, db, user_id, extraction)
    except PersistenceError as e:
        e.payload = ExtractionResult(extraction=extraction).to_response()
        raise
    return ExtractionResult(extraction=extraction, receipt_id=receipt.id)
