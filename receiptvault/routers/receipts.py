"""
Receipt endpoints.

POST /api/extract                          — scan a receipt, store it for the caller
GET  /api/receipts                         — caller's receipts, newest first
GET  /api/receipts/{user_id}               — same, with an explicit owner check
GET  /api/receipts/{user_id}/{receipt_id}  — one receipt
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from receiptvault import receipts
from receiptvault.auth import ActiveSession
from receiptvault.config import settings
from receiptvault.database import get_db
from receiptvault.dependencies import get_current_session
from receiptvault.errors import Forbidden, NotFound
from receiptvault.pipeline import run_extraction
from receiptvault.pipeline.client import ExtractionClient, get_extraction_client
from receiptvault.schemas import ReceiptOut

logger = logging.getLogger(__name__)
router = APIRouter()


def _require_owner(session: ActiveSession, user_id: Optional[str]) -> None:
    # The session decides who is acting; a client-sent id may only confirm it
    if user_id and user_id != session.user_id:
        logger.warning("User %s tried to act as %s", session.user_id, user_id)
        raise Forbidden()


@router.get("/")
def api_root():
    return {"name": "receiptvault"}


# ── POST /api/extract ────────────────────────────────────────────────────
@router.post("/extract")
async def extract(
    document: Optional[UploadFile] = File(None),
    user_id: Optional[str] = Form(None),
    session: ActiveSession = Depends(get_current_session),
    db: Session = Depends(get_db),
    client: ExtractionClient = Depends(get_extraction_client),
):
    _require_owner(session, user_id)

    file_bytes = filename = content_type = None
    if document is not None:
        file_bytes = await document.read()
        filename, content_type = document.filename, document.content_type
        logger.info("File received: %s", filename)

    result = await run_extraction(
        db,
        client,
        file_bytes,
        filename,
        session.user_id,
        content_type=content_type,
        validate_schema=settings.EXTRACT_VALIDATE_SCHEMA,
    )
    return result.to_response()


# ── GET /api/receipts ────────────────────────────────────────────────────
@router.get("/receipts", response_model=list[ReceiptOut])
def list_my_receipts(
    session: ActiveSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return receipts.list_receipts(db, session.user_id)


# ── GET /api/receipts/{user_id} ──────────────────────────────────────────
@router.get("/receipts/{user_id}", response_model=list[ReceiptOut])
def list_user_receipts(
    user_id: str,
    session: ActiveSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    _require_owner(session, user_id)
    return receipts.list_receipts(db, session.user_id)


# ── GET /api/receipts/{user_id}/{receipt_id} ─────────────────────────────
@router.get("/receipts/{user_id}/{receipt_id}", response_model=ReceiptOut)
def get_user_receipt(
    user_id: str,
    receipt_id: int,
    session: ActiveSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    _require_owner(session, user_id)
    receipt = receipts.get_receipt(db, session.user_id, receipt_id)
    if receipt is None:
        raise NotFound()
    return receipt
