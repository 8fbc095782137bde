"""
Receipt repository.

Every read filters on the owner inside the query, so a receipt belonging to
someone else is indistinguishable from one that does not exist.
"""
from __future__ import annotations

import json
import logging
from typing import Optional

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from receiptvault.errors import DataCorrupt, PersistenceError
from receiptvault.models import ReceiptModel
from receiptvault.schemas import Extraction, Item, ReceiptOut

logger = logging.getLogger(__name__)

_ITEMS = TypeAdapter(list[Item])


def encode_items(items: list[Item]) -> str:
    return json.dumps([item.model_dump(mode="json") for item in items], ensure_ascii=False)


def decode_items(raw: Optional[str], receipt_id: Optional[int] = None) -> list[Item]:
    try:
        return _ITEMS.validate_python(json.loads(raw))
    except (TypeError, ValueError, ValidationError) as e:
        logger.error("Receipt %s has undecodable items: %s", receipt_id, e)
        raise DataCorrupt(detail=f"receipt {receipt_id}: {e}") from e


def to_out(row: ReceiptModel) -> ReceiptOut:
    return ReceiptOut(
        id=row.id,
        user_id=row.user_id,
        store_name=row.store_name,
        address=row.address,
        transaction_date=row.transaction_date,
        total_amount=row.total_amount,
        items=decode_items(row.items, row.id),
        created_at=row.created_at,
    )


def create_receipt(db: Session, user_id: str, extraction: Extraction) -> ReceiptOut:
    """Store the receipt-relevant projection of *extraction* for *user_id*."""
    record = ReceiptModel(
        user_id=user_id,
        store_name=extraction.storeInfo.storeName,
        address=extraction.storeInfo.address,
        transaction_date=extraction.storeInfo.transactionDate,
        total_amount=extraction.paymentSummary.totalAmount,
        items=encode_items(extraction.itemList),
    )
    db.add(record)
    try:
        db.commit()
        db.refresh(record)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Receipt insert failed for user %s: %s", user_id, e)
        raise PersistenceError("Failed to save receipt", detail=str(e)) from e

    logger.info("Stored receipt %s for user %s (%d items)", record.id, user_id, len(extraction.itemList))
    return to_out(record)


def list_receipts(db: Session, user_id: str) -> list[ReceiptOut]:
    """Newest first. Empty list if the user has none."""
    rows = (
        db.query(ReceiptModel)
        .filter(ReceiptModel.user_id == user_id)
        .order_by(ReceiptModel.created_at.desc(), ReceiptModel.id.desc())
        .all()
    )
    logger.info("Found %d receipts for user %s", len(rows), user_id)
    return [to_out(r) for r in rows]


def get_receipt(db: Session, user_id: str, receipt_id: int) -> Optional[ReceiptOut]:
    row = (
        db.query(ReceiptModel)
        .filter(ReceiptModel.id == receipt_id, ReceiptModel.user_id == user_id)
        .first()
    )
    return to_out(row) if row else None
