"""
Receipt as served to the UI (snake_case, items decoded).
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from receiptvault.schemas.extraction import Item


class ReceiptOut(BaseModel):
    id: int
    user_id: str
    store_name: Optional[str] = None
    address: Optional[str] = None
    transaction_date: Optional[str] = None
    total_amount: Optional[float] = None
    items: list[Item] = Field(default_factory=list)
    created_at: Optional[datetime] = None
