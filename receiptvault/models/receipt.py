"""
SQLAlchemy model for receipt persistence.
"""
from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func

from receiptvault.database import Base


class ReceiptModel(Base):
    __tablename__ = "receipts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    store_name = Column(String, nullable=True)
    address = Column(String, nullable=True)
    transaction_date = Column(String, nullable=True)
    total_amount = Column(Float, nullable=True)
    # JSON-encoded list of items, in receipt order
    items = Column(Text, nullable=False, default="[]")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
