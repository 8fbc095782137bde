"""
Typed view of the structured fields returned by the extraction service.

Mirrors ``receiptvault.pipeline.schema.EXTRACTION_SCHEMA``. The service is
trusted to conform, so every leaf is optional here: an omitted field is
tolerated, a field of the wrong shape is not. Unknown keys are kept so the
full payload reaches the client.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class _Section(BaseModel):
    model_config = ConfigDict(extra="allow")


class StoreInfo(_Section):
    storeName: Optional[str] = None
    address: Optional[str] = None
    cashierName: Optional[str] = None
    transactionDate: Optional[str] = None
    transactionTime: Optional[str] = None


class PaymentSummary(_Section):
    paymentMethod: Optional[str] = None
    totalAmount: Optional[float] = None
    changeGiven: Optional[float] = None
    itemsSold: Optional[float] = None
    referenceNumber: Optional[str] = None


class Item(_Section):
    """One purchased line. No identity of its own."""
    itemName: Optional[str] = None
    itemPrice: Optional[float] = None
    itemType: Optional[str] = None
    weight: Optional[float] = None
    unitPrice: Optional[float] = None


class SavingsSummary(_Section):
    totalSavings: Optional[float] = None
    totalCoupons: Optional[float] = None
    annualCardSavings: Optional[float] = None
    fuelPointsEarned: Optional[float] = None
    totalFuelPoints: Optional[float] = None


class AccountInfo(_Section):
    customerId: Optional[str] = None
    cardType: Optional[str] = None
    cardLastDigits: Optional[str] = None
    aid: Optional[str] = None
    tc: Optional[str] = None


class Extraction(_Section):
    storeInfo: StoreInfo = Field(default_factory=StoreInfo)
    paymentSummary: PaymentSummary = Field(default_factory=PaymentSummary)
    itemList: list[Item] = Field(default_factory=list)
    savingsSummary: SavingsSummary = Field(default_factory=SavingsSummary)
    accountInfo: AccountInfo = Field(default_factory=AccountInfo)


class ExtractionResult(BaseModel):
    """What ``POST /api/extract`` returns: the extraction plus the stored receipt id."""
    extraction: Extraction
    receipt_id: Optional[int] = None

    def to_response(self) -> dict:
        body = self.extraction.model_dump(mode="json")
        body["receiptId"] = self.receipt_id
        return body
