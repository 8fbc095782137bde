from receiptvault.schemas.auth import (
    AuthConfigResponse,
    GoogleSignInRequest,
    SuccessResponse,
    UserOut,
    UserResponse,
)
from receiptvault.schemas.extraction import (
    AccountInfo,
    Extraction,
    ExtractionResult,
    Item,
    PaymentSummary,
    SavingsSummary,
    StoreInfo,
)
from receiptvault.schemas.receipt import ReceiptOut

__all__ = [
    "AccountInfo",
    "AuthConfigResponse",
    "Extraction",
    "ExtractionResult",
    "GoogleSignInRequest",
    "Item",
    "PaymentSummary",
    "ReceiptOut",
    "SavingsSummary",
    "StoreInfo",
    "SuccessResponse",
    "UserOut",
    "UserResponse",
]
