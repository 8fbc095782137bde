"""
Error taxonomy.

Every failure the service reports to a client is one of these. Each carries
the HTTP status and a client-safe message; diagnostic detail goes to the log
only (see ``receiptvault.main`` for the handlers).
"""
from __future__ import annotations

from typing import Any, Optional


class ReceiptVaultError(Exception):
    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, *, detail: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        # Server-side only, never returned to the client
        self.detail = detail
        super().__init__(detail or self.message)


# ── Authentication / authorization ───────────────────────────────────────

class TokenInvalid(ReceiptVaultError):
    """Identity token is forged, expired, for another audience or issuer."""
    status_code = 401
    message = "Invalid token"


class Unauthenticated(ReceiptVaultError):
    status_code = 401
    message = "Not authenticated"


class Forbidden(ReceiptVaultError):
    status_code = 403
    message = "Forbidden"


# ── Request validation ───────────────────────────────────────────────────

class MissingFile(ReceiptVaultError):
    status_code = 400
    message = "No file provided"


class MissingUser(ReceiptVaultError):
    status_code = 400
    message = "No user_id provided"


class NotFound(ReceiptVaultError):
    status_code = 404
    message = "Receipt not found"


# ── Extraction service ───────────────────────────────────────────────────

class ServiceUnauthenticated(ReceiptVaultError):
    """The backend has no credential for the extraction service (operator fix)."""
    status_code = 500
    message = "API key not set"


class ParseFailed(ReceiptVaultError):
    status_code = 500
    message = "Parse failed"
    stage = "parse"


class ExtractFailed(ReceiptVaultError):
    status_code = 500
    message = "Extract failed"
    stage = "extract"


class SchemaMismatch(ExtractFailed):
    message = "Extract response did not match schema"


# ── Storage ──────────────────────────────────────────────────────────────

class PersistenceError(ReceiptVaultError):
    status_code = 500
    message = "Failed to save data"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        detail: Optional[str] = None,
        payload: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, detail=detail)
        # Extraction result that could not be recorded, still owed to the caller
        self.payload = payload


class DataCorrupt(ReceiptVaultError):
    """A stored value failed to deserialize."""
    status_code = 500
    message = "Stored data is corrupt"
