"""
API Models — Request and Response schemas
Using Pydantic for automatic validation and documentation

Every response is an envelope:
  success  - true/false
  data     - CanonicalReceipt (success) / error-code table
  error    - {code, message, details, originalError} (failure)
  meta     - processing time and timestamp
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from extractor.models import CanonicalReceipt


# ─── Request Models ───────────────────────────────────────────────────────────

class CheckReceiptRequest(BaseModel):
    """Check by full receipt URL or by transaction code (code wins if both)."""
    model_config = ConfigDict(populate_by_name=True)

    url: Optional[str]              = Field(None, description="Full receipt URL")
    transaction_code: Optional[str] = Field(None, alias="transactionCode", description="10-character transaction code")


# ─── Response Models ──────────────────────────────────────────────────────────

class ResponseMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    processing_time: str = Field(..., alias="processingTime", description='e.g. "1250ms"')
    timestamp: str       = Field(..., description="ISO-8601 UTC timestamp")


class ReceiptResponse(BaseModel):
    """Successful receipt lookup."""
    success: bool          = Field(True, description="Always true")
    data: CanonicalReceipt = Field(..., description="Canonical receipt record")
    meta: ResponseMeta


class ErrorDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    code: str                     = Field(..., description="Stable error code")
    message: str                  = Field(..., description="Human-readable message")
    details: Optional[Any]        = Field(None, description="Structured context")
    original_error: Optional[str] = Field(None, alias="originalError", description="Underlying error text")


class ErrorResponse(BaseModel):
    """Error response."""
    success: bool = Field(False, description="Always false")
    error: ErrorDetail
    meta: Optional[ResponseMeta] = None


# ─── Health & Error-code Models ──────────────────────────────────────────────

class HealthResponse(BaseModel):
    """Health check response."""
    success: bool    = True
    status: str      = Field("healthy",     description="Health status")
    timestamp: str   = Field(...,           description="ISO-8601 UTC timestamp")
    environment: str = Field("development", description="Deployment environment")


class ErrorCodesResponse(BaseModel):
    success: bool        = True
    data: Dict[str, str] = Field(..., description="Error code -> message")
