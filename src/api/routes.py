"""
API Routes - All API endpoints
Thin layer over ReceiptService: maps ReceiptError codes to HTTP status
"""

import time

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from loguru import logger

from api.models import (
    CheckReceiptRequest,
    ErrorCodesResponse,
    ErrorDetail,
    ErrorResponse,
    HealthResponse,
    ReceiptResponse,
    ResponseMeta,
)
from receipt_errors import ERROR_MESSAGES, ErrorCode, ReceiptError, http_status_for
from receipt_service import ReceiptService
from utils import format_processing_time, utc_timestamp

# Create router
router = APIRouter()


# ==================== UTILITY FUNCTIONS ====================

def get_receipt_service(request: Request) -> ReceiptService:
    """The service created in the app lifespan (or installed by tests)."""
    return request.app.state.receipt_service


def _meta(started: float) -> ResponseMeta:
    elapsed_ms = (time.perf_counter() - started) * 1000
    return ResponseMeta(
        processing_time=format_processing_time(elapsed_ms),
        timestamp=utc_timestamp(),
    )


def error_response(err: Exception, started: float) -> JSONResponse:
    """Error envelope for any exception; non-ReceiptErrors become UNKNOWN_ERROR."""
    if not isinstance(err, ReceiptError):
        logger.exception("Unclassified error while checking receipt")
        err = ReceiptError(ErrorCode.UNKNOWN_ERROR, original_error=str(err))
    else:
        logger.error(f"Error: {err.code.value} - {err.message}")

    body = ErrorResponse(
        error=ErrorDetail(**err.to_dict()),
        meta=_meta(started),
    )
    return JSONResponse(
        status_code=http_status_for(err.code.value),
        content=body.model_dump(by_alias=True),
    )


# ==================== API ENDPOINTS ====================

@router.post(
    "/check-receipt",
    response_model=ReceiptResponse,
    responses={400: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
    tags=["Receipt"],
)
async def check_receipt(payload: CheckReceiptRequest, request: Request):
    """
    **Check a receipt by URL or transaction code**

    **Body:**
    - `transactionCode`: 10-character telebirr transaction code
    - `url`: full receipt URL (used when no code is given)

    **Example:**
    ```bash
    curl -X POST http://localhost:3000/api/check-receipt \\
      -H "Content-Type: application/json" \\
      -d '{"transactionCode": "CGL1ABCDEF"}'
    ```
    """
    started = time.perf_counter()
    service = get_receipt_service(request)
    url = (payload.url or "").strip()
    tx = (payload.transaction_code or "").strip()

    try:
        if tx:
            logger.info(f"Processing transaction code: {tx}")
            receipt = await service.get_receipt_canonical(tx)
        elif url:
            logger.info(f"Processing URL: {url}")
            receipt = await service.get_receipt_from_url(url)
        else:
            raise ReceiptError(ErrorCode.MISSING_INPUT)
    except Exception as e:
        return error_response(e, started)

    meta = _meta(started)
    logger.info(f"Success! Processing time: {meta.processing_time}")
    return ReceiptResponse(data=receipt, meta=meta)


@router.get(
    "/receipt/{tx_code}",
    response_model=ReceiptResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    tags=["Receipt"],
)
async def get_receipt(tx_code: str, request: Request):
    """**Get a receipt by transaction code**"""
    started = time.perf_counter()
    service = get_receipt_service(request)

    try:
        logger.info(f"Processing transaction code: {tx_code}")
        receipt = await service.get_receipt_canonical(tx_code.strip())
    except Exception as e:
        return error_response(e, started)

    return ReceiptResponse(data=receipt, meta=_meta(started))


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(request: Request):
    config = getattr(request.app.state, "config", None) or {}
    return HealthResponse(
        timestamp=utc_timestamp(),
        environment=config.get("server", {}).get("environment", "development"),
    )


@router.get("/error-codes", response_model=ErrorCodesResponse, tags=["Health"])
async def error_codes():
    return ErrorCodesResponse(data=ERROR_MESSAGES)
