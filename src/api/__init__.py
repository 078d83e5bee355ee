"""
API Package
Contains FastAPI routes and models
"""

from api.routes import router
from api.models import (
    CheckReceiptRequest,
    ReceiptResponse,
    ErrorResponse,
    HealthResponse,
    ErrorCodesResponse
)

__all__ = [
    'router',
    'CheckReceiptRequest',
    'ReceiptResponse',
    'ErrorResponse',
    'HealthResponse',
    'ErrorCodesResponse'
]
