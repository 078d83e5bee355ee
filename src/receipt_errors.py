"""
Receipt Errors
==============
Stable error codes for every failure the receipt pipeline can raise.

Each failure carries:
  code            - one of ErrorCode (stable, used by the UI)
  message         - human-readable text (defaults to ERROR_MESSAGES[code])
  details         - optional structured context (presence report, host, ...)
  original_error  - optional text of the underlying library error

The pipeline never translates codes into HTTP status; the API layer does that
with HTTP_STATUS_BY_CODE.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    TX_FORMAT = "TX_FORMAT"
    INVALID_URL = "INVALID_URL"
    INVALID_PROTOCOL = "INVALID_PROTOCOL"
    HOST_NOT_ALLOWED = "HOST_NOT_ALLOWED"
    TX_EXTRACT_FAILED = "TX_EXTRACT_FAILED"
    MISSING_INPUT = "MISSING_INPUT"
    BROWSER_LAUNCH_FAILED = "BROWSER_LAUNCH_FAILED"
    PAGE_LOAD_FAILED = "PAGE_LOAD_FAILED"
    PAGE_TIMEOUT = "PAGE_TIMEOUT"
    NAVIGATION_ERROR = "NAVIGATION_ERROR"
    HTTP_ERROR = "HTTP_ERROR"
    EMPTY_HTML = "EMPTY_HTML"
    TX_NOT_FOUND = "TX_NOT_FOUND"
    PARSE_FAIL = "PARSE_FAIL"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


ERROR_MESSAGES: Dict[str, str] = {
    ErrorCode.TX_FORMAT.value:             "Invalid transaction code format. Must be 10 alphanumeric characters.",
    ErrorCode.INVALID_URL.value:           "Invalid URL format provided.",
    ErrorCode.INVALID_PROTOCOL.value:      "Only HTTP and HTTPS protocols are allowed.",
    ErrorCode.HOST_NOT_ALLOWED.value:      "The provided URL host is not allowed.",
    ErrorCode.TX_EXTRACT_FAILED.value:     "Could not extract transaction code from URL.",
    ErrorCode.MISSING_INPUT.value:         "Please provide a URL or transaction code.",
    ErrorCode.BROWSER_LAUNCH_FAILED.value: "Failed to launch browser. Please try again.",
    ErrorCode.PAGE_LOAD_FAILED.value:      "Failed to load the receipt page.",
    ErrorCode.PAGE_TIMEOUT.value:          "Page load timed out. The server might be slow.",
    ErrorCode.NAVIGATION_ERROR.value:      "Navigation error occurred while loading the page.",
    ErrorCode.HTTP_ERROR.value:            "The receipt server answered with an HTTP error.",
    ErrorCode.EMPTY_HTML.value:            "Received empty or invalid HTML response.",
    ErrorCode.TX_NOT_FOUND.value:          "Transaction not found. Please check the transaction code.",
    ErrorCode.PARSE_FAIL.value:            "Failed to parse receipt data. Required fields are missing.",
    ErrorCode.UNKNOWN_ERROR.value:         "An unexpected error occurred.",
}


# Only the API layer reads this table.
HTTP_STATUS_BY_CODE: Dict[str, int] = {
    ErrorCode.TX_FORMAT.value:             400,
    ErrorCode.INVALID_URL.value:           400,
    ErrorCode.INVALID_PROTOCOL.value:      400,
    ErrorCode.TX_EXTRACT_FAILED.value:     400,
    ErrorCode.MISSING_INPUT.value:         400,
    ErrorCode.HOST_NOT_ALLOWED.value:      403,
    ErrorCode.TX_NOT_FOUND.value:          404,
    ErrorCode.PARSE_FAIL.value:            422,
    ErrorCode.HTTP_ERROR.value:            502,
    ErrorCode.PAGE_LOAD_FAILED.value:      502,
    ErrorCode.NAVIGATION_ERROR.value:      502,
    ErrorCode.EMPTY_HTML.value:            502,
    ErrorCode.BROWSER_LAUNCH_FAILED.value: 503,
    ErrorCode.PAGE_TIMEOUT.value:          504,
}


def http_status_for(code: str) -> int:
    """Transport status for an error code; unknown codes map to 500."""
    return HTTP_STATUS_BY_CODE.get(code, 500)


class ReceiptError(Exception):
    """A classified receipt pipeline failure."""

    def __init__(
        self,
        code: ErrorCode,
        message: Optional[str] = None,
        details: Any = None,
        original_error: Optional[str] = None,
    ):
        self.code = ErrorCode(code)
        self.message = message or ERROR_MESSAGES[self.code.value]
        self.details = details
        self.original_error = original_error
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"ReceiptError({self.code.value}, {self.message!r})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
            "originalError": self.original_error,
        }
