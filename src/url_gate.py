"""
Identifier & URL Safety Gate
============================
Runs before any page fetch:

  validate_transaction_id()          10 ASCII letters/digits, case preserved
  build_receipt_url()                template + percent-encoded id
  assert_allowed_url()               http(s) only, exact host allow-list (SSRF guard)
  extract_transaction_id_from_url()  recover an id for the "check by URL" path
"""

import re
from typing import Optional
from urllib.parse import parse_qs, quote, unquote, urlsplit

from loguru import logger

from receipt_errors import ErrorCode, ReceiptError
from settings import DEFAULT_URL_TEMPLATE


# Exact hostname match only: no subdomains, no wildcards.
ALLOWED_HOSTS = frozenset({"transactioninfo.ethiotelecom.et"})

ALLOWED_SCHEMES = ("http", "https")

_TX_PATTERN = re.compile(r'[A-Za-z0-9]{10}')

# Whitespace, control chars, and '\' (a path separator to browsers, not to urlsplit)
_UNSAFE_URL_CHARS = re.compile(r'[\s\x00-\x1f\x7f\\]')


def validate_transaction_id(tx) -> None:
    """Raise TX_FORMAT unless tx is exactly 10 ASCII letters or digits."""
    if not isinstance(tx, str) or not _TX_PATTERN.fullmatch(tx):
        raise ReceiptError(ErrorCode.TX_FORMAT)


def build_receipt_url(tx: str, template: Optional[str] = None) -> str:
    template = template or DEFAULT_URL_TEMPLATE
    return template.replace("{tx}", quote(tx, safe=""))


def assert_allowed_url(url, allowed_hosts=ALLOWED_HOSTS) -> None:
    """
    Reject any URL the fetcher must not visit.

    Raises
    ------
    ReceiptError
        INVALID_URL       unparsable, no scheme or no host
        INVALID_PROTOCOL  scheme other than http/https
        HOST_NOT_ALLOWED  hostname not in the allow-list
    """
    if not isinstance(url, str) or not url or _UNSAFE_URL_CHARS.search(url):
        raise ReceiptError(ErrorCode.INVALID_URL)

    try:
        parts = urlsplit(url)
        hostname = parts.hostname
        parts.port  # raises ValueError on a malformed port
    except ValueError as e:
        raise ReceiptError(ErrorCode.INVALID_URL, original_error=str(e))

    if not parts.scheme:
        raise ReceiptError(ErrorCode.INVALID_URL)

    if parts.scheme not in ALLOWED_SCHEMES:
        raise ReceiptError(ErrorCode.INVALID_PROTOCOL)

    if not hostname:
        raise ReceiptError(ErrorCode.INVALID_URL)

    if hostname not in allowed_hosts:
        logger.warning(f"Blocked fetch to non-allowed host {hostname!r}")
        raise ReceiptError(
            ErrorCode.HOST_NOT_ALLOWED,
            details=f'Host "{hostname}" is not in the allowed list.',
        )


def extract_transaction_id_from_url(url) -> Optional[str]:
    """
    Best-effort transaction id recovery, tried in order:
      1. /receipt/{id}
      2. ?tx= or ?id=
      3. last path segment
    """
    try:
        parts = urlsplit(url)
    except (TypeError, ValueError):
        return None

    segments = [unquote(s) for s in parts.path.split("/") if s]

    if len(segments) >= 2 and segments[0] == "receipt":
        return segments[1]

    query = parse_qs(parts.query)
    for name in ("tx", "id"):
        values = [v for v in query.get(name, []) if v]
        if values:
            return values[0]

    return segments[-1] if segments else None
