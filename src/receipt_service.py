"""
Receipt Verification Pipeline
Gate → fetch → extract → resolve → accept, in one place

Workflow:
1. Validate the transaction id / supplied URL (url_gate)
2. Fetch the rendered page (BrowserSession, injected)
3. Reject short payloads and operator "not found" pages
4. Extract, filter and resolve fields
5. Accept or raise PARSE_FAIL
"""

from typing import Dict, Optional, Protocol

from loguru import logger

from browser_session import FetchResult
from extractor.acceptance import check_acceptance, is_html_too_short, is_not_found_page
from extractor.models import CanonicalReceipt
from extractor.pairs import make_soup
from extractor.resolver import page_text, resolve_canonical
from receipt_errors import ErrorCode, ReceiptError
from settings import DEFAULT_FETCH_TIMEOUT_MS, DEFAULT_URL_TEMPLATE
from url_gate import (
    assert_allowed_url,
    build_receipt_url,
    extract_transaction_id_from_url,
    validate_transaction_id,
)


class PageFetcher(Protocol):
    async def fetch(self, url: str, timeout_ms: int) -> FetchResult: ...


def parse_receipt_html(html: str, tx: Optional[str] = None) -> CanonicalReceipt:
    """
    Synchronous part of the pipeline: HTML in, accepted receipt out.

    Raises
    ------
    ReceiptError
        EMPTY_HTML, TX_NOT_FOUND or PARSE_FAIL
    """
    if is_html_too_short(html):
        raise ReceiptError(ErrorCode.EMPTY_HTML, details={"length": len(html or "")})

    soup = make_soup(html)
    if is_not_found_page(page_text(soup)):
        logger.info(f"Receipt page reports no such transaction: {tx}")
        raise ReceiptError(ErrorCode.TX_NOT_FOUND)

    draft = resolve_canonical(soup, tx)
    result = check_acceptance(draft)
    if not result.accepted:
        raise ReceiptError(ErrorCode.PARSE_FAIL, details=result.report)

    return result.receipt


class ReceiptService:
    """
    Entry points used by the API.

    The fetcher is anything with `async fetch(url, timeout_ms)`; in production
    it is a BrowserSession.
    """

    def __init__(self, fetcher: PageFetcher, config: Optional[Dict] = None):
        receipt_config = (config or {}).get('receipt', {})
        self.fetcher = fetcher
        self.url_template = receipt_config.get('url_template') or DEFAULT_URL_TEMPLATE
        self.timeout_ms = int(receipt_config.get('fetch_timeout_ms') or DEFAULT_FETCH_TIMEOUT_MS)

    async def get_receipt_canonical(self, tx: str) -> CanonicalReceipt:
        validate_transaction_id(tx)

        receipt_url = build_receipt_url(tx, self.url_template)
        assert_allowed_url(receipt_url)

        logger.info(f"Fetching receipt {tx}")
        fetched = await self.fetcher.fetch(receipt_url, self.timeout_ms)

        receipt = parse_receipt_html(fetched.html, tx)
        receipt.source_url = fetched.final_url or receipt_url
        return receipt

    async def get_receipt_from_url(self, url: str) -> CanonicalReceipt:
        assert_allowed_url(url)

        tx = extract_transaction_id_from_url(url)
        if not tx:
            raise ReceiptError(ErrorCode.TX_EXTRACT_FAILED)

        try:
            validate_transaction_id(tx)
        except ReceiptError as e:
            e.details = f'Extracted code: "{tx}"'
            raise

        return await self.get_receipt_canonical(tx)
