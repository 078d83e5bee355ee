"""
Acceptance Gate
===============
A resolved draft is usable only when invoice_no, settled_amount and
credited_party_account_no are all present.  check_acceptance() returns a typed
result instead of raising; the service turns a rejection into PARSE_FAIL.

Also holds the page-level checks that run before resolution.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Optional

from loguru import logger

from extractor.models import CanonicalReceipt, ReceiptDraft


MIN_HTML_LENGTH = 200

# Operator-side "no such transaction" phrasing
NOT_FOUND_PATTERN = re.compile(
    r'no\s+data|not\s+found|invalid\s+invoice|does\s+not\s+exist',
    re.IGNORECASE,
)

REQUIRED_FIELDS = {
    "invoice_no": "hasInvoiceNo",
    "settled_amount": "hasSettledAmount",
    "credited_party_account_no": "hasCreditedPartyAccountNo",
}


@dataclass
class AcceptanceResult:
    accepted: bool
    receipt: Optional[CanonicalReceipt] = None
    report: Dict[str, bool] = field(default_factory=dict)

    @property
    def missing(self):
        return [name for name, key in REQUIRED_FIELDS.items() if not self.report.get(key)]


def is_html_too_short(html) -> bool:
    return not html or len(html) < MIN_HTML_LENGTH


def is_not_found_page(text: str) -> bool:
    return bool(NOT_FOUND_PATTERN.search(text or ""))


def presence_report(draft: ReceiptDraft) -> Dict[str, bool]:
    return {key: bool(getattr(draft, name)) for name, key in REQUIRED_FIELDS.items()}


def check_acceptance(draft: ReceiptDraft) -> AcceptanceResult:
    report = presence_report(draft)
    if not all(report.values()):
        result = AcceptanceResult(accepted=False, report=report)
        logger.warning(f"[check_acceptance] rejected, missing: {', '.join(result.missing)}")
        return result

    receipt = CanonicalReceipt(**draft.model_dump())
    return AcceptanceResult(accepted=True, receipt=receipt, report=report)
