"""
Extractor package — turns a rendered telebirr receipt page into a
CanonicalReceipt.

Stages
------
extract_raw_pairs()   table rows → ordered label/value pairs
filter_junk_pairs()   drop UI chrome (PDF link text, label == value)
resolve_canonical()   FIELD_RULES over pairs + page text → ReceiptDraft
check_acceptance()    ReceiptDraft → AcceptanceResult (CanonicalReceipt or report)
"""

from extractor.acceptance import AcceptanceResult, check_acceptance
from extractor.models import CanonicalReceipt, NameParts, ReceiptDraft
from extractor.pairs import extract_raw_pairs, filter_junk_pairs, is_junk_pair
from extractor.resolver import resolve_canonical
from extractor.text import clean_text, normalize_key, parse_ethiopian_name

__all__ = [
    "AcceptanceResult",
    "CanonicalReceipt",
    "NameParts",
    "ReceiptDraft",
    "check_acceptance",
    "clean_text",
    "extract_raw_pairs",
    "filter_junk_pairs",
    "is_junk_pair",
    "normalize_key",
    "parse_ethiopian_name",
    "resolve_canonical",
]
