"""
Field rules for the telebirr receipt
====================================
One FieldRule per canonical field, tried by the resolver in table order.

  aliases  exact table labels, most specific first.  The page renders most
           labels as "<Amharic>/<English>"; English-only variants follow.
  pattern  regex over the full page text, for fields whose table cell is
           unreliable.  Group 1 is the value.
"""

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Tuple


@dataclass(frozen=True)
class FieldRule:
    name: str
    aliases: Tuple[str, ...] = ()
    pattern: Optional[Pattern] = None


# ─── Body-text patterns ───────────────────────────────────────────────────────

INVOICE_NO_PATTERN = re.compile(r'\bInvoice No\.\s*([A-Z0-9]{6,})\b', re.IGNORECASE)

PAYMENT_DATE_PATTERN = re.compile(
    r'\bPayment date\s*([0-9]{2}[-/][0-9]{2}[-/][0-9]{4}\s+[0-9]{2}:[0-9]{2}:[0-9]{2})\b',
    re.IGNORECASE,
)

# "Settled Amount 1,234.50 Birr" → 1,234.50
SETTLED_AMOUNT_PATTERN = re.compile(
    r'\bSettled Amount\s*([0-9,]+(?:\.[0-9]{1,2})?)\s*Birr\b',
    re.IGNORECASE,
)


FIELD_RULES: Tuple[FieldRule, ...] = (
    FieldRule("payer_name", aliases=(
        "የከፋይ ስም/Payer Name",
        "Payer Name",
    )),
    FieldRule("payer_telebirr_no", aliases=(
        "የከፋይ ቴሌብር ቁ./Payer telebirr no.",
        "Payer telebirr no.",
    )),
    FieldRule("credited_party_name", aliases=(
        "የገንዘብ ተቀባይ ስም/Credited Party name",
        "የገንዘብ ተቀባይ ስም/Credited party name",
        "Credited Party name",
    )),
    FieldRule("credited_party_account_no", aliases=(
        "የገንዘብ ተቀባይ ቴሌብር ቁ./Credited party account no",
        "Credited party account no",
    )),
    FieldRule("transaction_status", aliases=(
        "የክፍያው ሁኔታ/transaction status",
        "Transaction status",
    )),
    FieldRule("invoice_no", pattern=INVOICE_NO_PATTERN),
    FieldRule("payment_date", pattern=PAYMENT_DATE_PATTERN),
    FieldRule("settled_amount", pattern=SETTLED_AMOUNT_PATTERN),
)

# Fields additionally run through the name segmenter: name -> parts field
NAME_FIELDS = {
    "payer_name": "payer_name_parts",
    "credited_party_name": "credited_party_name_parts",
}
