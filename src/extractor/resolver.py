"""
Canonical Field Resolver
========================
Maps the filtered table pairs plus the full page text onto the canonical
receipt fields, driven by FIELD_RULES:

  1. alias rules   first alias present in the filtered pairs wins
  2. regex rules   first match in the cleaned page text (PDF prompt removed)
  3. invoice_no    falls back to the caller's transaction id
  4. names         split with parse_ethiopian_name()

A field with no match is simply left empty; the acceptance gate decides
whether the record is usable.
"""

import re
from typing import Dict, Iterable, Optional, Pattern, Sequence, Union

from bs4 import BeautifulSoup
from loguru import logger

from extractor.fields import FIELD_RULES, NAME_FIELDS, FieldRule
from extractor.models import RawPairMap, ReceiptDraft
from extractor.pairs import extract_raw_pairs, filter_junk_pairs, make_soup, node_text
from extractor.text import clean_text, parse_ethiopian_name


_PDF_PROMPT = re.compile(r'download the pdf', re.IGNORECASE)


def page_text(html: Union[str, BeautifulSoup], strip_pdf_prompt: bool = False) -> str:
    """Cleaned text of the document body (whole document if there is no <body>)."""
    soup = make_soup(html)
    root = soup.body or soup
    text = clean_text(node_text(root))
    if strip_pdf_prompt:
        text = clean_text(_PDF_PROMPT.sub("", text))
    return text


def pick_exact(raw: RawPairMap, aliases: Iterable[str]) -> Optional[str]:
    for alias in aliases:
        value = raw.get(alias)
        if value:
            return value
    return None


def extract_by_regex(text: str, pattern: Pattern) -> Optional[str]:
    m = pattern.search(text or "")
    if not m:
        return None
    return clean_text(m.group(1)) or None


def resolve_fields(
    raw: RawPairMap, text: str, rules: Sequence[FieldRule] = FIELD_RULES
) -> Dict[str, Optional[str]]:
    """Apply each rule in order; returns field name -> value (or None)."""
    values: Dict[str, Optional[str]] = {}
    for rule in rules:
        value = None
        if rule.aliases:
            value = pick_exact(raw, rule.aliases)
        if value is None and rule.pattern is not None:
            value = extract_by_regex(text, rule.pattern)
        values[rule.name] = clean_text(value) or None
    return values


def resolve_canonical(
    html: Union[str, BeautifulSoup],
    tx: Optional[str] = None,
    rules: Sequence[FieldRule] = FIELD_RULES,
) -> ReceiptDraft:
    """
    Resolve a receipt page into a ReceiptDraft.

    Parameters
    ----------
    html : str | BeautifulSoup
        Rendered receipt page.
    tx : str, optional
        Transaction id the page was fetched for; used as invoice_no when the
        page text has none.
    """
    soup = make_soup(html)
    raw = filter_junk_pairs(extract_raw_pairs(soup))
    text = page_text(soup, strip_pdf_prompt=True)

    values = resolve_fields(raw, text, rules)

    if not values.get("invoice_no") and tx:
        logger.debug(f"[resolve_canonical] invoice_no not on page, using tx {tx}")
        values["invoice_no"] = tx

    for name_field, parts_field in NAME_FIELDS.items():
        values[parts_field] = parse_ethiopian_name(values.get(name_field))

    draft = ReceiptDraft(**values, raw_data=raw)

    logger.info(
        f"[resolve_canonical] invoice={draft.invoice_no!r} "
        f"amount={draft.settled_amount!r} "
        f"account={draft.credited_party_account_no!r} "
        f"pairs={len(raw)}"
    )
    return draft
