"""
Raw Pair Extractor & Junk Filter
================================
The receipt page mixes an unknown number of two-column tables, so the scan is
layout-agnostic: every table row is read as consecutive (label, value) cells.

    <tr><td>Payer Name</td><td>Abebe Kebede</td></tr>   → {"Payer Name": "Abebe Kebede"}
    <tr><th>A</th><td>1</td><th>B</th><td>2</td></tr>    → {"A": "1", "B": "2"}

The first value seen for a label wins; later duplicates are ignored.
"""

import copy
from typing import List, Union

from bs4 import BeautifulSoup, CData, NavigableString, Tag
from loguru import logger

from extractor.models import RawPairMap
from extractor.text import clean_text, normalize_key


# Interactive / decorative children stripped from a cell before reading it
_CHROME_TAGS = ["a", "button", "svg", "script", "style"]

# Element boundaries that separate words; inline tags (span, b, ...) do not
_BLOCK_TAGS = {
    "address", "article", "aside", "blockquote", "br", "caption", "dd", "div",
    "dl", "dt", "footer", "form", "h1", "h2", "h3", "h4", "h5", "h6", "header",
    "hr", "li", "main", "nav", "ol", "p", "pre", "section", "table", "tbody",
    "td", "tfoot", "th", "thead", "tr", "ul",
}
_SKIPPED_TAGS = {"script", "style", "template", "noscript"}

# Comments, doctypes and script/style strings are NavigableString subclasses
_TEXT_TYPES = (NavigableString, CData)

_PDF_PHRASES = {"download the pdf", "download pdf"}


def make_soup(html: Union[str, BeautifulSoup]) -> BeautifulSoup:
    if isinstance(html, BeautifulSoup):
        return html
    return BeautifulSoup(html or "", "html.parser")


def is_pdf_junk_value(value) -> bool:
    """True for the "Download the PDF" link text the page renders in tables."""
    text = normalize_key(value)
    if text in _PDF_PHRASES:
        return True
    return "download" in text and "pdf" in text


def is_junk_pair(key, value) -> bool:
    if not clean_text(key) or not clean_text(value):
        return True
    if is_pdf_junk_value(value):
        return True
    # label repeated as its own value
    return normalize_key(key) == normalize_key(value)


def _collect_text(node: Tag, parts: List[str]) -> None:
    for child in node.children:
        if isinstance(child, Tag):
            if child.name in _SKIPPED_TAGS:
                continue
            block = child.name in _BLOCK_TAGS
            if block:
                parts.append(" ")
            _collect_text(child, parts)
            if block:
                parts.append(" ")
        elif type(child) in _TEXT_TYPES:
            parts.append(str(child))


def node_text(node: Tag) -> str:
    """
    Text of a node, with inline markup joined as the browser renders it.

        <td><span>1,234</span>.50 Birr</td>   → "1,234.50 Birr"
        <p>Abebe<br>Kebede</p>              → "Abebe  Kebede"
    """
    parts: List[str] = []
    _collect_text(node, parts)
    return "".join(parts)


def cell_text(cell: Tag) -> str:
    """Cell text without links, buttons, icons or scripts."""
    clone = copy.copy(cell)
    for child in clone.find_all(_CHROME_TAGS):
        child.decompose()
    text = clean_text(node_text(clone))
    return "" if is_pdf_junk_value(text) else text


def extract_raw_pairs(html: Union[str, BeautifulSoup]) -> RawPairMap:
    soup = make_soup(html)
    raw: RawPairMap = {}

    for row in soup.select("table tr"):
        cells = row.find_all(["th", "td"])
        if len(cells) < 2:
            continue

        texts = [cell_text(c) for c in cells]
        for i in range(0, len(texts) - 1, 2):
            key, value = texts[i], texts[i + 1]
            if not key or not value:
                continue
            if key not in raw:
                raw[key] = value

    logger.debug(f"[extract_raw_pairs] {len(raw)} raw pairs")
    return raw


def filter_junk_pairs(raw: RawPairMap) -> RawPairMap:
    kept = {k: v for k, v in (raw or {}).items() if not is_junk_pair(k, v)}
    dropped = len(raw or {}) - len(kept)
    if dropped:
        logger.debug(f"[filter_junk_pairs] dropped {dropped} junk pair(s)")
    return kept
