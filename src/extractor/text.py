"""
Text Normalizer & Name Segmenter
================================
Every string pulled out of the receipt HTML goes through clean_text() before
it is compared or stored.  normalize_key() is for equality checks only and is
never shown to users.
"""

import re
from typing import Optional

from extractor.models import NameParts


_NBSP = re.compile(r'[\u00a0\u202f\u2007]')
_WHITESPACE = re.compile(r'\s+')
# Trailing label colons (ASCII and full-width) plus any whitespace around them
_TRAILING_COLONS = re.compile(r'[\s:\uff1a]+$')


def clean_text(s) -> str:
    """Collapse whitespace, drop trailing colons, trim.  Idempotent."""
    if s is None:
        return ""
    text = _NBSP.sub(" ", str(s))
    text = _WHITESPACE.sub(" ", text)
    text = _TRAILING_COLONS.sub("", text)
    return text.strip()


def normalize_key(s) -> str:
    return _WHITESPACE.sub(" ", clean_text(s).lower()).strip()


def parse_ethiopian_name(full) -> Optional[NameParts]:
    """
    Split a name by the Ethiopian naming convention.

    "Abebe Kebede Tesfaye" → first=Abebe, father=Kebede, grandfather=Tesfaye.
    Tokens past the third are joined into `rest`; missing positions stay None.
    Returns None for an empty name.
    """
    tokens = clean_text(full).split()
    if not tokens:
        return None

    first, father, grandfather = (tokens + [None, None, None])[:3]
    rest = " ".join(tokens[3:]) or None

    return NameParts(
        full=" ".join(tokens),
        first=first,
        father=father,
        grandfather=grandfather,
        rest=rest,
    )
