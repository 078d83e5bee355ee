"""
Shared fixtures for the receipt verifier tests
"""

import sys
from pathlib import Path

import pytest

# Add src (and the project root, for main.py) to path
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT / "src"))
sys.path.insert(0, str(ROOT))

from browser_session import FetchResult  # noqa: E402

FIXTURES = Path(__file__).parent / "fixtures"

# Keeps short test pages above the 200-character EMPTY_HTML threshold
PADDING = "<p>" + "telebirr transaction information " * 8 + "</p>"


def receipt_page(rows=(), body_text="", padding=True):
    """Build a receipt-like page from (label, value) rows and free body text."""
    cells = "".join(f"<tr><td>{k}</td><td>{v}</td></tr>" for k, v in rows)
    table = f"<table>{cells}</table>" if rows else ""
    return (
        "<html><head><title>Receipt</title></head><body>"
        f"{PADDING if padding else ''}{table}<div>{body_text}</div>"
        "</body></html>"
    )


class FakeFetcher:
    """Stands in for BrowserSession; records every URL it was asked for."""

    def __init__(self, html="", status=200, final_url=None, error=None):
        self.html = html
        self.status = status
        self.final_url = final_url
        self.error = error
        self.calls = []

    async def fetch(self, url, timeout_ms):
        self.calls.append((url, timeout_ms))
        if self.error is not None:
            raise self.error
        return FetchResult(html=self.html, status=self.status, final_url=self.final_url or url)


@pytest.fixture
def sample_html():
    """Captured-style bilingual receipt page"""
    return (FIXTURES / "receipt_sample.html").read_text(encoding="utf-8")


@pytest.fixture
def valid_page():
    return receipt_page(
        rows=[
            ("Invoice No.", "ABC12345XYZ"),
            ("Credited party account no", "2519****5678"),
        ],
        body_text="Settled Amount 500.00 Birr",
    )
