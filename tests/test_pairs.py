"""
Tests for table pair extraction and junk filtering
"""

import itertools

import pytest
from bs4 import BeautifulSoup

from extractor.pairs import (
    extract_raw_pairs,
    filter_junk_pairs,
    is_junk_pair,
    is_pdf_junk_value,
    node_text,
)
from extractor.text import normalize_key


def test_first_value_wins_on_duplicate_label():
    html = """
    <table>
      <tr><td>Payer Name</td><td>Abebe Kebede</td></tr>
      <tr><td>Payer Name</td><td>Duplicate Value</td></tr>
    </table>
    """
    assert extract_raw_pairs(html) == {"Payer Name": "Abebe Kebede"}


def test_first_value_wins_across_tables():
    html = """
    <table><tr><td>Status</td><td>Completed</td></tr></table>
    <table><tr><td>Status</td><td>Pending</td></tr></table>
    """
    assert extract_raw_pairs(html) == {"Status": "Completed"}


def test_rows_with_single_cell_are_skipped():
    html = "<table><tr><td colspan='2'>Transaction Details</td></tr></table>"
    assert extract_raw_pairs(html) == {}


def test_cells_paired_consecutively_and_odd_cell_dropped():
    html = "<table><tr><th>A</th><td>1</td><th>B</th><td>2</td><td>orphan</td></tr></table>"
    assert extract_raw_pairs(html) == {"A": "1", "B": "2"}


def test_pairs_keep_document_order():
    html = """
    <table>
      <tr><td>Z</td><td>last letter</td></tr>
      <tr><td>A</td><td>first letter</td></tr>
    </table>
    """
    assert list(extract_raw_pairs(html)) == ["Z", "A"]


def test_chrome_elements_removed_from_cells():
    html = """
    <table><tr>
      <td>Status<script>var x = 1;</script></td>
      <td>Completed <a href="#">edit</a><button>Copy</button><svg><title>icon</title></svg></td>
    </tr></table>
    """
    assert extract_raw_pairs(html) == {"Status": "Completed"}


def test_labels_are_cleaned():
    html = "<table><tr><td>  Payer&nbsp;Name : </td><td> Abebe\n Kebede </td></tr></table>"
    assert extract_raw_pairs(html) == {"Payer Name": "Abebe Kebede"}


def test_empty_sides_are_skipped():
    html = """
    <table>
      <tr><td></td><td>value without label</td></tr>
      <tr><td>label without value</td><td>   </td></tr>
    </table>
    """
    assert extract_raw_pairs(html) == {}


def test_pdf_link_cell_reads_as_empty():
    html = "<table><tr><td>Receipt</td><td><span>Download the PDF</span></td></tr></table>"
    assert extract_raw_pairs(html) == {}


def test_no_tables():
    assert extract_raw_pairs("<p>nothing here</p>") == {}
    assert extract_raw_pairs("") == {}


@pytest.mark.parametrize("value", [
    "Download the PDF",
    "download pdf",
    "Click to download receipt PDF",
])
def test_pdf_junk_values(value):
    assert is_pdf_junk_value(value)
    assert is_junk_pair("Receipt", value)


@pytest.mark.parametrize("key, value", [
    ("Payer Name", "Payer Name"),
    ("Payer Name", "payer   name:"),
    ("STATUS", "status"),
    ("የከፋይ ስም", "የከፋይ ስም"),
])
def test_label_equal_to_value_is_junk(key, value):
    assert is_junk_pair(key, value)


@pytest.mark.parametrize("key, value", [("", "x"), ("x", ""), (None, "x"), ("x", None)])
def test_empty_side_is_junk(key, value):
    assert is_junk_pair(key, value)


def test_real_pair_is_not_junk():
    assert not is_junk_pair("Payer Name", "Abebe Kebede")


def test_filter_junk_pairs_keeps_order():
    raw = {
        "Transaction Details": "Transaction Details",
        "Payer Name": "Abebe",
        "Receipt": "Download PDF",
        "Status": "Completed",
    }
    assert list(filter_junk_pairs(raw).items()) == [("Payer Name", "Abebe"), ("Status", "Completed")]


def test_inline_markup_joined_without_extra_space():
    html = "<table><tr><td>Amount</td><td><span>1,234</span>.50 <b>Birr</b></td></tr></table>"
    assert extract_raw_pairs(html) == {"Amount": "1,234.50 Birr"}


def test_line_breaks_separate_words():
    html = "<table><tr><td>Payer<br>Name</td><td>Abebe<br/>Kebede</td></tr></table>"
    assert extract_raw_pairs(html) == {"Payer Name": "Abebe Kebede"}


def test_node_text_skips_comments_and_scripts():
    soup = BeautifulSoup("<div>A<!-- note --><script>x()</script><span>B</span></div>", "html.parser")
    assert node_text(soup.div) == "AB"


LABELS = ["Payer Name", "Transaction Details", "Invoice No.", "የከፋይ ስም/Payer Name", "Status"]
CASINGS = [str, str.upper, str.lower, str.title]
SPACINGS = [
    lambda s: s,
    lambda s: s.replace(" ", "  "),
    lambda s: s.replace(" ", "\u00a0"),
    lambda s: "\t" + s + "\n",
]
SUFFIXES = ["", ":", " :", "：", ": "]


def label_variants(label):
    for case, space, suffix in itertools.product(CASINGS, SPACINGS, SUFFIXES):
        yield space(case(label)) + suffix


def test_label_repeated_in_any_form_is_junk():
    for label in LABELS:
        variants = list(label_variants(label))
        for key, value in itertools.product(variants, repeat=2):
            assert normalize_key(key) == normalize_key(value)
            assert is_junk_pair(key, value), (key, value)


def test_different_labels_never_collapse():
    for a, b in itertools.combinations(LABELS, 2):
        for key, value in itertools.product(label_variants(a), label_variants(b)):
            assert not is_junk_pair(key, value), (key, value)
