"""
Tests for the identifier & URL safety gate
"""

import itertools

import pytest

from receipt_errors import ErrorCode, ReceiptError
from url_gate import (
    ALLOWED_HOSTS,
    assert_allowed_url,
    build_receipt_url,
    extract_transaction_id_from_url,
    validate_transaction_id,
)


@pytest.mark.parametrize("tx", ["ABCDEFGHIJ", "abc123XYZ0", "0123456789", "CGL1ABCDEF"])
def test_valid_transaction_ids(tx):
    assert validate_transaction_id(tx) is None


@pytest.mark.parametrize("tx", [
    "",
    "ABCDEFGHI",
    "ABCDEFGHIJK",
    "ABCDE-GHIJ",
    "ABCDE GHIJ",
    "ABCDEFGHIJ\n",
    "ÀBCDEFGHIJ",
    "١٢٣٤٥٦٧٨٩٠",
    None,
    1234567890,
])
def test_invalid_transaction_ids(tx):
    with pytest.raises(ReceiptError) as exc:
        validate_transaction_id(tx)
    assert exc.value.code == ErrorCode.TX_FORMAT


def test_build_receipt_url_default_template():
    assert build_receipt_url("CGL1ABCDEF") == "https://transactioninfo.ethiotelecom.et/receipt/CGL1ABCDEF"


def test_build_receipt_url_encodes_id():
    url = build_receipt_url("a/b?c", "https://transactioninfo.ethiotelecom.et/r/{tx}")
    assert url == "https://transactioninfo.ethiotelecom.et/r/a%2Fb%3Fc"


@pytest.mark.parametrize("url", [
    "https://transactioninfo.ethiotelecom.et/receipt/CGL1ABCDEF",
    "http://transactioninfo.ethiotelecom.et/receipt/CGL1ABCDEF",
    "https://transactioninfo.ethiotelecom.et:443/receipt?tx=CGL1ABCDEF",
])
def test_allowed_urls(url):
    assert assert_allowed_url(url) is None


@pytest.mark.parametrize("url", [
    "ftp://transactioninfo.ethiotelecom.et/receipt/CGL1ABCDEF",
    "file:///etc/passwd",
    "javascript:alert(1)",
    "gopher://transactioninfo.ethiotelecom.et/",
])
def test_rejects_other_protocols(url):
    with pytest.raises(ReceiptError) as exc:
        assert_allowed_url(url)
    assert exc.value.code == ErrorCode.INVALID_PROTOCOL


@pytest.mark.parametrize("url", [
    "https://evil.example.com/receipt/CGL1ABCDEF",
    "https://sub.transactioninfo.ethiotelecom.et/receipt/CGL1ABCDEF",
    "https://transactioninfo.ethiotelecom.et.evil.com/receipt/CGL1ABCDEF",
    "https://transactioninfo.ethiotelecom.et@evil.com/receipt/CGL1ABCDEF",
    "http://127.0.0.1/receipt/CGL1ABCDEF",
    "http://169.254.169.254/latest/meta-data",
])
def test_rejects_hosts_outside_allow_list(url):
    with pytest.raises(ReceiptError) as exc:
        assert_allowed_url(url)
    assert exc.value.code == ErrorCode.HOST_NOT_ALLOWED
    assert "not in the allowed list" in exc.value.details


@pytest.mark.parametrize("url", [
    "",
    "not a url",
    "transactioninfo.ethiotelecom.et/receipt/CGL1ABCDEF",
    "https://",
    "http:///receipt/CGL1ABCDEF",
    "https://[::1",
    "https://transactioninfo.ethiotelecom.et:notaport/",
    "https://transactioninfo.ethiotelecom.et/a\nb",
    "https://evil.example.com\\@transactioninfo.ethiotelecom.et/receipt/CGL1ABCDEF",
    "https://evil.example.com\\.transactioninfo.ethiotelecom.et/receipt/CGL1ABCDEF",
    "https://transactioninfo.ethiotelecom.et\\receipt\\CGL1ABCDEF",
    None,
])
def test_malformed_urls(url):
    with pytest.raises(ReceiptError) as exc:
        assert_allowed_url(url)
    assert exc.value.code == ErrorCode.INVALID_URL


def test_allow_list_is_exact():
    assert ALLOWED_HOSTS == frozenset({"transactioninfo.ethiotelecom.et"})


@pytest.mark.parametrize("url, expected", [
    ("https://transactioninfo.ethiotelecom.et/receipt/CGL1ABCDEF", "CGL1ABCDEF"),
    ("https://transactioninfo.ethiotelecom.et/receipt/CGL1ABCDEF/extra", "CGL1ABCDEF"),
    ("https://transactioninfo.ethiotelecom.et/view?tx=CGL1ABCDEF", "CGL1ABCDEF"),
    ("https://transactioninfo.ethiotelecom.et/view?id=CGL1ABCDEF", "CGL1ABCDEF"),
    ("https://transactioninfo.ethiotelecom.et/view?tx=AAA&id=BBB", "AAA"),
    ("https://transactioninfo.ethiotelecom.et/some/path/CGL1ABCDEF", "CGL1ABCDEF"),
])
def test_extract_transaction_id(url, expected):
    assert extract_transaction_id_from_url(url) == expected


@pytest.mark.parametrize("url", [
    "https://transactioninfo.ethiotelecom.et/",
    "https://transactioninfo.ethiotelecom.et",
])
def test_extract_transaction_id_empty_path(url):
    assert extract_transaction_id_from_url(url) is None


ALNUM = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
NON_ALNUM = ["-", "_", " ", "\t", "\n", ".", "/", "%", "é", "٣", "፩", "Ａ", "\x00"]


def test_only_length_ten_is_accepted():
    base = "CGL1ABCDEF12345"
    for n in range(len(base) + 1):
        tx = base[:n]
        if n == 10:
            assert validate_transaction_id(tx) is None
        else:
            with pytest.raises(ReceiptError) as exc:
                validate_transaction_id(tx)
            assert exc.value.code == ErrorCode.TX_FORMAT, tx


def test_every_ascii_alnum_accepted_at_every_position():
    base = "CGL1ABCDEF"
    for i, ch in itertools.product(range(10), ALNUM):
        assert validate_transaction_id(base[:i] + ch + base[i + 1:]) is None


def test_any_other_char_rejected_at_every_position():
    base = "CGL1ABCDEF"
    for i, ch in itertools.product(range(10), NON_ALNUM):
        tx = base[:i] + ch + base[i + 1:]
        with pytest.raises(ReceiptError) as exc:
            validate_transaction_id(tx)
        assert exc.value.code == ErrorCode.TX_FORMAT, repr(tx)
