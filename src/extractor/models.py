"""
Receipt data models
Using Pydantic so the API can serialize them directly (camelCase aliases)

ReceiptDraft      - what the resolver produced; every field optional
CanonicalReceipt  - an accepted record; invoice_no, settled_amount and
                    credited_party_account_no are required
"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Ordered label -> value pairs scraped from the receipt tables
RawPairMap = Dict[str, str]


class NameParts(BaseModel):
    """A personal name split into Ethiopian positional parts."""
    full: Optional[str] = None
    first: Optional[str] = None
    father: Optional[str] = None
    grandfather: Optional[str] = None
    rest: Optional[str] = None


class _ReceiptFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    payer_name: Optional[str]                  = Field(None, alias="payerName")
    payer_name_parts: Optional[NameParts]      = Field(None, alias="payerNameParts")
    payer_telebirr_no: Optional[str]           = Field(None, alias="payerTelebirrNo")
    credited_party_name: Optional[str]         = Field(None, alias="creditedPartyName")
    credited_party_name_parts: Optional[NameParts] = Field(None, alias="creditedPartyNameParts")
    transaction_status: Optional[str]          = Field(None, alias="transactionStatus")
    payment_date: Optional[str]                = Field(
        None, alias="paymentDate", description="DD[-/]MM[-/]YYYY HH:MM:SS as shown on the page"
    )
    raw_data: RawPairMap                       = Field(default_factory=dict, alias="rawData")
    source_url: Optional[str]                  = Field(None, alias="sourceUrl")

    @field_validator(
        "payer_name", "payer_telebirr_no", "credited_party_name",
        "transaction_status", "payment_date", "source_url",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ReceiptDraft(_ReceiptFields):
    credited_party_account_no: Optional[str] = Field(None, alias="creditedPartyAccountNo")
    invoice_no: Optional[str]                = Field(None, alias="invoiceNo")
    settled_amount: Optional[str]            = Field(None, alias="settledAmount")

    @field_validator("credited_party_account_no", "invoice_no", "settled_amount", mode="before")
    @classmethod
    def _required_blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class CanonicalReceipt(_ReceiptFields):
    """The validated record returned to callers."""
    credited_party_account_no: str = Field(..., min_length=1, alias="creditedPartyAccountNo")
    invoice_no: str                = Field(..., min_length=1, alias="invoiceNo")
    settled_amount: str            = Field(
        ..., min_length=1, alias="settledAmount", description="Numeric string, currency suffix removed"
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "payerName": "Abebe Kebede Tesfaye",
                "payerNameParts": {
                    "full": "Abebe Kebede Tesfaye",
                    "first": "Abebe",
                    "father": "Kebede",
                    "grandfather": "Tesfaye",
                    "rest": None,
                },
                "payerTelebirrNo": "2519****1234",
                "creditedPartyName": "Sara Alemu",
                "creditedPartyAccountNo": "2519****5678",
                "transactionStatus": "Completed",
                "invoiceNo": "CGL1ABCDEF",
                "paymentDate": "12-03-2025 14:22:05",
                "settledAmount": "1,234.50",
                "rawData": {"የከፋይ ስም/Payer Name": "Abebe Kebede Tesfaye"},
                "sourceUrl": "https://transactioninfo.ethiotelecom.et/receipt/CGL1ABCDEF",
            }
        },
    )
