# app/api/v1/schemas/invoices.py
"""Request and response schemas for sales and purchase invoice endpoints."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from app.domain.models.ledger import PurchaseInvoice, SalesInvoice


class SalesInvoiceCreate(BaseModel):
    """Fields the user enters for a sales invoice."""

    invoice_number: str = Field(min_length=1, max_length=50)
    customer_name: str = Field(default="", max_length=255)
    customer_gstin: str | None = Field(default=None, max_length=20, description="15 characters for B2B")
    place_of_supply: str = Field(min_length=2, max_length=2, description="2-digit state code")
    invoice_date: date
    invoice_value: Decimal = Field(ge=0, description="Gross value including tax")
    taxable_value: Decimal = Field(ge=0)
    gst_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100)

    def to_domain(self) -> SalesInvoice:
        return SalesInvoice(**self.model_dump())


class SalesInvoiceDetail(BaseModel):
    id: str | None
    invoice_number: str
    customer_name: str
    customer_gstin: str | None
    place_of_supply: str
    invoice_date: date | str | None
    invoice_value: Decimal
    taxable_value: Decimal
    gst_rate: Decimal
    created_at: datetime | None

    @classmethod
    def from_domain(cls, inv: SalesInvoice) -> "SalesInvoiceDetail":
        return cls(**inv.model_dump())


class PurchaseInvoiceCreate(BaseModel):
    invoice_number: str = Field(min_length=1, max_length=50)
    supplier_name: str = Field(default="", max_length=255)
    supplier_gstin: str | None = Field(default=None, max_length=20)
    invoice_date: date
    taxable_value: Decimal = Field(ge=0)
    itc_claimed: Decimal = Field(default=Decimal("0"), ge=0)

    def to_domain(self) -> PurchaseInvoice:
        return PurchaseInvoice(**self.model_dump())


class PurchaseInvoiceDetail(BaseModel):
    id: str | None
    invoice_number: str
    supplier_name: str
    supplier_gstin: str | None
    invoice_date: date | str | None
    taxable_value: Decimal
    itc_claimed: Decimal
    created_at: datetime | None

    @classmethod
    def from_domain(cls, inv: PurchaseInvoice) -> "PurchaseInvoiceDetail":
        return cls(**inv.model_dump())
