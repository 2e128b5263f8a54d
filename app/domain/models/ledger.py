# app/domain/models/ledger.py
"""
Ledger entities as read from / written to the document store.

Field names are snake_case; every field also accepts the store's camelCase
name (``invoiceNumber``, ``customerGstin`` ...) so raw records validate as-is.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class LedgerModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Client(LedgerModel):
    id: str
    owner_id: str
    name: str
    gstin: str
    created_at: Optional[datetime] = None


class SalesInvoice(LedgerModel):
    id: Optional[str] = None
    invoice_number: str
    customer_name: str = ""
    customer_gstin: Optional[str] = None
    place_of_supply: str = ""
    # raw as stored; parsed lazily by the period filter
    invoice_date: Union[date, str, None] = None
    invoice_value: Decimal = Field(default=Decimal("0"))
    taxable_value: Decimal = Field(default=Decimal("0"))
    gst_rate: Decimal = Field(default=Decimal("0"))
    created_at: Optional[datetime] = None


class PurchaseInvoice(LedgerModel):
    id: Optional[str] = None
    invoice_number: str
    supplier_name: str = ""
    supplier_gstin: Optional[str] = None
    invoice_date: Union[date, str, None] = None
    taxable_value: Decimal = Field(default=Decimal("0"))
    itc_claimed: Decimal = Field(default=Decimal("0"))
    created_at: Optional[datetime] = None
