"""Shared test fixtures for the GST filing desk test suite."""

import asyncio
import io
from decimal import Decimal

import pytest
from openpyxl import Workbook

from app.domain.models.ledger import PurchaseInvoice, SalesInvoice
from app.infrastructure.db.repositories import MemoryLedgerRepository

# Maharashtra filer
FILER_GSTIN = "27AAACB1234C1Z5"
DELHI_CUSTOMER = "07AAACA1111A1Z1"
PUNE_CUSTOMER = "27AAACZ2222B1Z2"


@pytest.fixture(scope="session")
def event_loop():
    """Use a single event loop for the entire test session."""
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture
def filer_gstin() -> str:
    return FILER_GSTIN


@pytest.fixture
def make_sales_invoice():
    """Factory for a B2B Delhi sale of 1000 + 18% dated 10-04-2024."""

    def _make(**overrides) -> SalesInvoice:
        data = {
            "invoice_number": "INV-001",
            "customer_name": "Acme Traders",
            "customer_gstin": DELHI_CUSTOMER,
            "place_of_supply": "07",
            "invoice_date": "2024-04-10",
            "invoice_value": Decimal("1180"),
            "taxable_value": Decimal("1000"),
            "gst_rate": Decimal("18"),
        }
        data.update(overrides)
        return SalesInvoice(**data)

    return _make


@pytest.fixture
def make_purchase_invoice():
    def _make(**overrides) -> PurchaseInvoice:
        data = {
            "invoice_number": "P-001",
            "supplier_name": "Zen Supplies",
            "supplier_gstin": PUNE_CUSTOMER,
            "invoice_date": "2024-04-03",
            "taxable_value": Decimal("500"),
            "itc_claimed": Decimal("90"),
        }
        data.update(overrides)
        return PurchaseInvoice(**data)

    return _make


@pytest.fixture
def april_sales(make_sales_invoice) -> list[SalesInvoice]:
    """
    Three April 2024 sales plus one from March:
    two B2B to the same Delhi GSTIN (one billed intra-state), one B2C.
    """
    return [
        make_sales_invoice(invoice_number="INV-001", invoice_date="2024-04-10"),
        make_sales_invoice(invoice_number="INV-002", invoice_date="2024-04-02", place_of_supply="27"),
        make_sales_invoice(
            invoice_number="INV-003",
            invoice_date="05-04-2024",
            customer_name="Walk-in",
            customer_gstin=None,
            place_of_supply="27",
            invoice_value=Decimal("590"),
            taxable_value=Decimal("500"),
        ),
        make_sales_invoice(invoice_number="INV-000", invoice_date="2024-03-28"),
    ]


@pytest.fixture
def memory_store() -> MemoryLedgerRepository:
    return MemoryLedgerRepository()


# ---------------------------------------------------------------------------
# GSTR-2B workbooks
# ---------------------------------------------------------------------------

def build_workbook(sheets: dict) -> bytes:
    """Write ``{sheet title: [row, ...]}`` to an in-memory .xlsx."""
    wb = Workbook()
    wb.remove(wb.active)
    for title, rows in sheets.items():
        ws = wb.create_sheet(title)
        for row in rows:
            ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


@pytest.fixture
def make_workbook():
    return build_workbook


@pytest.fixture
def gstr2b_bytes() -> bytes:
    """Portal-style B2B sheet: single header row, two suppliers, a totals row."""
    return build_workbook({
        "Read me": [["Goods and Services Tax - GSTR-2B"]],
        "B2B": [
            ["Goods and Services Tax - GSTR-2B"],
            [None],
            [
                "GSTIN of supplier",
                "Trade/Legal name",
                "Invoice number",
                "Integrated Tax(₹)",
                "Central Tax(₹)",
                "State/UT Tax(₹)",
            ],
            [DELHI_CUSTOMER, "Acme Traders", "A-1", 180, 0, 0],
            [DELHI_CUSTOMER, None, "A-2", 90.5, 0, 0],
            [PUNE_CUSTOMER, "Zen Supplies", "Z-1", 0, 45, 45],
            ["Total", None, None, 270.5, 45, 45],
        ],
    })
