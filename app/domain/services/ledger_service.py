# app/domain/services/ledger_service.py
"""
Client and invoice bookkeeping over an injected ledger store.

The authenticated owner and the store are always passed in explicitly;
nothing here reads ambient state. Records are validated before they reach
the store, so the filing builders only ever see well-formed entries.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable, Protocol

from app.domain.errors import NotFoundError, ValidationError
from app.domain.models.ledger import Client, PurchaseInvoice, SalesInvoice
from app.domain.services.gst_period import parse_invoice_date
from app.domain.services.gstin_pan_validation import ensure_filer_gstin

logger = logging.getLogger("ledger_service")

Unsubscribe = Callable[[], None]


class LedgerStore(Protocol):
    """Pull-based access to the document store. Lists are newest first."""

    async def list_clients(self, owner_id: str) -> list[Client]: ...

    async def get_client(self, owner_id: str, client_id: str) -> Client | None: ...

    async def add_client(self, owner_id: str, name: str, gstin: str) -> Client: ...

    async def delete_client(self, owner_id: str, client_id: str) -> bool: ...

    async def list_sales_invoices(self, owner_id: str, client_id: str) -> list[SalesInvoice]: ...

    async def add_sales_invoice(self, owner_id: str, client_id: str, invoice: SalesInvoice) -> SalesInvoice: ...

    async def delete_sales_invoice(self, owner_id: str, client_id: str, invoice_id: str) -> bool: ...

    async def list_purchase_invoices(self, owner_id: str, client_id: str) -> list[PurchaseInvoice]: ...

    async def add_purchase_invoice(
        self, owner_id: str, client_id: str, invoice: PurchaseInvoice
    ) -> PurchaseInvoice: ...

    async def delete_purchase_invoice(self, owner_id: str, client_id: str, invoice_id: str) -> bool: ...

    def watch_sales_invoices(
        self, owner_id: str, client_id: str, on_change: Callable[[], None]
    ) -> Unsubscribe: ...


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------

async def list_clients(store: LedgerStore, owner_id: str) -> list[Client]:
    return await store.list_clients(owner_id)


async def get_client(store: LedgerStore, owner_id: str, client_id: str) -> Client:
    client = await store.get_client(owner_id, client_id)
    if client is None:
        raise NotFoundError("Client", client_id)
    return client


async def add_client(store: LedgerStore, owner_id: str, name: str, gstin: str) -> Client:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Client name is required", field="name")
    gstin = ensure_filer_gstin(gstin)

    client = await store.add_client(owner_id, name, gstin)
    logger.info("client added: owner=%s client=%s gstin=%s", owner_id, client.id, gstin)
    return client


async def delete_client(store: LedgerStore, owner_id: str, client_id: str) -> None:
    """
    Delete the client record only. Its sales and purchase invoices are left
    in the store; removing them needs a separate cleanup job.
    """
    if not await store.delete_client(owner_id, client_id):
        raise NotFoundError("Client", client_id)
    logger.warning(
        "client deleted without its invoices: owner=%s client=%s", owner_id, client_id
    )


# ---------------------------------------------------------------------------
# Sales invoices
# ---------------------------------------------------------------------------

def _require_date(raw) -> None:
    if parse_invoice_date(raw) is None:
        raise ValidationError(f"Invalid invoice date: {raw!r}", field="invoice_date")


def _clean_gstin(raw: str | None) -> str | None:
    raw = (raw or "").strip().upper()
    return raw or None


def validate_sales_invoice(invoice: SalesInvoice) -> SalesInvoice:
    if not invoice.invoice_number.strip():
        raise ValidationError("Invoice number is required", field="invoice_number")
    _require_date(invoice.invoice_date)

    pos = (invoice.place_of_supply or "").strip()
    if len(pos) != 2 or not pos.isdigit():
        raise ValidationError(
            f"Place of supply must be a 2-digit state code, got {invoice.place_of_supply!r}",
            field="place_of_supply",
        )
    if invoice.taxable_value < Decimal("0"):
        raise ValidationError("Taxable value cannot be negative", field="taxable_value")
    if invoice.invoice_value < invoice.taxable_value:
        raise ValidationError(
            "Invoice value must be greater than or equal to taxable value",
            field="invoice_value",
        )

    return invoice.model_copy(update={
        "invoice_number": invoice.invoice_number.strip(),
        "customer_name": invoice.customer_name.strip(),
        "customer_gstin": _clean_gstin(invoice.customer_gstin),
        "place_of_supply": pos,
    })


async def list_sales_invoices(store: LedgerStore, owner_id: str, client_id: str) -> list[SalesInvoice]:
    await get_client(store, owner_id, client_id)
    return await store.list_sales_invoices(owner_id, client_id)


async def add_sales_invoice(
    store: LedgerStore, owner_id: str, client_id: str, invoice: SalesInvoice
) -> SalesInvoice:
    await get_client(store, owner_id, client_id)
    saved = await store.add_sales_invoice(owner_id, client_id, validate_sales_invoice(invoice))
    logger.info("sales invoice added: client=%s invoice=%s", client_id, saved.invoice_number)
    return saved


async def delete_sales_invoice(store: LedgerStore, owner_id: str, client_id: str, invoice_id: str) -> None:
    if not await store.delete_sales_invoice(owner_id, client_id, invoice_id):
        raise NotFoundError("Sales invoice", invoice_id)


def watch_sales_invoices(
    store: LedgerStore, owner_id: str, client_id: str, on_change: Callable[[], None]
) -> Unsubscribe:
    """Call ``on_change`` after every write to the client's sales invoices."""
    return store.watch_sales_invoices(owner_id, client_id, on_change)


# ---------------------------------------------------------------------------
# Purchase invoices
# ---------------------------------------------------------------------------

def validate_purchase_invoice(invoice: PurchaseInvoice) -> PurchaseInvoice:
    if not invoice.invoice_number.strip():
        raise ValidationError("Invoice number is required", field="invoice_number")
    _require_date(invoice.invoice_date)
    if invoice.taxable_value < Decimal("0"):
        raise ValidationError("Taxable value cannot be negative", field="taxable_value")
    if invoice.itc_claimed < Decimal("0"):
        raise ValidationError("ITC claimed cannot be negative", field="itc_claimed")

    return invoice.model_copy(update={
        "invoice_number": invoice.invoice_number.strip(),
        "supplier_name": invoice.supplier_name.strip(),
        "supplier_gstin": _clean_gstin(invoice.supplier_gstin),
    })


async def list_purchase_invoices(store: LedgerStore, owner_id: str, client_id: str) -> list[PurchaseInvoice]:
    await get_client(store, owner_id, client_id)
    return await store.list_purchase_invoices(owner_id, client_id)


async def add_purchase_invoice(
    store: LedgerStore, owner_id: str, client_id: str, invoice: PurchaseInvoice
) -> PurchaseInvoice:
    await get_client(store, owner_id, client_id)
    saved = await store.add_purchase_invoice(owner_id, client_id, validate_purchase_invoice(invoice))
    logger.info("purchase invoice added: client=%s invoice=%s", client_id, saved.invoice_number)
    return saved


async def delete_purchase_invoice(store: LedgerStore, owner_id: str, client_id: str, invoice_id: str) -> None:
    if not await store.delete_purchase_invoice(owner_id, client_id, invoice_id):
        raise NotFoundError("Purchase invoice", invoice_id)
