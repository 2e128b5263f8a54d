# app/api/v1/routes/invoices.py
"""
Sales and purchase invoice ledgers of one client.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from app.api.v1.deps import CurrentUser, get_current_user, get_ledger_store
from app.api.v1.envelope import ok
from app.api.v1.schemas.invoices import (
    PurchaseInvoiceCreate,
    PurchaseInvoiceDetail,
    SalesInvoiceCreate,
    SalesInvoiceDetail,
)
from app.domain.services import ledger_service
from app.domain.services.ledger_service import LedgerStore

logger = logging.getLogger("api.v1.invoices")

router = APIRouter(prefix="/clients/{client_id}", tags=["Invoices"])


# ---------------------------------------------------------------------------
# Sales
# ---------------------------------------------------------------------------

@router.get("/sales-invoices", response_model=dict)
async def list_sales_invoices(
    client_id: str,
    user: CurrentUser = Depends(get_current_user),
    store: LedgerStore = Depends(get_ledger_store),
):
    invoices = await ledger_service.list_sales_invoices(store, user.id, client_id)
    return ok(data=[SalesInvoiceDetail.from_domain(inv).model_dump() for inv in invoices])


@router.post("/sales-invoices", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_sales_invoice(
    client_id: str,
    body: SalesInvoiceCreate,
    user: CurrentUser = Depends(get_current_user),
    store: LedgerStore = Depends(get_ledger_store),
):
    saved = await ledger_service.add_sales_invoice(store, user.id, client_id, body.to_domain())
    return ok(data=SalesInvoiceDetail.from_domain(saved).model_dump(), message="Invoice added")


@router.delete("/sales-invoices/{invoice_id}", response_model=dict)
async def delete_sales_invoice(
    client_id: str,
    invoice_id: str,
    user: CurrentUser = Depends(get_current_user),
    store: LedgerStore = Depends(get_ledger_store),
):
    await ledger_service.delete_sales_invoice(store, user.id, client_id, invoice_id)
    return ok(message="Invoice deleted")


# ---------------------------------------------------------------------------
# Purchases
# ---------------------------------------------------------------------------

@router.get("/purchase-invoices", response_model=dict)
async def list_purchase_invoices(
    client_id: str,
    user: CurrentUser = Depends(get_current_user),
    store: LedgerStore = Depends(get_ledger_store),
):
    invoices = await ledger_service.list_purchase_invoices(store, user.id, client_id)
    return ok(data=[PurchaseInvoiceDetail.from_domain(inv).model_dump() for inv in invoices])


@router.post("/purchase-invoices", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_purchase_invoice(
    client_id: str,
    body: PurchaseInvoiceCreate,
    user: CurrentUser = Depends(get_current_user),
    store: LedgerStore = Depends(get_ledger_store),
):
    saved = await ledger_service.add_purchase_invoice(store, user.id, client_id, body.to_domain())
    return ok(data=PurchaseInvoiceDetail.from_domain(saved).model_dump(), message="Purchase added")


@router.delete("/purchase-invoices/{invoice_id}", response_model=dict)
async def delete_purchase_invoice(
    client_id: str,
    invoice_id: str,
    user: CurrentUser = Depends(get_current_user),
    store: LedgerStore = Depends(get_ledger_store),
):
    await ledger_service.delete_purchase_invoice(store, user.id, client_id, invoice_id)
    return ok(message="Purchase deleted")
