# app/api/v1/routes/gst.py
"""
GST return endpoints: GSTR-1 and GSTR-3B preparation and JSON download,
and GSTR-2B workbook parsing for the ITC step of GSTR-3B.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile

from app.api.v1.deps import CurrentUser, get_current_user, get_ledger_store
from app.api.v1.envelope import ok
from app.api.v1.schemas.gst import Gstr1Request, Gstr3bRequest
from app.core.config import settings
from app.domain.models.gst import Gstr3bSummary
from app.domain.services import ledger_service
from app.domain.services.gst_export import export_document, make_gstr1_json, make_gstr3b_json
from app.domain.services.gstr1_service import (
    Gstr1Payload,
    prepare_gstr1_form,
    prepare_gstr1_payload,
    render_gstr1_text,
)
from app.domain.services.gstr2b_service import parse_gstr2b_workbook, total_claimed
from app.domain.services.gstr3b_service import prepare_gstr3b_summary, render_gstr3b_text
from app.domain.services.ledger_service import LedgerStore

logger = logging.getLogger("api.v1.gst")

router = APIRouter(tags=["GST"])


def _download(form_type: str, document: dict) -> Response:
    filename, body = export_document(form_type, document)
    return Response(
        content=body,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


async def _gstr1_payload(
    store: LedgerStore, owner_id: str, client_id: str, body: Gstr1Request
) -> Gstr1Payload:
    client = await ledger_service.get_client(store, owner_id, client_id)
    invoices = await ledger_service.list_sales_invoices(store, owner_id, client_id)
    return prepare_gstr1_payload(
        invoices, body.year, body.month, client.gstin, body.gross_turnover_last_fy
    )


async def _gstr3b_summary(
    store: LedgerStore, owner_id: str, client_id: str, body: Gstr3bRequest
) -> Gstr3bSummary:
    client = await ledger_service.get_client(store, owner_id, client_id)
    invoices = await ledger_service.list_sales_invoices(store, owner_id, client_id)
    itc_rows = [row.to_row() for row in body.itc_rows]
    return prepare_gstr3b_summary(invoices, itc_rows, body.year, body.month, client.gstin)


# ---------------------------------------------------------------------------
# GSTR-1
# ---------------------------------------------------------------------------

@router.post("/clients/{client_id}/gstr1", response_model=dict)
async def prepare_gstr1(
    client_id: str,
    body: Gstr1Request,
    user: CurrentUser = Depends(get_current_user),
    store: LedgerStore = Depends(get_ledger_store),
):
    """Build the month's GSTR-1 from the client's sales ledger."""
    payload = await _gstr1_payload(store, user.id, client_id, body)
    form = prepare_gstr1_form(payload)
    return ok(data={
        "document": make_gstr1_json(payload),
        "summary": form,
        "text": render_gstr1_text(form),
    })


@router.post("/clients/{client_id}/gstr1/export")
async def export_gstr1(
    client_id: str,
    body: Gstr1Request,
    user: CurrentUser = Depends(get_current_user),
    store: LedgerStore = Depends(get_ledger_store),
):
    payload = await _gstr1_payload(store, user.id, client_id, body)
    return _download("GSTR1", make_gstr1_json(payload))


# ---------------------------------------------------------------------------
# GSTR-2B
# ---------------------------------------------------------------------------

@router.post("/gstr2b/parse", response_model=dict)
async def parse_gstr2b(
    file: UploadFile = File(..., description="GSTR-2B Excel download (.xlsx)"),
    user: CurrentUser = Depends(get_current_user),
):
    """
    Read the B2B sheet of an uploaded GSTR-2B and return ITC per supplier.

    Rows come back all claimed; send them (with any toggles) to the
    GSTR-3B endpoints.
    """
    content = await file.read()
    if len(content) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds {settings.MAX_UPLOAD_BYTES} bytes",
        )

    rows = parse_gstr2b_workbook(content)
    logger.info("GSTR-2B upload: user=%s file=%s suppliers=%d", user.id, file.filename, len(rows))
    return ok(data={
        "suppliers": [row.to_dict() for row in rows],
        "total_claimed": float(total_claimed(rows)),
    })


# ---------------------------------------------------------------------------
# GSTR-3B
# ---------------------------------------------------------------------------

@router.post("/clients/{client_id}/gstr3b", response_model=dict)
async def prepare_gstr3b(
    client_id: str,
    body: Gstr3bRequest,
    user: CurrentUser = Depends(get_current_user),
    store: LedgerStore = Depends(get_ledger_store),
):
    """Build the month's GSTR-3B from sales plus the claimed GSTR-2B credit."""
    summary = await _gstr3b_summary(store, user.id, client_id, body)
    return ok(data={
        "document": make_gstr3b_json(summary),
        "summary": summary.model_dump(mode="json"),
        "text": render_gstr3b_text(summary),
    })


@router.post("/clients/{client_id}/gstr3b/export")
async def export_gstr3b(
    client_id: str,
    body: Gstr3bRequest,
    user: CurrentUser = Depends(get_current_user),
    store: LedgerStore = Depends(get_ledger_store),
):
    summary = await _gstr3b_summary(store, user.id, client_id, body)
    return _download("GSTR3B", make_gstr3b_json(summary))
