# app/api/v1/routes/insights.py
"""
GST insights: registration status, business details, return filing status,
and purchase-supplier GSTIN verification.

Lookups return tagged results inside the envelope; an upstream failure is
reported as ``data.error`` rather than an HTTP error.
"""

from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, Depends, Query

from app.api.v1.deps import CurrentUser, get_current_user, get_insights_client
from app.api.v1.envelope import ok
from app.domain.services.filing_status import financial_years
from app.domain.services.gst_insights import (
    fetch_filing_status,
    fetch_gst_details,
    fetch_gst_status,
    verify_supplier_gstin,
)
from app.infrastructure.external.gst_insights_client import GstInsightsClient

logger = logging.getLogger("api.v1.insights")

router = APIRouter(prefix="/insights", tags=["GST Insights"])


@router.get("/status/{gstin}", response_model=dict)
async def gst_status(
    gstin: str,
    user: CurrentUser = Depends(get_current_user),
    client: GstInsightsClient = Depends(get_insights_client),
):
    result = await fetch_gst_status(client, gstin)
    return ok(data=result.model_dump())


@router.get("/details", response_model=dict)
async def gst_details(
    search_type: Literal["gstin", "pan"] = Query(default="gstin"),
    value: str = Query(default=""),
    user: CurrentUser = Depends(get_current_user),
    client: GstInsightsClient = Depends(get_insights_client),
):
    result = await fetch_gst_details(client, search_type, value)
    return ok(data=result.model_dump())


@router.get("/filing-status/{gstin}", response_model=dict)
async def filing_status(
    gstin: str,
    financial_year: str = Query(..., description="Financial year, e.g. 2024-25"),
    user: CurrentUser = Depends(get_current_user),
    client: GstInsightsClient = Depends(get_insights_client),
):
    """Month-wise GSTR-1 / GSTR-3B filing status for one financial year."""
    result = await fetch_filing_status(client, gstin, financial_year)
    return ok(data=result.model_dump())


@router.get("/financial-years", response_model=dict)
async def list_financial_years(user: CurrentUser = Depends(get_current_user)):
    return ok(data=financial_years())


@router.get("/verify-supplier/{gstin}", response_model=dict)
async def verify_supplier(
    gstin: str,
    user: CurrentUser = Depends(get_current_user),
    client: GstInsightsClient = Depends(get_insights_client),
):
    result = await verify_supplier_gstin(client, gstin)
    return ok(data=result.model_dump())
