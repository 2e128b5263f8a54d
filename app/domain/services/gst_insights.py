# app/domain/services/gst_insights.py
"""
GST insights lookups for a client: registration status, business details
by GSTIN or PAN, return filing status, and purchase-supplier verification.

Every call returns a tagged result. API failures never raise out of here;
they become ``error`` messages the dashboard can show as-is.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import BaseModel, Field

from app.domain.models.filing_status import FilingStatusRow
from app.domain.services.filing_status import api_year, extract_filing_events, normalize_filing_status
from app.domain.services.gstin_pan_validation import is_b2b_gstin, is_valid_pan
from app.infrastructure.external.gst_insights_client import GstInsightsClient, GstInsightsError

logger = logging.getLogger("gst_insights")

CONNECT_ERROR = "Failed to connect to the API worker."


class LookupResult(BaseModel):
    ok: bool
    data: Optional[dict[str, Any]] = None
    error: Optional[str] = None


class FilingStatusResult(BaseModel):
    financial_year: str
    api_year: str
    rows: list[FilingStatusRow] = Field(default_factory=list)
    error: Optional[str] = None


class SupplierVerification(BaseModel):
    verified: bool
    legal_name: Optional[str] = None
    message: str


def _error_message(exc: GstInsightsError, default: str, connect_error: str = CONNECT_ERROR) -> str:
    if exc.status_code == 0:
        return connect_error
    return exc.response.get("message") or default


async def fetch_gst_status(client: GstInsightsClient, gstin: str) -> LookupResult:
    try:
        data = await client.get_gst_status(gstin)
    except GstInsightsError as exc:
        return LookupResult(ok=False, error=_error_message(exc, "Failed to fetch status"))
    return LookupResult(ok=True, data=data)


async def fetch_gst_details(client: GstInsightsClient, search_type: str, value: str) -> LookupResult:
    """Business details by GSTIN (``search_type="gstin"``) or by PAN (``"pan"``)."""
    value = (value or "").strip()
    if not value:
        return LookupResult(ok=False, error="Please enter a value to search.")

    if search_type == "pan" and not is_valid_pan(value):
        return LookupResult(ok=False, error="Please enter a valid 10-character PAN.")

    try:
        if search_type == "pan":
            data = await client.get_details_by_pan(value.upper())
        else:
            data = await client.get_details_by_gstin(value)
    except GstInsightsError as exc:
        return LookupResult(ok=False, error=_error_message(exc, "Failed to fetch details"))
    return LookupResult(ok=True, data=data)


async def fetch_filing_status(
    client: GstInsightsClient,
    gstin: str,
    financial_year: str,
) -> FilingStatusResult:
    """
    Month-wise GSTR-1 / GSTR-3B filing status for one financial year.

    ``financial_year`` is ``"YYYY-YY"``; a malformed value raises
    ``ValidationError`` before any request is made.
    """
    year_key = api_year(financial_year)
    result = FilingStatusResult(financial_year=financial_year, api_year=year_key)

    try:
        response = await client.get_filing_status(gstin, year_key)
    except GstInsightsError as exc:
        result.error = _error_message(exc, "Failed to fetch filing status")
        return result

    result.rows = normalize_filing_status(extract_filing_events(response, year_key))
    logger.info("filing status: gstin=%s year=%s months=%d", gstin, year_key, len(result.rows))
    return result


async def verify_supplier_gstin(client: GstInsightsClient, gstin: str) -> SupplierVerification:
    """Check a purchase supplier's GSTIN and return the registered legal name."""
    if not is_b2b_gstin(gstin):
        return SupplierVerification(verified=False, message="Please enter a valid 15-digit GSTIN.")

    try:
        data = await client.verify_gstin(gstin)
    except GstInsightsError as exc:
        return SupplierVerification(
            verified=False,
            message=_error_message(
                exc,
                "Invalid GSTIN or API error.",
                connect_error="Failed to connect to verification service.",
            ),
        )

    details = data.get("data")
    if data.get("isValid") is True or data.get("success") is True or details:
        details = details if isinstance(details, dict) else {}
        legal_name = details.get("legalName") or details.get("lgnm") or "Name not found"
        return SupplierVerification(verified=True, legal_name=legal_name, message=f"Verified: {legal_name}")

    return SupplierVerification(verified=False, message=data.get("message") or "Invalid GSTIN or API error.")
