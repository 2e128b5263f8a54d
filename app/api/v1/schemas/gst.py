# app/api/v1/schemas/gst.py
"""Request and response schemas for GST return endpoints."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

from app.domain.services.gstr2b_service import ItcSupplierRow


class PeriodRequest(BaseModel):
    """Filing month to build a return for."""

    year: int = Field(description="Calendar year of the filing month")
    month: int = Field(description="1-12")


class Gstr1Request(PeriodRequest):
    gross_turnover_last_fy: Decimal = Field(default=Decimal("0"), ge=0)


# ---------------------------------------------------------------------------
# GSTR-2B / GSTR-3B
# ---------------------------------------------------------------------------

class ItcSupplierSchema(BaseModel):
    """One supplier's credit from GSTR-2B, as returned by ``/gstr2b/parse``."""

    gstin: str
    name: str = "N/A"
    iamt: Decimal = Decimal("0")
    camt: Decimal = Decimal("0")
    samt: Decimal = Decimal("0")
    is_claimed: bool = True

    def to_row(self) -> ItcSupplierRow:
        return ItcSupplierRow(
            gstin=self.gstin,
            name=self.name,
            iamt=self.iamt,
            camt=self.camt,
            samt=self.samt,
            is_claimed=self.is_claimed,
        )


class Gstr3bRequest(PeriodRequest):
    """
    Build GSTR-3B for the month. ``itc_rows`` is the (possibly toggled)
    supplier list from ``/gstr2b/parse``; omit it for a return with no ITC.
    """

    itc_rows: list[ItcSupplierSchema] = Field(default_factory=list)
