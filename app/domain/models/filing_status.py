# app/domain/models/filing_status.py

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class FilingEvent(BaseModel):
    """One return filed, as reported by the filing-status API."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    return_period: str  # MMYYYY
    return_type: str  # GSTR1 / GSTR3B / ...
    status: Optional[str] = None
    date_of_filing: Optional[str] = None
    mode_of_filing: Optional[str] = None


class FilingStatusRow(BaseModel):
    month: str
    gstr1_status: Optional[str] = None
    gstr1_dof: Optional[str] = None
    gstr1_mof: Optional[str] = None
    gstr3b_status: Optional[str] = None
    gstr3b_dof: Optional[str] = None
    gstr3b_mof: Optional[str] = None


class FilingStatusData(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    filling_data: dict[str, Any] = Field(default_factory=dict, alias="fillingData")


class FilingStatusResponse(BaseModel):
    """``{"data": {"fillingData": {"<apiYear>": [FilingEvent, ...]}}}``"""

    model_config = ConfigDict(extra="ignore")

    data: Optional[FilingStatusData] = None
