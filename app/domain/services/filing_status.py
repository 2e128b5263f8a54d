# app/domain/services/filing_status.py
"""
Return filing status: reshape the API's flat list of filing events into one
row per month with GSTR-1 and GSTR-3B columns.

Rows are keyed by month name only. Callers query one financial year
(April..March) at a time, so a month name cannot repeat within a response.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from app.domain.errors import ValidationError
from app.domain.models.filing_status import FilingEvent, FilingStatusResponse, FilingStatusRow

logger = logging.getLogger("filing_status")

MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

_RETURN_COLUMNS = {
    "GSTR1": "gstr1",
    "GSTR3B": "gstr3b",
}


def month_name(return_period: str) -> str | None:
    """``"042024"`` -> ``"April"``; None when the first two chars are not 01-12."""
    prefix = (return_period or "")[:2]
    if len(prefix) != 2 or not prefix.isdigit():
        return None
    index = int(prefix)
    if not 1 <= index <= 12:
        return None
    return MONTH_NAMES[index - 1]


def normalize_filing_status(raw_events: Any) -> list[FilingStatusRow]:
    """
    Build month rows from raw filing events.

    Missing status means the return was filed. Anything that is not a list
    yields an empty result; malformed events are skipped.
    """
    if not isinstance(raw_events, list):
        return []

    monthly: dict[str, dict[str, Any]] = {}
    for raw in raw_events:
        if not isinstance(raw, dict):
            continue
        try:
            event = FilingEvent.model_validate(raw)
        except PydanticValidationError:
            logger.warning("filing_status: skipping malformed event %r", raw)
            continue

        name = month_name(event.return_period)
        if name is None:
            logger.warning("filing_status: bad returnPeriod %r", event.return_period)
            continue

        row = monthly.setdefault(name, {"month": name})
        column = _RETURN_COLUMNS.get(event.return_type)
        if column is None:
            continue
        row[f"{column}_status"] = event.status or "Filed"
        row[f"{column}_dof"] = event.date_of_filing
        row[f"{column}_mof"] = event.mode_of_filing

    return [FilingStatusRow(**row) for row in monthly.values()]


def extract_filing_events(response: Any, year_key: str) -> Any:
    """Pull ``data.fillingData[year_key]`` out of a filing-status response."""
    if not isinstance(response, dict):
        return []
    try:
        parsed = FilingStatusResponse.model_validate(response)
    except PydanticValidationError:
        logger.warning("filing_status: unexpected response shape")
        return []
    if parsed.data is None:
        return []
    return parsed.data.filling_data.get(year_key, [])


# ---------------------------------------------------------------------------
# Financial years
# ---------------------------------------------------------------------------

def api_year(financial_year: str) -> str:
    """
    ``"2024-25"`` -> ``"2024-2025"``: the first year, a dash, the first two
    digits of the first year, then the two-digit suffix.
    """
    parts = (financial_year or "").strip().split("-")
    if (
        len(parts) != 2
        or len(parts[0]) != 4
        or len(parts[1]) != 2
        or not parts[0].isdigit()
        or not parts[1].isdigit()
    ):
        raise ValidationError(
            f"Invalid financial year: {financial_year!r} (expected YYYY-YY)",
            field="financial_year",
        )
    first, suffix = parts
    return f"{first}-{first[:2]}{suffix}"


def financial_years(today: date | None = None, count: int = 5) -> list[str]:
    """The current financial year (starting in April) and the ones before it."""
    today = today or date.today()
    start = today.year if today.month >= 4 else today.year - 1
    return [f"{year}-{str(year + 1)[2:]}" for year in range(start, start - count, -1)]
