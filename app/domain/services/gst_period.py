# app/domain/services/gst_period.py
"""
Filing period helpers: ``MMYYYY`` strings, portal dates, and selecting the
invoices that belong to one calendar month.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, TypeVar

from app.domain.errors import InvalidPeriodError

T = TypeVar("T")

_DATE_FORMATS = ("%Y-%m-%d", "%d-%m-%Y", "%d/%m/%Y")


def parse_invoice_date(raw: Any) -> date | None:
    """Parse an invoice date; returns None instead of raising."""
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return raw.date()
    if isinstance(raw, date):
        return raw
    if not isinstance(raw, str):
        return None

    text = raw.strip()
    if not text:
        return None
    # ISO timestamps ("2024-04-05T10:00:00Z") keep only the date part
    if len(text) > 10 and text[4:5] == "-" and text[10:11] in ("T", " "):
        text = text[:10]

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def validate_period(year, month) -> None:
    if not isinstance(year, int) or isinstance(year, bool) or not 1 <= year <= 9999:
        raise InvalidPeriodError(year, month)
    if not isinstance(month, int) or isinstance(month, bool) or not 1 <= month <= 12:
        raise InvalidPeriodError(year, month)


def filing_period(year: int, month: int) -> str:
    """Filing period MMYYYY (e.g. 042024)."""
    return f"{month:02d}{year}"


def portal_date(d: date) -> str:
    """DD-MM-YYYY, the date format used inside portal JSON."""
    return d.strftime("%d-%m-%Y")


def in_period(invoice, year: int, month: int) -> bool:
    d = parse_invoice_date(getattr(invoice, "invoice_date", None))
    return d is not None and d.year == year and d.month == month


def filter_for_period(invoices: Iterable[T], year: int, month: int) -> list[T]:
    """
    Keep invoices dated within (year, month), ordered by invoice date.

    Invoices with missing or unparseable dates are dropped. The sort is
    stable, so same-day invoices keep their input order.
    """
    selected = [inv for inv in invoices if in_period(inv, year, month)]
    selected.sort(key=lambda inv: parse_invoice_date(getattr(inv, "invoice_date", None)))
    return selected
