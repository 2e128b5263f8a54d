# app/domain/errors.py
"""
Domain error taxonomy.

ValidationError      -> bad caller input, raised before any transformation runs
NotFoundError        -> unknown client / invoice for the authenticated owner
SourceFormatError    -> uploaded workbook is not in the expected shape
ExternalServiceError -> the GST insights API failed
"""

from __future__ import annotations


class ValidationError(Exception):
    """Raised when caller input is malformed (GSTIN, period, required field)."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class InvalidGSTINError(ValidationError):
    """Raised when a GSTIN cannot be used to derive a home state code."""

    def __init__(self, gstin: str | None, field: str = "gstin"):
        super().__init__(f"Invalid GSTIN: {gstin!r} (expected 15 characters)", field=field)
        self.gstin = gstin


class InvalidPeriodError(ValidationError):
    def __init__(self, year, month):
        super().__init__(f"Invalid filing period: year={year!r}, month={month!r}", field="period")
        self.year = year
        self.month = month


class NotFoundError(Exception):
    def __init__(self, kind: str, key: str):
        super().__init__(f"{kind} not found: {key}")
        self.kind = kind
        self.key = key


class SourceFormatError(Exception):
    """Raised when an uploaded workbook is missing an expected sheet, header or column."""


class WorkbookReadError(SourceFormatError):
    pass


class SheetNotFoundError(SourceFormatError):
    pass


class HeaderNotFoundError(SourceFormatError):
    pass


class ExternalServiceError(Exception):
    """Raised when a third-party API call fails."""

    def __init__(self, message: str, status_code: int = 0, response: dict | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response or {}
