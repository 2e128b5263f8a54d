# app/domain/services/gstr2b_service.py
"""
GSTR-2B ITC reconciliation.

Reads the B2B sheet of a GSTR-2B Excel download, totals the input tax
credit per supplier GSTIN, and lets the filer exclude individual suppliers
before the claimed total flows into GSTR-3B.

Header detection is fuzzy (substring matches on lower-cased headings)
because the portal template wording changes between releases.
A stricter ``ColumnResolver`` can be passed in for validated sources.
"""

from __future__ import annotations

import io
import logging
import zipfile
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Iterable, Optional, Protocol, Sequence

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from app.domain.errors import HeaderNotFoundError, SheetNotFoundError, WorkbookReadError
from app.domain.services.gstin_pan_validation import is_b2b_gstin

logger = logging.getLogger("gstr2b_service")

Row = Sequence[Any]


# ---------------------------------------------------------------------------
# Result dataclasses
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ItcSupplierRow:
    """Credit available from one supplier in the uploaded GSTR-2B."""
    gstin: str
    name: str
    iamt: Decimal = Decimal("0")
    camt: Decimal = Decimal("0")
    samt: Decimal = Decimal("0")
    is_claimed: bool = True

    @property
    def total_itc(self) -> Decimal:
        return self.iamt + self.camt + self.samt

    def to_dict(self) -> dict:
        return {
            "gstin": self.gstin,
            "name": self.name,
            "iamt": float(self.iamt),
            "camt": float(self.camt),
            "samt": float(self.samt),
            "total_itc": float(self.total_itc),
            "is_claimed": self.is_claimed,
        }


@dataclass(frozen=True)
class ResolvedColumns:
    """Zero-based positions located in the B2B sheet. None = not found."""
    header_row: int
    gstin: int
    name: Optional[int] = None
    igst: Optional[int] = None
    cgst: Optional[int] = None
    sgst: Optional[int] = None


class ColumnResolver(Protocol):
    def resolve(self, rows: Sequence[Row]) -> Optional[ResolvedColumns]:
        """Locate the header row and the columns of interest, or None."""
        ...


# ---------------------------------------------------------------------------
# Column resolution
# ---------------------------------------------------------------------------

def _lower(cell: Any) -> Optional[str]:
    return cell.lower() if isinstance(cell, str) else None


def _find(row: Row, predicate: Callable[[str], bool]) -> Optional[int]:
    for idx, cell in enumerate(row):
        text = _lower(cell)
        if text is not None and predicate(text):
            return idx
    return None


def _is_gstin_heading(text: str) -> bool:
    return "gstin" in text and "supplier" in text


def _is_name_heading(text: str) -> bool:
    return "trade" in text or "name" in text


def _is_igst_heading(text: str) -> bool:
    return "integrated" in text or "igst" in text


def _is_cgst_heading(text: str) -> bool:
    return "central" in text or "cgst" in text


def _is_sgst_heading(text: str) -> bool:
    return "state/ut" in text or "sgst" in text


class FuzzyColumnResolver:
    """
    First row with a cell mentioning both "gstin" and "supplier" is the
    header. Tax columns missing from it are looked up in the row right
    below, where the portal puts the Integrated/Central/State tax
    sub-headings under a merged "Tax Amount" cell.
    """

    def resolve(self, rows: Sequence[Row]) -> Optional[ResolvedColumns]:
        for i, row in enumerate(rows):
            gstin_col = _find(row, _is_gstin_heading)
            if gstin_col is None:
                continue

            sub_header: Row = rows[i + 1] if i + 1 < len(rows) else ()
            if is_b2b_gstin(_cell(sub_header, gstin_col)):
                # first data row, not a sub-header
                sub_header = ()
            cols = {}
            for key, predicate in (
                ("igst", _is_igst_heading),
                ("cgst", _is_cgst_heading),
                ("sgst", _is_sgst_heading),
            ):
                found = _find(row, predicate)
                if found is None:
                    found = _find(sub_header, predicate)
                cols[key] = found

            return ResolvedColumns(
                header_row=i,
                gstin=gstin_col,
                name=_find(row, _is_name_heading),
                **cols,
            )
        return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_gstr2b_workbook(
    file_bytes: bytes,
    resolver: ColumnResolver | None = None,
) -> list[ItcSupplierRow]:
    """
    Parse a GSTR-2B ``.xlsx`` into per-supplier ITC rows.

    Raises:
        WorkbookReadError: bytes are not a readable workbook.
        SheetNotFoundError: no sheet name contains "b2b".
        HeaderNotFoundError: no "GSTIN of supplier" style header row.
    """
    resolver = resolver or FuzzyColumnResolver()

    try:
        wb = load_workbook(io.BytesIO(file_bytes), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as e:
        raise WorkbookReadError(f"Failed to read Excel file: {e}") from e

    try:
        sheet_name = next((name for name in wb.sheetnames if "b2b" in name.lower()), None)
        if sheet_name is None:
            raise SheetNotFoundError("Could not find a 'B2B' sheet in the Excel file.")
        rows = [tuple(r) for r in wb[sheet_name].iter_rows(values_only=True)]
    finally:
        wb.close()

    columns = resolver.resolve(rows)
    if columns is None:
        raise HeaderNotFoundError("Could not find required columns in the B2B sheet.")

    for key in ("igst", "cgst", "sgst"):
        if getattr(columns, key) is None:
            logger.warning("GSTR-2B sheet %r: no %s column, counting it as zero", sheet_name, key)

    suppliers = aggregate_itc_rows(rows[columns.header_row + 1:], columns)
    logger.info(
        "GSTR-2B parsed: sheet=%s, rows=%d, suppliers=%d",
        sheet_name, len(rows) - columns.header_row - 1, len(suppliers),
    )
    return suppliers


def aggregate_itc_rows(rows: Iterable[Row], columns: ResolvedColumns) -> list[ItcSupplierRow]:
    """
    Sum IGST/CGST/SGST per supplier GSTIN over the data rows.

    Rows whose GSTIN cell is not a 15-character string are skipped.
    Suppliers are returned in order of first appearance, all claimed.
    """
    totals: dict[str, dict[str, Any]] = {}

    for row in rows:
        gstin = _cell(row, columns.gstin)
        if not is_b2b_gstin(gstin):
            continue

        entry = totals.get(gstin)
        if entry is None:
            name = _cell(row, columns.name)
            name = str(name).strip() if name is not None else ""
            entry = totals[gstin] = {
                "name": name or "N/A",
                "iamt": Decimal("0"),
                "camt": Decimal("0"),
                "samt": Decimal("0"),
            }
        entry["iamt"] += _numeric(_cell(row, columns.igst))
        entry["camt"] += _numeric(_cell(row, columns.cgst))
        entry["samt"] += _numeric(_cell(row, columns.sgst))

    return [
        ItcSupplierRow(gstin=gstin, name=e["name"], iamt=e["iamt"], camt=e["camt"], samt=e["samt"])
        for gstin, e in totals.items()
    ]


def toggle_claim(rows: Iterable[ItcSupplierRow], gstin: str) -> list[ItcSupplierRow]:
    """New list with ``is_claimed`` flipped for the row matching ``gstin``."""
    return [
        replace(row, is_claimed=not row.is_claimed) if row.gstin == gstin else row
        for row in rows
    ]


def total_claimed(rows: Iterable[ItcSupplierRow]) -> Decimal:
    return sum((row.total_itc for row in rows if row.is_claimed), Decimal("0"))


class ItcWorkspace:
    """
    Caller-owned holder for the current upload's supplier rows.

    A failed upload raises and leaves the previous rows untouched.
    """

    def __init__(self, resolver: ColumnResolver | None = None) -> None:
        self.resolver = resolver
        self.rows: list[ItcSupplierRow] = []

    def load(self, file_bytes: bytes) -> list[ItcSupplierRow]:
        rows = parse_gstr2b_workbook(file_bytes, self.resolver)
        self.rows = rows
        return rows

    def toggle(self, gstin: str) -> None:
        self.rows = toggle_claim(self.rows, gstin)

    def reset(self) -> None:
        self.rows = []

    @property
    def total_claimed(self) -> Decimal:
        return total_claimed(self.rows)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _cell(row: Row, idx: Optional[int]) -> Any:
    if idx is None or idx >= len(row):
        return None
    return row[idx]


def _numeric(value: Any) -> Decimal:
    """Numeric cells as Decimal; text, blanks and booleans count as zero."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        return Decimal("0")
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")
    return result if result.is_finite() else Decimal("0")
