# app/domain/services/gstr3b_service.py

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable

from app.domain.models.gst import Gstr3bSummary, ItcBucket, TaxBucket
from app.domain.models.ledger import SalesInvoice
from app.domain.services.gst_export import make_gstr3b_json
from app.domain.services.gst_period import filing_period, filter_for_period, validate_period
from app.domain.services.gstin_pan_validation import ensure_filer_gstin, state_code_from_gstin
from app.domain.services.gstr2b_service import ItcSupplierRow
from app.domain.services.tax_split import split_invoice_tax, to_decimal

logger = logging.getLogger("gstr3b_service")


def prepare_gstr3b_summary(
    sales_invoices: Iterable[SalesInvoice],
    itc_rows: Iterable[ItcSupplierRow],
    year: int,
    month: int,
    filer_gstin: str,
) -> Gstr3bSummary:
    """
    Aggregate outward supplies for the month and the claimed GSTR-2B credit.

    - Outward tax is split per invoice (IGST vs CGST+SGST) and summed.
    - ITC: only suppliers still marked as claimed are counted.
    """
    gstin = ensure_filer_gstin(filer_gstin)
    validate_period(year, month)
    home_state = state_code_from_gstin(gstin)

    invoices = filter_for_period(sales_invoices, year, month)

    txval = igst = cgst = sgst = Decimal("0")
    for inv in invoices:
        txval += to_decimal(inv.taxable_value)
        split = split_invoice_tax(inv, home_state)
        igst += split.igst
        cgst += split.cgst
        sgst += split.sgst

    itc_rows = list(itc_rows)
    claimed = [row for row in itc_rows if row.is_claimed]
    itc = ItcBucket(
        igst=sum((r.iamt for r in claimed), Decimal("0")),
        cgst=sum((r.camt for r in claimed), Decimal("0")),
        sgst=sum((r.samt for r in claimed), Decimal("0")),
    )

    summary = Gstr3bSummary(
        gstin=gstin,
        fp=filing_period(year, month),
        outward_taxable_supplies=TaxBucket(taxable_value=txval, igst=igst, cgst=cgst, sgst=sgst),
        itc_eligible=itc,
        invoice_count=len(invoices),
        itc_supplier_count=len(itc_rows),
        claimed_supplier_count=len(claimed),
    )

    logger.info(
        "GSTR-3B prepared: gstin=%s fp=%s invoices=%d txval=%s itc_claimed=%s (%d/%d suppliers)",
        summary.gstin, summary.fp, summary.invoice_count, txval, itc.total,
        summary.claimed_supplier_count, summary.itc_supplier_count,
    )
    return summary


def build_gstr3b(
    sales_invoices: Iterable[SalesInvoice],
    itc_rows: Iterable[ItcSupplierRow],
    year: int,
    month: int,
    filer_gstin: str,
) -> dict:
    """GSTR-3B portal JSON for one month (see ``gst_export.make_gstr3b_json``)."""
    return make_gstr3b_json(prepare_gstr3b_summary(sales_invoices, itc_rows, year, month, filer_gstin))


def render_gstr3b_text(summary: Gstr3bSummary) -> str:
    """Plain-text GSTR-3B summary, amounts rounded to two decimals for display."""
    out = summary.outward_taxable_supplies
    itc = summary.itc_eligible

    def fmt(v) -> str:
        return f"₹{float(v):,.2f}"

    lines = [
        f"GSTR-3B summary for period {summary.fp[2:]}-{summary.fp[:2]}",
        f"GSTIN: {summary.gstin}",
        "",
        f"Sales invoices: {summary.invoice_count}",
        f"Taxable value: {fmt(out.taxable_value)}",
        f"IGST: {fmt(out.igst)} | CGST: {fmt(out.cgst)} | SGST: {fmt(out.sgst)}",
        "",
        f"ITC claimed from {summary.claimed_supplier_count} of {summary.itc_supplier_count} suppliers: "
        f"{fmt(itc.total)}",
    ]
    return "\n".join(lines)
