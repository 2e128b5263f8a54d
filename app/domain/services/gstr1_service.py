# app/domain/services/gstr1_service.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable

from app.domain.models.ledger import SalesInvoice
from app.domain.services.gst_export import make_gstr1_json
from app.domain.services.gst_period import (
    filing_period,
    filter_for_period,
    parse_invoice_date,
    portal_date,
    validate_period,
)
from app.domain.services.gstin_pan_validation import (
    ensure_filer_gstin,
    is_b2b_gstin,
    state_code_from_gstin,
)
from app.domain.services.tax_split import split_invoice_tax, to_decimal

logger = logging.getLogger("gstr1_service")


# ---------- Dataclasses representing GSTR-1 structure ----------


@dataclass(frozen=True)
class Gstr1Item:
    txval: Decimal
    rt: Decimal
    igst: Decimal
    cgst: Decimal
    sgst: Decimal


@dataclass(frozen=True)
class Gstr1Invoice:
    num: str  # invoice number
    dt: str  # DD-MM-YYYY
    val: Decimal  # invoice total value
    pos: str  # place of supply (2-digit state code)
    itms: tuple[Gstr1Item, ...] = ()


@dataclass(frozen=True)
class Gstr1B2BEntry:
    ctin: str  # counterparty GSTIN
    inv: tuple[Gstr1Invoice, ...] = ()


@dataclass(frozen=True)
class Gstr1Payload:
    gstin: str
    fp: str  # filing period in MMYYYY format
    gt: Decimal  # gross turnover, last financial year
    cur_gt: Decimal  # turnover of the period, B2B + B2C
    b2b: tuple[Gstr1B2BEntry, ...] = field(default_factory=tuple)
    b2c_count: int = 0


# ---------- B2B grouping ----------


def is_b2b(invoice: SalesInvoice) -> bool:
    return is_b2b_gstin(invoice.customer_gstin)


def _b2b_invoice(inv: SalesInvoice, home_state_code: str) -> Gstr1Invoice:
    split = split_invoice_tax(inv, home_state_code)
    item = Gstr1Item(
        txval=to_decimal(inv.taxable_value),
        rt=to_decimal(inv.gst_rate),
        igst=split.igst,
        cgst=split.cgst,
        sgst=split.sgst,
    )
    inv_date = parse_invoice_date(inv.invoice_date)
    return Gstr1Invoice(
        num=inv.invoice_number,
        dt=portal_date(inv_date) if inv_date else "",
        val=to_decimal(inv.invoice_value),
        pos=(inv.place_of_supply or "").strip(),
        itms=(item,),
    )


def group_b2b_invoices(
    invoices: Iterable[SalesInvoice],
    home_state_code: str,
) -> dict[str, Gstr1B2BEntry]:
    """
    Group B2B invoices by customer GSTIN.

    Non-B2B invoices are skipped. Groups keep the order in which each GSTIN
    first appears; each source invoice becomes one ``inv`` entry with a
    single item line.
    """
    index: dict[str, list[Gstr1Invoice]] = {}
    for inv in invoices:
        if not is_b2b(inv):
            continue
        ctin = inv.customer_gstin
        index.setdefault(ctin, []).append(_b2b_invoice(inv, home_state_code))

    return {ctin: Gstr1B2BEntry(ctin=ctin, inv=tuple(lines)) for ctin, lines in index.items()}


# ---------- Builder from invoices ----------


def prepare_gstr1_payload(
    all_invoices: Iterable[SalesInvoice],
    year: int,
    month: int,
    filer_gstin: str,
    gross_turnover_last_fy=0,
) -> Gstr1Payload:
    """
    Build the GSTR-1 payload for one filing month.

    Rules (v1):
    - Only invoices dated inside the month are considered.
    - customer GSTIN of exactly 15 chars -> B2B, grouped by GSTIN.
    - Everything else is B2C: counted in turnover, not emitted.
    """
    gstin = ensure_filer_gstin(filer_gstin)
    validate_period(year, month)
    home_state = state_code_from_gstin(gstin)

    invoices = filter_for_period(all_invoices, year, month)
    groups = group_b2b_invoices(invoices, home_state)

    b2b_count = sum(len(entry.inv) for entry in groups.values())
    current_turnover = sum((to_decimal(inv.invoice_value) for inv in invoices), Decimal("0"))

    payload = Gstr1Payload(
        gstin=gstin,
        fp=filing_period(year, month),
        gt=to_decimal(gross_turnover_last_fy),
        cur_gt=current_turnover,
        b2b=tuple(groups.values()),
        b2c_count=len(invoices) - b2b_count,
    )

    logger.info(
        "GSTR-1 prepared: gstin=%s fp=%s invoices=%d b2b_parties=%d b2c=%d",
        payload.gstin, payload.fp, len(invoices), len(payload.b2b), payload.b2c_count,
    )
    return payload


def build_gstr1(
    all_invoices: Iterable[SalesInvoice],
    year: int,
    month: int,
    filer_gstin: str,
    gross_turnover_last_fy=0,
) -> dict:
    """GSTR-1 portal JSON for one month (see ``gst_export.make_gstr1_json``)."""
    return make_gstr1_json(
        prepare_gstr1_payload(all_invoices, year, month, filer_gstin, gross_turnover_last_fy)
    )


# ---------- Processed summary ----------


def prepare_gstr1_form(payload: Gstr1Payload) -> dict:
    """
    Small aggregate of the payload for the processed-summary view.
    """
    total_txval = Decimal("0.00")
    for entry in payload.b2b:
        for inv in entry.inv:
            for item in inv.itms:
                total_txval += item.txval

    return {
        "gstin": payload.gstin,
        "fp": payload.fp,
        "b2b_parties": len(payload.b2b),
        "b2b_invoices": sum(len(entry.inv) for entry in payload.b2b),
        "b2c_invoices": payload.b2c_count,
        "b2b_txval": float(total_txval),
        "cur_gt": float(payload.cur_gt),
    }


def render_gstr1_text(form: dict) -> str:
    """
    Plain-text version of the GSTR-1 summary. Amounts are rounded to two
    decimals for display only.
    """

    def fmt(v) -> str:
        try:
            return f"₹{float(v):,.2f}"
        except (TypeError, ValueError):
            return "₹0.00"

    period = form.get("fp", "")
    if len(period) == 6:
        # MMYYYY -> YYYY-MM
        period_str = f"{period[2:]}-{period[0:2]}"
    else:
        period_str = period or "-"

    lines: list[str] = [
        f"GSTR-1 summary for period {period_str}",
        f"GSTIN: {form.get('gstin', '-')}",
        "",
        f"B2B customers found: {form.get('b2b_parties', 0)}",
        f"B2B invoices: {form.get('b2b_invoices', 0)}",
        f"B2C invoices (not exported): {form.get('b2c_invoices', 0)}",
        f"Turnover for period: {fmt(form.get('cur_gt', 0))}",
    ]
    return "\n".join(lines)
