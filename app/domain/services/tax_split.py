# app/domain/services/tax_split.py
"""
Inter-state vs intra-state tax split.

An invoice whose place of supply differs from the filer's home state is
inter-state and carries IGST only; otherwise the tax is shared equally
between CGST and SGST.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

ZERO = Decimal("0")
TWO = Decimal("2")


def to_decimal(value) -> Decimal:
    """Coerce int/float/str/Decimal to Decimal; anything else is zero."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


@dataclass(frozen=True)
class TaxSplit:
    igst: Decimal
    cgst: Decimal
    sgst: Decimal

    @property
    def total(self) -> Decimal:
        return self.igst + self.cgst + self.sgst


def is_inter_state(place_of_supply: str | None, home_state_code: str) -> bool:
    return (place_of_supply or "").strip() != home_state_code


def split_tax(total_tax, place_of_supply: str | None, home_state_code: str) -> TaxSplit:
    # no rounding here; credit notes keep their negative sign
    tax = to_decimal(total_tax)
    if is_inter_state(place_of_supply, home_state_code):
        return TaxSplit(igst=tax, cgst=ZERO, sgst=ZERO)
    half = tax / TWO
    return TaxSplit(igst=ZERO, cgst=half, sgst=half)


def invoice_tax(invoice) -> Decimal:
    """Tax amount of a tax-inclusive invoice: gross value minus taxable value."""
    return to_decimal(getattr(invoice, "invoice_value", None)) - to_decimal(
        getattr(invoice, "taxable_value", None)
    )


def split_invoice_tax(invoice, home_state_code: str) -> TaxSplit:
    return split_tax(invoice_tax(invoice), getattr(invoice, "place_of_supply", None), home_state_code)
