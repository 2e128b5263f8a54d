from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class TaxBucket(BaseModel):
    model_config = ConfigDict(frozen=True)

    taxable_value: Decimal = Field(default=Decimal("0"))
    igst: Decimal = Field(default=Decimal("0"))
    cgst: Decimal = Field(default=Decimal("0"))
    sgst: Decimal = Field(default=Decimal("0"))
    cess: Decimal = Field(default=Decimal("0"))


class ItcBucket(BaseModel):
    model_config = ConfigDict(frozen=True)

    igst: Decimal = Field(default=Decimal("0"))
    cgst: Decimal = Field(default=Decimal("0"))
    sgst: Decimal = Field(default=Decimal("0"))

    @property
    def total(self) -> Decimal:
        return self.igst + self.cgst + self.sgst


class Gstr3bSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    gstin: str
    fp: str  # MMYYYY
    outward_taxable_supplies: TaxBucket = Field(default_factory=TaxBucket)
    # single "OTH" category: all claimed GSTR-2B credit
    itc_eligible: ItcBucket = Field(default_factory=ItcBucket)

    invoice_count: int = 0
    itc_supplier_count: int = 0
    claimed_supplier_count: int = 0
