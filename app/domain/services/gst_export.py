# app/domain/services/gst_export.py
"""
Build GST return JSON in the portal's offline-upload format and serialize
it for download.

GSTR-3B: From Gstr3bSummary (TaxBucket/ItcBucket structure)
GSTR-1:  From Gstr1Payload (B2B entries from gstr1_service.py)
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any, Dict


def _d(val: Decimal | None) -> float:
    """Convert Decimal to float for JSON serialization."""
    if val is None:
        return 0.0
    return float(val)


def make_gstr3b_json(summary) -> Dict[str, Any]:
    """
    Build GSTR-3B JSON from a Gstr3bSummary.

    Reverse-charge, composition/UIN, tax-payment, interest and late-fee
    sections are emitted with zero values; only outward supplies and
    eligible ITC are computed.
    """
    out = summary.outward_taxable_supplies
    itc = summary.itc_eligible

    return {
        "gstin": summary.gstin,
        "fp": summary.fp,
        "sup_details": {
            "osup_det": {
                "txval": _d(out.taxable_value),
                "iamt": _d(out.igst),
                "camt": _d(out.cgst),
                "samt": _d(out.sgst),
                "csamt": 0,
            },
            "isup_det": {"txval": 0, "iamt": 0},
        },
        "inter_sup": {
            "unreg_details": [],
            "comp_details": [],
            "uin_details": [],
        },
        "inward_sup": {
            "isup_rev": {"txval": 0, "iamt": 0, "camt": 0, "samt": 0, "csamt": 0},
        },
        "itc_elg": {
            "itc_avl": [
                {
                    "ty": "OTH",
                    "iamt": _d(itc.igst),
                    "camt": _d(itc.cgst),
                    "samt": _d(itc.sgst),
                },
            ],
            "itc_rev": [],
            "itc_net": {
                "iamt": _d(itc.igst),
                "camt": _d(itc.cgst),
                "samt": _d(itc.sgst),
            },
        },
        "tx_pay": {
            "cgst": {"amt": 0, "chlln": 0},
            "sgst": {"amt": 0, "chlln": 0},
            "igst": {"amt": 0, "chlln": 0},
            "cess": {"amt": 0, "chlln": 0},
        },
        "interest": {"cgst": 0, "sgst": 0, "igst": 0, "cess": 0},
        "latefee": {"cgst": 0, "sgst": 0},
    }


def make_gstr1_json(payload) -> Dict[str, Any]:
    """
    Build GSTR-1 JSON from a Gstr1Payload dataclass.

    Args:
        payload: Gstr1Payload from gstr1_service.py containing
                 gstin, fp, turnover figures and b2b entries.

    Returns:
        Dict with the portal's GSTR-1 field names.
    """
    b2b_list = []
    for entry in payload.b2b:
        inv_list = []
        for inv in entry.inv:
            items = []
            for num, item in enumerate(inv.itms, start=1):
                items.append({
                    "num": num,
                    "itm_det": {
                        "txval": _d(item.txval),
                        "rt": _d(item.rt),
                        "iamt": _d(item.igst),
                        "camt": _d(item.cgst),
                        "samt": _d(item.sgst),
                        "csamt": 0,
                    },
                })
            inv_list.append({
                "inum": inv.num,
                "idt": inv.dt,
                "val": _d(inv.val),
                "pos": inv.pos,
                "rchrg": "N",
                "inv_typ": "R",
                "itms": items,
            })
        b2b_list.append({
            "ctin": entry.ctin,
            "inv": inv_list,
        })

    return {
        "gstin": payload.gstin,
        "fp": payload.fp,
        "gt": _d(payload.gt),
        "cur_gt": _d(payload.cur_gt),
        "b2b": b2b_list,
    }


# ---------------------------------------------------------------------------
# File export
# ---------------------------------------------------------------------------

def export_filename(form_type: str, gstin: str, fp: str) -> str:
    """``GSTR1_<gstin>_<MMYYYY>.json`` / ``GSTR3B_<gstin>_<MMYYYY>.json``."""
    prefix = form_type.upper().replace("-", "")
    if prefix not in ("GSTR1", "GSTR3B"):
        raise ValueError(f"Unsupported form type: {form_type}")
    return f"{prefix}_{gstin}_{fp}.json"


def export_document(form_type: str, document: Dict[str, Any]) -> tuple[str, bytes]:
    """
    Serialize a built document for download.

    The file carries the document's values unchanged (no rounding).
    """
    filename = export_filename(form_type, document["gstin"], document["fp"])
    body = json.dumps(document, indent=2, ensure_ascii=False).encode("utf-8")
    return filename, body
