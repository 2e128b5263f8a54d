# app/domain/services/gstin_pan_validation.py

import re

from app.domain.errors import InvalidGSTINError

PAN_REGEX = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]$")

GSTIN_LENGTH = 15


def is_valid_pan(pan: str | None) -> bool:
    if not pan:
        return False
    pan = pan.strip().upper()
    return bool(PAN_REGEX.match(pan))


def is_b2b_gstin(gstin) -> bool:
    """
    Loose classification rule used for invoices and GSTR-2B rows:
    any string of exactly 15 characters counts as a counterparty GSTIN.
    The raw value is measured; padding is not trimmed.
    """
    return isinstance(gstin, str) and len(gstin) == GSTIN_LENGTH


def state_code_from_gstin(gstin: str) -> str:
    """First two characters of a GSTIN are the registration state code."""
    return gstin[:2]


def ensure_filer_gstin(gstin: str | None) -> str:
    """
    Validate the filer's own GSTIN before any return is built.

    A short or non-numeric state prefix would silently flip every invoice
    between intra- and inter-state, so it is rejected here instead.
    """
    if not isinstance(gstin, str):
        raise InvalidGSTINError(gstin)
    cleaned = gstin.strip().upper()
    if len(cleaned) != GSTIN_LENGTH or not cleaned.isalnum():
        raise InvalidGSTINError(gstin)
    if not cleaned[:2].isdigit():
        raise InvalidGSTINError(gstin)
    return cleaned
