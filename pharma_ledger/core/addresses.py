from __future__ import annotations

import re

from pharma_ledger.core.errors import ValidationError

_ZERO_RE = re.compile(r"^(0x)?0+$", re.IGNORECASE)

MAX_ADDRESS_LENGTH = 128


def is_zero_address(address: str) -> bool:
    return _ZERO_RE.match(address) is not None


def validate_address(address: str, *, field: str = "address") -> str:
    """Reject empty, zero, or over-long identity keys. Returns the stripped value."""
    value = (address or "").strip()
    if not value:
        raise ValidationError(f"{field} must not be empty.")
    if is_zero_address(value):
        raise ValidationError(f"{field} must not be the zero address.")
    if len(value) > MAX_ADDRESS_LENGTH:
        raise ValidationError(f"{field} exceeds {MAX_ADDRESS_LENGTH} characters.")
    return value
