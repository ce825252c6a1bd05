"""Phone number canonicalisation for customer matching"""

import re
from typing import Optional

from ordercore.config import settings

_NON_DIGITS = re.compile(r"\D")


def canonical_phone(phone: str) -> Optional[str]:
    """Reduce a phone number to its last national digits.

    ``"+1 (555) 123-4567"`` and ``"5551234567"`` both become
    ``"5551234567"``. Returns None when fewer than
    ``settings.phone_min_digits`` digits are present.
    """
    digits = _NON_DIGITS.sub("", phone or "")
    if len(digits) < settings.phone_min_digits:
        return None
    return digits[-settings.phone_min_digits:]


def mask_phone(phone: str) -> str:
    """Last 4 digits only, for logs"""
    digits = _NON_DIGITS.sub("", phone or "")
    return digits[-4:]
