"""Best-effort cleanup of free-text delivery addresses.

Admins and storefront clients often paste a full address into the street
field ("Rruga Myslym Shyri 12, Tirana 1001, Albania"). This splits it back
into structured fields. The parse is lossy and only fills fields that are
missing; anything it cannot recognise is left untouched.
"""

import re
from dataclasses import dataclass, asdict
from typing import Optional

from ordercore.config import settings
from ordercore.schemas.order import AddressInput

# 3-5 digit postal code with an optional short suffix ("1001", "106 82")
POSTAL_CODE_RE = re.compile(r"\b\d{3,5}\s?\d{0,2}\b")

# (country name, ISO code) in match priority order
COUNTRY_LOOKUP = (
    ("albania", "AL"),
    ("greece", "GR"),
    ("italy", "IT"),
    ("spain", "ES"),
)


@dataclass
class Address:
    street: str = ""
    additional: str = ""
    city: str = ""
    zip_code: str = ""
    country: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def to_dict(self) -> dict:
        return asdict(self)


def _detect_country(segment: str) -> Optional[str]:
    segment = segment.lower()
    for name, code in COUNTRY_LOOKUP:
        if name in segment:
            return code
    tokens = set(re.findall(r"[a-z]+", segment))
    for _, code in COUNTRY_LOOKUP:
        if code.lower() in tokens:
            return code
    return None


def normalize_address(raw: AddressInput) -> Address:
    """Split a comma-separated street into street/city/zip/country."""
    address = Address(
        street=(raw.street or "").strip(),
        additional=(raw.additional or "").strip(),
        city=(raw.city or "").strip(),
        zip_code=(raw.zip_code or "").strip(),
        country=(raw.country or settings.default_country).strip(),
        latitude=raw.latitude,
        longitude=raw.longitude,
    )

    if "," not in address.street:
        return address

    original = address.street
    parts = [part.strip() for part in original.split(",")]

    if not address.city and len(parts) >= 2:
        city = POSTAL_CODE_RE.sub("", parts[1]).strip()
        if city:
            address.city = city

    if not address.zip_code:
        matches = POSTAL_CODE_RE.findall(original)
        if matches:
            address.zip_code = re.sub(r"\s+", " ", matches[-1]).strip()

    if not address.country or address.country == settings.default_country:
        country = _detect_country(parts[-1])
        if country:
            address.country = country

    address.street = parts[0]
    return address


def flatten_address(address: Address) -> str:
    """Single-line form kept on the customer for display and search"""
    parts = [address.street, address.additional, address.city, address.zip_code]
    return ", ".join(part for part in parts if part)
