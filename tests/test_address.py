"""Tests for address normalization and phone canonicalisation"""

from ordercore.schemas.order import AddressInput
from ordercore.services.address import normalize_address, flatten_address
from ordercore.services.phone import canonical_phone, mask_phone


def test_full_address_in_street_is_split():
    address = normalize_address(
        AddressInput(street="Rruga Myslym Shyri 12, Tirana 1001, Albania")
    )

    assert address.street == "Rruga Myslym Shyri 12"
    assert address.city == "Tirana"
    assert address.zip_code == "1001"
    assert address.country == "AL"


def test_last_postal_code_wins():
    address = normalize_address(AddressInput(street="Odos 123, Athens 106 82, Greece"))

    assert address.street == "Odos 123"
    assert address.city == "Athens"
    assert address.zip_code == "106 82"
    assert address.country == "GR"


def test_existing_fields_are_kept():
    address = normalize_address(
        AddressInput(
            street="Via Roma 5, Milano 20121, Italy",
            city="Milan",
            zip_code="20100",
            country="IT",
        )
    )

    assert address.street == "Via Roma 5"
    assert address.city == "Milan"
    assert address.zip_code == "20100"
    assert address.country == "IT"


def test_country_name_beats_embedded_iso_code():
    # "italy" contains "al" but must not become Albania
    address = normalize_address(AddressInput(street="Via Roma 5, Napoli, italy"))

    assert address.country == "IT"


def test_iso_code_token_is_detected():
    address = normalize_address(AddressInput(street="Rruga e Kavajes, Durres, AL"))

    assert address.country == "AL"
    assert address.city == "Durres"


def test_spain_by_name_and_code():
    address = normalize_address(AddressInput(street="Calle Mayor 10, Madrid 28013, Spain"))

    assert address.city == "Madrid"
    assert address.zip_code == "28013"
    assert address.country == "ES"

    address = normalize_address(AddressInput(street="Carrer de Balmes 20, Barcelona, ES"))

    assert address.country == "ES"


def test_unknown_country_leaves_placeholder():
    address = normalize_address(AddressInput(street="1 Main St, Springfield, Narnia"))

    assert address.street == "1 Main St"
    assert address.city == "Springfield"
    assert address.country == "US"


def test_street_without_comma_is_untouched():
    address = normalize_address(AddressInput(street="  1 Main St 10001  ", latitude=1.5))

    assert address.street == "1 Main St 10001"
    assert address.city == ""
    assert address.zip_code == ""
    assert address.latitude == 1.5


def test_flatten_address_skips_empty_parts():
    address = normalize_address(AddressInput(street="Rruga Myslym Shyri 12, Tirana 1001, Albania"))

    assert flatten_address(address) == "Rruga Myslym Shyri 12, Tirana, 1001"


def test_canonical_phone_variants_collide():
    assert canonical_phone("+1 (555) 123-4567") == "5551234567"
    assert canonical_phone("555.123.4567") == "5551234567"
    assert canonical_phone("5551234567") == "5551234567"


def test_canonical_phone_rejects_short_numbers():
    assert canonical_phone("555-1234") is None
    assert canonical_phone("") is None


def test_mask_phone_keeps_last_four_digits():
    assert mask_phone("+1 (555) 123-4567") == "4567"
