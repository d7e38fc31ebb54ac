import pytest
from pydantic import BaseModel, ValidationError

from app.core.malaysia import (
    MalNumber,
    MalaysianPhone,
    delivery_charge,
    format_malaysian_phone,
    format_myr,
    get_delivery_info,
    validate_business_registration,
    validate_mal_number,
    validate_malaysian_ic,
    validate_pharmacy_license,
    validate_phone,
    validate_postal_code,
)


class TestPostalCode:
    @pytest.mark.parametrize(
        "postal_code,state",
        [("50450", "KUL"), ("40100", "SGR"), ("10200", "PNG"), ("88000", "SBH"), ("62000", "PJY")],
    )
    def test_valid_for_state(self, postal_code, state):
        assert validate_postal_code(postal_code, state) is True

    def test_wrong_range_for_state(self):
        assert validate_postal_code("99999", "KUL") is False
        assert validate_postal_code("50450", "SBH") is False

    def test_empty_and_unknown_state(self):
        assert validate_postal_code("", "KUL") is False
        assert validate_postal_code("50450", "") is False
        assert validate_postal_code("50450", "XYZ") is False

    def test_state_code_is_case_insensitive(self):
        assert validate_postal_code("50450", "kul") is True


class TestPhone:
    @pytest.mark.parametrize("phone", ["0123456789", "012-345 6789", "+60123456789", "011-2345 6789"])
    def test_mobile_numbers(self, phone):
        assert validate_phone(phone) is True
        assert validate_phone(phone, "mobile") is True

    def test_landline_and_toll_free(self):
        assert validate_phone("03-2345 6789", "landline") is True
        assert validate_phone("1800123456", "toll_free") is True

    def test_invalid_numbers(self):
        assert validate_phone("") is False
        assert validate_phone("notaphone") is False
        assert validate_phone("12345") is False

    def test_format_mobile(self):
        assert format_malaysian_phone("0123456789") == "+60 12-345 6789"
        assert format_malaysian_phone("60123456789") == "+60 12-345 6789"
        assert format_malaysian_phone("012-345 6789") == "+60 12-345 6789"

    def test_format_leaves_other_input_unchanged(self):
        assert format_malaysian_phone("notaphone") == "notaphone"
        assert format_malaysian_phone("03-2345 6789") == "03-2345 6789"
        assert format_malaysian_phone("") == ""


class TestRegistrationNumbers:
    def test_mal_number(self):
        assert validate_mal_number("MAL19990001") is True
        assert validate_mal_number("MAL1999000") is False
        assert validate_mal_number("mal19990001") is False
        assert validate_mal_number("") is False

    def test_pharmacy_license(self):
        assert validate_pharmacy_license("PH12345") is True
        assert validate_pharmacy_license("A1234") is True
        assert validate_pharmacy_license("ABC1234") is False
        assert validate_pharmacy_license("") is False

    def test_ic_and_business_registration(self):
        assert validate_malaysian_ic("900101-14-5678") is True
        assert validate_malaysian_ic("9001011456") is False
        assert validate_business_registration("123456-A") is True
        assert validate_business_registration("123456A") is False


class TestDelivery:
    def test_zone_lookup(self):
        assert get_delivery_info("KUL")["zone"] == "Klang Valley"
        assert get_delivery_info("SWK")["zone"] == "East Malaysia"

    def test_unknown_state_falls_back_to_west_malaysia(self):
        assert get_delivery_info("XYZ")["zone"] == "West Malaysia"

    def test_standard_charge_below_threshold(self):
        assert delivery_charge("KUL", 20.0) == 5.0
        assert delivery_charge("SBH", 99.99) == 20.0

    def test_free_at_threshold(self):
        assert delivery_charge("KUL", 50.0) == 0.0
        assert delivery_charge("PRK", 120.0) == 0.0

    def test_express_is_always_charged(self):
        assert delivery_charge("KUL", 500.0, express=True) == 10.0

    def test_format_myr(self):
        assert format_myr(1234.5) == "RM 1,234.50"
        assert format_myr(0) == "RM 0.00"


class Listing(BaseModel):
    phone: MalaysianPhone
    mal_number: MalNumber


class TestFieldTypes:
    def test_valid_values(self):
        listing = Listing(phone=" 012-345 6789 ", mal_number="mal19990001")

        assert listing.phone == "012-345 6789"
        assert listing.mal_number == "MAL19990001"

    def test_invalid_values(self):
        with pytest.raises(ValidationError):
            Listing(phone="notaphone", mal_number="MAL19990001")
        with pytest.raises(ValidationError):
            Listing(phone="0123456789", mal_number="MAL123")
