# app/core/malaysia.py
"""
Malaysian reference data and field validators.

Everything here is pure: no I/O, no state, same input -> same output.
Validators return False for empty input instead of raising.
"""
import re
from typing import Annotated, Literal

from pydantic import AfterValidator

# Malaysian States and Federal Territories
MALAYSIAN_STATES: dict[str, str] = {
    "JHR": "Johor",
    "KDH": "Kedah",
    "KTN": "Kelantan",
    "KUL": "Kuala Lumpur",
    "LBN": "Labuan",
    "MLK": "Melaka",
    "NSN": "Negeri Sembilan",
    "PHG": "Pahang",
    "PRK": "Perak",
    "PLS": "Perlis",
    "PNG": "Penang",
    "PJY": "Putrajaya",
    "SBH": "Sabah",
    "SWK": "Sarawak",
    "SGR": "Selangor",
    "TRG": "Terengganu",
}

StateCode = Literal[
    "JHR", "KDH", "KTN", "KUL", "LBN", "MLK", "NSN", "PHG",
    "PRK", "PLS", "PNG", "PJY", "SBH", "SWK", "SGR", "TRG",
]

POSTAL_CODE_PATTERNS: dict[str, re.Pattern[str]] = {
    "JHR": re.compile(r"^[78]\d{4}$"),
    "KDH": re.compile(r"^0[5-9]\d{3}$"),
    "KTN": re.compile(r"^1[5-8]\d{3}$"),
    "KUL": re.compile(r"^[5-6]\d{4}$"),
    "LBN": re.compile(r"^87\d{3}$"),
    "MLK": re.compile(r"^7[5-8]\d{3}$"),
    "NSN": re.compile(r"^7[0-3]\d{3}$"),
    "PHG": re.compile(r"^2[5-8]\d{3}$"),
    "PRK": re.compile(r"^3[0-6]\d{3}$"),
    "PLS": re.compile(r"^02\d{3}$"),
    "PNG": re.compile(r"^1[0-4]\d{3}$"),
    "PJY": re.compile(r"^62\d{3}$"),
    "SBH": re.compile(r"^8[8-9]\d{3}$"),
    "SWK": re.compile(r"^9[3-8]\d{3}$"),
    "SGR": re.compile(r"^4[0-8]\d{3}$"),
    "TRG": re.compile(r"^2[0-4]\d{3}$"),
}

PHONE_FORMATS: dict[str, re.Pattern[str]] = {
    "mobile": re.compile(r"^(\+?6?01)[0-46-9]\d{7,8}$"),
    "landline": re.compile(r"^(\+?6?0)[2-9]\d{7,8}$"),
    "toll_free": re.compile(r"^1[38]00\d{6}$"),
}

PhoneKind = Literal["mobile", "landline", "toll_free"]

MAL_NUMBER_PATTERN = re.compile(r"^MAL\d{8}$")
PHARMACY_LICENSE_PATTERN = re.compile(r"^[A-Z]{1,2}\d{4,5}$")
IC_PATTERN = re.compile(r"^\d{6}-\d{2}-\d{4}$")
BUSINESS_REG_PATTERN = re.compile(r"^\d{6}-[A-Z]$")

# Delivery zones and charges (RM)
DELIVERY_ZONES: dict[str, dict] = {
    "Klang Valley": {
        "states": ("KUL", "SGR", "PJY"),
        "free_delivery_threshold": 50.0,
        "standard_charge": 5.0,
        "express_charge": 10.0,
        "same_day_available": True,
    },
    "Penang": {
        "states": ("PNG",),
        "free_delivery_threshold": 60.0,
        "standard_charge": 8.0,
        "express_charge": 15.0,
        "same_day_available": True,
    },
    "Johor Bahru": {
        "states": ("JHR",),
        "free_delivery_threshold": 60.0,
        "standard_charge": 8.0,
        "express_charge": 15.0,
        "same_day_available": True,
    },
    "West Malaysia": {
        "states": ("PRK", "KDH", "PLS", "NSN", "MLK", "PHG", "TRG", "KTN"),
        "free_delivery_threshold": 80.0,
        "standard_charge": 12.0,
        "express_charge": 20.0,
        "same_day_available": False,
    },
    "East Malaysia": {
        "states": ("SBH", "SWK", "LBN"),
        "free_delivery_threshold": 100.0,
        "standard_charge": 20.0,
        "express_charge": 35.0,
        "same_day_available": False,
    },
}

DEFAULT_DELIVERY_ZONE = "West Malaysia"


# ----- Validators -----


def validate_postal_code(postal_code: str, state_code: str) -> bool:
    """
    Check a 5-digit postal code against the pattern for `state_code`.

    Unknown state codes and empty input are simply invalid.
    """
    if not postal_code or not state_code:
        return False
    pattern = POSTAL_CODE_PATTERNS.get(state_code.upper())
    return bool(pattern and pattern.match(postal_code.strip()))


def _strip_phone(phone: str) -> str:
    return re.sub(r"[\s\-()]", "", phone)


def validate_phone(phone: str, kind: PhoneKind | None = None) -> bool:
    """
    Validate a Malaysian phone number.

    With `kind` set only that pattern set is tried; otherwise any of
    mobile / landline / toll_free is accepted. Spaces, dashes and
    parentheses are ignored.
    """
    if not phone:
        return False
    cleaned = _strip_phone(phone)
    if kind is not None:
        return bool(PHONE_FORMATS[kind].match(cleaned))
    return any(p.match(cleaned) for p in PHONE_FORMATS.values())


def format_malaysian_phone(phone: str) -> str:
    """
    Normalize a mobile number to "+60 XX-XXX XXXX".

    Only 10-digit "01..." and 11-digit "601..." numbers are rewritten.
    Anything else is returned exactly as given.
    """
    cleaned = re.sub(r"\D", "", phone or "")

    formatted = cleaned
    if len(cleaned) == 10 and cleaned.startswith("01"):
        formatted = "6" + cleaned

    if len(formatted) == 11 and formatted.startswith("601"):
        return f"+60 {formatted[2:4]}-{formatted[4:7]} {formatted[7:]}"

    return phone


def validate_mal_number(mal_number: str) -> bool:
    """MAL (drug registration) number: "MAL" followed by 8 digits."""
    return bool(mal_number) and bool(MAL_NUMBER_PATTERN.match(mal_number))


def validate_pharmacy_license(license_no: str) -> bool:
    """1-2 uppercase letters followed by 4-5 digits, e.g. A12345."""
    return bool(license_no) and bool(PHARMACY_LICENSE_PATTERN.match(license_no))


def validate_malaysian_ic(ic: str) -> bool:
    return bool(ic) and bool(IC_PATTERN.match(ic))


def validate_business_registration(reg_number: str) -> bool:
    return bool(reg_number) and bool(BUSINESS_REG_PATTERN.match(reg_number))


# ----- Formatting / delivery -----


def format_myr(amount: float) -> str:
    """Format an amount as Malaysian Ringgit, e.g. 1234.5 -> 'RM 1,234.50'."""
    sign = "-" if amount < 0 else ""
    return f"{sign}RM {abs(amount):,.2f}"


def get_delivery_info(state_code: str) -> dict:
    """
    Return the delivery zone info for a state, including its zone name.

    Unknown states fall back to West Malaysia rates.
    """
    code = (state_code or "").upper()
    for zone_name, info in DELIVERY_ZONES.items():
        if code in info["states"]:
            return {"zone": zone_name, **info}
    return {"zone": DEFAULT_DELIVERY_ZONE, **DELIVERY_ZONES[DEFAULT_DELIVERY_ZONE]}


def delivery_charge(state_code: str, subtotal: float, express: bool = False) -> float:
    """
    Delivery charge for an order going to `state_code`.

    Standard delivery is free once the subtotal reaches the zone's
    threshold; express delivery is always charged.
    """
    info = get_delivery_info(state_code)
    if express:
        return info["express_charge"]
    if subtotal >= info["free_delivery_threshold"]:
        return 0.0
    return info["standard_charge"]


# ----- pydantic field types -----


def _check_phone(v: str) -> str:
    v = v.strip()
    if not validate_phone(v):
        raise ValueError("invalid Malaysian phone number")
    return v


def _check_mal_number(v: str) -> str:
    v = v.strip().upper()
    if not validate_mal_number(v):
        raise ValueError("MAL number must be 'MAL' followed by 8 digits")
    return v


MalaysianPhone = Annotated[str, AfterValidator(_check_phone)]
MalNumber = Annotated[str, AfterValidator(_check_mal_number)]
