"""Shipping address model and checkout-time validation."""

from __future__ import annotations

import re

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

PIN_PATTERN = re.compile(r"^[0-9]{6}$")
PHONE_PATTERN = re.compile(r"^[0-9]{10}$")

REQUIRED_ADDRESS_FIELDS: tuple[str, ...] = (
    "full_name",
    "street",
    "city",
    "state",
    "zip_code",
    "phone",
)

MSG_MISSING_FIELDS = "Please fill in all shipping address fields."
MSG_INVALID_PIN = "ZIP Code must be a valid 6-digit PIN."
MSG_INVALID_PHONE = "Phone number must be a valid 10-digit mobile number."


class ShippingAddress(BaseModel):
    """Delivery address as entered at checkout.

    Accepts the storefront's camelCase keys (``fullName``, ``zipCode``) as
    well as snake_case.  Missing fields default to ``""`` so that partial
    addresses can still be screened.
    """

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    full_name: str = ""
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    phone: str = ""


class AddressCheck(BaseModel):
    """Outcome of :func:`validate_shipping_address`."""

    model_config = {"frozen": True}

    ok: bool
    message: str | None = None


def validate_shipping_address(address: ShippingAddress) -> AddressCheck:
    """Check field presence, then PIN format, then phone format.

    The presence check is deliberately generic: it does not say which
    field is blank.
    """
    for name in REQUIRED_ADDRESS_FIELDS:
        if not getattr(address, name).strip():
            return AddressCheck(ok=False, message=MSG_MISSING_FIELDS)

    if not PIN_PATTERN.match(address.zip_code.strip()):
        return AddressCheck(ok=False, message=MSG_INVALID_PIN)

    if not PHONE_PATTERN.match(address.phone.strip()):
        return AddressCheck(ok=False, message=MSG_INVALID_PHONE)

    return AddressCheck(ok=True)
