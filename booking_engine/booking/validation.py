"""Customer field sanitization and validation for public booking requests.

Every field is cleaned first, then checked. All problems are collected
so the form can show them together.
"""

import logging
import re
from typing import Optional

from booking_engine.config import settings
from booking_engine.errors import ValidationError
from booking_engine.schemas.reservation_schema import BookingRequest, CustomerSnapshot
from booking_engine.utils import (
    normalize_phone,
    sanitize_email,
    sanitize_name,
    sanitize_notes,
    sanitize_phone,
)

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def _validate_name(value: str) -> Optional[str]:
    minimum = settings.booking.min_customer_name_length
    if len(value) < minimum:
        return f"Name must have at least {minimum} characters"
    return None


def _validate_phone(value: str) -> Optional[str]:
    if not value:
        return "Phone is required"
    digits = normalize_phone(value).lstrip("+")
    low, high = settings.booking.min_phone_digits, settings.booking.max_phone_digits
    if not low <= len(digits) <= high:
        return f"Phone must have between {low} and {high} digits"
    return None


def _validate_email(value: str) -> Optional[str]:
    if value and not EMAIL_PATTERN.match(value):
        return "Email address is not valid"
    return None


def _validate_party_size(value: Optional[int]) -> Optional[str]:
    low, high = settings.booking.min_party_size, settings.booking.max_party_size
    if value is None or not low <= value <= high:
        return f"Number of people must be between {low} and {high}"
    return None


def build_customer_snapshot(
    request: BookingRequest, requires_party_size: bool = False
) -> CustomerSnapshot:
    """
    Sanitize and validate the customer part of a booking request.

    Raises:
        ValidationError: With one message per invalid field.
    """
    name = sanitize_name(request.customer_name)
    phone = sanitize_phone(request.customer_phone)
    email = sanitize_email(request.customer_email or "")
    notes = sanitize_notes(request.notes or "", settings.booking.max_notes_length)

    errors: dict[str, str] = {}
    checks = [
        ("customer_name", _validate_name(name)),
        ("customer_phone", _validate_phone(phone)),
        ("customer_email", _validate_email(email)),
    ]
    if requires_party_size:
        checks.append(("party_size", _validate_party_size(request.party_size)))

    for field_name, message in checks:
        if message:
            errors[field_name] = message

    if errors:
        logger.warning("Rejected booking request for '%s': %s", request.tenant_slug, errors)
        raise ValidationError(errors)

    return CustomerSnapshot(
        name=name,
        phone=phone,
        email=email or None,
        notes=notes or None,
        party_size=request.party_size if requires_party_size else None,
    )
