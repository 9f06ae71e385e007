"""Bangladeshi phone number helpers."""
import re

from .const import COUNTRY_CODE
from .exceptions import ValidationError

_LOCAL_PATTERN = re.compile(r"01[3-9][0-9]{8}")
_SEPARATORS = re.compile(r"[\s\-\(\)\.]+")

INVALID_MESSAGE = (
    "Invalid Bangladeshi phone number. Please use the local format "
    "(e.g., 01712345678) without the +88 prefix."
)


def validate_phone(phone: str) -> bool:
    """Raise ValidationError unless phone is an 11-digit local mobile number."""
    if not phone:
        raise ValidationError("Phone number is required.")
    if not isinstance(phone, str) or not _LOCAL_PATTERN.fullmatch(phone):
        raise ValidationError(INVALID_MESSAGE)
    return True


def is_valid_phone(phone) -> bool:
    try:
        return validate_phone(phone)
    except ValidationError:
        return False


def sanitize_phone(phone: str) -> str:
    """Strip separators and a redundant +88/88 country code.

    The result is not validated.
    """
    clean = _SEPARATORS.sub("", str(phone))
    if clean.startswith(f"+{COUNTRY_CODE}"):
        clean = clean[3:]
    # Only drop a bare 88 when a local 01 prefix follows it
    clean = re.sub(rf"^{COUNTRY_CODE}(01)", r"\1", clean)
    return clean


def format_phone(phone: str) -> str:
    sanitized = sanitize_phone(phone)
    validate_phone(sanitized)
    return sanitized


def phone_with_country_code(phone: str) -> str:
    """Return the number as +8801XXXXXXXXX."""
    return f"+{COUNTRY_CODE}{format_phone(phone)}"


def phone_validation_error(phone) -> str | None:
    """Return the validation message for phone, or None when it is valid."""
    try:
        validate_phone(phone)
    except ValidationError as err:
        return str(err)
    return None
