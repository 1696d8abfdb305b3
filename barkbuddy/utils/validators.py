"""
Input validation and sanitization utilities.
"""

import re
from typing import List, Optional
from loguru import logger

from ..schemas.profile import ProfileFields

_RATE_PATTERN = re.compile(r"^\$?\s*(\d+(\.\d*)?|\.\d+)$")


def sanitize_string(value: str, max_length: int = 1000) -> str:
    """
    Sanitize string input before it is written to the store.

    Args:
        value: Input string
        max_length: Maximum allowed length

    Returns:
        Sanitized string
    """
    if not isinstance(value, str):
        return str(value)

    # Remove null bytes
    value = value.replace("\x00", "")

    # Truncate to max length
    value = value[:max_length]

    # Strip leading/trailing whitespace
    value = value.strip()

    return value


def parse_hourly_rate(text: str) -> Optional[float]:
    """
    Parse an hourly rate typed by a walker.

    Accepts plain decimals with an optional leading "$". Anything else,
    including an empty string, yields None so the caller can leave the
    stored rate untouched.

    Args:
        text: Rate as entered

    Returns:
        Rate as a float, or None if it cannot be parsed
    """
    cleaned = sanitize_string(text or "", 32)
    if not _RATE_PATTERN.match(cleaned):
        if cleaned:
            logger.warning(f"Ignoring unparseable hourly rate: {cleaned!r}")
        return None
    return float(cleaned.lstrip("$").strip())


def validate_phone(phone: str) -> bool:
    """
    Validate phone number format.

    Args:
        phone: Phone number

    Returns:
        True if valid phone format
    """
    # Remove common formatting characters
    cleaned = re.sub(r"[^\d+]", "", phone)

    # Check if it's a reasonable length
    return 10 <= len(cleaned) <= 15


def validate_zip_code(zip_code: str) -> bool:
    """Validate US ZIP code format (5-digit or ZIP+4)."""
    pattern = r"^\d{5}(-\d{4})?$"
    return bool(re.match(pattern, zip_code))


def validate_state_code(state: str) -> bool:
    """
    Validate US state code.

    Args:
        state: Two-letter state code

    Returns:
        True if valid state code
    """
    valid_states = {
        "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA",
        "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME", "MD",
        "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ",
        "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC",
        "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY",
        "DC", "PR", "VI", "GU", "AS", "MP"
    }
    return state.strip().upper() in valid_states


def field_warnings(fields: ProfileFields) -> List[str]:
    """
    Advisory checks on contact fields. Empty fields are not flagged and
    nothing here blocks a save.

    Args:
        fields: Profile form

    Returns:
        Human-readable warnings, possibly empty
    """
    warnings = []
    if fields.phone_number and not validate_phone(fields.phone_number):
        warnings.append("Phone number looks incomplete")
    if fields.zip_code and not validate_zip_code(fields.zip_code.strip()):
        warnings.append("ZIP code should be 5 digits")
    if fields.state and not validate_state_code(fields.state):
        warnings.append("State should be a two-letter code")
    return warnings
