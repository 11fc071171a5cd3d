"""Shared validation utilities"""

import re
from typing import Optional

TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def parse_time(value: Optional[str]) -> Optional[int]:
    """
    Parse a wall-clock HH:MM string into minutes after midnight.

    Returns None for empty or malformed values instead of raising, so callers
    that must degrade gracefully can treat a bad value as "no time".
    """
    if not value or not isinstance(value, str):
        return None

    match = TIME_PATTERN.match(value.strip())
    if not match:
        return None

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None

    return hours * 60 + minutes


def format_time(minutes: int) -> str:
    """Format minutes after midnight as zero-padded 24-hour HH:MM"""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def validate_time(value: str) -> str:
    """
    Validate a time of day and normalize it to zero-padded HH:MM.

    Args:
        value: Time string such as "9:00" or "09:00"

    Returns:
        Normalized "HH:MM" string

    Raises:
        ValueError: If the value is not a valid 24-hour time
    """
    minutes = parse_time(value)
    if minutes is None:
        raise ValueError(f"Invalid time '{value}', expected HH:MM (24-hour)")
    return format_time(minutes)


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def require_text(value: Optional[str], field_name: str) -> str:
    """Strip a required text value, rejecting blanks"""
    if value is None or not value.strip():
        raise ValueError(f"{field_name} is required")
    return value.strip()
