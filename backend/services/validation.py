"""
Contact form field validation.

Pure checks on the raw submitted values; nothing here touches storage.
"""
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

# local@domain.tld, no whitespace, single "@" separator
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_MESSAGE_LENGTH = 10

FIELD_LABELS = {
    "name": "Name",
    "email": "Email",
    "message": "Message",
}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a submission."""

    valid: bool
    errors: list[str] = field(default_factory=list)


def _clean(value: Any) -> Optional[str]:
    """Return the trimmed text, or None when the value is missing or not text."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def is_valid_email(email: str) -> bool:
    """Loose shape check, not an RFC 5322 validator."""
    return EMAIL_PATTERN.match(email) is not None


def validate_submission(
    name: Any,
    email: Any,
    message: Any,
    *,
    max_lengths: Optional[Mapping[str, int]] = None,
) -> ValidationResult:
    """
    Validate the three contact form fields.

    A field fails when it is absent, not a string, or blank after trimming.
    The email must look like local@domain.tld and the message must have at
    least MIN_MESSAGE_LENGTH characters once trimmed.

    Args:
        name: Raw name value from the request body
        email: Raw email value from the request body
        message: Raw message value from the request body
        max_lengths: Optional per-field length bounds of the active store

    Returns:
        ValidationResult with one error per failing field, in field order
    """
    values = {"name": _clean(name), "email": _clean(email), "message": _clean(message)}
    limits = max_lengths or {}
    errors: list[str] = []

    for key, value in values.items():
        label = FIELD_LABELS[key]
        if value is None:
            errors.append(f"{label} is required")
            continue

        if key == "email" and not is_valid_email(value):
            errors.append("Email is not valid")
        elif key == "message" and len(value) < MIN_MESSAGE_LENGTH:
            errors.append(f"Message must be at least {MIN_MESSAGE_LENGTH} characters")
        elif key in limits and len(value) > limits[key]:
            errors.append(f"{label} must be at most {limits[key]} characters")

    return ValidationResult(valid=not errors, errors=errors)
