"""
Backend services for contact message handling.
"""

from backend.services.validation import ValidationResult, is_valid_email, validate_submission

__all__ = [
    "ValidationResult",
    "is_valid_email",
    "validate_submission",
]
