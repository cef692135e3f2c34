"""
Pydantic schemas for API request/response validation.
"""

from backend.schemas.messages import (
    SubmissionCreatedResponse,
    SubmissionListResponse,
    SubmissionRecord,
    SubmissionRequest,
)

__all__ = [
    "SubmissionCreatedResponse",
    "SubmissionListResponse",
    "SubmissionRecord",
    "SubmissionRequest",
]
