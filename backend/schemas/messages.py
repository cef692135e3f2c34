"""Contact message schemas."""
from datetime import datetime
from typing import Any, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class SubmissionRequest(BaseModel):
    """
    Incoming contact form body.

    Fields are untyped; shape problems are reported by the validator as a
    400. Spanish field names from the legacy form are accepted alongside
    English ones.
    """

    model_config = ConfigDict(extra="ignore")

    name: Optional[Any] = Field(None, validation_alias=AliasChoices("nombre", "name"))
    email: Optional[Any] = None
    message: Optional[Any] = Field(None, validation_alias=AliasChoices("mensaje", "message"))


class SubmissionCreatedResponse(BaseModel):
    """Response for a stored submission."""

    message: str = Field(..., description="Confirmation text for the sender")
    id: Union[int, str] = Field(..., description="Identifier assigned by the storage backend")
    created_at: datetime


class SubmissionRecord(BaseModel):
    """Stored submission as shown to administrators."""

    model_config = ConfigDict(from_attributes=True)

    id: Union[int, str]
    name: str
    email: str
    message: str
    created_at: datetime


class SubmissionListResponse(BaseModel):
    """Every stored submission, newest first."""

    count: int
    submissions: List[SubmissionRecord]
