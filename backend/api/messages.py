"""
Contact Message API endpoints.

POST stores a new submission from the public contact form.
GET lists every submission for holders of the admin key.
"""

import structlog
from fastapi import APIRouter, status

from backend.api.deps import AdminDep, StoreDep
from backend.core.exceptions import InternalServerError, StorageError, ValidationError
from backend.schemas.messages import (
    SubmissionCreatedResponse,
    SubmissionListResponse,
    SubmissionRecord,
    SubmissionRequest,
)
from backend.services.validation import validate_submission

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/mensajes", tags=["messages"])


@router.post(
    "",
    response_model=SubmissionCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a contact message",
)
async def create_message(payload: SubmissionRequest, store: StoreDep) -> SubmissionCreatedResponse:
    """
    Validate and store a contact form submission.

    - **nombre** / **name**: sender name
    - **email**: sender email (local@domain.tld)
    - **mensaje** / **message**: at least 10 characters

    Values are trimmed before they are stored.
    """
    result = validate_submission(
        payload.name,
        payload.email,
        payload.message,
        max_lengths=store.field_limits,
    )
    if not result.valid:
        logger.info("submission_rejected", errors=result.errors)
        raise ValidationError("Invalid contact form submission.", errors=result.errors)

    name = payload.name.strip()
    email = payload.email.strip()
    message = payload.message.strip()

    try:
        created = await store.insert(name, email, message)
    except StorageError as e:
        # The logging integration reports this to Sentry; no separate capture
        logger.exception("submission_insert_failed", operation="insert", backend=store.name)
        raise InternalServerError("Internal server error. The message could not be saved.") from e

    logger.info("submission_saved", submission_id=created.id, backend=store.name)
    return SubmissionCreatedResponse(
        message="Message saved successfully.",
        id=created.id,
        created_at=created.created_at,
    )


@router.get(
    "",
    response_model=SubmissionListResponse,
    dependencies=[AdminDep],
    summary="List contact messages (admin)",
)
async def list_messages(store: StoreDep) -> SubmissionListResponse:
    """
    Return every stored submission, newest first.

    Requires the admin key in the `X-Admin-Key` header (or the legacy
    `clave` query parameter).
    """
    try:
        submissions = await store.list_all()
    except StorageError as e:
        logger.exception("submission_list_failed", operation="list_all", backend=store.name)
        raise InternalServerError() from e

    return SubmissionListResponse(
        count=len(submissions),
        submissions=[SubmissionRecord.model_validate(item) for item in submissions],
    )
