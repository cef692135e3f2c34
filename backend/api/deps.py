"""
FastAPI Dependencies
Shared dependencies for storage access and admin authorization.
"""
import secrets
from typing import Annotated, Optional

import structlog
from fastapi import Depends, Header, Query, Request

from backend.core.config import settings
from backend.core.exceptions import AuthorizationError, ServiceUnavailableError
from backend.storage import SubmissionStore

logger = structlog.get_logger(__name__)

ADMIN_KEY_HEADER = "X-Admin-Key"


# =============================================================================
# Storage
# =============================================================================


def get_store(request: Request) -> SubmissionStore:
    """
    Return the store installed on the application at startup.

    Requests that arrive before startup finished are refused with 503.
    """
    store: Optional[SubmissionStore] = getattr(request.app.state, "store", None)
    if store is None:
        raise ServiceUnavailableError("Storage backend is not ready")
    return store


# =============================================================================
# Admin Credential
# =============================================================================


def credentials_match(supplied: Optional[str], expected: str) -> bool:
    """Constant-time comparison; an unset secret never matches."""
    if not supplied or not expected:
        return False
    return secrets.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))


def client_address(request: Request) -> str:
    if request.client:
        return request.client.host
    return "unknown"


async def require_admin(
    request: Request,
    header_key: Annotated[Optional[str], Header(alias=ADMIN_KEY_HEADER)] = None,
    clave: Annotated[Optional[str], Query(include_in_schema=False)] = None,
) -> None:
    """
    Verify the caller holds the admin shared secret.

    The header is preferred; the `clave` query parameter is still accepted
    for the legacy admin page. The supplied value is never logged.
    """
    supplied = header_key if header_key is not None else clave
    source = "header" if header_key is not None else "query" if clave is not None else "none"

    if not credentials_match(supplied, settings.admin_secret):
        logger.warning(
            "admin_listing_access",
            outcome="denied",
            credential_source=source,
            client=client_address(request),
        )
        raise AuthorizationError("Access denied. A valid admin key is required.")

    logger.info(
        "admin_listing_access",
        outcome="granted",
        credential_source=source,
        client=client_address(request),
    )


StoreDep = Annotated[SubmissionStore, Depends(get_store)]
AdminDep = Depends(require_admin)
