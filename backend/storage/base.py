"""
Storage interface for contact submissions.

Both backends (relational table and document collection) implement this
contract so the API layer never knows which one is deployed.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Union

SubmissionId = Union[int, str]


@dataclass(frozen=True)
class InsertResult:
    """Identity and timestamp assigned to a newly stored submission."""

    id: SubmissionId
    created_at: datetime


@dataclass(frozen=True)
class StoredSubmission:
    """A persisted submission as returned by list_all."""

    id: SubmissionId
    name: str
    email: str
    message: str
    created_at: datetime


class SubmissionStore(ABC):
    """
    Durable store for contact submissions.

    Implementations wrap every driver failure in StorageError. The store is
    connected once at startup and shared by all requests; it must not rely
    on exclusive access.
    """

    #: Backend label used in logs and health reports
    name: str = "storage"

    @property
    def field_limits(self) -> Mapping[str, int]:
        """Maximum lengths enforced by the underlying schema, per field."""
        return {}

    @abstractmethod
    async def connect(self) -> None:
        """Verify the backend is reachable. Raises StorageError otherwise."""
        ...

    @abstractmethod
    async def ensure_schema(self) -> None:
        """Create the table/collection indexes if missing. Idempotent."""
        ...

    @abstractmethod
    async def insert(self, name: str, email: str, message: str) -> InsertResult:
        """
        Persist a new submission.

        Args:
            name: Trimmed sender name
            email: Trimmed sender email
            message: Trimmed message body

        Returns:
            The assigned id and creation timestamp
        """
        ...

    @abstractmethod
    async def list_all(self) -> list[StoredSubmission]:
        """Return every submission, newest first."""
        ...

    @abstractmethod
    async def ping(self) -> None:
        """Cheap connectivity check. Raises StorageError on failure."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release connections held by the backend."""
        ...
