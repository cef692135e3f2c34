"""
Storage backends for contact submissions.

Provides one interface with two implementations, chosen by STORAGE_BACKEND:
 - SqlSubmissionStore: relational table with auto-increment ids
 - MongoSubmissionStore: document collection with generated ids
"""

from pymongo import AsyncMongoClient

from backend.core.config import Settings
from backend.database import build_async_engine
from backend.storage.base import InsertResult, StoredSubmission, SubmissionStore
from backend.storage.mongo import MongoSubmissionStore
from backend.storage.sql import SqlSubmissionStore


def create_store(settings: Settings) -> SubmissionStore:
    """Build the configured backend. Nothing is connected yet."""
    if settings.storage_backend == "mongo":
        client = AsyncMongoClient(
            settings.mongo_url,
            tz_aware=True,
            serverSelectionTimeoutMS=settings.mongo_timeout_ms,
        )
        return MongoSubmissionStore(client, settings.mongo_db_name, settings.mongo_collection)
    return SqlSubmissionStore(build_async_engine(settings))


__all__ = [
    "InsertResult",
    "MongoSubmissionStore",
    "SqlSubmissionStore",
    "StoredSubmission",
    "SubmissionStore",
    "create_store",
]
