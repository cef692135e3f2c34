"""
Document submission store backed by MongoDB (pymongo async API).
"""

from datetime import datetime, timezone
from typing import Any

import structlog
from pymongo import DESCENDING, AsyncMongoClient
from pymongo.errors import PyMongoError

from backend.core.exceptions import StorageError
from backend.storage.base import InsertResult, StoredSubmission, SubmissionStore

logger = structlog.get_logger(__name__)

CREATED_AT_INDEX = "created_at_desc"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def bson_now() -> datetime:
    """Current UTC time at BSON datetime precision (milliseconds)."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)



class MongoSubmissionStore(SubmissionStore):
    """
    Stores submissions as documents in a single collection.

    Identifiers are the generated ObjectId rendered as a hex string.
    Emails are lowercased before they are written.
    """

    name = "mongo"

    def __init__(self, client: AsyncMongoClient, database_name: str, collection_name: str = "mensajes"):
        self._client = client
        self._database_name = database_name
        self._collection = client[database_name][collection_name]

    async def connect(self) -> None:
        await self.ping()
        logger.info("mongo_store_connected", database=self._database_name)

    async def ensure_schema(self) -> None:
        try:
            await self._collection.create_index([("created_at", DESCENDING)], name=CREATED_AT_INDEX)
        except PyMongoError as e:
            raise StorageError(f"Could not create index {CREATED_AT_INDEX}: {e}") from e
        logger.info("mongo_schema_ready", index=CREATED_AT_INDEX)

    async def insert(self, name: str, email: str, message: str) -> InsertResult:
        created_at = bson_now()
        document = {
            "name": name,
            "email": email.lower(),
            "message": message,
            "created_at": created_at,
        }
        try:
            result = await self._collection.insert_one(document)
        except PyMongoError as e:
            raise StorageError(f"Insert failed: {e}") from e

        return InsertResult(id=str(result.inserted_id), created_at=created_at)

    async def list_all(self) -> list[StoredSubmission]:
        try:
            cursor = self._collection.find().sort([("created_at", DESCENDING), ("_id", DESCENDING)])
            documents: list[dict[str, Any]] = await cursor.to_list(length=None)
        except PyMongoError as e:
            raise StorageError(f"Query failed: {e}") from e

        return [
            StoredSubmission(
                id=str(doc["_id"]),
                name=doc["name"],
                email=doc["email"],
                message=doc["message"],
                created_at=_as_utc(doc["created_at"]),
            )
            for doc in documents
        ]

    async def ping(self) -> None:
        try:
            await self._client.admin.command("ping")
        except PyMongoError as e:
            raise StorageError(f"MongoDB unreachable: {e}") from e

    async def close(self) -> None:
        await self._client.close()
