"""
Relational submission store backed by an async SQLAlchemy engine.
"""

from datetime import datetime, timezone
from typing import Mapping

import structlog
from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from backend.core.exceptions import StorageError
from backend.database import build_sessionmaker
from backend.models import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH, Base, Submission, utcnow
from backend.storage.base import InsertResult, StoredSubmission, SubmissionStore

logger = structlog.get_logger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite and MySQL hand back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlSubmissionStore(SubmissionStore):
    """Stores submissions in the mensajes_nuevos table."""

    name = "sql"

    def __init__(self, engine: AsyncEngine):
        self._engine = engine
        self._sessionmaker = build_sessionmaker(engine)

    @property
    def field_limits(self) -> Mapping[str, int]:
        return {"name": NAME_MAX_LENGTH, "email": EMAIL_MAX_LENGTH}

    async def connect(self) -> None:
        await self.ping()
        logger.info("sql_store_connected", url=self._engine.url.render_as_string(hide_password=True))

    async def ensure_schema(self) -> None:
        try:
            async with self._engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(f"Could not create table {Submission.__tablename__}: {e}") from e
        logger.info("sql_schema_ready", table=Submission.__tablename__)

    async def insert(self, name: str, email: str, message: str) -> InsertResult:
        for field, value in (("name", name), ("email", email)):
            limit = self.field_limits[field]
            if len(value) > limit:
                raise StorageError(f"{field} exceeds column length {limit}")

        row = Submission(name=name, email=email, message=message, created_at=utcnow())
        try:
            async with self._sessionmaker() as session:
                session.add(row)
                await session.commit()
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(f"Insert into {Submission.__tablename__} failed: {e}") from e

        return InsertResult(id=row.id, created_at=_as_utc(row.created_at))

    async def list_all(self) -> list[StoredSubmission]:
        query = select(Submission).order_by(Submission.created_at.desc(), Submission.id.desc())
        try:
            async with self._sessionmaker() as session:
                result = await session.execute(query)
                rows = result.scalars().all()
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(f"Query on {Submission.__tablename__} failed: {e}") from e

        return [
            StoredSubmission(
                id=row.id,
                name=row.name,
                email=row.email,
                message=row.message,
                created_at=_as_utc(row.created_at),
            )
            for row in rows
        ]

    async def ping(self) -> None:
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            raise StorageError(f"Database unreachable: {e}") from e

    async def close(self) -> None:
        await self._engine.dispose()
