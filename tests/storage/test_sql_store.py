"""
Tests for the relational submission store.
Runs against a temporary SQLite database through aiosqlite.
"""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select, text
from sqlalchemy.dialects import mysql, sqlite
from sqlalchemy.schema import CreateTable

from backend.core.exceptions import StorageError
from backend.database import build_sessionmaker
from backend.models import Submission
from backend.storage import SqlSubmissionStore


async def count_rows(engine) -> int:
    async with build_sessionmaker(engine)() as session:
        result = await session.execute(select(func.count()).select_from(Submission))
        return result.scalar_one()


class TestInsert:
    """Tests for SqlSubmissionStore.insert."""

    @pytest.mark.asyncio
    async def test_insert_assigns_id_and_timestamp(self, sql_store):
        before = datetime.now(timezone.utc)

        created = await sql_store.insert("Ana", "ana@x.com", "Hola, este es un mensaje de prueba")

        assert isinstance(created.id, int)
        assert created.id > 0
        assert before <= created.created_at <= datetime.now(timezone.utc)

    @pytest.mark.asyncio
    async def test_ids_increase(self, sql_store):
        first = await sql_store.insert("Ana", "ana@x.com", "first message body")
        second = await sql_store.insert("Luis", "luis@x.com", "second message body")

        assert second.id > first.id

    @pytest.mark.asyncio
    async def test_values_stored_verbatim(self, sql_store):
        await sql_store.insert("Ana", "Ana@X.com", "Hola, este es un mensaje de prueba")

        [stored] = await sql_store.list_all()

        assert stored.name == "Ana"
        assert stored.email == "Ana@X.com"
        assert stored.message == "Hola, este es un mensaje de prueba"

    @pytest.mark.asyncio
    async def test_name_longer_than_column_rejected(self, sql_store, async_engine):
        with pytest.raises(StorageError):
            await sql_store.insert("A" * 101, "ana@x.com", "long name message")

        assert await count_rows(async_engine) == 0

    @pytest.mark.asyncio
    async def test_unreachable_database_raises_storage_error(self, unreachable_engine):
        store = SqlSubmissionStore(unreachable_engine)

        with pytest.raises(StorageError):
            await store.insert("Ana", "ana@x.com", "Hola, este es un mensaje")

        await store.close()


class TestListAll:
    """Tests for SqlSubmissionStore.list_all."""

    @pytest.mark.asyncio
    async def test_empty_table(self, sql_store):
        assert await sql_store.list_all() == []

    @pytest.mark.asyncio
    async def test_insert_then_list_contains_record(self, sql_store):
        created = await sql_store.insert("Ana", "ana@x.com", "Hola, este es un mensaje de prueba")

        submissions = await sql_store.list_all()

        assert [s.id for s in submissions] == [created.id]
        assert submissions[0].created_at <= datetime.now(timezone.utc)

    @pytest.mark.asyncio
    async def test_listed_timestamp_equals_insert_result(self, sql_store):
        created = await sql_store.insert("Ana", "ana@x.com", "Hola, este es un mensaje de prueba")

        [stored] = await sql_store.list_all()

        assert stored.created_at == created.created_at

    @pytest.mark.asyncio
    async def test_database_default_fills_timestamp(self, sql_store, async_engine):
        async with async_engine.begin() as conn:
            await conn.execute(
                text(
                    "INSERT INTO mensajes_nuevos (nombre, email, mensaje) "
                    "VALUES ('Ana', 'ana@x.com', 'Hola, este es un mensaje')"
                )
            )

        [stored] = await sql_store.list_all()

        assert stored.created_at.tzinfo is not None
        assert stored.created_at <= datetime.now(timezone.utc)

    @pytest.mark.asyncio
    async def test_sorted_newest_first_regardless_of_insert_order(self, sql_store, async_engine):
        base = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)
        offsets = [5, 1, 9, 3, 7]

        async with build_sessionmaker(async_engine)() as session:
            for offset in offsets:
                session.add(
                    Submission(
                        name=f"Sender {offset}",
                        email=f"s{offset}@x.com",
                        message="message body text",
                        created_at=base + timedelta(minutes=offset),
                    )
                )
            await session.commit()

        submissions = await sql_store.list_all()

        assert [s.name for s in submissions] == [f"Sender {o}" for o in sorted(offsets, reverse=True)]
        timestamps = [s.created_at for s in submissions]
        assert timestamps == sorted(timestamps, reverse=True)

    @pytest.mark.asyncio
    async def test_timestamps_are_timezone_aware(self, sql_store):
        await sql_store.insert("Ana", "ana@x.com", "Hola, este es un mensaje de prueba")

        [stored] = await sql_store.list_all()

        assert stored.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_unreachable_database_raises_storage_error(self, unreachable_engine):
        store = SqlSubmissionStore(unreachable_engine)

        with pytest.raises(StorageError):
            await store.list_all()

        await store.close()


class TestLifecycle:
    """Tests for connect, ensure_schema, ping and close."""

    @pytest.mark.asyncio
    async def test_ensure_schema_is_idempotent(self, sql_store):
        await sql_store.ensure_schema()
        await sql_store.ensure_schema()

        assert await sql_store.list_all() == []

    @pytest.mark.asyncio
    async def test_connect_and_ping(self, sql_store):
        await sql_store.connect()
        await sql_store.ping()

    @pytest.mark.asyncio
    async def test_ping_unreachable(self, unreachable_engine):
        store = SqlSubmissionStore(unreachable_engine)

        with pytest.raises(StorageError):
            await store.ping()

        await store.close()

    def test_field_limits(self, sql_store):
        assert sql_store.field_limits == {"name": 100, "email": 100}


class TestTableDefinition:
    """DDL emitted for the submissions table."""

    def test_mysql_timestamp_keeps_microseconds(self):
        ddl = str(CreateTable(Submission.__table__).compile(dialect=mysql.dialect()))

        assert "fecha TIMESTAMP(6)" in ddl
        assert "DEFAULT CURRENT_TIMESTAMP(6)" in ddl
        assert "now()" not in ddl.lower()

    def test_sqlite_uses_plain_current_timestamp(self):
        ddl = str(CreateTable(Submission.__table__).compile(dialect=sqlite.dialect()))

        assert "DEFAULT CURRENT_TIMESTAMP" in ddl
        assert "CURRENT_TIMESTAMP(" not in ddl
