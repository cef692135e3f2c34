"""
Contact Inbox Database Connection Setup
Builds the async SQLAlchemy engine and session factory for the relational store.
"""

import ssl
from typing import Any, Optional

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from backend.core.config import Settings


def build_ssl_context(verify: bool) -> ssl.SSLContext:
    """
    Create the TLS context handed to the database driver.

    With verify disabled the connection is still encrypted but the server
    certificate is not checked.
    """
    context = ssl.create_default_context()
    if not verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def build_async_engine(settings: Settings, url: Optional[str] = None) -> AsyncEngine:
    """
    Create the async engine described by the settings.

    SQLite URLs (used for local runs and tests) get no pool sizing or TLS.
    """
    database_url = url or settings.async_database_url
    engine_kwargs: dict[str, Any] = {
        "echo": settings.db_echo,
        "pool_pre_ping": True,
    }

    if make_url(database_url).get_backend_name() == "sqlite":
        engine_kwargs["connect_args"] = {"check_same_thread": False}
    else:
        engine_kwargs["pool_size"] = settings.db_pool_size
        engine_kwargs["pool_recycle"] = 3600
        if settings.db_ssl:
            engine_kwargs["connect_args"] = {"ssl": build_ssl_context(settings.db_ssl_verify)}

    return create_async_engine(database_url, **engine_kwargs)


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the engine; one session per unit of work."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
