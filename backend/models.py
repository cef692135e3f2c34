"""
Contact Inbox Database Models
SQLAlchemy ORM models for the relational storage backend.
"""
from datetime import datetime, timezone

from sqlalchemy import TIMESTAMP, Integer, String, Text
from sqlalchemy.dialects import mysql
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql.functions import FunctionElement

NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 100

# MySQL TIMESTAMP drops fractional seconds unless a precision is given
TIMESTAMP_PRECISION = 6


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class current_timestamp(FunctionElement):
    """CURRENT_TIMESTAMP column default matching the column precision."""

    type = TIMESTAMP(timezone=True)
    name = "current_timestamp"
    inherit_cache = True


@compiles(current_timestamp)
def _compile_current_timestamp(element, compiler, **kw):
    return "CURRENT_TIMESTAMP"


@compiles(current_timestamp, "mysql")
def _compile_current_timestamp_mysql(element, compiler, **kw):
    # The default's precision must equal the column's or MySQL rejects the DDL
    return f"CURRENT_TIMESTAMP({TIMESTAMP_PRECISION})"


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class Submission(Base):
    """
    A contact form entry.

    Column names follow the table created by the first Node deployment
    (nombre, mensaje, fecha) so existing databases keep working.
    """

    __tablename__ = "mensajes_nuevos"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        doc="Auto-incremented submission identifier",
    )
    name: Mapped[str] = mapped_column(
        "nombre",
        String(NAME_MAX_LENGTH),
        nullable=False,
        doc="Sender name, trimmed",
    )
    email: Mapped[str] = mapped_column(
        String(EMAIL_MAX_LENGTH),
        nullable=False,
        doc="Sender email, trimmed",
    )
    message: Mapped[str] = mapped_column(
        "mensaje",
        Text,
        nullable=False,
        doc="Message body, trimmed",
    )
    created_at: Mapped[datetime] = mapped_column(
        "fecha",
        TIMESTAMP(timezone=True).with_variant(
            mysql.TIMESTAMP(fsp=TIMESTAMP_PRECISION), "mysql"
        ),
        nullable=False,
        default=utcnow,
        server_default=current_timestamp(),
        index=True,
        doc="Insertion time, stored to the microsecond",
    )

    def __repr__(self) -> str:
        return f"<Submission(id={self.id}, email={self.email!r})>"
