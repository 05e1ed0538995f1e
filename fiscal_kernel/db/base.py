"""
Module: fiscal_kernel.db.base
Responsibility: Declarative base for the fiscal ORM models: the UUID primary
    key, the column type map, the constraint naming convention and the
    TrackedBase timestamps.
Architecture position: Kernel > DB.  Lowest-level import target of the
    persistence layer.  MUST NOT import from models/, services/, selectors/,
    domain/, or outer layers.

Invariants enforced:
    - Every row has a uuid4 primary key stored as String(36), so the same
      schema runs on PostgreSQL and SQLite.
    - datetime columns are timezone-aware.
    - Constraint and index names are deterministic (naming convention), so
      migrations and IntegrityError messages are stable across databases.
"""

from datetime import datetime
from typing import ClassVar
from uuid import UUID as PyUUID, uuid4

from sqlalchemy import DateTime, MetaData, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class UUIDString(TypeDecorator):
    """UUID stored as its 36-character string form."""

    impl = String(36)
    cache_ok = True

    @property
    def python_type(self):
        return PyUUID

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if not isinstance(value, PyUUID):
            value = PyUUID(str(value))
        return str(value)

    def process_result_value(self, value, dialect):
        return PyUUID(value) if value is not None else None


class Base(DeclarativeBase):
    """Declarative base: UUID id plus the shared column type map."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    type_annotation_map: ClassVar[dict] = {
        datetime: DateTime(timezone=True),
        PyUUID: UUIDString(),
    }

    id: Mapped[PyUUID] = mapped_column(primary_key=True, default=uuid4)


class TrackedBase(Base):
    """
    Abstract base with row timestamps.

    created_at is set by the database on INSERT; updated_at also moves on
    every UPDATE.  Both are timezone-aware.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
    )
