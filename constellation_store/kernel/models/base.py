"""
Base model with common fields and utilities.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""


class VersionedComponentMixin:
    """
    Append-only versioned row.

    ``id`` is the component id, stable across versions; ``row_id`` is the
    physical row. A component's history is every row sharing ``id``; rows
    are never updated in place.
    """

    row_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    # Owning record (constellation id)
    main_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
    )
    owner_kind: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
    )
    owner_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    is_deleted: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    @declared_attr.directive
    def __table_args__(cls):
        return (
            Index(f"ix_{cls.__tablename__}_id_version", "id", "version", unique=True),
            Index(f"ix_{cls.__tablename__}_owner", "owner_kind", "owner_id", "version"),
        )

    def __repr__(self) -> str:
        state = " deleted" if self.is_deleted else ""
        return f"<{type(self).__name__} {self.id} v{self.version}{state}>"


BOOKKEEPING_COLUMNS = frozenset(
    {"row_id", "id", "version", "main_id", "owner_kind", "owner_id", "is_deleted", "created_at"}
)
