"""
Version history ledger tables.

Every write pass appends one VersionHistory row; rows are never updated.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from constellation_store.kernel.models.base import Base


class VersionStatus(str, Enum):
    """Status recorded with each constellation version."""

    LOCKED_EDITING = "locked editing"
    CURRENTLY_EDITING = "currently editing"
    NEEDS_REVIEW = "needs review"
    REJECTED = "rejected"
    PUBLISHED = "published"
    DELETED = "deleted"
    INGEST_CPF = "ingest cpf"
    BULK_INGEST = "bulk ingest"


class ConstellationIdentity(Base):
    """Allocator for constellation ids (main_id)."""

    __tablename__ = "constellation_identity"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


class VersionHistory(Base):
    """One immutable ledger entry per (main_id, version)."""

    __tablename__ = "version_history"

    row_id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    main_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    version: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    # Attribution
    user_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )
    role_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
    )

    status: Mapped[VersionStatus] = mapped_column(
        String(50),
        nullable=False,
    )
    note: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_version_history_main_version", "main_id", "version", unique=True),
        Index("ix_version_history_main_status", "main_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<VersionHistory {self.main_id} v{self.version} {self.status}>"
