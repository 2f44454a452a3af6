"""
Version history ledger.

Every write pass mints exactly one (record id, version) pair and records who
made it, with what status and note. Ledger rows are never updated.
"""

from typing import List, Optional

from sqlalchemy import desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from constellation_store.exceptions import ReferentialIntegrityError, StorageFailure
from constellation_store.kernel.models.version_history import (
    ConstellationIdentity,
    VersionHistory,
    VersionStatus,
)
from constellation_store.logging_config import get_logger
from constellation_store.schemas.common import Editor, HistoryEntry, VersionInfo

logger = get_logger(__name__)


class VersionLedger:
    """
    Mints versions and answers history queries.

    Usage:
        ledger = VersionLedger(session)
        stamp = await ledger.mint_version(None, editor, VersionStatus.NEEDS_REVIEW, "new record")
        # every row of the pass is written with stamp.version

    The ledger only flushes; committing is up to the caller.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def mint_version(
        self,
        record_id: Optional[int],
        editor: Editor,
        status: VersionStatus,
        note: Optional[str] = None,
    ) -> VersionInfo:
        """
        Mint the version shared by every row of one write pass.

        Args:
            record_id: Existing record id, or None to allocate a new record
            editor: User and role the version is attributed to
            status: Status stored with the version
            note: Free-text commit message

        Returns:
            The (record id, version) stamp

        Raises:
            ReferentialIntegrityError: record_id has no ledger entries
            StorageFailure: the database rejected the write
        """
        status = VersionStatus(status)
        try:
            if record_id is None:
                identity = ConstellationIdentity()
                self.session.add(identity)
                await self.session.flush()
                record_id = identity.id
                version = 1
            else:
                latest = await self._max_version(record_id)
                if latest is None:
                    raise ReferentialIntegrityError("unknown record", kind="constellation", component_id=record_id)
                version = latest + 1

            self.session.add(
                VersionHistory(
                    main_id=record_id,
                    version=version,
                    user_id=editor.user_id,
                    role_id=editor.role_id,
                    status=status.value,
                    note=note,
                )
            )
            await self.session.flush()
        except SQLAlchemyError as exc:
            logger.error("Minting version for record %s failed: %s", record_id, exc)
            raise StorageFailure(str(exc), kind="version_history", component_id=record_id) from exc

        logger.info("Minted version %s of record %s (%s)", version, record_id, status.value)
        return VersionInfo(record_id=record_id, version=version)

    async def append_status(
        self,
        record_id: int,
        editor: Editor,
        status: VersionStatus,
        note: Optional[str] = None,
    ) -> int:
        """Status-only transition: a new version with no component rows."""
        stamp = await self.mint_version(record_id, editor, status, note)
        return stamp.version

    async def latest_version(
        self,
        record_id: int,
        status: Optional[VersionStatus] = None,
    ) -> Optional[int]:
        """
        Latest version of a record, optionally restricted to one status.

        Returns None when the record has no matching entry.
        """
        if status is None:
            return await self._max_version(record_id)
        stmt = select(func.max(VersionHistory.version)).where(
            VersionHistory.main_id == record_id,
            VersionHistory.status == VersionStatus(status).value,
        )
        return await self._scalar(stmt, record_id)

    async def first_version(self, record_id: int) -> Optional[int]:
        stmt = select(func.min(VersionHistory.version)).where(VersionHistory.main_id == record_id)
        return await self._scalar(stmt, record_id)

    async def current_status(self, record_id: int) -> Optional[VersionStatus]:
        """Status of the latest version, or None for an unknown record."""
        stmt = (
            select(VersionHistory.status)
            .where(VersionHistory.main_id == record_id)
            .order_by(desc(VersionHistory.version))
            .limit(1)
        )
        status = await self._scalar(stmt, record_id)
        return VersionStatus(status) if status is not None else None

    async def history(self, record_id: int) -> List[HistoryEntry]:
        """Every ledger entry of a record, oldest first."""
        stmt = (
            select(VersionHistory)
            .where(VersionHistory.main_id == record_id)
            .order_by(VersionHistory.version)
        )
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StorageFailure(str(exc), kind="version_history", component_id=record_id) from exc
        return [
            HistoryEntry(
                record_id=row.main_id,
                version=row.version,
                user_id=row.user_id,
                role_id=row.role_id,
                status=row.status,
                note=row.note,
                created_at=row.created_at,
            )
            for row in result.scalars().all()
        ]

    async def _max_version(self, record_id: int) -> Optional[int]:
        stmt = select(func.max(VersionHistory.version)).where(VersionHistory.main_id == record_id)
        return await self._scalar(stmt, record_id)

    async def _scalar(self, stmt, record_id: int):
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StorageFailure(str(exc), kind="version_history", component_id=record_id) from exc
        return result.scalar_one_or_none()
