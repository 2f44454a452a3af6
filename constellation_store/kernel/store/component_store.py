"""
Component store: append-only, versioned, soft-deletable rows.

One generic contract serves every component kind. A row is never updated
in place: writing, deleting and undeleting all insert a new row stamped with
the pass version. The effective state of a component at version V is its row
with the greatest version <= V, dropped when that row is a delete marker.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import and_, desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from constellation_store.exceptions import (
    InvariantViolation,
    ReferentialIntegrityError,
    StorageFailure,
    UnsupportedComponent,
)
from constellation_store.kernel.models.base import BOOKKEEPING_COLUMNS, VersionedComponentMixin
from constellation_store.kernel.models.components import model_for
from constellation_store.kernel.models.kinds import ComponentKind, OwnerRef
from constellation_store.logging_config import get_logger
from constellation_store.schemas.common import VersionInfo

logger = get_logger(__name__)


class ComponentStore:
    """
    Versioned row storage for every component kind.

    Usage:
        store = ComponentStore(session)
        name_id = await store.write(
            ComponentKind.NAME,
            OwnerRef.record(stamp.record_id),
            None,
            stamp,
            {"original": "Jane Doe"},
        )
        names = await store.read(ComponentKind.NAME, OwnerRef.record(stamp.record_id), stamp.version)

    The store only flushes; committing is up to the caller.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def write(
        self,
        kind: ComponentKind,
        owner: OwnerRef,
        component_id: Optional[int],
        stamp: VersionInfo,
        fields: Dict[str, Any],
    ) -> int:
        """
        Insert a new row for a component.

        Args:
            kind: Component kind (selects the table)
            owner: Owning component
            component_id: Existing component id, or None to mint one
            stamp: Record id and version of the current pass
            fields: Kind-specific column values

        Returns:
            The component id

        Raises:
            ReferentialIntegrityError: component_id was never written, or
                belongs to another record
            StorageFailure: the database rejected the write
        """
        self._check_owner(kind, owner)
        model = model_for(kind)

        if kind is ComponentKind.RECORD:
            component_id = stamp.record_id
        elif component_id is None:
            component_id = await self._mint_id(model)
        else:
            main_id = await self._main_id_of(model, component_id)
            if main_id is None:
                raise ReferentialIntegrityError("unknown component id", kind=kind.value, component_id=component_id)
            if main_id != stamp.record_id:
                raise ReferentialIntegrityError(
                    f"component belongs to record {main_id}",
                    kind=kind.value,
                    component_id=component_id,
                )

        row = model(
            id=component_id,
            version=stamp.version,
            main_id=stamp.record_id,
            owner_kind=owner.kind.value,
            owner_id=owner.id,
            is_deleted=False,
            **fields,
        )
        self.session.add(row)
        await self._flush(kind, component_id)
        return component_id

    async def read(
        self,
        kind: ComponentKind,
        owner: OwnerRef,
        ceiling: int,
    ) -> List[VersionedComponentMixin]:
        """
        Effective rows owned by ``owner`` at version ``ceiling``.

        Components whose effective row is a delete marker are left out.
        Rows come back ordered by component id.
        """
        model = model_for(kind)
        latest = (
            select(model.id, func.max(model.version).label("version"))
            .where(
                model.owner_kind == owner.kind.value,
                model.owner_id == owner.id,
                model.version <= ceiling,
            )
            .group_by(model.id)
            .subquery()
        )
        stmt = (
            select(model)
            .join(latest, and_(model.id == latest.c.id, model.version == latest.c.version))
            .where(model.is_deleted.is_(False))
            .order_by(model.id)
        )
        result = await self._execute(stmt, kind)
        return list(result.scalars().all())

    async def effective_row(
        self,
        kind: ComponentKind,
        component_id: int,
        ceiling: Optional[int] = None,
    ) -> Optional[VersionedComponentMixin]:
        """Row with the greatest version <= ceiling, delete markers included."""
        model = model_for(kind)
        stmt = select(model).where(model.id == component_id)
        if ceiling is not None:
            stmt = stmt.where(model.version <= ceiling)
        stmt = stmt.order_by(desc(model.version)).limit(1)
        result = await self._execute(stmt, kind, component_id)
        return result.scalar_one_or_none()

    async def active_name_count(
        self,
        record_id: int,
        ceiling: int,
        excluding: Optional[int] = None,
    ) -> int:
        """Number of non-deleted names of a record at ``ceiling``."""
        names = await self.read(ComponentKind.NAME, OwnerRef.record(record_id), ceiling)
        return sum(1 for name in names if name.id != excluding)

    async def ensure_deletable(
        self,
        kind: ComponentKind,
        component_id: int,
        record_id: int,
        ceiling: int,
    ) -> VersionedComponentMixin:
        """
        Check that a soft delete at ``ceiling`` would be accepted.

        Returns:
            The component's effective row

        Raises:
            UnsupportedComponent: kind cannot be deleted
            ReferentialIntegrityError: component unknown or owned by another record
            InvariantViolation: the component is the record's last name
        """
        if not kind.deletable:
            raise UnsupportedComponent("soft delete not supported", kind=kind.value, component_id=component_id)

        current = await self.effective_row(kind, component_id, ceiling)
        if current is None:
            raise ReferentialIntegrityError("unknown component id", kind=kind.value, component_id=component_id)
        if current.main_id != record_id:
            raise ReferentialIntegrityError(
                f"component belongs to record {current.main_id}",
                kind=kind.value,
                component_id=component_id,
            )

        if kind.name_like and not current.is_deleted:
            others = await self.active_name_count(record_id, ceiling, excluding=component_id)
            if others == 0:
                raise InvariantViolation(
                    "cannot delete the last name of a constellation",
                    kind=kind.value,
                    component_id=component_id,
                )
        return current

    async def soft_delete(
        self,
        kind: ComponentKind,
        component_id: int,
        stamp: VersionInfo,
    ) -> bool:
        """
        Write a delete marker copying the component's effective content.

        Deleting an already deleted component writes nothing.

        Raises:
            UnsupportedComponent, ReferentialIntegrityError, InvariantViolation:
                see ensure_deletable
            StorageFailure: the database rejected the write
        """
        current = await self.ensure_deletable(kind, component_id, stamp.record_id, stamp.version)
        if current.is_deleted:
            logger.debug("%s %s already deleted", kind.value, component_id)
            return True

        self.session.add(self._copy_row(current, stamp.version, is_deleted=True))
        await self._flush(kind, component_id)
        logger.info("Soft deleted %s %s at version %s", kind.value, component_id, stamp.version)
        return True

    async def clear_delete(
        self,
        kind: ComponentKind,
        component_id: int,
        stamp: VersionInfo,
    ) -> int:
        """
        Reinstate a deleted component with its last non-deleted content.

        Clearing a component that is not deleted writes nothing.

        Returns:
            The component id
        """
        if not kind.deletable:
            raise UnsupportedComponent("undelete not supported", kind=kind.value, component_id=component_id)

        current = await self.effective_row(kind, component_id, stamp.version)
        if current is None or current.main_id != stamp.record_id:
            raise ReferentialIntegrityError(
                "unknown component id for this record",
                kind=kind.value,
                component_id=component_id,
            )
        if not current.is_deleted:
            return component_id

        model = model_for(kind)
        stmt = (
            select(model)
            .where(model.id == component_id, model.is_deleted.is_(False), model.version <= stamp.version)
            .order_by(desc(model.version))
            .limit(1)
        )
        result = await self._execute(stmt, kind, component_id)
        content = result.scalar_one_or_none()
        if content is None:
            raise ReferentialIntegrityError("no content to reinstate", kind=kind.value, component_id=component_id)

        self.session.add(self._copy_row(content, stamp.version, is_deleted=False))
        await self._flush(kind, component_id)
        logger.info("Cleared delete of %s %s at version %s", kind.value, component_id, stamp.version)
        return component_id

    async def retire_others(
        self,
        kind: ComponentKind,
        owner: OwnerRef,
        keep_id: int,
        stamp: VersionInfo,
    ) -> List[int]:
        """
        Delete every active ``kind`` row of ``owner`` except ``keep_id``.

        Used for slots that hold a single component, so a replacement
        written in this pass leaves exactly one active row.

        Returns:
            Ids of the components deleted
        """
        retired = []
        for row in await self.read(kind, owner, stamp.version):
            if row.id != keep_id:
                self.session.add(self._copy_row(row, stamp.version, is_deleted=True))
                retired.append(row.id)
        if retired:
            await self._flush(kind, retired[0])
            logger.info("Replaced %s %s of %s at version %s", kind.value, retired, owner, stamp.version)
        return retired

    @staticmethod
    def _check_owner(kind: ComponentKind, owner: OwnerRef) -> None:
        if not isinstance(owner, OwnerRef):
            raise TypeError(f"owner must be an OwnerRef, got {owner!r}")
        if (kind.record_level or kind is ComponentKind.RECORD) and owner.kind is not ComponentKind.RECORD:
            raise ReferentialIntegrityError(f"must be owned by the record, not {owner}", kind=kind.value)
        if kind is ComponentKind.CONTRIBUTOR and owner.kind is not ComponentKind.NAME:
            raise ReferentialIntegrityError(f"must be owned by a name, not {owner}", kind=kind.value)

    @staticmethod
    def _copy_row(row: VersionedComponentMixin, version: int, *, is_deleted: bool) -> VersionedComponentMixin:
        model = type(row)
        content = {
            column.key: getattr(row, column.key)
            for column in model.__table__.columns
            if column.key not in BOOKKEEPING_COLUMNS
        }
        return model(
            id=row.id,
            version=version,
            main_id=row.main_id,
            owner_kind=row.owner_kind,
            owner_id=row.owner_id,
            is_deleted=is_deleted,
            **content,
        )

    async def _mint_id(self, model) -> int:
        result = await self._execute(select(func.coalesce(func.max(model.id), 0)), model.kind)
        return result.scalar_one() + 1

    async def _main_id_of(self, model, component_id: int) -> Optional[int]:
        stmt = select(model.main_id).where(model.id == component_id).limit(1)
        result = await self._execute(stmt, model.kind, component_id)
        return result.scalar_one_or_none()

    async def _execute(self, stmt, kind: ComponentKind, component_id: Optional[int] = None):
        try:
            return await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            logger.error("Query on %s failed: %s", kind.value, exc)
            raise StorageFailure(str(exc), kind=kind.value, component_id=component_id) from exc

    async def _flush(self, kind: ComponentKind, component_id: Optional[int]) -> None:
        try:
            await self.session.flush()
        except SQLAlchemyError as exc:
            logger.error("Write to %s failed: %s", kind.value, exc)
            raise StorageFailure(str(exc), kind=kind.value, component_id=component_id) from exc
