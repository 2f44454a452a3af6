"""
Constellation service: the in-process entry point of the store.

Each call runs under its own operation id for log correlation. The service
never commits; wrap calls in ``database.session_scope()`` so a failed write
pass rolls back together with its ledger row.
"""

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from constellation_store.config import Settings, get_settings
from constellation_store.exceptions import InvariantViolation, ReferentialIntegrityError, UnsupportedComponent
from constellation_store.kernel.ledger.version_ledger import VersionLedger
from constellation_store.kernel.models.kinds import ComponentKind
from constellation_store.kernel.models.version_history import VersionStatus
from constellation_store.kernel.store.component_store import ComponentStore
from constellation_store.kernel.vocabulary.term_resolver import TermResolver
from constellation_store.logging_config import get_logger, operation_scope
from constellation_store.orchestration.read_assembler import ReadAssembler
from constellation_store.orchestration.write_orchestrator import WriteOrchestrator
from constellation_store.schemas.common import (
    DeleteOutcome,
    DeleteRejection,
    Editor,
    HistoryEntry,
    VersionInfo,
    WriteResult,
)
from constellation_store.schemas.constellation import ComponentNode, Constellation
from constellation_store.schemas.term import Term

logger = get_logger(__name__)


class ConstellationService:
    """
    Write, read, delete and publish constellations.

    Usage:
        async with session_scope() as session:
            service = ConstellationService(session)
            result = await service.write(graph, VersionStatus.NEEDS_REVIEW, "new record")
            await service.publish(result.record_id)
    """

    def __init__(self, session: AsyncSession, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or get_settings()
        self.ledger = VersionLedger(session)
        self.store = ComponentStore(session)
        self.resolver = TermResolver(session)
        self.orchestrator = WriteOrchestrator(session)
        self.assembler = ReadAssembler(session)

    def default_editor(self) -> Editor:
        return Editor(user_id=self.settings.system_user_id, role_id=self.settings.system_role_id)

    async def write(
        self,
        graph: Constellation,
        status: VersionStatus,
        note: Optional[str] = None,
        editor: Optional[Editor] = None,
    ) -> WriteResult:
        """Apply a tagged graph as one new version. See WriteOrchestrator.write."""
        with operation_scope("write"):
            return await self.orchestrator.write(graph, editor or self.default_editor(), status, note)

    async def read(self, record_id: int, version: Optional[int] = None) -> Constellation:
        """
        Read a record.

        Args:
            record_id: Record to read
            version: Version ceiling; None reads the latest published version

        Raises:
            ReferentialIntegrityError: unknown record, nothing published, or
                an unresolvable reference
        """
        with operation_scope("read"):
            if version is None:
                version = await self.ledger.latest_version(record_id, VersionStatus.PUBLISHED)
                if version is None:
                    raise ReferentialIntegrityError(
                        "no published version",
                        kind=ComponentKind.RECORD.value,
                        component_id=record_id,
                    )
            return await self.assembler.assemble(record_id, version)

    async def soft_delete(
        self,
        record_id: int,
        component: ComponentNode,
        editor: Optional[Editor] = None,
        note: Optional[str] = None,
        status: Optional[VersionStatus] = None,
    ) -> DeleteOutcome:
        """
        Delete one component in its own version.

        A delete refused by the last-name invariant mints nothing and is
        reported in the outcome. The new version keeps the record's current
        status unless ``status`` is given.
        """
        with operation_scope("delete"):
            kind = component.kind
            if component.id is None:
                raise ReferentialIntegrityError("delete requested without a component id", kind=kind.value)
            latest = await self._require_latest(record_id)

            try:
                await self.store.ensure_deletable(kind, component.id, record_id, latest)
            except InvariantViolation as exc:
                logger.warning("Delete of %s %s rejected: %s", kind.value, component.id, exc.reason)
                return DeleteOutcome(
                    deleted=False,
                    record_id=record_id,
                    rejection=DeleteRejection(kind=kind, component_id=component.id, reason=exc.reason),
                )

            stamp = await self._mint(record_id, editor, status, note)
            await self.store.soft_delete(kind, component.id, stamp)
            return DeleteOutcome(deleted=True, record_id=record_id, version=stamp.version)

    async def clear_delete(
        self,
        record_id: int,
        kind: ComponentKind,
        component_id: int,
        editor: Optional[Editor] = None,
        note: Optional[str] = None,
        status: Optional[VersionStatus] = None,
    ) -> int:
        """
        Reinstate a deleted component in its own version.

        Returns the new version, or the record's latest version when the
        component was not deleted and nothing was minted.
        """
        with operation_scope("undelete"):
            kind = ComponentKind(kind)
            if not kind.deletable:
                raise UnsupportedComponent("undelete not supported", kind=kind.value, component_id=component_id)
            latest = await self._require_latest(record_id)
            current = await self.store.effective_row(kind, component_id, latest)
            if current is None or current.main_id != record_id:
                raise ReferentialIntegrityError(
                    "unknown component id for this record",
                    kind=kind.value,
                    component_id=component_id,
                )
            if not current.is_deleted:
                logger.debug("%s %s is not deleted", kind.value, component_id)
                return latest

            stamp = await self._mint(record_id, editor, status, note)
            await self.store.clear_delete(kind, component_id, stamp)
            return stamp.version

    async def publish(
        self,
        record_id: int,
        editor: Optional[Editor] = None,
        note: Optional[str] = None,
    ) -> int:
        """Status-only transition to published. Returns the new version."""
        with operation_scope("publish"):
            return await self.ledger.append_status(
                record_id, editor or self.default_editor(), VersionStatus.PUBLISHED, note
            )

    async def search_vocabulary(self, term_type: str, query: str, limit: Optional[int] = None) -> List[Term]:
        return await self.resolver.search(term_type, query, limit or self.settings.vocabulary_search_limit)

    async def history(self, record_id: int) -> List[HistoryEntry]:
        return await self.ledger.history(record_id)

    async def _require_latest(self, record_id: int) -> int:
        latest = await self.ledger.latest_version(record_id)
        if latest is None:
            raise ReferentialIntegrityError("unknown record", kind=ComponentKind.RECORD.value, component_id=record_id)
        return latest

    async def _mint(
        self,
        record_id: int,
        editor: Optional[Editor],
        status: Optional[VersionStatus],
        note: Optional[str],
    ) -> VersionInfo:
        if status is None:
            status = await self.ledger.current_status(record_id)
        return await self.ledger.mint_version(record_id, editor or self.default_editor(), status, note)
