"""
Write orchestrator.

Walks a constellation graph and applies each node's operation tag:

    insert / update, or untagged without an id  -> write a new row
    untagged or "none" with an id               -> nothing written, descend
    delete                                      -> delete marker, do not descend

One version is minted for the whole pass. Deletes are collected during the
walk and applied after every write, so a pass that adds a name and deletes
the old one sees the new name when the last-name invariant is checked.
"""

from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from constellation_store.exceptions import InvariantViolation, ReferentialIntegrityError
from constellation_store.kernel.ledger.version_ledger import VersionLedger
from constellation_store.kernel.models.kinds import ComponentKind, Operation, OwnerRef
from constellation_store.kernel.models.version_history import VersionStatus
from constellation_store.kernel.store.component_store import ComponentStore
from constellation_store.kernel.store.metadata import ControlMetadataAttachment
from constellation_store.kernel.store.nodes import (
    PendingDelete,
    check_references,
    persist_node,
    replace_in_slot,
)
from constellation_store.kernel.vocabulary.term_resolver import TermResolver
from constellation_store.logging_config import get_logger
from constellation_store.schemas.common import DeleteRejection, Editor, VersionInfo, WriteResult
from constellation_store.schemas.constellation import ComponentNode, Constellation

logger = get_logger(__name__)


def validate_tags(graph: Constellation) -> None:
    """
    Check every operation tag in the graph before anything is written.

    Raises:
        BadOperationTag: a node carries an unrecognized tag
        ReferentialIntegrityError: a delete names no component id
    """
    for node in graph.walk():
        if node.parsed_operation() is Operation.DELETE and node.id is None:
            raise ReferentialIntegrityError("delete requested without a component id", kind=node.kind.value)


class WriteOrchestrator:
    """
    Applies a tagged constellation graph as one version.

    Usage:
        orchestrator = WriteOrchestrator(session)
        result = await orchestrator.write(graph, editor, VersionStatus.NEEDS_REVIEW, "added a name")

    The caller's graph is never modified; the result carries a copy with
    ids and versions filled in. Nothing is committed here: a failed pass
    leaves rows in the session that the caller must roll back.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.ledger = VersionLedger(session)
        self.store = ComponentStore(session)
        self.resolver = TermResolver(session)
        self.metadata = ControlMetadataAttachment(self.store, self.resolver)

    async def write(
        self,
        graph: Constellation,
        editor: Editor,
        status: VersionStatus,
        note: Optional[str] = None,
    ) -> WriteResult:
        """
        Run one write pass.

        Args:
            graph: Constellation with operation tags
            editor: User and role the version is attributed to
            status: Status of the minted version
            note: Commit message

        Returns:
            WriteResult with the updated graph copy and any rejected deletes

        Raises:
            BadOperationTag: unrecognized tag anywhere in the graph
            ReferentialIntegrityError: unknown record or component id
            StorageFailure: the database rejected a call
        """
        graph = graph.model_copy(deep=True)
        validate_tags(graph)
        operation = graph.parsed_operation()

        if operation is Operation.DELETE:
            return await self._retire(graph, editor, note)

        if operation is not Operation.INSERT and graph.id is None:
            raise ReferentialIntegrityError(
                "record id required unless the record is inserted",
                kind=ComponentKind.RECORD.value,
            )

        record_id = None if operation is Operation.INSERT else graph.id
        stamp = await self.ledger.mint_version(record_id, editor, status, note)
        logger.info("Write pass for record %s at version %s started", stamp.record_id, stamp.version)

        record_ref = OwnerRef.record(stamp.record_id)
        pending: List[PendingDelete] = []

        if operation is not None:
            await check_references(graph, self.resolver)
            await self.store.write(ComponentKind.RECORD, record_ref, stamp.record_id, stamp, graph.to_columns())
            graph.operation = None
        graph.id = stamp.record_id
        graph.version = stamp.version

        await self._write_nested(graph, record_ref, stamp, pending)
        for kind, _ in graph.collections:
            for component in graph.components_of(kind):
                await self._write_subtree(component, record_ref, stamp, pending)

        rejections = await self._apply_deletes(pending, stamp)
        logger.info(
            "Write pass for record %s at version %s finished (%d deletes, %d rejected)",
            stamp.record_id,
            stamp.version,
            len(pending),
            len(rejections),
        )
        return WriteResult(
            constellation=graph,
            record_id=stamp.record_id,
            version=stamp.version,
            rejections=rejections,
        )

    async def _retire(self, graph: Constellation, editor: Editor, note: Optional[str]) -> WriteResult:
        if graph.id is None:
            raise ReferentialIntegrityError("delete requested without a record id", kind=ComponentKind.RECORD.value)
        stamp = await self.ledger.mint_version(graph.id, editor, VersionStatus.DELETED, note)
        graph.version = stamp.version
        logger.info("Record %s marked deleted at version %s", stamp.record_id, stamp.version)
        return WriteResult(constellation=graph, record_id=stamp.record_id, version=stamp.version)

    async def _write_subtree(
        self,
        node: ComponentNode,
        owner: OwnerRef,
        stamp: VersionInfo,
        pending: List[PendingDelete],
    ) -> None:
        node_id = await persist_node(self.store, self.resolver, node, owner, stamp, pending)
        if node_id is not None:
            await self._write_nested(node, OwnerRef(node.kind, node_id), stamp, pending)

    async def _write_nested(
        self,
        node: ComponentNode,
        node_ref: OwnerRef,
        stamp: VersionInfo,
        pending: List[PendingDelete],
    ) -> None:
        for kind in node.nested_kinds:
            for child in node.nested(kind):
                await self._write_subtree(child, node_ref, stamp, pending)
                if node.single_valued(kind):
                    await replace_in_slot(self.store, child, node_ref, stamp)
        await self.metadata.write(node_ref, node.scm, stamp, pending)

    async def _apply_deletes(self, pending: List[PendingDelete], stamp: VersionInfo) -> List[DeleteRejection]:
        rejections = []
        for item in pending:
            node = item.node
            try:
                await self.store.soft_delete(node.kind, node.id, stamp)
            except InvariantViolation as exc:
                logger.warning("Delete of %s %s rejected: %s", node.kind.value, node.id, exc.reason)
                rejections.append(DeleteRejection(kind=node.kind, component_id=node.id, reason=exc.reason))
                continue
            node.version = stamp.version
        return rejections
