"""
Read assembler: rebuilds a constellation graph as of a version.
"""

from typing import Type

from sqlalchemy.ext.asyncio import AsyncSession

from constellation_store.exceptions import ReferentialIntegrityError
from constellation_store.kernel.ledger.version_ledger import VersionLedger
from constellation_store.kernel.models.base import VersionedComponentMixin
from constellation_store.kernel.models.kinds import ComponentKind, OwnerRef
from constellation_store.kernel.store.component_store import ComponentStore
from constellation_store.kernel.store.metadata import ControlMetadataAttachment
from constellation_store.kernel.store.nodes import load_fields
from constellation_store.kernel.vocabulary.term_resolver import TermResolver
from constellation_store.logging_config import get_logger
from constellation_store.schemas.constellation import ComponentNode, Constellation, node_type

logger = get_logger(__name__)


class ReadAssembler:
    """
    Hydrates a Constellation at an explicit version ceiling.

    Every node carries its own effective (id, version); the root carries the
    ceiling the graph was read at.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.ledger = VersionLedger(session)
        self.store = ComponentStore(session)
        self.resolver = TermResolver(session)
        self.metadata = ControlMetadataAttachment(self.store, self.resolver)

    async def assemble(self, record_id: int, version: int) -> Constellation:
        """
        Read a record as of ``version``.

        A ceiling above the latest version reads the latest version.

        Raises:
            ReferentialIntegrityError: unknown record, a version before the
                record existed, or an unresolvable vocabulary reference
        """
        first = await self.ledger.first_version(record_id)
        if first is None:
            raise ReferentialIntegrityError("unknown record", kind=ComponentKind.RECORD.value, component_id=record_id)
        if version < first:
            raise ReferentialIntegrityError(
                f"no version at or below {version}",
                kind=ComponentKind.RECORD.value,
                component_id=record_id,
            )
        ceiling = min(version, await self.ledger.latest_version(record_id))

        core = await self.store.effective_row(ComponentKind.RECORD, record_id, ceiling)
        if core is None:
            raise ReferentialIntegrityError(
                f"no record core at version {ceiling}",
                kind=ComponentKind.RECORD.value,
                component_id=record_id,
            )

        graph = await self._hydrate(Constellation, core, ceiling)
        record_ref = OwnerRef.record(record_id)
        for kind, _ in Constellation.collections:
            for row in await self.store.read(kind, record_ref, ceiling):
                graph.attach_component(await self._hydrate(node_type(kind), row, ceiling))
        graph.version = ceiling

        logger.info("Assembled record %s at version %s", record_id, ceiling)
        return graph

    async def _hydrate(
        self,
        node_cls: Type[ComponentNode],
        row: VersionedComponentMixin,
        ceiling: int,
    ) -> ComponentNode:
        node = node_cls(**await load_fields(node_cls, row, self.resolver))
        node_ref = OwnerRef(node_cls.kind, row.id)
        for kind in node_cls.nested_kinds:
            for child_row in await self.store.read(kind, node_ref, ceiling):
                node.attach(await self._hydrate(node_type(kind), child_row, ceiling))
        node.scm = await self.metadata.read(node_ref, ceiling)
        return node
