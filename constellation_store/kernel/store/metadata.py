"""
Control metadata (SCM) attachment.

Any component can carry SCM entries keyed by its own OwnerRef. Each entry
owns at most one language and one citation source, and the citation owns
at most one language of its own.
"""

from typing import List

from constellation_store.kernel.models.kinds import ComponentKind, OwnerRef
from constellation_store.kernel.store.component_store import ComponentStore
from constellation_store.kernel.store.nodes import PendingDelete, load_fields, persist_node, replace_in_slot
from constellation_store.kernel.vocabulary.term_resolver import TermResolver
from constellation_store.logging_config import get_logger
from constellation_store.schemas.common import VersionInfo
from constellation_store.schemas.constellation import ComponentNode, ControlMetadata, Language, Source

logger = get_logger(__name__)


class ControlMetadataAttachment:
    """
    Writes and reads SCM entries for any owning component.

    Usage:
        metadata = ControlMetadataAttachment(store, resolver)
        await metadata.write(OwnerRef(ComponentKind.NAME, name_id), name.scm, stamp, pending)
        name.scm = await metadata.read(OwnerRef(ComponentKind.NAME, name_id), version)
    """

    def __init__(self, store: ComponentStore, resolver: TermResolver):
        self.store = store
        self.resolver = resolver

    async def write(
        self,
        owner: OwnerRef,
        entries: List[ControlMetadata],
        stamp: VersionInfo,
        pending: List[PendingDelete],
    ) -> None:
        """
        Persist each entry, then its language and citation under the entry's id.

        Language and citation are single-valued: writing a replacement
        deletes the row it replaces in the same pass.
        """
        for entry in entries:
            entry_id = await persist_node(self.store, self.resolver, entry, owner, stamp, pending)
            if entry_id is None:
                continue
            entry_ref = OwnerRef(ComponentKind.SCM, entry_id)
            if entry.language is not None:
                await self._write_leaf(entry.language, entry_ref, stamp, pending)
            citation = entry.citation
            if citation is not None:
                citation_id = await persist_node(self.store, self.resolver, citation, entry_ref, stamp, pending)
                await replace_in_slot(self.store, citation, entry_ref, stamp)
                if citation_id is not None:
                    citation_ref = OwnerRef(ComponentKind.SOURCE, citation_id)
                    if citation.language is not None:
                        await self._write_leaf(citation.language, citation_ref, stamp, pending)
                    await self.write(citation_ref, citation.scm, stamp, pending)
            await self.write(entry_ref, entry.scm, stamp, pending)

    async def read(self, owner: OwnerRef, ceiling: int) -> List[ControlMetadata]:
        """Every SCM entry of ``owner`` at ``ceiling``, with language and citation."""
        entries = []
        for row in await self.store.read(ComponentKind.SCM, owner, ceiling):
            entry = ControlMetadata(**await load_fields(ControlMetadata, row, self.resolver))
            entry_ref = OwnerRef(ComponentKind.SCM, row.id)
            for language in await self._read_languages(entry_ref, ceiling):
                entry.attach_language(language)
            for source_row in await self.store.read(ComponentKind.SOURCE, entry_ref, ceiling):
                citation = Source(**await load_fields(Source, source_row, self.resolver))
                citation_ref = OwnerRef(ComponentKind.SOURCE, source_row.id)
                for language in await self._read_languages(citation_ref, ceiling):
                    citation.attach_language(language)
                citation.scm = await self.read(citation_ref, ceiling)
                entry.attach_source(citation)
            entry.scm = await self.read(entry_ref, ceiling)
            entries.append(entry)
        if entries:
            logger.debug("Read %d scm entries for %s at version %s", len(entries), owner, ceiling)
        return entries

    async def _write_leaf(
        self,
        node: ComponentNode,
        owner: OwnerRef,
        stamp: VersionInfo,
        pending: List[PendingDelete],
    ) -> None:
        node_id = await persist_node(self.store, self.resolver, node, owner, stamp, pending)
        await replace_in_slot(self.store, node, owner, stamp)
        if node_id is not None:
            await self.write(OwnerRef(node.kind, node_id), node.scm, stamp, pending)

    async def _read_languages(self, owner: OwnerRef, ceiling: int) -> List[Language]:
        languages = []
        for row in await self.store.read(ComponentKind.LANGUAGE, owner, ceiling):
            language = Language(**await load_fields(Language, row, self.resolver))
            language.scm = await self.read(OwnerRef(ComponentKind.LANGUAGE, row.id), ceiling)
            languages.append(language)
        return languages
