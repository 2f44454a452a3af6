"""
Helpers shared by the write and read paths for moving one graph node in
and out of the component store.
"""

from typing import Any, Dict, List, Optional, Type

from constellation_store.exceptions import ReferentialIntegrityError
from constellation_store.kernel.models.base import VersionedComponentMixin
from constellation_store.kernel.models.kinds import Operation, OwnerRef
from constellation_store.kernel.store.component_store import ComponentStore
from constellation_store.kernel.vocabulary.term_resolver import TermResolver
from constellation_store.schemas.common import VersionInfo
from constellation_store.schemas.constellation import ComponentNode


class PendingDelete:
    """A delete found during the walk, executed after all writes of the pass."""

    __slots__ = ("node", "owner")

    def __init__(self, node: ComponentNode, owner: OwnerRef):
        self.node = node
        self.owner = owner

    def __repr__(self) -> str:
        return f"<PendingDelete {self.node.kind.value} {self.node.id} of {self.owner}>"


async def check_references(node: ComponentNode, resolver: TermResolver) -> None:
    """
    Resolve every Term and GeoTerm a node refers to.

    Raises:
        ReferentialIntegrityError: a referenced id is not in the vocabulary
    """
    for name in node.term_fields:
        ref = getattr(node, name)
        if ref is not None:
            await resolver.resolve(ref.id)
    for name in node.geo_fields:
        ref = getattr(node, name)
        if ref is not None:
            await resolver.resolve_geo(ref.id)


async def persist_node(
    store: ComponentStore,
    resolver: TermResolver,
    node: ComponentNode,
    owner: OwnerRef,
    stamp: VersionInfo,
    pending: List[PendingDelete],
) -> Optional[int]:
    """
    Apply one node's operation tag.

    Returns the node's component id when its nested components should be
    visited, or None for a delete (nested components are not visited).
    Written nodes get the pass version and their tag cleared.
    """
    operation = node.parsed_operation()

    if operation is Operation.DELETE:
        if node.id is None:
            raise ReferentialIntegrityError("delete requested without a component id", kind=node.kind.value)
        pending.append(PendingDelete(node, owner))
        return None

    if operation is not None or node.id is None:
        await check_references(node, resolver)
        requested_id = None if operation is Operation.INSERT else node.id
        node.id = await store.write(node.kind, owner, requested_id, stamp, node.to_columns())
        node.version = stamp.version
        node.operation = None

    return node.id


async def replace_in_slot(
    store: ComponentStore,
    child: ComponentNode,
    owner: OwnerRef,
    stamp: VersionInfo,
) -> None:
    """After ``child`` is written into a single-valued slot, retire what it replaced."""
    if child.id is None or child.operation is not None or child.version != stamp.version:
        return
    await store.retire_others(child.kind, owner, child.id, stamp)


async def load_fields(
    node_cls: Type[ComponentNode],
    row: VersionedComponentMixin,
    resolver: TermResolver,
) -> Dict[str, Any]:
    """Constructor arguments for a graph node from its effective row."""
    values: Dict[str, Any] = {"id": row.id, "version": row.version}
    for name in node_cls.scalar_fields:
        values[name] = getattr(row, name)
    for name in node_cls.term_fields:
        values[name] = await resolver.resolve_optional(getattr(row, f"{name}_id"))
    for name in node_cls.geo_fields:
        values[name] = await resolver.resolve_geo_optional(getattr(row, f"{name}_id"))
    return values
