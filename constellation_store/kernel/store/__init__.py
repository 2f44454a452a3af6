"""
Versioned component storage and control metadata attachment.
"""

from constellation_store.kernel.store.component_store import ComponentStore
from constellation_store.kernel.store.metadata import ControlMetadataAttachment
from constellation_store.kernel.store.nodes import (
    PendingDelete,
    check_references,
    load_fields,
    persist_node,
    replace_in_slot,
)

__all__ = [
    "ComponentStore",
    "ControlMetadataAttachment",
    "PendingDelete",
    "check_references",
    "load_fields",
    "persist_node",
    "replace_in_slot",
]
