"""
Stable Kernel Layer

The storage core of the constellation store:
- Version ledger (one append-only history row per write pass)
- Component store (append-only versioned rows with soft delete)
- Control metadata attachment
- Vocabulary resolution

Invariants:
- Rows are never updated in place; every change is a new (id, version) row
- The kernel never commits; the caller owns the transaction
"""

from constellation_store.kernel.models import (
    Base,
    ComponentKind,
    Operation,
    OwnerRef,
    VersionHistory,
    VersionStatus,
    VocabularyTerm,
    GeoPlace,
)

__all__ = [
    "Base",
    "ComponentKind",
    "Operation",
    "OwnerRef",
    "VersionHistory",
    "VersionStatus",
    "VocabularyTerm",
    "GeoPlace",
]
