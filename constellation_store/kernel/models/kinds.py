"""
Component kinds, operation tags and owner references.

ComponentKind is the closed set of versioned component tables. Every
capability (deletable, name-like, record-level) is a static property of the
enum rather than a lookup keyed on runtime classes.
"""

from dataclasses import dataclass
from enum import Enum


class ComponentKind(str, Enum):
    """Versioned component tables; values are the SQL table names."""

    RECORD = "constellation"
    NAME = "name"
    CONTRIBUTOR = "name_contributor"
    DATE = "date_range"
    PLACE = "place_link"
    SCM = "scm"
    LANGUAGE = "language"
    SOURCE = "source"
    BIOG_HIST = "biog_hist"
    NATIONALITY = "nationality"
    OCCUPATION = "occupation"
    FUNCTION = "function"
    GENDER = "gender"
    LEGAL_STATUS = "legal_status"
    SUBJECT = "subject"
    OTHER_ID = "otherid"
    STRUCTURE_GENEALOGY = "structure_genealogy"
    GENERAL_CONTEXT = "general_context"
    MANDATE = "mandate"
    CONVENTION_DECLARATION = "convention_declaration"
    RELATION = "related_identity"
    RESOURCE_RELATION = "related_resource"

    @property
    def deletable(self) -> bool:
        """Whether soft delete / clear delete may target this kind."""
        # The record core is retired through the ledger (status "deleted")
        return self is not ComponentKind.RECORD

    @property
    def name_like(self) -> bool:
        """Kinds guarded by the at-least-one-name invariant."""
        return self is ComponentKind.NAME

    @property
    def record_level(self) -> bool:
        """Kinds that may only be owned by the record itself."""
        return self not in (
            ComponentKind.RECORD,
            ComponentKind.CONTRIBUTOR,
            ComponentKind.DATE,
            ComponentKind.PLACE,
            ComponentKind.SCM,
            ComponentKind.LANGUAGE,
            ComponentKind.SOURCE,
        )


class Operation(str, Enum):
    """Write operation a graph node asks for. No tag, or NONE, means untouched."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    NONE = "none"


@dataclass(frozen=True)
class OwnerRef:
    """Owning component of a row: (kind, id)."""

    kind: ComponentKind
    id: int

    def __post_init__(self) -> None:
        if not isinstance(self.kind, ComponentKind):
            raise TypeError(f"OwnerRef.kind must be a ComponentKind, got {self.kind!r}")
        if isinstance(self.id, bool) or not isinstance(self.id, int) or self.id < 1:
            raise ValueError(f"OwnerRef.id must be a positive integer, got {self.id!r}")

    @classmethod
    def record(cls, record_id: int) -> "OwnerRef":
        return cls(ComponentKind.RECORD, record_id)

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.id}"
