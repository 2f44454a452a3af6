"""
Pydantic schemas for constellation graphs and store results.
"""

from constellation_store.schemas.term import Term, GeoTerm
from constellation_store.schemas.constellation import (
    ComponentNode,
    Constellation,
    NameEntry,
    Contributor,
    DateRange,
    Place,
    ControlMetadata,
    Language,
    Source,
    BiogHist,
    Nationality,
    Occupation,
    Function,
    Gender,
    LegalStatus,
    Subject,
    OtherRecordId,
    StructureOrGenealogy,
    GeneralContext,
    Mandate,
    ConventionDeclaration,
    ConstellationRelation,
    ResourceRelation,
    node_type,
)
from constellation_store.schemas.common import (
    Editor,
    VersionInfo,
    HistoryEntry,
    DeleteRejection,
    DeleteOutcome,
    WriteResult,
)

__all__ = [
    # Vocabulary
    "Term",
    "GeoTerm",
    # Graph
    "ComponentNode",
    "Constellation",
    "NameEntry",
    "Contributor",
    "DateRange",
    "Place",
    "ControlMetadata",
    "Language",
    "Source",
    "BiogHist",
    "Nationality",
    "Occupation",
    "Function",
    "Gender",
    "LegalStatus",
    "Subject",
    "OtherRecordId",
    "StructureOrGenealogy",
    "GeneralContext",
    "Mandate",
    "ConventionDeclaration",
    "ConstellationRelation",
    "ResourceRelation",
    "node_type",
    # Results
    "Editor",
    "VersionInfo",
    "HistoryEntry",
    "DeleteRejection",
    "DeleteOutcome",
    "WriteResult",
]
