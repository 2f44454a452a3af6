"""
Kernel Data Models

SQLAlchemy models for the versioned constellation store: the version
history ledger, the controlled vocabulary, and one append-only table per
component kind.
"""

from constellation_store.kernel.models.base import Base, VersionedComponentMixin, BOOKKEEPING_COLUMNS
from constellation_store.kernel.models.kinds import ComponentKind, Operation, OwnerRef
from constellation_store.kernel.models.version_history import (
    ConstellationIdentity,
    VersionHistory,
    VersionStatus,
)
from constellation_store.kernel.models.vocabulary import VocabularyTerm, GeoPlace
from constellation_store.kernel.models.components import (
    COMPONENT_MODELS,
    model_for,
    ConstellationRow,
    NameRow,
    NameContributorRow,
    DateRangeRow,
    PlaceLinkRow,
    ControlMetadataRow,
    LanguageRow,
    SourceRow,
    BiogHistRow,
    NationalityRow,
    GenderRow,
    LegalStatusRow,
    SubjectRow,
    OccupationRow,
    FunctionRow,
    OtherRecordIdRow,
    StructureOrGenealogyRow,
    GeneralContextRow,
    MandateRow,
    ConventionDeclarationRow,
    RelatedIdentityRow,
    RelatedResourceRow,
)

__all__ = [
    # Base
    "Base",
    "VersionedComponentMixin",
    "BOOKKEEPING_COLUMNS",
    # Kinds
    "ComponentKind",
    "Operation",
    "OwnerRef",
    # Ledger
    "ConstellationIdentity",
    "VersionHistory",
    "VersionStatus",
    # Vocabulary
    "VocabularyTerm",
    "GeoPlace",
    # Components
    "COMPONENT_MODELS",
    "model_for",
    "ConstellationRow",
    "NameRow",
    "NameContributorRow",
    "DateRangeRow",
    "PlaceLinkRow",
    "ControlMetadataRow",
    "LanguageRow",
    "SourceRow",
    "BiogHistRow",
    "NationalityRow",
    "GenderRow",
    "LegalStatusRow",
    "SubjectRow",
    "OccupationRow",
    "FunctionRow",
    "OtherRecordIdRow",
    "StructureOrGenealogyRow",
    "GeneralContextRow",
    "MandateRow",
    "ConventionDeclarationRow",
    "RelatedIdentityRow",
    "RelatedResourceRow",
]
