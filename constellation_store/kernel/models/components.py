"""
Versioned component tables.

Each table stores the full append-only history of one component kind. A row
is keyed by (id, version); ownership is generic (owner_kind, owner_id) so the
same dates/places/language/source/scm tables serve every owning kind.
Vocabulary references are stored as ``<field>_id`` integer columns.
"""

from typing import ClassVar, Dict, Optional, Type

from sqlalchemy import Boolean, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from constellation_store.kernel.models.base import Base, VersionedComponentMixin
from constellation_store.kernel.models.kinds import ComponentKind


class ConstellationRow(Base, VersionedComponentMixin):
    """Record core (id == main_id)."""

    __tablename__ = ComponentKind.RECORD.value
    kind: ClassVar[ComponentKind] = ComponentKind.RECORD

    ark: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    entity_type_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


class NameRow(Base, VersionedComponentMixin):
    __tablename__ = ComponentKind.NAME.value
    kind: ClassVar[ComponentKind] = ComponentKind.NAME

    original: Mapped[str] = mapped_column(Text, nullable=False)
    preference_score: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


class NameContributorRow(Base, VersionedComponentMixin):
    __tablename__ = ComponentKind.CONTRIBUTOR.value
    kind: ClassVar[ComponentKind] = ComponentKind.CONTRIBUTOR

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


class DateRangeRow(Base, VersionedComponentMixin):
    __tablename__ = ComponentKind.DATE.value
    kind: ClassVar[ComponentKind] = ComponentKind.DATE

    is_range: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    from_date: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    from_original: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    from_type_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    from_bc: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    from_not_before: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    from_not_after: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    to_date: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    to_original: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    to_type_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    to_bc: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    to_not_before: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    to_not_after: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class PlaceLinkRow(Base, VersionedComponentMixin):
    __tablename__ = ComponentKind.PLACE.value
    kind: ClassVar[ComponentKind] = ComponentKind.PLACE

    original: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    confirmed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    score: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    role_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    geo_term_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


class ControlMetadataRow(Base, VersionedComponentMixin):
    """SNAC control metadata (scm): provenance attached to any component."""

    __tablename__ = ComponentKind.SCM.value
    kind: ClassVar[ComponentKind] = ComponentKind.SCM

    sub_citation: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source_data: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    descriptive_rule_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class LanguageRow(Base, VersionedComponentMixin):
    __tablename__ = ComponentKind.LANGUAGE.value
    kind: ClassVar[ComponentKind] = ComponentKind.LANGUAGE

    language_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    script_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    vocabulary_source: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class SourceRow(Base, VersionedComponentMixin):
    __tablename__ = ComponentKind.SOURCE.value
    kind: ClassVar[ComponentKind] = ComponentKind.SOURCE

    text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    uri: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


class BiogHistRow(Base, VersionedComponentMixin):
    __tablename__ = ComponentKind.BIOG_HIST.value
    kind: ClassVar[ComponentKind] = ComponentKind.BIOG_HIST

    text: Mapped[str] = mapped_column(Text, nullable=False)


# Term-only components

class NationalityRow(Base, VersionedComponentMixin):
    __tablename__ = ComponentKind.NATIONALITY.value
    kind: ClassVar[ComponentKind] = ComponentKind.NATIONALITY

    term_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


class GenderRow(Base, VersionedComponentMixin):
    __tablename__ = ComponentKind.GENDER.value
    kind: ClassVar[ComponentKind] = ComponentKind.GENDER

    term_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


class LegalStatusRow(Base, VersionedComponentMixin):
    __tablename__ = ComponentKind.LEGAL_STATUS.value
    kind: ClassVar[ComponentKind] = ComponentKind.LEGAL_STATUS

    term_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


class SubjectRow(Base, VersionedComponentMixin):
    __tablename__ = ComponentKind.SUBJECT.value
    kind: ClassVar[ComponentKind] = ComponentKind.SUBJECT

    term_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


class OccupationRow(Base, VersionedComponentMixin):
    __tablename__ = ComponentKind.OCCUPATION.value
    kind: ClassVar[ComponentKind] = ComponentKind.OCCUPATION

    term_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    vocabulary_source: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class FunctionRow(Base, VersionedComponentMixin):
    __tablename__ = ComponentKind.FUNCTION.value
    kind: ClassVar[ComponentKind] = ComponentKind.FUNCTION

    function_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    term_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    vocabulary_source: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class OtherRecordIdRow(Base, VersionedComponentMixin):
    """sameAs / otherRecordId links."""

    __tablename__ = ComponentKind.OTHER_ID.value
    kind: ClassVar[ComponentKind] = ComponentKind.OTHER_ID

    text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    uri: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    type_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


# Free-text components

class StructureOrGenealogyRow(Base, VersionedComponentMixin):
    __tablename__ = ComponentKind.STRUCTURE_GENEALOGY.value
    kind: ClassVar[ComponentKind] = ComponentKind.STRUCTURE_GENEALOGY

    text: Mapped[str] = mapped_column(Text, nullable=False)


class GeneralContextRow(Base, VersionedComponentMixin):
    __tablename__ = ComponentKind.GENERAL_CONTEXT.value
    kind: ClassVar[ComponentKind] = ComponentKind.GENERAL_CONTEXT

    text: Mapped[str] = mapped_column(Text, nullable=False)


class MandateRow(Base, VersionedComponentMixin):
    __tablename__ = ComponentKind.MANDATE.value
    kind: ClassVar[ComponentKind] = ComponentKind.MANDATE

    text: Mapped[str] = mapped_column(Text, nullable=False)


class ConventionDeclarationRow(Base, VersionedComponentMixin):
    __tablename__ = ComponentKind.CONVENTION_DECLARATION.value
    kind: ClassVar[ComponentKind] = ComponentKind.CONVENTION_DECLARATION

    text: Mapped[str] = mapped_column(Text, nullable=False)


# Relations

class RelatedIdentityRow(Base, VersionedComponentMixin):
    """Constellation-to-constellation relation (cpfRelation)."""

    __tablename__ = ComponentKind.RELATION.value
    kind: ClassVar[ComponentKind] = ComponentKind.RELATION

    target_constellation: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    target_ark: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    target_entity_type_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    type_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    cpf_relation_type_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class RelatedResourceRow(Base, VersionedComponentMixin):
    """Constellation-to-archival-resource relation (resourceRelation)."""

    __tablename__ = ComponentKind.RESOURCE_RELATION.value
    kind: ClassVar[ComponentKind] = ComponentKind.RESOURCE_RELATION

    document_type_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    entry_type_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    link: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    role_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


COMPONENT_MODELS: Dict[ComponentKind, Type[VersionedComponentMixin]] = {
    model.kind: model
    for model in (
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
}


def model_for(kind: ComponentKind) -> Type[VersionedComponentMixin]:
    """ORM class storing the given component kind."""
    return COMPONENT_MODELS[kind]
