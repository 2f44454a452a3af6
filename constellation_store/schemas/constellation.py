"""
Constellation graph schemas.

A Constellation is the root of a graph of versioned components. Every node
carries its own (id, version) and an optional operation tag telling the
write orchestrator what to do with it.

Nested components attach through small capability methods
(``attach_language``, ``attach_date``, ...). Owners that hold a single
language or source (BiogHist, Source, ControlMetadata) implement them
differently from owners that hold lists (Constellation, NameEntry).
"""

from typing import Any, ClassVar, Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from constellation_store.exceptions import BadOperationTag, UnsupportedComponent
from constellation_store.kernel.models.kinds import ComponentKind, Operation
from constellation_store.schemas.term import GeoTerm, Term


class ComponentNode(BaseModel):
    """Base for every versioned node in a constellation graph."""

    model_config = ConfigDict(extra="forbid")

    kind: ClassVar[ComponentKind]
    # Columns copied verbatim to/from the component table
    scalar_fields: ClassVar[Tuple[str, ...]] = ()
    # Term references, stored as <field>_id
    term_fields: ClassVar[Tuple[str, ...]] = ()
    # GeoTerm references, stored as <field>_id
    geo_fields: ClassVar[Tuple[str, ...]] = ()
    # Nested kinds owned by this node (control metadata is implicit for all)
    nested_kinds: ClassVar[Tuple[ComponentKind, ...]] = ()

    id: Optional[int] = None
    version: Optional[int] = None
    operation: Optional[str] = None
    scm: List["ControlMetadata"] = Field(default_factory=list)

    def parsed_operation(self) -> Optional[Operation]:
        """The operation tag as an Operation, or None when untagged or tagged "none"."""
        if self.operation is None:
            return None
        try:
            operation = Operation(self.operation)
        except ValueError:
            raise BadOperationTag(
                self.operation, kind=self.kind.value, component_id=self.id
            ) from None
        return None if operation is Operation.NONE else operation

    def to_columns(self) -> Dict[str, Any]:
        """Kind-specific column values for a new row of this node."""
        columns = {name: getattr(self, name) for name in self.scalar_fields}
        for name in self.term_fields + self.geo_fields:
            ref = getattr(self, name)
            columns[f"{name}_id"] = ref.id if ref is not None else None
        return columns

    # Capability interface. Owners override what they support.

    def language_entries(self) -> List["Language"]:
        return []

    def date_entries(self) -> List["DateRange"]:
        return []

    def place_entries(self) -> List["Place"]:
        return []

    def source_entries(self) -> List["Source"]:
        return []

    def contributor_entries(self) -> List["Contributor"]:
        return []

    def attach_language(self, language: "Language") -> None:
        raise UnsupportedComponent("cannot own a language", kind=self.kind.value, component_id=self.id)

    def attach_date(self, date: "DateRange") -> None:
        raise UnsupportedComponent("cannot own a date", kind=self.kind.value, component_id=self.id)

    def attach_place(self, place: "Place") -> None:
        raise UnsupportedComponent("cannot own a place", kind=self.kind.value, component_id=self.id)

    def attach_source(self, source: "Source") -> None:
        raise UnsupportedComponent("cannot own a source", kind=self.kind.value, component_id=self.id)

    def attach_contributor(self, contributor: "Contributor") -> None:
        raise UnsupportedComponent("cannot own a contributor", kind=self.kind.value, component_id=self.id)

    def attach_metadata(self, entry: "ControlMetadata") -> None:
        self.scm.append(entry)

    def single_valued(self, kind: ComponentKind) -> bool:
        """Whether this node holds at most one nested node of ``kind``."""
        if kind is ComponentKind.LANGUAGE:
            return isinstance(self, SingleLanguageMixin)
        if kind is ComponentKind.SOURCE:
            return isinstance(self, CitationMixin)
        return False

    def nested(self, kind: ComponentKind) -> List["ComponentNode"]:
        """Nested nodes of one kind, in graph order."""
        if kind is ComponentKind.LANGUAGE:
            return list(self.language_entries())
        if kind is ComponentKind.DATE:
            return list(self.date_entries())
        if kind is ComponentKind.PLACE:
            return list(self.place_entries())
        if kind is ComponentKind.SOURCE:
            return list(self.source_entries())
        if kind is ComponentKind.CONTRIBUTOR:
            return list(self.contributor_entries())
        if kind is ComponentKind.SCM:
            return list(self.scm)
        raise UnsupportedComponent("not a nested component kind", kind=kind.value)

    def attach(self, child: "ComponentNode") -> None:
        """Attach a nested node through the matching capability."""
        kind = child.kind
        if kind is ComponentKind.LANGUAGE:
            self.attach_language(child)
        elif kind is ComponentKind.DATE:
            self.attach_date(child)
        elif kind is ComponentKind.PLACE:
            self.attach_place(child)
        elif kind is ComponentKind.SOURCE:
            self.attach_source(child)
        elif kind is ComponentKind.CONTRIBUTOR:
            self.attach_contributor(child)
        elif kind is ComponentKind.SCM:
            self.attach_metadata(child)
        else:
            raise UnsupportedComponent("not a nested component kind", kind=kind.value)

    def walk(self) -> Iterator["ComponentNode"]:
        """This node and every node below it, depth first."""
        yield self
        for kind in self.nested_kinds:
            for child in self.nested(kind):
                yield from child.walk()
        for entry in self.scm:
            yield from entry.walk()


# Capability mixins

class LanguageListMixin(BaseModel):
    languages: List["Language"] = Field(default_factory=list)

    def language_entries(self) -> List["Language"]:
        return self.languages

    def attach_language(self, language: "Language") -> None:
        self.languages.append(language)


class SingleLanguageMixin(BaseModel):
    language: Optional["Language"] = None

    def language_entries(self) -> List["Language"]:
        return [self.language] if self.language is not None else []

    def attach_language(self, language: "Language") -> None:
        self.language = language


class DatedMixin(BaseModel):
    dates: List["DateRange"] = Field(default_factory=list)

    def date_entries(self) -> List["DateRange"]:
        return self.dates

    def attach_date(self, date: "DateRange") -> None:
        self.dates.append(date)


class PlacedMixin(BaseModel):
    places: List["Place"] = Field(default_factory=list)

    def place_entries(self) -> List["Place"]:
        return self.places

    def attach_place(self, place: "Place") -> None:
        self.places.append(place)


class SourceListMixin(BaseModel):
    sources: List["Source"] = Field(default_factory=list)

    def source_entries(self) -> List["Source"]:
        return self.sources

    def attach_source(self, source: "Source") -> None:
        self.sources.append(source)


class CitationMixin(BaseModel):
    citation: Optional["Source"] = None

    def source_entries(self) -> List["Source"]:
        return [self.citation] if self.citation is not None else []

    def attach_source(self, source: "Source") -> None:
        self.citation = source


class ContributorMixin(BaseModel):
    contributors: List["Contributor"] = Field(default_factory=list)

    def contributor_entries(self) -> List["Contributor"]:
        return self.contributors

    def attach_contributor(self, contributor: "Contributor") -> None:
        self.contributors.append(contributor)


# Nested components

class Language(ComponentNode):
    """Language and script of the owning component."""

    kind = ComponentKind.LANGUAGE
    scalar_fields = ("vocabulary_source", "note")
    term_fields = ("language", "script")

    language: Optional[Term] = None
    script: Optional[Term] = None
    vocabulary_source: Optional[str] = None
    note: Optional[str] = None


class Source(SingleLanguageMixin, ComponentNode):
    """A non-authority description of a source, private to its owner."""

    kind = ComponentKind.SOURCE
    scalar_fields = ("text", "note", "uri")
    term_fields = ("type",)
    nested_kinds = (ComponentKind.LANGUAGE,)

    text: Optional[str] = None
    note: Optional[str] = None
    uri: Optional[str] = None
    type: Optional[Term] = None


class ControlMetadata(SingleLanguageMixin, CitationMixin, ComponentNode):
    """Provenance metadata (SCM) attachable to any component."""

    kind = ComponentKind.SCM
    scalar_fields = ("sub_citation", "source_data", "note")
    term_fields = ("descriptive_rule",)
    nested_kinds = (ComponentKind.LANGUAGE, ComponentKind.SOURCE)

    sub_citation: Optional[str] = None
    source_data: Optional[str] = None
    descriptive_rule: Optional[Term] = None
    note: Optional[str] = None


class DateRange(ComponentNode):
    """A single date or a from/to range."""

    kind = ComponentKind.DATE
    scalar_fields = (
        "is_range",
        "from_date",
        "from_original",
        "from_bc",
        "from_not_before",
        "from_not_after",
        "to_date",
        "to_original",
        "to_bc",
        "to_not_before",
        "to_not_after",
        "note",
    )
    term_fields = ("from_type", "to_type")

    is_range: bool = False
    from_date: Optional[str] = None
    from_original: Optional[str] = None
    from_type: Optional[Term] = None
    from_bc: bool = False
    from_not_before: Optional[str] = None
    from_not_after: Optional[str] = None
    to_date: Optional[str] = None
    to_original: Optional[str] = None
    to_type: Optional[Term] = None
    to_bc: bool = False
    to_not_before: Optional[str] = None
    to_not_after: Optional[str] = None
    note: Optional[str] = None


class Place(DatedMixin, ComponentNode):
    kind = ComponentKind.PLACE
    scalar_fields = ("original", "confirmed", "score", "note")
    term_fields = ("type", "role")
    geo_fields = ("geo_term",)
    nested_kinds = (ComponentKind.DATE,)

    original: Optional[str] = None
    confirmed: bool = False
    score: Optional[float] = None
    note: Optional[str] = None
    type: Optional[Term] = None
    role: Optional[Term] = None
    geo_term: Optional[GeoTerm] = None


class Contributor(ComponentNode):
    """Who contributed a name form, and in what capacity."""

    kind = ComponentKind.CONTRIBUTOR
    scalar_fields = ("name",)
    term_fields = ("type",)

    name: Optional[str] = None
    type: Optional[Term] = None


# Record-level components

class NameEntry(LanguageListMixin, DatedMixin, ContributorMixin, ComponentNode):
    kind = ComponentKind.NAME
    scalar_fields = ("original", "preference_score")
    nested_kinds = (ComponentKind.CONTRIBUTOR, ComponentKind.LANGUAGE, ComponentKind.DATE)

    original: str
    preference_score: Optional[int] = None


class BiogHist(SingleLanguageMixin, ComponentNode):
    kind = ComponentKind.BIOG_HIST
    scalar_fields = ("text",)
    nested_kinds = (ComponentKind.LANGUAGE,)

    text: str


class TermComponent(ComponentNode):
    """A component that is just a vocabulary reference."""

    term_fields = ("term",)

    term: Optional[Term] = None


class Nationality(TermComponent):
    kind = ComponentKind.NATIONALITY


class Gender(TermComponent):
    kind = ComponentKind.GENDER


class LegalStatus(TermComponent):
    kind = ComponentKind.LEGAL_STATUS


class Subject(TermComponent):
    kind = ComponentKind.SUBJECT


class Occupation(DatedMixin, ComponentNode):
    kind = ComponentKind.OCCUPATION
    scalar_fields = ("vocabulary_source", "note")
    term_fields = ("term",)
    nested_kinds = (ComponentKind.DATE,)

    term: Optional[Term] = None
    vocabulary_source: Optional[str] = None
    note: Optional[str] = None


class Function(DatedMixin, ComponentNode):
    kind = ComponentKind.FUNCTION
    scalar_fields = ("function_type", "vocabulary_source", "note")
    term_fields = ("term",)
    nested_kinds = (ComponentKind.DATE,)

    function_type: Optional[str] = None
    term: Optional[Term] = None
    vocabulary_source: Optional[str] = None
    note: Optional[str] = None


class OtherRecordId(ComponentNode):
    """sameAs / otherRecordId link to an external record."""

    kind = ComponentKind.OTHER_ID
    scalar_fields = ("text", "uri")
    term_fields = ("type",)

    text: Optional[str] = None
    uri: Optional[str] = None
    type: Optional[Term] = None


class TextComponent(ComponentNode):
    """A component that is a block of descriptive text."""

    scalar_fields = ("text",)

    text: str


class StructureOrGenealogy(TextComponent):
    kind = ComponentKind.STRUCTURE_GENEALOGY


class GeneralContext(TextComponent):
    kind = ComponentKind.GENERAL_CONTEXT


class Mandate(TextComponent):
    kind = ComponentKind.MANDATE


class ConventionDeclaration(TextComponent):
    kind = ComponentKind.CONVENTION_DECLARATION


class ConstellationRelation(DatedMixin, ComponentNode):
    kind = ComponentKind.RELATION
    scalar_fields = ("target_constellation", "target_ark", "content", "note")
    term_fields = ("target_entity_type", "type", "cpf_relation_type")
    nested_kinds = (ComponentKind.DATE,)

    target_constellation: Optional[int] = None
    target_ark: Optional[str] = None
    target_entity_type: Optional[Term] = None
    type: Optional[Term] = None
    cpf_relation_type: Optional[Term] = None
    content: Optional[str] = None
    note: Optional[str] = None


class ResourceRelation(ComponentNode):
    kind = ComponentKind.RESOURCE_RELATION
    scalar_fields = ("link", "content", "source", "note")
    term_fields = ("document_type", "entry_type", "role")

    document_type: Optional[Term] = None
    entry_type: Optional[Term] = None
    link: Optional[str] = None
    role: Optional[Term] = None
    content: Optional[str] = None
    source: Optional[str] = None
    note: Optional[str] = None


class Constellation(LanguageListMixin, PlacedMixin, DatedMixin, SourceListMixin, ComponentNode):
    """Root of the graph: one archival identity at one version."""

    kind = ComponentKind.RECORD
    scalar_fields = ("ark",)
    term_fields = ("entity_type",)
    nested_kinds = (
        ComponentKind.LANGUAGE,
        ComponentKind.PLACE,
        ComponentKind.DATE,
        ComponentKind.SOURCE,
    )
    # Record-level collections in write/read order
    collections: ClassVar[Tuple[Tuple[ComponentKind, str], ...]] = (
        (ComponentKind.NAME, "names"),
        (ComponentKind.BIOG_HIST, "biog_hists"),
        (ComponentKind.NATIONALITY, "nationalities"),
        (ComponentKind.OCCUPATION, "occupations"),
        (ComponentKind.FUNCTION, "functions"),
        (ComponentKind.GENDER, "genders"),
        (ComponentKind.LEGAL_STATUS, "legal_statuses"),
        (ComponentKind.SUBJECT, "subjects"),
        (ComponentKind.OTHER_ID, "other_record_ids"),
        (ComponentKind.STRUCTURE_GENEALOGY, "structure_or_genealogies"),
        (ComponentKind.GENERAL_CONTEXT, "general_contexts"),
        (ComponentKind.MANDATE, "mandates"),
        (ComponentKind.CONVENTION_DECLARATION, "convention_declarations"),
        (ComponentKind.RELATION, "relations"),
        (ComponentKind.RESOURCE_RELATION, "resource_relations"),
    )

    ark: Optional[str] = None
    entity_type: Optional[Term] = None

    names: List[NameEntry] = Field(default_factory=list)
    biog_hists: List[BiogHist] = Field(default_factory=list)
    nationalities: List[Nationality] = Field(default_factory=list)
    occupations: List[Occupation] = Field(default_factory=list)
    functions: List[Function] = Field(default_factory=list)
    genders: List[Gender] = Field(default_factory=list)
    legal_statuses: List[LegalStatus] = Field(default_factory=list)
    subjects: List[Subject] = Field(default_factory=list)
    other_record_ids: List[OtherRecordId] = Field(default_factory=list)
    structure_or_genealogies: List[StructureOrGenealogy] = Field(default_factory=list)
    general_contexts: List[GeneralContext] = Field(default_factory=list)
    mandates: List[Mandate] = Field(default_factory=list)
    convention_declarations: List[ConventionDeclaration] = Field(default_factory=list)
    relations: List[ConstellationRelation] = Field(default_factory=list)
    resource_relations: List[ResourceRelation] = Field(default_factory=list)

    def components_of(self, kind: ComponentKind) -> List[ComponentNode]:
        """Record-level components of one kind."""
        return getattr(self, self._collection_name(kind))

    def attach_component(self, component: ComponentNode) -> None:
        """Add a record-level component to its collection."""
        self.components_of(component.kind).append(component)

    def walk(self) -> Iterator[ComponentNode]:
        yield from super().walk()
        for kind, _ in self.collections:
            for component in self.components_of(kind):
                yield from component.walk()

    def _collection_name(self, kind: ComponentKind) -> str:
        for collection_kind, name in self.collections:
            if collection_kind is kind:
                return name
        raise UnsupportedComponent("not a record-level component kind", kind=kind.value)


NODE_TYPES: Dict[ComponentKind, type] = {
    node_type.kind: node_type
    for node_type in (
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
    )
}


def node_type(kind: ComponentKind) -> type:
    """Graph node class for a component kind."""
    return NODE_TYPES[kind]


for _model in (
    ComponentNode,
    LanguageListMixin,
    SingleLanguageMixin,
    DatedMixin,
    PlacedMixin,
    SourceListMixin,
    CitationMixin,
    ContributorMixin,
    TermComponent,
    TextComponent,
    *NODE_TYPES.values(),
):
    _model.model_rebuild()
