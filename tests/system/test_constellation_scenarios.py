"""
End-to-end write/read scenarios against a file-backed SQLite database.

Covers the insert/delete walkthroughs, round-trip fidelity, untouched
subtrees, version monotonicity, temporal visibility of deletes and the
last-name rule.
"""

import pytest

from constellation_store.exceptions import BadOperationTag, ReferentialIntegrityError
from constellation_store.kernel.models import ComponentKind, OwnerRef, VersionStatus
from constellation_store.kernel.store import ComponentStore
from constellation_store.orchestration import ConstellationService
from constellation_store.schemas import (
    BiogHist,
    Constellation,
    ConstellationRelation,
    Contributor,
    ControlMetadata,
    DateRange,
    Function,
    Gender,
    GeoTerm,
    Language,
    LegalStatus,
    Mandate,
    NameEntry,
    Nationality,
    Occupation,
    OtherRecordId,
    Place,
    ResourceRelation,
    Source,
    StructureOrGenealogy,
    Subject,
    Term,
    GeneralContext,
    ConventionDeclaration,
)


def _jane_doe() -> Constellation:
    return Constellation(operation="insert", names=[NameEntry(original="Jane Doe", operation="insert")])


def _rich_graph(terms, boston) -> Constellation:
    english = Language(language=terms["English"], script=terms["Latin"], operation="insert")
    return Constellation(
        operation="insert",
        ark="http://n2t.net/ark:/99166/w6jane",
        entity_type=terms["person"],
        languages=[english],
        dates=[
            DateRange(
                is_range=True,
                from_date="1901-03-04",
                from_original="March 4, 1901",
                from_type=terms["Birth"],
                to_date="1980",
                to_type=terms["Death"],
                operation="insert",
            )
        ],
        places=[
            Place(
                original="Boston, Mass.",
                confirmed=True,
                score=0.75,
                type=terms["AssociatedPlace"],
                role=terms["Birth"],
                geo_term=boston,
                dates=[DateRange(from_date="1901", operation="insert")],
                operation="insert",
            )
        ],
        sources=[Source(text="Who's who", type=terms["simple"], operation="insert")],
        scm=[
            ControlMetadata(
                note="record provenance",
                descriptive_rule=terms["RDA"],
                citation=Source(text="LC NAF", operation="insert"),
                operation="insert",
            )
        ],
        names=[
            NameEntry(
                original="Doe, Jane, 1901-1980",
                preference_score=99,
                contributors=[Contributor(name="VIAF", type=terms["alternativeForm"], operation="insert")],
                languages=[Language(language=terms["English"], operation="insert")],
                dates=[DateRange(from_date="1901", operation="insert")],
                scm=[
                    ControlMetadata(
                        sub_citation="p. 3",
                        language=Language(language=terms["French"], operation="insert"),
                        operation="insert",
                    )
                ],
                operation="insert",
            ),
            NameEntry(original="Jane Doe", operation="insert"),
        ],
        biog_hists=[
            BiogHist(text="<p>Librarian.</p>", language=Language(language=terms["English"]), operation="insert")
        ],
        nationalities=[Nationality(term=terms["American"], operation="insert")],
        occupations=[
            Occupation(
                term=terms["Librarians"],
                vocabulary_source="LCSH",
                dates=[DateRange(from_date="1925", to_date="1965", is_range=True, operation="insert")],
                operation="insert",
            )
        ],
        functions=[Function(function_type="DerivedFromRole", term=terms["Lawyers"], operation="insert")],
        genders=[Gender(term=terms["Female"], operation="insert")],
        legal_statuses=[LegalStatus(operation="insert")],
        subjects=[Subject(term=terms["Librarians"], operation="insert")],
        other_record_ids=[OtherRecordId(text="n79021164", uri="http://id.loc.gov/n79021164", operation="insert")],
        structure_or_genealogies=[StructureOrGenealogy(text="<p>Family.</p>", operation="insert")],
        general_contexts=[GeneralContext(text="<p>Context.</p>", operation="insert")],
        mandates=[Mandate(text="<p>Mandate.</p>", operation="insert")],
        convention_declarations=[ConventionDeclaration(text="<p>RDA.</p>", operation="insert")],
        relations=[
            ConstellationRelation(
                target_constellation=77,
                target_ark="http://n2t.net/ark:/99166/w6other",
                target_entity_type=terms["corporateBody"],
                type=terms["associatedWith"],
                content="Acme Corp.",
                dates=[DateRange(from_date="1930", operation="insert")],
                operation="insert",
            )
        ],
        resource_relations=[
            ResourceRelation(
                document_type=terms["ArchivalResource"],
                link="http://example.org/findingaid",
                content="Jane Doe papers",
                operation="insert",
            )
        ],
    )


class TestScenarios:
    """Insert, add-and-delete, and rejected delete walkthroughs."""

    @pytest.mark.asyncio
    async def test_insert_single_name(self, db_session, settings, editor):
        """A new record with one name is version 1 and reads back."""
        service = ConstellationService(db_session, settings)
        result = await service.write(_jane_doe(), VersionStatus.NEEDS_REVIEW, "new", editor)

        assert result.version == 1
        assert result.fully_applied
        graph = await service.read(result.record_id, 1)
        assert [name.original for name in graph.names] == ["Jane Doe"]
        assert graph.id == result.record_id
        assert graph.version == 1

    @pytest.mark.asyncio
    async def test_add_name_and_delete_old_one(self, db_session, settings, editor):
        """The replacement name is visible at v2; v1 still shows the original."""
        service = ConstellationService(db_session, settings)
        first = await service.write(_jane_doe(), VersionStatus.NEEDS_REVIEW, "new", editor)

        graph = first.constellation.model_copy(deep=True)
        graph.names[0].operation = "delete"
        graph.names.append(NameEntry(original="J. Doe", operation="insert"))
        second = await service.write(graph, VersionStatus.NEEDS_REVIEW, "rename", editor)

        assert second.version == 2
        assert second.record_id == first.record_id
        assert second.fully_applied
        assert [n.original for n in (await service.read(first.record_id, 2)).names] == ["J. Doe"]
        assert [n.original for n in (await service.read(first.record_id, 1)).names] == ["Jane Doe"]

        deleted = second.constellation.names[0]
        assert deleted.operation == "delete"
        assert deleted.version == 2

    @pytest.mark.asyncio
    async def test_soft_delete_of_sole_name_is_rejected(self, db_session, settings, editor):
        """Deleting the only name reports a rejection and changes nothing."""
        service = ConstellationService(db_session, settings)
        first = await service.write(_jane_doe(), VersionStatus.NEEDS_REVIEW, "new", editor)
        before = await service.read(first.record_id, first.version)

        outcome = await service.soft_delete(first.record_id, first.constellation.names[0], editor)

        assert outcome.deleted is False
        assert outcome.version is None
        assert outcome.rejection.kind is ComponentKind.NAME
        assert outcome.rejection.component_id == first.constellation.names[0].id
        assert await service.read(first.record_id, first.version + 1) == before
        assert len(await service.history(first.record_id)) == 1


class TestProperties:
    @pytest.mark.asyncio
    async def test_round_trip(self, db_session, settings, editor, terms, boston):
        """Reading back an inserted graph yields the written graph."""
        service = ConstellationService(db_session, settings)
        result = await service.write(_rich_graph(terms, boston), VersionStatus.NEEDS_REVIEW, "ingest", editor)

        graph = await service.read(result.record_id, result.version)

        assert graph == result.constellation
        assert graph.places[0].geo_term == boston
        assert graph.names[0].scm[0].language.language == terms["French"]
        assert graph.biog_hists[0].language.language == terms["English"]
        assert graph.relations[0].dates[0].from_date == "1930"

    @pytest.mark.asyncio
    async def test_caller_graph_is_not_modified(self, db_session, settings, editor):
        service = ConstellationService(db_session, settings)
        graph = _jane_doe()
        result = await service.write(graph, VersionStatus.NEEDS_REVIEW, "new", editor)

        assert graph.id is None
        assert graph.operation == "insert"
        assert graph.names[0].id is None
        assert graph.names[0].operation == "insert"
        assert result.constellation.names[0].id is not None
        assert result.constellation.names[0].operation is None

    @pytest.mark.asyncio
    async def test_untouched_subtrees_keep_id_and_version(self, db_session, settings, editor, terms, boston):
        service = ConstellationService(db_session, settings)
        first = await service.write(_rich_graph(terms, boston), VersionStatus.NEEDS_REVIEW, "ingest", editor)
        second = await service.write(first.constellation, VersionStatus.NEEDS_REVIEW, "no changes", editor)
        third = await service.write(second.constellation, VersionStatus.NEEDS_REVIEW, "no changes", editor)

        assert third.version == 3
        assert [(n.id, n.version) for n in third.constellation.names] == [
            (n.id, n.version) for n in first.constellation.names
        ]
        at_three = await service.read(first.record_id, 3)
        assert [(n.id, n.version) for n in at_three.names] == [(n.id, n.version) for n in first.constellation.names]
        assert at_three.names[0].dates[0].version == 1

    @pytest.mark.asyncio
    async def test_tagged_child_under_untouched_parent(self, db_session, settings, editor):
        service = ConstellationService(db_session, settings)
        first = await service.write(_jane_doe(), VersionStatus.NEEDS_REVIEW, "new", editor)

        graph = first.constellation.model_copy(deep=True)
        graph.names[0].dates.append(DateRange(from_date="1901", operation="insert"))
        second = await service.write(graph, VersionStatus.NEEDS_REVIEW, "date", editor)

        name = (await service.read(first.record_id, second.version)).names[0]
        assert name.version == 1
        assert [(date.from_date, date.version) for date in name.dates] == [("1901", 2)]
        assert (await service.read(first.record_id, 1)).names[0].dates == []

    @pytest.mark.asyncio
    async def test_versions_strictly_increase(self, db_session, settings, editor):
        service = ConstellationService(db_session, settings)
        result = await service.write(_jane_doe(), VersionStatus.NEEDS_REVIEW, "new", editor)
        versions = [result.version]
        for _ in range(4):
            result = await service.write(result.constellation, VersionStatus.CURRENTLY_EDITING, "edit", editor)
            versions.append(result.version)
        assert versions == [1, 2, 3, 4, 5]
        assert [entry.version for entry in await service.history(result.record_id)] == versions

    @pytest.mark.asyncio
    async def test_deleted_component_visible_only_before_delete(self, db_session, settings, editor, terms):
        service = ConstellationService(db_session, settings)
        graph = _jane_doe()
        graph.genders.append(Gender(term=terms["Female"], operation="insert"))
        first = await service.write(graph, VersionStatus.NEEDS_REVIEW, "new", editor)
        await service.write(first.constellation, VersionStatus.NEEDS_REVIEW, "noop", editor)

        outcome = await service.soft_delete(first.record_id, first.constellation.genders[0], editor)
        assert outcome.deleted is True
        assert outcome.version == 3

        assert len((await service.read(first.record_id, 2)).genders) == 1
        assert (await service.read(first.record_id, 3)).genders == []
        assert (await service.read(first.record_id, 10)).genders == []

    @pytest.mark.asyncio
    async def test_last_name_survives_delete_in_write_pass(self, db_session, settings, editor, terms):
        """A rejected delete is reported and the rest of the pass applies."""
        service = ConstellationService(db_session, settings)
        first = await service.write(_jane_doe(), VersionStatus.NEEDS_REVIEW, "new", editor)

        graph = first.constellation.model_copy(deep=True)
        graph.names[0].operation = "delete"
        graph.genders.append(Gender(term=terms["Male"], operation="insert"))
        second = await service.write(graph, VersionStatus.NEEDS_REVIEW, "try", editor)

        assert not second.fully_applied
        [rejection] = second.rejections
        assert rejection.kind is ComponentKind.NAME
        assert second.constellation.names[0].version == 1

        after = await service.read(first.record_id, second.version)
        assert [name.original for name in after.names] == ["Jane Doe"]
        assert after.genders[0].term == terms["Male"]

    @pytest.mark.asyncio
    async def test_deleting_every_name_keeps_one(self, db_session, settings, editor):
        service = ConstellationService(db_session, settings)
        graph = _jane_doe()
        graph.names.append(NameEntry(original="J. Doe", operation="insert"))
        first = await service.write(graph, VersionStatus.NEEDS_REVIEW, "new", editor)

        doomed = first.constellation.model_copy(deep=True)
        for name in doomed.names:
            name.operation = "delete"
        second = await service.write(doomed, VersionStatus.NEEDS_REVIEW, "purge", editor)

        assert len(second.rejections) == 1
        assert len((await service.read(first.record_id, second.version)).names) == 1


    @pytest.mark.asyncio
    async def test_none_tag_leaves_node_untouched(self, db_session, settings, editor):
        service = ConstellationService(db_session, settings)
        first = await service.write(_jane_doe(), VersionStatus.NEEDS_REVIEW, "new", editor)
        name_id = first.constellation.names[0].id

        graph = first.constellation.model_copy(deep=True)
        graph.names[0].operation = "none"
        graph.names.append(NameEntry(original="J. Doe", operation="insert"))
        second = await service.write(graph, VersionStatus.NEEDS_REVIEW, "add", editor)

        assert second.version == 2
        names = (await service.read(first.record_id, 2)).names
        assert [(n.id, n.version, n.original) for n in names] == [
            (name_id, 1, "Jane Doe"),
            (names[1].id, 2, "J. Doe"),
        ]

    @pytest.mark.asyncio
    async def test_replacing_a_single_language_retires_the_old_one(self, db_session, settings, editor, terms):
        service = ConstellationService(db_session, settings)
        graph = _jane_doe()
        graph.biog_hists.append(
            BiogHist(text="<p>Librarian.</p>", language=Language(language=terms["English"]), operation="insert")
        )
        first = await service.write(graph, VersionStatus.NEEDS_REVIEW, "new", editor)
        old_language_id = first.constellation.biog_hists[0].language.id

        graph = first.constellation.model_copy(deep=True)
        graph.biog_hists[0].language = Language(language=terms["French"], operation="insert")
        second = await service.write(graph, VersionStatus.NEEDS_REVIEW, "french", editor)

        store = ComponentStore(db_session)
        owner = OwnerRef(ComponentKind.BIOG_HIST, first.constellation.biog_hists[0].id)
        active = await store.read(ComponentKind.LANGUAGE, owner, second.version)
        assert [row.id for row in active] == [second.constellation.biog_hists[0].language.id]
        assert (await store.effective_row(ComponentKind.LANGUAGE, old_language_id)).is_deleted

        assert (await service.read(first.record_id, 2)).biog_hists[0].language.language == terms["French"]
        assert (await service.read(first.record_id, 1)).biog_hists[0].language.language == terms["English"]

    @pytest.mark.asyncio
    async def test_replacing_a_citation_retires_the_old_one(self, db_session, settings, editor):
        service = ConstellationService(db_session, settings)
        graph = _jane_doe()
        graph.scm.append(ControlMetadata(citation=Source(text="LC NAF"), operation="insert"))
        first = await service.write(graph, VersionStatus.NEEDS_REVIEW, "new", editor)

        graph = first.constellation.model_copy(deep=True)
        graph.scm[0].citation = Source(text="VIAF", operation="insert")
        second = await service.write(graph, VersionStatus.NEEDS_REVIEW, "cite", editor)

        store = ComponentStore(db_session)
        owner = OwnerRef(ComponentKind.SCM, first.constellation.scm[0].id)
        active = await store.read(ComponentKind.SOURCE, owner, second.version)
        assert [row.text for row in active] == ["VIAF"]
        assert (await service.read(first.record_id, 1)).scm[0].citation.text == "LC NAF"


class TestWriteFailures:
    @pytest.mark.asyncio
    async def test_bad_tag_writes_nothing(self, db_session, settings, editor):
        service = ConstellationService(db_session, settings)
        first = await service.write(_jane_doe(), VersionStatus.NEEDS_REVIEW, "new", editor)

        graph = first.constellation.model_copy(deep=True)
        graph.names.append(NameEntry(original="J. Doe", operation="insert"))
        graph.names[0].dates.append(DateRange(from_date="1901", operation="upsert"))

        with pytest.raises(BadOperationTag) as exc_info:
            await service.write(graph, VersionStatus.NEEDS_REVIEW, "bad", editor)
        assert exc_info.value.tag == "upsert"
        assert exc_info.value.kind == "date_range"
        assert len(await service.history(first.record_id)) == 1

    @pytest.mark.asyncio
    async def test_update_without_record_id(self, db_session, settings, editor):
        service = ConstellationService(db_session, settings)
        graph = Constellation(names=[NameEntry(original="Jane Doe", operation="insert")])
        with pytest.raises(ReferentialIntegrityError):
            await service.write(graph, VersionStatus.NEEDS_REVIEW, "orphan", editor)

    @pytest.mark.asyncio
    async def test_record_delete_only_touches_the_ledger(self, db_session, settings, editor):
        service = ConstellationService(db_session, settings)
        first = await service.write(_jane_doe(), VersionStatus.NEEDS_REVIEW, "new", editor)

        graph = first.constellation.model_copy(deep=True)
        graph.operation = "delete"
        graph.names.append(NameEntry(original="ignored", operation="insert"))
        result = await service.write(graph, VersionStatus.NEEDS_REVIEW, "withdrawn", editor)

        assert result.version == 2
        history = await service.history(first.record_id)
        assert history[-1].status is VersionStatus.DELETED
        assert [name.original for name in (await service.read(first.record_id, 2)).names] == ["Jane Doe"]

    @pytest.mark.asyncio
    async def test_unknown_term_rejects_the_write(self, db_session, settings, editor):
        service = ConstellationService(db_session, settings)
        graph = _jane_doe()
        graph.genders.append(Gender(term=Term(id=999, value="unknown"), operation="insert"))

        with pytest.raises(ReferentialIntegrityError) as exc_info:
            await service.write(graph, VersionStatus.NEEDS_REVIEW, "new", editor)
        assert exc_info.value.component_id == 999

    @pytest.mark.asyncio
    async def test_unknown_geo_term_rejects_the_write(self, db_session, settings, editor):
        service = ConstellationService(db_session, settings)
        first = await service.write(_jane_doe(), VersionStatus.NEEDS_REVIEW, "new", editor)

        graph = first.constellation.model_copy(deep=True)
        graph.places.append(Place(original="Atlantis", geo_term=GeoTerm(id=404, name="Atlantis"), operation="insert"))
        with pytest.raises(ReferentialIntegrityError) as exc_info:
            await service.write(graph, VersionStatus.NEEDS_REVIEW, "place", editor)
        assert exc_info.value.kind == "geo_place"
        assert exc_info.value.component_id == 404

    @pytest.mark.asyncio
    async def test_unknown_term_on_record_core(self, db_session, settings, editor):
        service = ConstellationService(db_session, settings)
        graph = _jane_doe()
        graph.entity_type = Term(id=555, value="robot")
        with pytest.raises(ReferentialIntegrityError) as exc_info:
            await service.write(graph, VersionStatus.NEEDS_REVIEW, "new", editor)
        assert exc_info.value.component_id == 555
