"""Unit tests for component kinds, operation tags and owner references."""

import pytest

from constellation_store.kernel.models import COMPONENT_MODELS, ComponentKind, Operation, OwnerRef, model_for
from constellation_store.schemas.constellation import NODE_TYPES, node_type


class TestComponentKind:
    """Static capabilities of the closed kind set."""

    def test_record_core_is_not_deletable(self):
        """The record is retired through the ledger, never by a delete marker."""
        assert ComponentKind.RECORD.deletable is False

    def test_every_other_kind_is_deletable(self):
        for kind in ComponentKind:
            if kind is not ComponentKind.RECORD:
                assert kind.deletable, kind

    def test_only_names_are_name_like(self):
        assert [kind for kind in ComponentKind if kind.name_like] == [ComponentKind.NAME]

    def test_nested_kinds_are_not_record_level(self):
        for kind in (
            ComponentKind.CONTRIBUTOR,
            ComponentKind.DATE,
            ComponentKind.PLACE,
            ComponentKind.SCM,
            ComponentKind.LANGUAGE,
            ComponentKind.SOURCE,
        ):
            assert kind.record_level is False
        assert ComponentKind.NAME.record_level is True
        assert ComponentKind.RESOURCE_RELATION.record_level is True

    def test_every_kind_has_a_table_and_a_node_type(self):
        assert set(COMPONENT_MODELS) == set(ComponentKind)
        assert set(NODE_TYPES) == set(ComponentKind)
        for kind in ComponentKind:
            assert model_for(kind).__tablename__ == kind.value
            assert node_type(kind).kind is kind


class TestOperation:
    def test_values(self):
        assert {op.value for op in Operation} == {"insert", "update", "delete", "none"}

    def test_unknown_tag_rejected(self):
        with pytest.raises(ValueError):
            Operation("upsert")


class TestOwnerRef:
    """OwnerRef validates itself on construction."""

    def test_record_shortcut(self):
        ref = OwnerRef.record(42)
        assert ref.kind is ComponentKind.RECORD
        assert ref.id == 42
        assert str(ref) == "constellation:42"

    def test_equal_refs_hash_equal(self):
        assert OwnerRef(ComponentKind.NAME, 3) == OwnerRef(ComponentKind.NAME, 3)
        assert len({OwnerRef(ComponentKind.NAME, 3), OwnerRef(ComponentKind.NAME, 3)}) == 1

    @pytest.mark.parametrize("bad_id", [0, -1, True, "7", None])
    def test_rejects_non_positive_or_non_int_id(self, bad_id):
        with pytest.raises(ValueError):
            OwnerRef(ComponentKind.NAME, bad_id)

    def test_rejects_plain_string_kind(self):
        with pytest.raises(TypeError):
            OwnerRef("name", 1)
