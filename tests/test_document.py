"""Unit tests for the designer document model.

Tests cover:
- Insertion at the end and at arbitrary positions
- Removal and selection clearing
- Reordering with the fail-fast out-of-range policy
- Atomic configuration updates
- Selection
- Serialization round-trips and load failures
- Immutability of earlier snapshots
"""

import itertools

import pytest

from formcraft.document import DesignerDocument
from formcraft.errors import (
    InstanceNotFound,
    InvalidConfiguration,
    InvalidDocument,
    InvalidIndex,
    UnknownFieldType,
)
from formcraft.fields import FieldInstance, TextField
from formcraft.registry import FieldTypeRegistry
from formcraft.types import FieldErrorCode, FieldType


def sequential_ids():
    counter = itertools.count(1)
    return lambda: f"fld_{next(counter)}"


def build(*tags):
    """Build a document with deterministic ids fld_1, fld_2, ..."""
    doc = DesignerDocument(id_factory=sequential_ids())
    for tag in tags:
        doc, _ = doc.insert(tag)
    return doc


def abc():
    """Three text fields with ids A, B and C."""
    return DesignerDocument(instances=[
        FieldInstance(id=i, type=FieldType.TEXT, configuration=dict(TextField.default_configuration))
        for i in ("A", "B", "C")
    ])


class TestInsert:
    """Test inserting new field instances."""

    def test_insert_into_empty_document(self):
        """Should append the first instance and return its id."""
        doc, new_id = DesignerDocument().insert("TextField")
        assert len(doc) == 1
        assert doc.instances[0].id == new_id
        assert doc.instances[0].type == FieldType.TEXT

    def test_insert_defaults_to_end(self):
        """Should append when no index is given."""
        doc = build("TextField", "CheckboxField")
        doc, new_id = doc.insert("SelectField")
        assert doc.ids[-1] == new_id

    @pytest.mark.parametrize("index", [0, 1, 2, 3])
    def test_insert_at_index(self, index):
        """Should place the new instance at the requested index."""
        doc = build("TextField", "TextField", "TextField")
        new_doc, new_id = doc.insert("TitleField", at_index=index)
        assert len(new_doc) == len(doc) + 1
        assert new_doc.instances[index].id == new_id
        assert len(set(new_doc.ids)) == len(new_doc)
        others = [i for i in new_doc.ids if i != new_id]
        assert others == doc.ids

    @pytest.mark.parametrize("index", [-1, 4])
    def test_insert_out_of_range(self, index):
        """Should raise InvalidIndex for negative or too-large indexes."""
        doc = build("TextField", "TextField", "TextField")
        with pytest.raises(InvalidIndex) as exc_info:
            doc.insert("TextField", at_index=index)
        assert exc_info.value.index == index
        assert exc_info.value.length == 3

    def test_insert_unknown_tag(self):
        """Should raise UnknownFieldType and leave the document unchanged."""
        doc = build("TextField")
        with pytest.raises(UnknownFieldType):
            doc.insert("SignatureField")
        assert len(doc) == 1

    def test_duplicate_tags_allowed(self):
        """Should allow many instances of the same tag with unique ids."""
        doc = build(*["TextField"] * 5)
        assert len(doc) == 5
        assert len(set(doc.ids)) == 5

    def test_colliding_generated_id_is_retried(self):
        """Should skip generated ids already present in the document."""
        candidates = iter(["fld_1", "fld_1", "fld_2"])
        doc = DesignerDocument(id_factory=lambda: next(candidates))
        doc, first = doc.insert("TextField")
        doc, second = doc.insert("TextField")
        assert (first, second) == ("fld_1", "fld_2")

    def test_default_ids_use_prefix(self):
        """Should generate prefixed ids by default."""
        _, new_id = DesignerDocument().insert("TextField")
        assert new_id.startswith("fld_")

    def test_insert_leaves_original_unchanged(self):
        """Should return a new document without touching the receiver."""
        doc = build("TextField")
        doc.insert("CheckboxField")
        assert len(doc) == 1


class TestRemove:
    """Test removing field instances."""

    def test_remove(self):
        """Should remove the instance and keep the others in order."""
        doc = abc().remove_by_id("B")
        assert doc.ids == ["A", "C"]

    def test_remove_selected_clears_selection(self):
        """Should clear the selection when the selected instance is removed."""
        doc = abc().select("B").remove_by_id("B")
        assert doc.selected_id is None
        assert doc.selected is None

    def test_remove_other_keeps_selection(self):
        """Should keep the selection when another instance is removed."""
        doc = abc().select("A").remove_by_id("B")
        assert doc.selected_id == "A"

    def test_double_remove(self):
        """Should raise InstanceNotFound on the second removal."""
        doc = abc().remove_by_id("B")
        with pytest.raises(InstanceNotFound) as exc_info:
            doc.remove_by_id("B")
        assert exc_info.value.instance_id == "B"


class TestMove:
    """Test reordering field instances."""

    def test_move_to_front(self):
        """Should move B to the front: [A,B,C] -> [B,A,C]."""
        assert abc().move_to("B", 0).ids == ["B", "A", "C"]

    def test_move_to_end(self):
        """Should move A to the last position."""
        assert abc().move_to("A", 2).ids == ["B", "C", "A"]

    def test_move_to_same_index(self):
        """Should leave the order unchanged when moving in place."""
        assert abc().move_to("B", 1).ids == ["A", "B", "C"]

    @pytest.mark.parametrize("index", [-1, 3, 5])
    def test_move_out_of_range(self, index):
        """Should raise InvalidIndex rather than clamping."""
        with pytest.raises(InvalidIndex):
            abc().move_to("B", index)

    def test_move_unknown_id(self):
        """Should raise InstanceNotFound for unknown ids."""
        with pytest.raises(InstanceNotFound):
            abc().move_to("Z", 0)

    def test_move_keeps_selection(self):
        """Should keep the selection across moves."""
        doc = abc().select("C").move_to("C", 0)
        assert doc.selected_id == "C"


class TestUpdateConfiguration:
    """Test configuration updates."""

    def test_valid_update(self):
        """Should replace the configuration of the targeted instance only."""
        doc = abc()
        config = dict(doc.get("B").configuration, label="Full name", required=True)
        new_doc = doc.update_configuration("B", config)
        assert new_doc.get("B").configuration["label"] == "Full name"
        assert new_doc.get("A").configuration == doc.get("A").configuration
        assert doc.get("B").configuration["label"] == "Text field"

    def test_invalid_update_is_atomic(self):
        """Should raise InvalidConfiguration and change nothing."""
        doc = abc()
        before = doc.serialize()
        config = dict(doc.get("B").configuration, label="X", required="yes")
        with pytest.raises(InvalidConfiguration) as exc_info:
            doc.update_configuration("B", config)
        assert {e.path for e in exc_info.value.errors} == {"label", "required"}
        assert exc_info.value.field_type == FieldType.TEXT
        assert doc.serialize() == before

    def test_invalid_configuration_to_dict(self):
        """Should expose field-level messages for the interaction layer."""
        doc = abc()
        with pytest.raises(InvalidConfiguration) as exc_info:
            doc.update_configuration("A", {})
        data = exc_info.value.to_dict()
        assert data["fieldType"] == "TextField"
        assert all(e["code"] == FieldErrorCode.REQUIRED.value for e in data["errors"])

    def test_update_unknown_id(self):
        """Should raise InstanceNotFound for unknown ids."""
        with pytest.raises(InstanceNotFound):
            abc().update_configuration("Z", {})

    def test_update_copies_configuration(self):
        """Should not keep a reference to the caller's configuration."""
        doc, select_id = DesignerDocument().insert("SelectField")
        config = dict(doc.get(select_id).configuration, options=["Yes", "No"])
        doc = doc.update_configuration(select_id, config)
        config["options"].append("Maybe")
        assert doc.get(select_id).configuration["options"] == ("Yes", "No")


class TestSelect:
    """Test single selection."""

    def test_select_and_clear(self):
        """Should set and clear the selected instance."""
        doc = abc().select("A")
        assert doc.selected.id == "A"
        assert doc.select(None).selected_id is None
        assert doc.select().selected_id is None

    def test_select_unknown(self):
        """Should raise InstanceNotFound for unknown ids."""
        with pytest.raises(InstanceNotFound):
            abc().select("Z")


class TestInvariants:
    """Test invariants enforced at construction."""

    def test_duplicate_ids_rejected(self):
        """Should refuse a document with duplicate ids."""
        instance = FieldInstance(id="A", type=FieldType.SEPARATOR, configuration={})
        with pytest.raises(InvalidDocument):
            DesignerDocument(instances=[instance, instance])

    def test_dangling_selection_rejected(self):
        """Should refuse a selection that references no instance."""
        with pytest.raises(InvalidDocument):
            DesignerDocument(selected_id="ghost")

    def test_columns(self):
        """Should list value-bearing fields only, in order."""
        doc = build("TitleField", "TextField", "SeparatorField", "CheckboxField")
        assert doc.columns() == [
            ("fld_2", "Text field"),
            ("fld_4", "Accept Terms and Conditions"),
        ]


class TestSerialization:
    """Test serialize/deserialize round-trips."""

    def test_round_trip_every_tag(self):
        """Should reproduce an equal document from its serialized form."""
        doc = build(*list(FieldType)).select("fld_3")
        restored = DesignerDocument.deserialize(doc.serialize())
        assert restored == doc
        assert restored.ids == doc.ids
        assert restored.selected_id == "fld_3"

    def test_round_trip_empty(self):
        """Should round-trip an empty document."""
        assert DesignerDocument.deserialize(DesignerDocument().serialize()) == DesignerDocument()

    def test_serialized_shape(self):
        """Should emit id, type and configuration per field."""
        payload = build("CheckboxField").serialize()
        assert payload["version"] == 1
        assert payload["submissionEncoding"] == 1
        assert payload["fields"] == [{
            "id": "fld_1",
            "type": "CheckboxField",
            "configuration": {
                "label": "Accept Terms and Conditions",
                "helperText": "You must agree to proceed",
                "required": True,
            },
        }]

    def test_unknown_tag_aborts_load(self):
        """Should raise UnknownFieldType instead of dropping the field."""
        payload = build("TextField", "TextField").serialize()
        payload["fields"][1]["type"] = "SignatureField"
        with pytest.raises(UnknownFieldType):
            DesignerDocument.deserialize(payload)

    def test_smaller_registry_rejects_load(self):
        """Should fail when the running registry lacks a stored tag."""
        payload = build("TextField", "CheckboxField").serialize()
        registry = FieldTypeRegistry([TextField()])
        with pytest.raises(UnknownFieldType):
            DesignerDocument.deserialize(payload, registry=registry)

    def test_missing_attributes_fall_back_to_defaults(self):
        """Should fill attributes absent from older payloads with defaults."""
        payload = {"fields": [
            {"id": "a", "type": "TextField", "configuration": {"label": "Name", "required": True}},
        ]}
        doc = DesignerDocument.deserialize(payload)
        config = doc.get("a").configuration
        assert config["label"] == "Name"
        assert config["required"] is True
        assert config["placeholder"] == "Value here..."
        assert config["helperText"] == "Helper text"

    def test_legacy_extra_attributes_key(self):
        """Should accept records stored under 'extraAttributes'."""
        payload = {"fields": [
            {"id": "a", "type": "CheckboxField", "extraAttributes": {"required": False}},
        ]}
        doc = DesignerDocument.deserialize(payload)
        assert doc.get("a").configuration["required"] is False

    def test_invalid_stored_configuration(self):
        """Should raise InvalidConfiguration for a stored configuration that fails validation."""
        payload = {"fields": [
            {"id": "a", "type": "SelectField", "configuration": {"options": []}},
        ]}
        with pytest.raises(InvalidConfiguration):
            DesignerDocument.deserialize(payload)

    def test_duplicate_ids_rejected(self):
        """Should refuse payloads with duplicate ids."""
        payload = {"fields": [
            {"id": "a", "type": "SeparatorField", "configuration": {}},
            {"id": "a", "type": "SeparatorField", "configuration": {}},
        ]}
        with pytest.raises(InvalidDocument):
            DesignerDocument.deserialize(payload)

    def test_dangling_selection_dropped(self):
        """Should drop a selectedId that references no field."""
        payload = {"selectedId": "ghost", "fields": [
            {"id": "a", "type": "SeparatorField", "configuration": {}},
        ]}
        assert DesignerDocument.deserialize(payload).selected_id is None

    @pytest.mark.parametrize("payload", [
        None,
        {},
        {"fields": "nope"},
        {"fields": ["nope"]},
        {"fields": [{"type": "TextField"}]},
        {"fields": [{"id": "a", "type": "TextField", "configuration": "nope"}]},
        {"fields": [], "submissionEncoding": 2},
        {"fields": [], "version": 2},
    ])
    def test_malformed_payloads(self, payload):
        """Should raise InvalidDocument for structurally malformed payloads."""
        with pytest.raises(InvalidDocument):
            DesignerDocument.deserialize(payload)


class TestImmutability:
    """Test that earlier snapshots are never affected by later operations."""

    def test_snapshots_are_independent(self):
        """Should keep every intermediate snapshot intact."""
        empty = DesignerDocument(id_factory=sequential_ids())
        one, first = empty.insert("TextField")
        two, second = one.insert("CheckboxField", at_index=0)
        moved = two.move_to(first, 0)
        removed = moved.remove_by_id(second)

        assert len(empty) == 0
        assert one.ids == [first]
        assert two.ids == [second, first]
        assert moved.ids == [first, second]
        assert removed.ids == [first]

    def test_instances_are_tuples(self):
        """Should store instances in an immutable sequence."""
        assert isinstance(abc().instances, tuple)

    def test_configuration_cannot_be_written_through_a_snapshot(self):
        """Should refuse writes through a later snapshot's configuration."""
        first, field_id = DesignerDocument().insert("TextField")
        second, _ = first.insert("EmailField")
        with pytest.raises(TypeError):
            second.get(field_id).configuration["label"] = ""
        assert first.get(field_id).configuration["label"] == "Text field"
        assert first.get(field_id).to_dict() == second.get(field_id).to_dict()

    def test_configuration_detached_from_caller_input(self):
        """Should copy the configuration given to a new instance."""
        config = dict(TextField.default_configuration)
        instance = FieldInstance(id="A", type=FieldType.TEXT, configuration=config)
        config["label"] = "Changed"
        assert instance.configuration["label"] == "Text field"
