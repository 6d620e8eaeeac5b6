"""Tests for schema editing tools and schema guardrails."""

import pytest

from form_builder.guardrails import check_schema, schema_warnings
from form_builder.models.field_definitions import FieldKind, FieldOption
from form_builder.models.form_schema import FormSchema
from form_builder.tools import (
    add_field,
    available_parent_fields,
    field_defaults,
    move_field,
    remove_field,
    update_field,
)


@pytest.fixture
def schema():
    return FormSchema.model_validate({
        "name": "Loan",
        "fields": [
            {"id": "amount", "type": "number"},
            {"id": "rate", "type": "number"},
            {
                "id": "interest",
                "type": "derived",
                "parentFields": ["amount", "rate"],
                "formula": "amount * rate / 100",
            },
            {"id": "notes", "type": "textarea"},
        ],
    })


class TestFieldDefaults:
    """Tests for field_defaults."""

    def test_text(self):
        """Test a plain field has no options or formula."""
        field = field_defaults("text", "name")
        assert field.id == "name"
        assert field.kind == FieldKind.TEXT
        assert field.options is None
        assert field.formula is None
        assert not field.required

    @pytest.mark.parametrize("kind", ["select", "radio", "checkbox"])
    def test_option_kinds(self, kind):
        """Test option fields start with one blank option."""
        field = field_defaults(kind, "choice")
        assert field.options == [FieldOption(value="", label="")]

    def test_derived(self):
        """Test derived fields start empty and read-only."""
        field = field_defaults(FieldKind.DERIVED, "total")
        assert field.parent_fields == []
        assert field.formula == ""
        assert field.readonly

    def test_generated_id(self):
        """Test an id is generated when none is given."""
        assert field_defaults("number").id.isdigit()


class TestEditing:
    """Tests for schema editing helpers."""

    def test_available_parent_fields(self, schema):
        """Test parents exclude the field itself and derived fields."""
        ids = [f.id for f in available_parent_fields(schema, "amount")]
        assert ids == ["rate", "notes"]

    def test_add_field(self, schema):
        """Test adding fields at the end or at an index."""
        updated = add_field(schema, field_defaults("text", "title"), index=0)
        assert updated.field_ids()[0] == "title"
        assert "title" not in schema.field_ids()

        updated = add_field(updated, field_defaults("date", "due"))
        assert updated.field_ids()[-1] == "due"

    def test_add_duplicate(self, schema):
        """Test duplicate ids are refused."""
        with pytest.raises(ValueError):
            add_field(schema, field_defaults("text", "amount"))

    def test_remove_field_updates_parents(self, schema):
        """Test removing a parent drops it from derived fields."""
        updated = remove_field(schema, "rate")
        assert updated.field_ids() == ["amount", "interest", "notes"]
        assert updated.get_field("interest").parent_fields == ["amount"]
        assert schema.get_field("interest").parent_fields == ["amount", "rate"]

    def test_move_field(self, schema):
        """Test reordering."""
        updated = move_field(schema, "notes", 0)
        assert updated.field_ids() == ["notes", "amount", "rate", "interest"]
        with pytest.raises(KeyError):
            move_field(schema, "missing", 0)

    def test_update_field(self, schema):
        """Test editing field attributes."""
        updated = update_field(schema, "notes", label="Notes", required=True)
        notes = updated.get_field("notes")
        assert notes.label == "Notes"
        assert notes.required
        assert schema.get_field("notes").label == ""

    def test_update_field_kind_to_derived(self, schema):
        """Test switching a field to derived makes it read-only."""
        updated = update_field(schema, "notes", kind=FieldKind.DERIVED, formula="amount")
        assert updated.get_field("notes").readonly

    def test_update_field_id_refused(self, schema):
        """Test ids cannot be changed."""
        with pytest.raises(ValueError):
            update_field(schema, "notes", id="comments")


class TestSchemaGuardrails:
    """Tests for schema checks."""

    def test_valid_schema(self, schema):
        """Test a valid schema has no issues or warnings."""
        assert check_schema(schema) == []
        assert schema_warnings(schema) == []

    def test_warnings(self):
        """Test suspicious but usable schemas produce warnings."""
        schema = FormSchema.model_validate({
            "fields": [
                {"id": "a", "type": "number"},
                {"id": "b", "type": "number"},
                {"id": "pick", "type": "select"},
                {"id": "c", "type": "derived", "parentFields": ["a"], "formula": "a + b"},
                {"id": "d", "type": "derived", "parentFields": ["a"]},
            ],
        })
        assert check_schema(schema) == []
        warnings = schema_warnings(schema)
        assert "Field 'pick' has no options" in warnings
        assert "Formula of 'c' uses 'b', which is not a parent field" in warnings
        assert "Derived field 'd' has no formula" in warnings

    def test_numeric_parent_id_warning(self):
        """Test parent ids that cannot appear in a formula are flagged."""
        schema = FormSchema.model_validate({
            "fields": [
                {"id": "1700000000000", "type": "number"},
                {
                    "id": "d",
                    "type": "derived",
                    "parentFields": ["1700000000000"],
                    "formula": "2 * 2",
                },
            ],
        })
        assert any("formula identifier" in w for w in schema_warnings(schema))
