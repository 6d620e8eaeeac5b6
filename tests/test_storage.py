"""Tests for form stores and the saved-forms repository."""

import json

import pytest

from form_builder.models.form_schema import FormSchema
from form_builder.storage import (
    FormRepository,
    InMemoryFormStore,
    JsonFileFormStore,
    sample_forms,
)


@pytest.fixture
def schema():
    return FormSchema.model_validate({
        "name": "Survey",
        "fields": [
            {"id": "q1", "type": "text", "label": "Question 1", "required": True},
            {"id": "score", "type": "number"},
            {"id": "double", "type": "derived", "parentFields": ["score"], "formula": "score * 2"},
        ],
    })


@pytest.fixture(params=["memory", "file"])
def store(request, tmp_path):
    if request.param == "memory":
        return InMemoryFormStore()
    return JsonFileFormStore(tmp_path / "forms")


class TestFormStore:
    """Tests shared by all store backends."""

    def test_absent_key(self, store):
        """Test reading a missing key."""
        assert store.read("currentForm") is None
        assert store.read_list("savedForms") is None

    def test_write_and_read(self, store, schema):
        """Test a written schema reads back equal."""
        assert store.write("currentForm", schema)
        assert store.read("currentForm") == schema

    def test_write_and_read_list(self, store, schema):
        """Test lists of schemas."""
        assert store.write_list("savedForms", [schema, schema])
        assert store.read_list("savedForms") == [schema, schema]

    def test_delete(self, store, schema):
        """Test deleting a key."""
        store.write("currentForm", schema)
        assert store.delete("currentForm")
        assert store.read("currentForm") is None


class TestMalformedContent:
    """Tests for corrupted store content."""

    @pytest.mark.parametrize(
        "text",
        ["{not json", '"just a string"', '{"fields": [{"id": "x", "type": "nope"}]}', "null"],
    )
    def test_malformed_schema_is_absent(self, text):
        """Test malformed JSON or schemas read as absent."""
        store = InMemoryFormStore({"currentForm": text})
        assert store.read("currentForm") is None

    def test_malformed_list_is_absent(self):
        """Test a non-list reads as absent."""
        store = InMemoryFormStore({"savedForms": json.dumps({"name": "x"})})
        assert store.read_list("savedForms") is None

    def test_malformed_file(self, tmp_path):
        """Test a corrupted file reads as absent."""
        (tmp_path / "currentForm.json").write_text("{oops", encoding="utf-8")
        assert JsonFileFormStore(tmp_path).read("currentForm") is None


class TestJsonFileFormStore:
    """Tests specific to the file backend."""

    def test_file_layout(self, tmp_path, schema):
        """Test one JSON file per key with camelCase content."""
        store = JsonFileFormStore(tmp_path)
        store.write("currentForm", schema)
        data = json.loads((tmp_path / "currentForm.json").read_text(encoding="utf-8"))
        assert data["fields"][2]["parentFields"] == ["score"]

    def test_invalid_key(self, tmp_path, schema):
        """Test keys that are not plain names are refused."""
        store = JsonFileFormStore(tmp_path)
        assert store.write("../escape", schema) is False
        assert store.read("../escape") is None

    def test_write_failure(self, tmp_path, schema):
        """Test write failures return False."""
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        store = JsonFileFormStore(blocker / "forms")
        assert store.write("currentForm", schema) is False


class TestFormRepository:
    """Tests for FormRepository."""

    @pytest.fixture
    def repository(self):
        return FormRepository(InMemoryFormStore())

    def test_current_form(self, repository, schema):
        """Test saving and loading the in-progress form."""
        assert repository.get_current_form() is None
        assert repository.save_current_form(schema)
        assert repository.get_current_form() == schema

    def test_samples_when_empty(self, repository):
        """Test the sample forms are listed until something is saved."""
        forms = repository.list_saved_forms()
        assert [f.name for f in forms] == ["Contact Form", "User Registration", "Feedback Survey"]

    def test_save_form(self, repository, schema):
        """Test saving assigns an id and creation time and prepends the form."""
        saved = repository.save_form(schema)
        assert saved is not None
        assert saved.id
        assert saved.created_at is not None
        assert schema.id is None

        forms = repository.list_saved_forms()
        assert forms[0].id == saved.id
        assert len(forms) == len(sample_forms()) + 1

    def test_save_twice_gives_distinct_ids(self, repository, schema):
        """Test each save gets its own id."""
        first = repository.save_form(schema)
        second = repository.save_form(schema)
        assert first.id != second.id
        assert [f.id for f in repository.list_saved_forms()[:2]] == [second.id, first.id]

    def test_get_and_delete(self, repository, schema):
        """Test looking up and deleting saved forms."""
        saved = repository.save_form(schema)
        assert repository.get_saved_form(saved.id).name == "Survey"
        assert repository.delete_form(saved.id)
        assert repository.get_saved_form(saved.id) is None
        assert repository.delete_form("missing") is False

    def test_malformed_saved_list_falls_back(self):
        """Test a corrupted saved list falls back to the samples."""
        repository = FormRepository(InMemoryFormStore({"savedForms": "[{"}))
        assert len(repository.list_saved_forms()) == len(sample_forms())

    def test_sample_forms_load_into_sessions(self):
        """Test every sample form is a valid session schema."""
        from form_builder.engine.session import FormSession

        for form in sample_forms():
            FormSession(enable_tracing=False).load(form)
