"""Tests for the validation engine."""

import pytest

from form_builder.engine.validation import validate_all, validate_field, validate_form
from form_builder.models.field_definitions import FieldKind, FormField, ValidationKind
from form_builder.models.form_schema import FormSchema


def make_field(kind="text", required=False, rules=(), **extra) -> FormField:
    return FormField.model_validate({
        "id": extra.pop("id", "field"),
        "type": kind,
        "required": required,
        "validations": [{"type": kind_, "value": value} for kind_, value in rules],
        **extra,
    })


class TestRequired:
    """Tests for required-ness checks."""

    @pytest.mark.parametrize("value", [None, "", "   ", []])
    def test_required_empty_fails(self, value):
        """Test empty values fail required fields."""
        failure = validate_field(make_field(required=True), value)
        assert failure is not None
        assert failure.message == "This field is required"
        assert failure.rule == ValidationKind.REQUIRED

    def test_required_checked_before_rules(self):
        """Test the required message wins over length rules."""
        field = make_field(required=True, rules=[("minLength", "5")])
        failure = validate_field(field, "")
        assert failure.message == "This field is required"

    def test_optional_empty_passes(self):
        """Test empty optional values skip all rules."""
        field = make_field(rules=[("minLength", "5"), ("email", "")])
        assert validate_field(field, "") is None
        assert validate_field(field, None) is None

    def test_required_rule_in_validations(self):
        """Test a required rule behaves like the required flag."""
        field = make_field(rules=[("required", "")])
        assert validate_field(field, " ").message == "This field is required"
        assert validate_field(field, "x") is None

    def test_zero_is_not_empty(self):
        """Test a numeric zero satisfies required."""
        assert validate_field(make_field("number", required=True), 0) is None

    def test_unchecked_checkbox_is_empty(self):
        """Test a required single checkbox must be checked."""
        field = make_field("checkbox", required=True)
        assert validate_field(field, False).message == "This field is required"
        assert validate_field(field, True) is None


class TestRules:
    """Tests for length and format rules."""

    def test_min_length(self):
        """Test minLength."""
        field = make_field(rules=[("minLength", "3")])
        assert validate_field(field, "ab").message == "Minimum length is 3 characters"
        assert validate_field(field, "abc") is None

    def test_max_length(self):
        """Test maxLength."""
        field = make_field(rules=[("maxLength", "5")])
        assert validate_field(field, "abcdef").message == "Maximum length is 5 characters"
        assert validate_field(field, "abcde") is None

    @pytest.mark.parametrize("value", ["not-an-email", "a@b", "a b@c.d", "@example.com", "user@"])
    def test_invalid_email(self, value):
        """Test invalid email addresses."""
        field = make_field(rules=[("email", "")])
        assert validate_field(field, value).message == "Please enter a valid email address"

    @pytest.mark.parametrize("value", ["user@example.com", "first.last@sub.example.org"])
    def test_valid_email(self, value):
        """Test valid email addresses."""
        assert validate_field(make_field(rules=[("email", "")]), value) is None

    def test_password(self):
        """Test the password length rule."""
        field = make_field("password", rules=[("password", "")])
        assert (
            validate_field(field, "short").message
            == "Password must be at least 8 characters long"
        )
        assert validate_field(field, "long enough") is None

    def test_first_failure_only(self):
        """Test only the first failing rule is reported."""
        field = make_field(rules=[("minLength", "5"), ("email", "")])
        failure = validate_field(field, "ab")
        assert failure.rule == ValidationKind.MIN_LENGTH
        assert failure.message == "Minimum length is 5 characters"

    def test_rule_order_matters(self):
        """Test rules run in declared order."""
        field = make_field(rules=[("email", ""), ("minLength", "5")])
        assert validate_field(field, "ab").rule == ValidationKind.EMAIL

    def test_duplicate_rules_tolerated(self):
        """Test duplicate rules of a kind are each applied."""
        field = make_field(rules=[("minLength", "2"), ("minLength", "4")])
        assert validate_field(field, "abc").message == "Minimum length is 4 characters"

    def test_invalid_threshold_ignored(self):
        """Test rules with unparsable thresholds never fail."""
        field = make_field(rules=[("minLength", ""), ("maxLength", "many")])
        assert validate_field(field, "anything at all") is None

    def test_number_values_checked_as_text(self):
        """Test numeric values are measured by their text form."""
        field = make_field("number", rules=[("maxLength", "3")])
        assert validate_field(field, 12345).message == "Maximum length is 3 characters"


class TestCheckboxGroup:
    """Tests for checkbox-group fields."""

    @pytest.fixture
    def field(self):
        return make_field(
            "checkbox",
            required=True,
            rules=[("minLength", "10")],
            id="newsletter",
            options=[{"value": "a", "label": "A"}, {"value": "b", "label": "B"}],
        )

    def test_empty_selection_fails(self, field):
        """Test a required group needs a selection."""
        assert validate_field(field, []).message == "This field is required"

    def test_selection_skips_length_rules(self, field):
        """Test length rules do not apply to selections."""
        assert validate_field(field, ["a"]) is None


class TestValidateAll:
    """Tests for whole-form validation."""

    @pytest.fixture
    def schema(self):
        return FormSchema(
            name="Contact",
            fields=[
                make_field(id="name", required=True, rules=[("minLength", "2")]),
                make_field(id="email", required=True, rules=[("email", "")]),
                make_field("textarea", id="message"),
            ],
        )

    def test_schema_order(self, schema):
        """Test failures come back in schema order, failing fields only."""
        failures = validate_all(schema, {"email": "nope", "name": "J", "message": ""})
        assert [(f.field_id, f.message) for f in failures] == [
            ("name", "Minimum length is 2 characters"),
            ("email", "Please enter a valid email address"),
        ]

    def test_missing_values(self, schema):
        """Test fields missing from the value-set are empty."""
        failures = validate_all(schema, {})
        assert [f.field_id for f in failures] == ["name", "email"]

    def test_all_valid(self, schema):
        """Test a valid form has no failures."""
        assert validate_all(schema, {"name": "Jo", "email": "jo@example.com"}) == []

    def test_validate_form(self, schema):
        """Test the result wrapper."""
        values = {"name": "Jo", "email": "jo@example.com"}
        result = validate_form(schema, values)
        assert result.is_valid
        assert result.validated_data == values

        result = validate_form(schema, {})
        assert not result.is_valid
        assert result.validated_data is None
        assert result.error_count == 2
