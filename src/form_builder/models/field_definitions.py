"""
Field definition models for dynamic forms.

A form is an ordered list of fields. Each field has a kind (which widget
renders it and how its value is interpreted), an ordered list of validation
rules and, for derived fields, the parent fields and the arithmetic formula
used to compute its value.

JSON uses the camelCase keys of the form builder UI (``type``,
``defaultValue``, ``parentFields``); Python attributes are snake_case.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FieldKind(str, Enum):
    """Kinds of form fields."""

    TEXT = "text"
    NUMBER = "number"
    TEXTAREA = "textarea"
    SELECT = "select"
    RADIO = "radio"
    CHECKBOX = "checkbox"
    DATE = "date"
    EMAIL = "email"
    PASSWORD = "password"
    DERIVED = "derived"


class ValidationKind(str, Enum):
    """Kinds of validation rules."""

    REQUIRED = "required"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    EMAIL = "email"
    PASSWORD = "password"


# Kinds whose fields carry a list of options
OPTION_KINDS = frozenset({FieldKind.SELECT, FieldKind.RADIO, FieldKind.CHECKBOX})


class ValidationRule(BaseModel):
    """A single validation rule attached to a field."""

    kind: ValidationKind = Field(..., alias="type", description="Rule kind")
    value: str = Field(
        default="",
        description="Rule parameter, e.g. the length threshold (unused for required)",
    )

    model_config = ConfigDict(populate_by_name=True)


class FieldOption(BaseModel):
    """A selectable option of a select, radio or checkbox-group field."""

    value: str = Field(..., description="Submitted value")
    label: str = Field(default="", description="Displayed label")


class FormField(BaseModel):
    """
    A single form field.

    ``id`` is immutable once the field exists. Derived fields are always
    read-only; their value is computed from ``parent_fields`` through
    ``formula``.
    """

    id: str = Field(..., frozen=True, description="Field identifier, unique within a schema")
    kind: FieldKind = Field(..., alias="type", description="Field kind")
    label: str = Field(default="", description="Human-readable label")
    default_value: str = Field(default="", alias="defaultValue", description="Initial value")
    required: bool = Field(default=False, description="Whether a value must be provided")
    validations: list[ValidationRule] = Field(
        default_factory=list, description="Validation rules, evaluated in order"
    )
    options: list[FieldOption] | None = Field(
        default=None, description="Options for select, radio and checkbox-group fields"
    )
    parent_fields: list[str] | None = Field(
        default=None, alias="parentFields", description="Parent field ids (derived only)"
    )
    formula: str | None = Field(default=None, description="Arithmetic formula (derived only)")
    readonly: bool = Field(default=False, description="Whether users may edit the value")

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    @model_validator(mode="after")
    def _derived_fields_are_readonly(self) -> "FormField":
        if self.kind == FieldKind.DERIVED and not self.readonly:
            # Bypass validate_assignment to avoid re-entering this validator
            object.__setattr__(self, "readonly", True)
        return self

    @property
    def is_derived(self) -> bool:
        return self.kind == FieldKind.DERIVED

    @property
    def is_checkbox_group(self) -> bool:
        """A checkbox field with options holds a list of selected values."""
        return self.kind == FieldKind.CHECKBOX and bool(self.options)

    @property
    def is_required(self) -> bool:
        """Required via the flag or via a ``required`` rule."""
        return self.required or any(
            rule.kind == ValidationKind.REQUIRED for rule in self.validations
        )

    def option_values(self) -> list[str]:
        return [option.value for option in self.options or []]

    def default_selection(self) -> list[str]:
        """Comma-separated default of a checkbox group as a list of option values."""
        return [item.strip() for item in self.default_value.split(",") if item.strip()]

    def default_checked(self) -> bool:
        return self.default_value.strip().lower() in ("true", "1", "yes", "on")

    def to_dict(self) -> dict:
        """Serialize with the camelCase keys used for storage."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
