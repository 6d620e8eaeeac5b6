"""
Form schema model.

A schema is an ordered list of fields; the order is both the presentation
and the submission order. Besides the native camelCase JSON shape used for
storage, a schema can be exported as JSON Schema + UI Schema for client-side
form libraries like react-jsonschema-form.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from form_builder.models.field_definitions import FieldKind, FormField, ValidationKind
from form_builder.models.values import parse_number

# JSON Schema type per field kind
_JSON_TYPES: dict[FieldKind, str] = {
    FieldKind.NUMBER: "number",
    FieldKind.DERIVED: "number",
    FieldKind.CHECKBOX: "boolean",
}

# UI widget per field kind
_UI_WIDGETS: dict[FieldKind, str] = {
    FieldKind.TEXT: "text",
    FieldKind.NUMBER: "updown",
    FieldKind.TEXTAREA: "textarea",
    FieldKind.SELECT: "select",
    FieldKind.RADIO: "radio",
    FieldKind.CHECKBOX: "checkbox",
    FieldKind.DATE: "date",
    FieldKind.EMAIL: "email",
    FieldKind.PASSWORD: "password",
    FieldKind.DERIVED: "text",
}


class FormSchema(BaseModel):
    """A named, ordered collection of form fields."""

    id: str | None = Field(default=None, description="Identifier assigned when the form is saved")
    name: str = Field(default="", description="Form name")
    fields: list[FormField] = Field(default_factory=list, description="Ordered form fields")
    created_at: datetime | None = Field(
        default=None, alias="createdAt", description="When the form was saved"
    )

    model_config = ConfigDict(populate_by_name=True)

    def get_field(self, field_id: str) -> FormField | None:
        for field in self.fields:
            if field.id == field_id:
                return field
        return None

    def field_ids(self) -> list[str]:
        return [field.id for field in self.fields]

    def derived_fields(self) -> list[FormField]:
        """Derived fields in schema order."""
        return [field for field in self.fields if field.is_derived]

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys used for storage."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")

    def to_json_schema(self) -> dict[str, Any]:
        """Export as JSON Schema dict."""
        properties = {}
        required = []

        for field in self.fields:
            if field.is_checkbox_group:
                prop: dict[str, Any] = {
                    "type": "array",
                    "items": {"type": "string", "enum": field.option_values()},
                    "uniqueItems": True,
                }
            else:
                prop = {"type": _JSON_TYPES.get(field.kind, "string")}
                if field.options and field.kind in (FieldKind.SELECT, FieldKind.RADIO):
                    prop["enum"] = field.option_values()
            prop["title"] = field.label or field.id
            if field.is_checkbox_group:
                selection = field.default_selection()
                if selection:
                    prop["default"] = selection
            elif field.kind == FieldKind.CHECKBOX:
                if field.default_value.strip():
                    prop["default"] = field.default_checked()
            elif prop["type"] == "number":
                number = parse_number(field.default_value)
                if number is not None:
                    prop["default"] = number
            elif field.default_value:
                prop["default"] = field.default_value
            if field.kind == FieldKind.DATE:
                prop["format"] = "date"
            if field.readonly:
                prop["readOnly"] = True

            for rule in field.validations:
                if rule.kind == ValidationKind.MIN_LENGTH and rule.value.strip().isdigit():
                    prop["minLength"] = int(rule.value)
                elif rule.kind == ValidationKind.MAX_LENGTH and rule.value.strip().isdigit():
                    prop["maxLength"] = int(rule.value)
                elif rule.kind == ValidationKind.EMAIL:
                    prop["format"] = "email"
                elif rule.kind == ValidationKind.PASSWORD:
                    prop["minLength"] = max(prop.get("minLength", 0), 8)

            properties[field.id] = prop

            if field.is_required:
                required.append(field.id)

        return {
            "$schema": "https://json-schema.org/draft/2020-12/schema",
            "type": "object",
            "title": self.name,
            "properties": properties,
            "required": required,
        }

    def to_ui_schema(self) -> dict[str, Any]:
        """Export as UI Schema dict."""
        ui_schema: dict[str, Any] = {"ui:order": self.field_ids()}

        for field in self.fields:
            field_ui: dict[str, Any] = {"ui:widget": _UI_WIDGETS[field.kind]}
            if field.is_checkbox_group:
                field_ui["ui:widget"] = "checkboxes"
            if field.readonly:
                field_ui["ui:readonly"] = True
            if field.is_derived and field.formula:
                field_ui["ui:help"] = f"= {field.formula}"
            ui_schema[field.id] = field_ui

        return ui_schema

    def to_form_config(self) -> dict[str, Any]:
        """Export complete form configuration for client libraries."""
        return {
            "formId": self.id,
            "schema": self.to_json_schema(),
            "uiSchema": self.to_ui_schema(),
        }
