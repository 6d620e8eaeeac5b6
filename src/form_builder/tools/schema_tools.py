"""
Schema editing tools.

Helpers used by a field editor to build and rearrange form schemas. Every
function returns a new schema and leaves its input untouched.
"""

import time
from typing import Any

from form_builder.models.field_definitions import (
    OPTION_KINDS,
    FieldKind,
    FieldOption,
    FormField,
)
from form_builder.models.form_schema import FormSchema


def field_defaults(kind: FieldKind | str, field_id: str | None = None) -> FormField:
    """
    Create a blank field of the given kind.

    Option fields start with one empty option; derived fields start with no
    parents, an empty formula and are read-only.

    Args:
        kind: Field kind.
        field_id: Field id. Defaults to a millisecond timestamp.
    """
    kind = FieldKind(kind)
    field = FormField(
        id=field_id or str(time.time_ns() // 1_000_000),
        kind=kind,
    )
    if kind in OPTION_KINDS:
        field.options = [FieldOption(value="", label="")]
    elif kind == FieldKind.DERIVED:
        field.parent_fields = []
        field.formula = ""
    return field


def available_parent_fields(schema: FormSchema, field_id: str) -> list[FormField]:
    """Fields a derived field may depend on: every other non-derived field."""
    return [f for f in schema.fields if f.id != field_id and not f.is_derived]


def add_field(schema: FormSchema, field: FormField, index: int | None = None) -> FormSchema:
    """Insert a field, appending when ``index`` is None."""
    if schema.get_field(field.id) is not None:
        raise ValueError(f"Field '{field.id}' already exists")
    fields = list(schema.fields)
    fields.insert(len(fields) if index is None else index, field)
    return schema.model_copy(update={"fields": fields})


def remove_field(schema: FormSchema, field_id: str) -> FormSchema:
    """Remove a field and drop it from the parents of derived fields."""
    fields = []
    for field in schema.fields:
        if field.id == field_id:
            continue
        if field.parent_fields and field_id in field.parent_fields:
            field = field.model_copy(
                update={"parent_fields": [p for p in field.parent_fields if p != field_id]}
            )
        fields.append(field)
    return schema.model_copy(update={"fields": fields})


def move_field(schema: FormSchema, field_id: str, new_index: int) -> FormSchema:
    """Move a field to a new position."""
    fields = list(schema.fields)
    for index, field in enumerate(fields):
        if field.id == field_id:
            fields.insert(new_index, fields.pop(index))
            return schema.model_copy(update={"fields": fields})
    raise KeyError(field_id)


def update_field(schema: FormSchema, field_id: str, **changes: Any) -> FormSchema:
    """
    Change attributes of a field.

    Raises:
        KeyError: If the field does not exist.
        ValueError: If ``changes`` tries to change the id.
    """
    if "id" in changes:
        raise ValueError("Field ids cannot be changed")
    fields = list(schema.fields)
    for index, field in enumerate(fields):
        if field.id == field_id:
            data = field.model_dump()
            data.update(changes)
            fields[index] = FormField.model_validate(data)
            return schema.model_copy(update={"fields": fields})
    raise KeyError(field_id)
