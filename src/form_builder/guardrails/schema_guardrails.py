"""
Structural guardrails for form schemas.

The field editor is trusted to build sensible schemas, but a few properties
must hold before a schema can be evaluated at all: field ids are unique, and
derived fields only depend on existing, non-derived fields. Violations are
errors and make ``FormSession.load`` reject the schema. Other oddities are
reported as warnings.
"""

from form_builder.engine.formula import referenced_identifiers
from form_builder.exceptions import EvaluationError
from form_builder.guardrails.constants import VALID_FIELD_ID
from form_builder.models.field_definitions import FieldKind, FormField
from form_builder.models.form_schema import FormSchema


def _check_field_id(field_id: str) -> tuple[bool, str | None]:
    """Validate a field id for use as a formula identifier."""
    if not field_id:
        return False, "Field id cannot be empty"
    if len(field_id) > 100:
        return False, "Field id too long"
    if not VALID_FIELD_ID.match(field_id):
        return False, "Field id cannot be used as a formula identifier"
    return True, None


def check_schema(schema: FormSchema) -> list[str]:
    """
    Find structural errors that prevent evaluating a schema.

    Returns:
        A list of issues; empty if the schema is usable.
    """
    issues: list[str] = []
    by_id: dict[str, FormField] = {}

    for field in schema.fields:
        if not field.id:
            issues.append("Field id cannot be empty")
        elif field.id in by_id:
            issues.append(f"Duplicate field id '{field.id}'")
        else:
            by_id[field.id] = field

    for field in schema.derived_fields():
        for parent_id in field.parent_fields or []:
            parent = by_id.get(parent_id)
            if parent_id == field.id:
                issues.append(f"Derived field '{field.id}' cannot depend on itself")
            elif parent is None:
                issues.append(f"Derived field '{field.id}' references unknown field '{parent_id}'")
            elif parent.is_derived:
                issues.append(
                    f"Derived field '{field.id}' cannot depend on derived field '{parent_id}'"
                )

    return issues


def schema_warnings(schema: FormSchema) -> list[str]:
    """Find issues that do not block evaluation but likely indicate mistakes."""
    warnings: list[str] = []

    for field in schema.fields:
        if field.kind in (FieldKind.SELECT, FieldKind.RADIO) and not field.options:
            warnings.append(f"Field '{field.id}' has no options")

        if not field.is_derived:
            continue

        parents = field.parent_fields or []
        for parent_id in parents:
            is_valid, error = _check_field_id(parent_id)
            if not is_valid:
                warnings.append(f"Parent '{parent_id}' of '{field.id}': {error}")

        if not (field.formula or "").strip():
            warnings.append(f"Derived field '{field.id}' has no formula")
            continue
        try:
            names = referenced_identifiers(field.formula)
        except EvaluationError as e:
            warnings.append(f"Formula of '{field.id}' is invalid: {e}")
            continue
        for name in names:
            if name not in parents:
                warnings.append(
                    f"Formula of '{field.id}' uses '{name}', which is not a parent field"
                )

    return warnings
