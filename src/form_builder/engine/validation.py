"""
Rule-based validation of field values.

Rules run in a fixed order:

1. Required-ness. A required field with an empty value fails with
   "This field is required" and no other rule runs.
2. An empty optional value passes without running any rule.
3. The field's validation rules run in declared order and the first failure
   is returned.

Length and format rules only apply to scalar values; checkbox groups are
checked for required-ness alone.
"""

import logging
from typing import Any, Mapping

from form_builder.guardrails.constants import (
    EMAIL_MESSAGE,
    EMAIL_PATTERN,
    MAX_LENGTH_MESSAGE,
    MIN_LENGTH_MESSAGE,
    PASSWORD_MESSAGE,
    PASSWORD_MIN_LENGTH,
    REQUIRED_MESSAGE,
    THRESHOLD_PATTERN,
)
from form_builder.models.field_definitions import FormField, ValidationKind, ValidationRule
from form_builder.models.form_schema import FormSchema
from form_builder.models.validation_result import ValidationFailure, ValidationResult
from form_builder.models.values import FieldValue

logger = logging.getLogger("form-builder.validation")


def _threshold(rule: ValidationRule) -> int | None:
    match = THRESHOLD_PATTERN.match(rule.value)
    if match is None:
        return None
    return int(match.group(1))


def _check_rule(rule: ValidationRule, text: str) -> str | None:
    """Return the failure message of a single rule, or None if it passes."""
    if rule.kind == ValidationKind.MIN_LENGTH:
        n = _threshold(rule)
        if n is None:
            logger.debug(f"Ignoring minLength rule with invalid threshold {rule.value!r}")
            return None
        if len(text) < n:
            return MIN_LENGTH_MESSAGE.format(n=n)
    elif rule.kind == ValidationKind.MAX_LENGTH:
        n = _threshold(rule)
        if n is None:
            logger.debug(f"Ignoring maxLength rule with invalid threshold {rule.value!r}")
            return None
        if len(text) > n:
            return MAX_LENGTH_MESSAGE.format(n=n)
    elif rule.kind == ValidationKind.EMAIL:
        if not EMAIL_PATTERN.match(text):
            return EMAIL_MESSAGE
    elif rule.kind == ValidationKind.PASSWORD:
        if len(text) < PASSWORD_MIN_LENGTH:
            return PASSWORD_MESSAGE.format(n=PASSWORD_MIN_LENGTH)
    return None


def validate_field(field: FormField, value: Any) -> ValidationFailure | None:
    """
    Validate one field value.

    Args:
        field: The field definition.
        value: The current raw value, or None when the field has no value.

    Returns:
        The first failure, or None if the value is valid.
    """
    field_value = FieldValue.of(value)

    if field_value.is_empty():
        if field.is_required:
            return ValidationFailure(
                field_id=field.id,
                rule=ValidationKind.REQUIRED,
                message=REQUIRED_MESSAGE,
            )
        return None

    if field.is_checkbox_group or field_value.is_list:
        return None

    text = field_value.as_text()
    for rule in field.validations:
        message = _check_rule(rule, text)
        if message is not None:
            return ValidationFailure(field_id=field.id, rule=rule.kind, message=message)
    return None


def validate_all(schema: FormSchema, values: Mapping[str, Any]) -> list[ValidationFailure]:
    """Validate every field in schema order, returning only the failures."""
    failures = []
    for field in schema.fields:
        failure = validate_field(field, values.get(field.id))
        if failure is not None:
            failures.append(failure)
    return failures


def validate_form(schema: FormSchema, values: Mapping[str, Any]) -> ValidationResult:
    """Validate a form and wrap the outcome in a ``ValidationResult``."""
    errors = validate_all(schema, values)
    return ValidationResult(
        is_valid=not errors,
        errors=errors,
        validated_data=dict(values) if not errors else None,
    )
