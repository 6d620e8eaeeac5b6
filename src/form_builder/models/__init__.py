"""
Data models for the form builder.

This module contains Pydantic models for:
- Field definitions and validation rules
- Form schemas
- Validation results
and the tagged value type used by the evaluation engine.
"""

from form_builder.models.field_definitions import (
    FieldKind,
    FieldOption,
    FormField,
    ValidationKind,
    ValidationRule,
)
from form_builder.models.form_schema import FormSchema
from form_builder.models.validation_result import (
    ValidationFailure,
    ValidationResult,
)
from form_builder.models.values import (
    FieldValue,
    ValueKind,
    format_number,
)

__all__ = [
    # Fields
    "FieldKind",
    "FieldOption",
    "FormField",
    "ValidationKind",
    "ValidationRule",
    # Schema
    "FormSchema",
    # Validation
    "ValidationFailure",
    "ValidationResult",
    # Values
    "FieldValue",
    "ValueKind",
    "format_number",
]
