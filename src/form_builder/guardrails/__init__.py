"""Guardrails for the form builder."""

from form_builder.guardrails.schema_guardrails import (
    check_schema,
    schema_warnings,
)

__all__ = [
    "check_schema",
    "schema_warnings",
]
