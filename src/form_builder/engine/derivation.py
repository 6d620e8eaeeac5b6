"""
Recomputation of derived field values.

Derived fields may only depend on non-derived fields, so a single pass over
the derived fields in schema order computes every value from the current
inputs. Running ``recompute`` again with unchanged inputs yields the same
values.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from form_builder.engine.formula import evaluate
from form_builder.exceptions import EvaluationError
from form_builder.models.field_definitions import FormField
from form_builder.models.form_schema import FormSchema
from form_builder.models.values import FieldValue, format_number
from form_builder.tracing import DerivationObserver, log_derivation_failure

logger = logging.getLogger("form-builder.derivation")


@dataclass(frozen=True)
class DerivationFailure:
    """A derived field whose formula could not be evaluated."""

    field_id: str
    formula: str
    message: str


def parent_variables(field: FormField, values: Mapping[str, Any]) -> dict[str, float]:
    """Map each parent id to the numeric interpretation of its value."""
    return {
        parent_id: FieldValue.of(values.get(parent_id)).as_number()
        for parent_id in field.parent_fields or []
    }


def _is_pending(field: FormField, values: Mapping[str, Any]) -> bool:
    """A derived field waits until at least one of its parents has a value.

    While it waits it holds its default, or no value at all, so clearing
    every parent also clears the value computed from them.
    """
    parents = field.parent_fields or []
    return bool(parents) and all(values.get(parent_id) is None for parent_id in parents)


def recompute(
    schema: FormSchema,
    values: Mapping[str, Any],
    observer: DerivationObserver | None = None,
) -> dict[str, Any]:
    """
    Recompute every derived field.

    Args:
        schema: The form schema.
        values: Current value-set. It is not modified.
        observer: Called with a ``DerivationFailure`` for each formula that
            fails. Defaults to logging the failure.

    Returns:
        A new value-set with derived values updated. A derived field whose
        formula fails keeps its previous value; one whose parents are all
        absent goes back to its default.
    """
    report = observer or log_derivation_failure
    updated = dict(values)

    for field in schema.derived_fields():
        formula = (field.formula or "").strip()
        if not formula:
            continue
        if _is_pending(field, updated):
            if field.default_value.strip():
                updated[field.id] = field.default_value
            else:
                updated.pop(field.id, None)
            continue
        try:
            result = evaluate(formula, parent_variables(field, updated))
        except EvaluationError as e:
            report(DerivationFailure(field_id=field.id, formula=formula, message=str(e)))
            continue
        updated[field.id] = format_number(result)
        logger.debug(f"Derived {field.id} = {updated[field.id]}")

    return updated
