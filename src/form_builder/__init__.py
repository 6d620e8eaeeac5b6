"""
Form Builder: live evaluation of dynamic form schemas.

Load a form schema into a session, feed it user input, and get back
validation errors and recomputed derived fields.

Simple Usage:
    from form_builder import FormSchema, FormSession

    schema = FormSchema.model_validate({
        "name": "Registration",
        "fields": [
            {"id": "age", "type": "number", "label": "Age", "required": True},
            {"id": "birthYear", "type": "derived", "label": "Birth Year",
             "parentFields": ["age"], "formula": "2024 - age"},
        ],
    })

    session = FormSession()
    session.load(schema)
    session.set_value("age", "30")
    session.values          # {"age": "30", "birthYear": "1994"}
    result = session.submit()

Formulas:
    from form_builder import evaluate

    evaluate("2 * (a + b) - c", {"a": 3, "b": 4, "c": 1})  # 13.0

Saved forms:
    from form_builder.storage import FormRepository, JsonFileFormStore

    repository = FormRepository(JsonFileFormStore(".form_builder"))
    repository.save_form(schema)

Tracing:
    from form_builder.tracing import setup_tracing

    setup_tracing(console=True, verbose=True)
"""

from form_builder.models import (
    FieldKind,
    FieldOption,
    FieldValue,
    FormField,
    FormSchema,
    ValidationFailure,
    ValidationKind,
    ValidationResult,
    ValidationRule,
)
from form_builder.engine import (
    DerivationFailure,
    FieldState,
    FormSession,
    SessionState,
    evaluate,
    recompute,
    validate_all,
    validate_field,
    validate_form,
)
from form_builder.exceptions import (
    EvaluationError,
    FormBuilderError,
    FormSessionError,
    InvalidStateError,
    PersistenceError,
    ReadonlyFieldError,
    SchemaError,
    UnknownFieldError,
)
from form_builder.tracing import setup_tracing

__all__ = [
    # Models
    "FieldKind",
    "FieldOption",
    "FieldValue",
    "FormField",
    "FormSchema",
    "ValidationFailure",
    "ValidationKind",
    "ValidationResult",
    "ValidationRule",
    # Engine
    "DerivationFailure",
    "FieldState",
    "FormSession",
    "SessionState",
    "evaluate",
    "recompute",
    "validate_all",
    "validate_field",
    "validate_form",
    # Errors
    "EvaluationError",
    "FormBuilderError",
    "FormSessionError",
    "InvalidStateError",
    "PersistenceError",
    "ReadonlyFieldError",
    "SchemaError",
    "UnknownFieldError",
    # Tracing
    "setup_tracing",
]

__version__ = "0.1.0"
