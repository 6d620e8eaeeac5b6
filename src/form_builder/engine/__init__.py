"""
Form evaluation engine.

- formula: parses and evaluates arithmetic formulas
- validation: rule-based validation of field values
- derivation: recomputes derived fields
- session: live state of one form
"""

from form_builder.engine.formula import evaluate, parse, referenced_identifiers
from form_builder.engine.validation import validate_all, validate_field, validate_form
from form_builder.engine.derivation import DerivationFailure, recompute
from form_builder.engine.session import FieldState, FormSession, SessionState

__all__ = [
    # Formula
    "evaluate",
    "parse",
    "referenced_identifiers",
    # Validation
    "validate_all",
    "validate_field",
    "validate_form",
    # Derivation
    "DerivationFailure",
    "recompute",
    # Session
    "FieldState",
    "FormSession",
    "SessionState",
]
