"""
Form session: the live state of one rendered form.

The session owns the value-set, the touched set and the error-set of a
single form. Every mutation recomputes the derived fields before returning,
so readers never observe a derived value computed from stale parents.

Usage:
    session = FormSession()
    session.load(schema)
    session.set_value("age", "30")
    result = session.submit()
    if result.is_valid:
        save(session.values)
"""

import copy
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping

from form_builder import guardrails
from form_builder.config import get_config
from form_builder.engine.derivation import DerivationFailure, recompute
from form_builder.engine.validation import validate_all
from form_builder.exceptions import (
    InvalidStateError,
    ReadonlyFieldError,
    SchemaError,
    UnknownFieldError,
)
from form_builder.models.field_definitions import FieldKind, FormField
from form_builder.models.form_schema import FormSchema
from form_builder.models.validation_result import ValidationFailure, ValidationResult
from form_builder.tracing import DerivationObserver, log_derivation_failure, trace_session_operation

logger = logging.getLogger("form-builder.session")


class SessionState(str, Enum):
    """Lifecycle states of a form session."""

    INITIALIZING = "initializing"
    READY = "ready"
    SUBMITTING = "submitting"
    SUBMITTED_VALID = "submitted_valid"
    SUBMITTED_INVALID = "submitted_invalid"


# States in which the user may edit and submit
_EDITABLE_STATES = frozenset({SessionState.READY, SessionState.SUBMITTED_INVALID})


@dataclass(frozen=True)
class FieldState:
    """What the presentation layer needs to render one field."""

    field_id: str
    value: Any
    touched: bool
    error: str | None
    readonly: bool
    submitted: bool = False

    @property
    def visible_error(self) -> str | None:
        """The error to display: only once the field is touched or the form submitted."""
        if self.touched or self.submitted:
            return self.error
        return None


def _default_value(field: FormField) -> Any:
    """The seeded value of a field, or None when it starts without one."""
    default = field.default_value
    if field.is_checkbox_group:
        return field.default_selection()
    if not default.strip():
        return None
    if field.kind == FieldKind.CHECKBOX:
        return field.default_checked()
    return default


class FormSession:
    """
    Live evaluation state of one form.

    Sessions share no state with each other; the schema is copied on load.
    """

    def __init__(
        self,
        observer: DerivationObserver | None = None,
        on_submit: Callable[[dict[str, Any]], None] | None = None,
        enable_tracing: bool | None = None,
    ):
        """
        Initialize an empty session.

        Args:
            observer: Receives derivation failures. Defaults to logging them.
            on_submit: Called with the final values after a valid submission.
            enable_tracing: Wrap operations in traces. If None, uses
                config.enable_tracing.
        """
        self.observer = observer or log_derivation_failure
        self.on_submit = on_submit
        self.enable_tracing = (
            get_config().enable_tracing if enable_tracing is None else enable_tracing
        )

        self._state = SessionState.INITIALIZING
        self._schema: FormSchema | None = None
        self._initial_values: dict[str, Any] = {}
        self._values: dict[str, Any] = {}
        self._touched: set[str] = set()
        self._errors: list[ValidationFailure] = []
        self._derivation_failures: list[DerivationFailure] = []

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def schema(self) -> FormSchema:
        if self._schema is None:
            raise InvalidStateError("read the schema", self._state.value)
        return self._schema

    @property
    def values(self) -> dict[str, Any]:
        """A copy of the current value-set."""
        return copy.deepcopy(self._values)

    @property
    def touched(self) -> frozenset[str]:
        return frozenset(self._touched)

    @property
    def errors(self) -> list[ValidationFailure]:
        """The error-set of the last submission, minus fields edited since."""
        return list(self._errors)

    @property
    def derivation_failures(self) -> list[DerivationFailure]:
        """Formulas that failed during the most recent recompute."""
        return list(self._derivation_failures)

    def get_value(self, field_id: str) -> Any:
        self._require_field(field_id)
        return copy.deepcopy(self._values.get(field_id))

    def get_error(self, field_id: str) -> str | None:
        self._require_field(field_id)
        for error in self._errors:
            if error.field_id == field_id:
                return error.message
        return None

    def field_state(self, field_id: str) -> FieldState:
        field = self._require_field(field_id)
        return FieldState(
            field_id=field_id,
            value=copy.deepcopy(self._values.get(field_id)),
            touched=field_id in self._touched,
            error=self.get_error(field_id),
            readonly=field.readonly,
            submitted=self._state
            in (SessionState.SUBMITTED_VALID, SessionState.SUBMITTED_INVALID),
        )

    def field_states(self) -> list[FieldState]:
        """Field states in schema order."""
        return [self.field_state(field.id) for field in self.schema.fields]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    @trace_session_operation("form_session.load")
    def load(
        self,
        schema: FormSchema,
        initial_values: Mapping[str, Any] | None = None,
    ) -> None:
        """
        Load a schema and seed its values.

        Fields with a non-empty default start with it, checkbox groups start
        with an empty selection, and all other fields start without a value.
        ``initial_values`` override the defaults.

        Raises:
            SchemaError: If ids are duplicated or a derived field depends on
                an unknown or derived field.
            UnknownFieldError: If ``initial_values`` names an unknown field.
        """
        issues = guardrails.check_schema(schema)
        if issues:
            raise SchemaError(issues)
        for warning in guardrails.schema_warnings(schema):
            logger.warning(f"Schema '{schema.name}': {warning}")

        schema = schema.model_copy(deep=True)
        initial = dict(initial_values or {})
        for field_id in initial:
            if schema.get_field(field_id) is None:
                raise UnknownFieldError(field_id)

        self._schema = schema
        self._initial_values = copy.deepcopy(initial)
        self._seed()
        logger.info(f"Loaded form '{schema.name}' with {len(schema.fields)} fields")

    @trace_session_operation("form_session.set_value")
    def set_value(self, field_id: str, value: Any) -> None:
        """
        Set a field value and recompute the derived fields.

        Marks the field as touched and clears its error. Editing after an
        invalid submission returns the session to READY.

        Raises:
            UnknownFieldError: If the field is not part of the schema.
            ReadonlyFieldError: If the field is derived.
            InvalidStateError: If the session is not editable.
        """
        self._require_state("set a value", _EDITABLE_STATES)
        field = self._require_field(field_id)
        if field.readonly:
            raise ReadonlyFieldError(field_id)

        self._values[field_id] = copy.deepcopy(value)
        self._touched.add(field_id)
        self._errors = [e for e in self._errors if e.field_id != field_id]
        self._recompute()
        self._state = SessionState.READY

    @trace_session_operation("form_session.submit")
    def submit(self) -> ValidationResult:
        """
        Validate all fields.

        Returns:
            ValidationResult whose ``validated_data`` holds the final values
            when the form is valid.
        """
        self._require_state("submit", _EDITABLE_STATES)
        self._state = SessionState.SUBMITTING

        self._errors = validate_all(self.schema, self._values)
        if self._errors:
            self._state = SessionState.SUBMITTED_INVALID
            logger.info(f"Submission of '{self.schema.name}' has {len(self._errors)} errors")
            return ValidationResult(is_valid=False, errors=list(self._errors))

        self._state = SessionState.SUBMITTED_VALID
        logger.info(f"Submission of '{self.schema.name}' is valid")
        if self.on_submit is not None:
            self.on_submit(self.values)
        return ValidationResult(is_valid=True, validated_data=self.values)

    @trace_session_operation("form_session.reset")
    def reset(self) -> None:
        """Discard all edits and errors and re-seed the loaded values."""
        if self._schema is None:
            raise InvalidStateError("reset", self._state.value)
        self._seed()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _seed(self) -> None:
        values: dict[str, Any] = {}
        for field in self.schema.fields:
            default = _default_value(field)
            if default is not None:
                values[field.id] = default
        values.update(copy.deepcopy(self._initial_values))

        self._values = values
        self._touched = set()
        self._errors = []
        self._recompute()
        self._state = SessionState.READY

    def _recompute(self) -> None:
        failures: list[DerivationFailure] = []

        def observe(failure: DerivationFailure) -> None:
            failures.append(failure)
            self.observer(failure)

        self._values = recompute(self.schema, self._values, observer=observe)
        self._derivation_failures = failures

    def _require_field(self, field_id: str) -> FormField:
        field = self.schema.get_field(field_id)
        if field is None:
            raise UnknownFieldError(field_id)
        return field

    def _require_state(self, operation: str, allowed: frozenset[SessionState]) -> None:
        if self._state not in allowed:
            raise InvalidStateError(operation, self._state.value)
