"""
Exception types for the form builder engine.

Errors from pure computations (formula evaluation, field validation) are
recovered inside the engine. Only contract violations by a collaborator
(unknown field ids, calls in the wrong session state, malformed schemas)
propagate to the caller.
"""


class FormBuilderError(Exception):
    """Base class for all form builder errors."""


class EvaluationError(FormBuilderError):
    """A formula could not be parsed or evaluated."""

    def __init__(self, message: str, position: int | None = None):
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message} (at position {self.position})"


class SchemaError(FormBuilderError):
    """A schema violates the structural rules required to evaluate it."""

    def __init__(self, issues: list[str]):
        super().__init__("Invalid form schema:\n" + "\n".join(f"  - {i}" for i in issues))
        self.issues = issues


class PersistenceError(FormBuilderError):
    """Reading from or writing to a form store failed."""


class FormSessionError(FormBuilderError):
    """A form session was used in a way its contract does not allow."""


class UnknownFieldError(FormSessionError, KeyError):
    """A field id is not part of the loaded schema."""

    def __init__(self, field_id: str):
        super().__init__(f"Unknown field: {field_id!r}")
        self.field_id = field_id

    def __str__(self) -> str:
        return f"Unknown field: {self.field_id!r}"


class ReadonlyFieldError(FormSessionError):
    """A value was written to a derived (read-only) field."""

    def __init__(self, field_id: str):
        super().__init__(f"Field {field_id!r} is read-only")
        self.field_id = field_id


class InvalidStateError(FormSessionError):
    """An operation was called while the session is in the wrong state."""

    def __init__(self, operation: str, state: str):
        super().__init__(f"Cannot {operation} while session is {state}")
        self.operation = operation
        self.state = state
