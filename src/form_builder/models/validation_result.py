"""
Validation result models for form input validation.

A ``ValidationFailure`` is an expected, user-facing outcome: its message is
shown verbatim next to the field. It is returned, never raised.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from form_builder.models.field_definitions import ValidationKind


class ValidationFailure(BaseModel):
    """Validation error for a specific field."""

    field_id: str = Field(..., alias="fieldId", description="Id of the field with error")
    rule: ValidationKind = Field(..., description="Rule that failed")
    message: str = Field(..., description="Human-readable error message")

    model_config = ConfigDict(populate_by_name=True)


class ValidationResult(BaseModel):
    """Result of validating a whole form."""

    is_valid: bool = Field(..., description="Whether the form data is valid")
    errors: list[ValidationFailure] = Field(
        default_factory=list, description="Failing fields in schema order"
    )
    validated_data: dict[str, Any] | None = Field(
        default=None, description="Submitted values if valid"
    )

    @property
    def error_count(self) -> int:
        """Get the number of validation errors."""
        return len(self.errors)

    def get_field_errors(self, field_id: str) -> list[ValidationFailure]:
        """Get all errors for a specific field."""
        return [e for e in self.errors if e.field_id == field_id]

    def to_error_dict(self) -> dict[str, str]:
        """Convert errors to a dict mapping field ids to error messages."""
        return {error.field_id: error.message for error in self.errors}
