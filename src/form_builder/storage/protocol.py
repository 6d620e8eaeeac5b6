"""Storage protocol for form schemas.

Defines the interface a form store must implement to be used by
``FormRepository``. Stores hold JSON documents under opaque keys.
"""

from typing import Protocol

from form_builder.models.form_schema import FormSchema


class FormStore(Protocol):
    """Protocol defining the storage interface for form schemas."""

    def read(self, key: str) -> FormSchema | None:
        """Read a schema.

        Returns:
            The stored schema, or None if the key is absent or its content
            is not a valid schema.
        """
        ...

    def write(self, key: str, schema: FormSchema) -> bool:
        """Write a schema.

        Returns:
            True on success, False if the store could not be written.
        """
        ...

    def read_list(self, key: str) -> list[FormSchema] | None:
        """Read a list of schemas; None if absent or malformed."""
        ...

    def write_list(self, key: str, schemas: list[FormSchema]) -> bool:
        """Write a list of schemas."""
        ...
