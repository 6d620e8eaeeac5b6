"""
Tools for the form builder.

Schema editing helpers used by field editors.
"""

from form_builder.tools.schema_tools import (
    add_field,
    available_parent_fields,
    field_defaults,
    move_field,
    remove_field,
    update_field,
)

__all__ = [
    "add_field",
    "available_parent_fields",
    "field_defaults",
    "move_field",
    "remove_field",
    "update_field",
]
