"""
Form storage for the form builder.

Provides the store interface used for saved forms, an in-memory and a
JSON-file backend, and the saved-forms repository.
"""

from form_builder.storage.backends import (
    InMemoryFormStore,
    JsonFileFormStore,
    JsonFormStore,
)
from form_builder.storage.protocol import FormStore
from form_builder.storage.repository import FormRepository
from form_builder.storage.samples import sample_forms

__all__ = [
    "FormStore",
    "JsonFormStore",
    "InMemoryFormStore",
    "JsonFileFormStore",
    "FormRepository",
    "sample_forms",
]
