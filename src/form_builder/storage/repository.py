"""
Saved forms and the in-progress form.

``FormRepository`` keeps two entries in a form store: the form currently
being edited, and the list of saved forms (newest first). Storage failures
are reported through return values and logs; they never touch the state of
a running form session.
"""

import logging
import time
from datetime import datetime, timezone

from form_builder.config import get_config
from form_builder.models.form_schema import FormSchema
from form_builder.storage.protocol import FormStore
from form_builder.storage.samples import sample_forms

logger = logging.getLogger("form-builder.storage")


class FormRepository:
    """Saved-forms access on top of a ``FormStore``."""

    def __init__(
        self,
        store: FormStore,
        current_form_key: str | None = None,
        saved_forms_key: str | None = None,
    ):
        config = get_config()
        self.store = store
        self.current_form_key = current_form_key or config.current_form_key
        self.saved_forms_key = saved_forms_key or config.saved_forms_key

    def get_current_form(self) -> FormSchema | None:
        """The in-progress form, or None if nothing valid is stored."""
        return self.store.read(self.current_form_key)

    def save_current_form(self, schema: FormSchema) -> bool:
        return self.store.write(self.current_form_key, schema)

    def list_saved_forms(self) -> list[FormSchema]:
        """Saved forms, newest first. Falls back to the sample forms."""
        forms = self.store.read_list(self.saved_forms_key)
        if forms is None:
            return sample_forms()
        return forms

    def get_saved_form(self, form_id: str) -> FormSchema | None:
        for form in self.list_saved_forms():
            if form.id == form_id:
                return form
        return None

    def save_form(self, schema: FormSchema) -> FormSchema | None:
        """
        Save a form under a new id.

        Returns:
            The stored copy with its id and creation time, or None if the
            store could not be written.
        """
        saved = self.list_saved_forms()
        taken = {form.id for form in saved}
        # Millisecond timestamp, bumped on collision
        form_id = time.time_ns() // 1_000_000
        while str(form_id) in taken:
            form_id += 1

        new_form = schema.model_copy(
            deep=True,
            update={"id": str(form_id), "created_at": datetime.now(timezone.utc)},
        )
        forms = [new_form, *saved]
        if not self.store.write_list(self.saved_forms_key, forms):
            logger.warning(f"Form '{schema.name}' was not saved")
            return None
        logger.info(f"Saved form '{new_form.name}' as {new_form.id}")
        return new_form

    def delete_form(self, form_id: str) -> bool:
        """Remove a saved form. Returns False if it does not exist or the store fails."""
        forms = self.list_saved_forms()
        remaining = [form for form in forms if form.id != form_id]
        if len(remaining) == len(forms):
            return False
        return self.store.write_list(self.saved_forms_key, remaining)
