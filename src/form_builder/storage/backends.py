"""
Form store backends.

Both backends store schemas as JSON text. Content that is not valid JSON or
not a valid schema is treated as absent rather than as an error, so a
corrupted entry never prevents the form builder from starting.
"""

import json
import logging
import re
from pathlib import Path

from pydantic import ValidationError

from form_builder.exceptions import PersistenceError
from form_builder.models.form_schema import FormSchema

logger = logging.getLogger("form-builder.storage")

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class JsonFormStore:
    """
    Base class for stores keeping schemas as JSON text.

    Subclasses implement ``_load_raw`` and ``_save_raw``, raising
    ``PersistenceError`` when the underlying medium fails.
    """

    def _load_raw(self, key: str) -> str | None:
        raise NotImplementedError

    def _save_raw(self, key: str, text: str) -> None:
        raise NotImplementedError

    def _delete_raw(self, key: str) -> None:
        raise NotImplementedError

    def _load_json(self, key: str):
        try:
            text = self._load_raw(key)
        except PersistenceError as e:
            logger.warning(f"Could not read '{key}': {e}")
            return None
        if text is None:
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring malformed JSON stored under '{key}': {e}")
            return None

    def _save_json(self, key: str, data) -> bool:
        try:
            self._save_raw(key, json.dumps(data))
        except PersistenceError as e:
            logger.error(f"Error saving '{key}': {e}")
            return False
        return True

    def read(self, key: str) -> FormSchema | None:
        data = self._load_json(key)
        if data is None:
            return None
        try:
            return FormSchema.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Ignoring invalid schema stored under '{key}': {e}")
            return None

    def write(self, key: str, schema: FormSchema) -> bool:
        return self._save_json(key, schema.to_dict())

    def read_list(self, key: str) -> list[FormSchema] | None:
        data = self._load_json(key)
        if not isinstance(data, list):
            if data is not None:
                logger.warning(f"Ignoring non-list content stored under '{key}'")
            return None
        try:
            return [FormSchema.model_validate(item) for item in data]
        except ValidationError as e:
            logger.warning(f"Ignoring invalid schema list stored under '{key}': {e}")
            return None

    def write_list(self, key: str, schemas: list[FormSchema]) -> bool:
        return self._save_json(key, [schema.to_dict() for schema in schemas])

    def delete(self, key: str) -> bool:
        try:
            self._delete_raw(key)
        except PersistenceError as e:
            logger.error(f"Error deleting '{key}': {e}")
            return False
        return True


class InMemoryFormStore(JsonFormStore):
    """Store keeping JSON text in a dict. Useful for tests and previews."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def _load_raw(self, key: str) -> str | None:
        return self._data.get(key)

    def _save_raw(self, key: str, text: str) -> None:
        self._data[key] = text

    def _delete_raw(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileFormStore(JsonFormStore):
    """Store keeping one ``<key>.json`` file per key in a directory."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise PersistenceError(f"Invalid store key: {key!r}")
        return self.directory / f"{key}.json"

    def _load_raw(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Cannot read {path}: {e}") from e

    def _save_raw(self, key: str, text: str) -> None:
        path = self._path(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Cannot write {path}: {e}") from e

    def _delete_raw(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Cannot delete {path}: {e}") from e
