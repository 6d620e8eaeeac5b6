"""
Field values and their coercion rules.

A value-set maps field ids to plain Python values: strings from text-like
inputs, numbers, booleans from single checkboxes and lists of strings from
checkbox groups. ``FieldValue`` tags such a value with its kind so the
validation and derivation engines coerce it in one place.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ValueKind(str, Enum):
    """Tag of a field value."""

    ABSENT = "absent"
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    LIST = "list"


def format_number(number: float) -> str:
    """
    Render a number the way it is stored in a value-set.

    Integral values drop the fractional part: ``1994.0`` becomes ``"1994"``.
    """
    if isinstance(number, bool):
        number = int(number)
    if math.isfinite(number) and float(number).is_integer() and abs(number) < 1e21:
        return str(int(number))
    return repr(float(number))


def parse_number(text: str) -> float | None:
    """Parse a numeric string, returning None when it is not a finite number."""
    try:
        number = float(text.strip())
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


@dataclass(frozen=True)
class FieldValue:
    """A raw field value tagged with its kind."""

    kind: ValueKind
    raw: Any = None

    @classmethod
    def of(cls, value: Any) -> "FieldValue":
        """Tag a raw value. ``None`` means the field has no value."""
        if value is None:
            return cls(ValueKind.ABSENT)
        # bool is checked before int/float since it subclasses int
        if isinstance(value, bool):
            return cls(ValueKind.BOOLEAN, value)
        if isinstance(value, (int, float)):
            return cls(ValueKind.NUMBER, value)
        if isinstance(value, (list, tuple, set, frozenset)):
            return cls(ValueKind.LIST, [str(item) for item in value])
        return cls(ValueKind.TEXT, str(value))

    @property
    def is_list(self) -> bool:
        return self.kind == ValueKind.LIST

    def is_empty(self) -> bool:
        """
        Whether the value counts as "not provided".

        Absent values, blank strings, empty lists and an unchecked checkbox
        are empty. Numbers never are, including zero.
        """
        if self.kind == ValueKind.ABSENT:
            return True
        if self.kind == ValueKind.TEXT:
            return self.raw.strip() == ""
        if self.kind == ValueKind.LIST:
            return len(self.raw) == 0
        if self.kind == ValueKind.BOOLEAN:
            return not self.raw
        return False

    def as_text(self) -> str:
        if self.kind == ValueKind.ABSENT:
            return ""
        if self.kind == ValueKind.NUMBER:
            return format_number(self.raw)
        if self.kind == ValueKind.BOOLEAN:
            return "true" if self.raw else "false"
        if self.kind == ValueKind.LIST:
            return ", ".join(self.raw)
        return self.raw

    def as_number(self) -> float:
        """Numeric interpretation used by formulas; anything non-numeric is 0."""
        if self.kind == ValueKind.NUMBER:
            number = float(self.raw)
            return number if math.isfinite(number) else 0.0
        if self.kind == ValueKind.TEXT:
            number = parse_number(self.raw)
            return 0.0 if number is None else number
        return 0.0
