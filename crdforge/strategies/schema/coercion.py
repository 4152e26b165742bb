"""Conversion between field text and typed scalars.

Field values travel as text through the form. Generation turns them back into
numbers and booleans; extraction formats schema defaults as text.
"""

import json
import math
import re
from typing import Any

from crdforge.interfaces.schema import FieldType

_NUMBER_PATTERN = re.compile(r"^[-+]?\d+(\.\d+)?$")

# Integral floats at or above this magnitude keep exponent notation.
_PLAIN_INTEGER_LIMIT = 1e21
# Defaults with more container entries than this render as empty text.
_MAX_RENDERED_NODES = 256


def _parse_number(text: str) -> int | float | None:
    try:
        number = float(text)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    if number.is_integer():
        # Parse integers directly to keep precision beyond 2**53.
        if re.fullmatch(r"[-+]?\d+", text):
            return int(text)
        return int(number)
    return number


def coerce_value(text: str, declared_type: FieldType | str | None = None) -> Any:
    """Convert field text into the scalar written to the document.

    Args:
        text: The raw field value.
        declared_type: ``"number"``, ``"boolean"`` or None.

    Returns:
        An int or float for numbers, a bool for booleans, otherwise the
        original text unchanged.
    """
    trimmed = text.strip()

    if declared_type == "number" or _NUMBER_PATTERN.match(trimmed):
        number = _parse_number(trimmed)
        if number is not None:
            return number

    if declared_type == "boolean" or trimmed in ("true", "false"):
        return trimmed == "true"

    return text


def _within_budget(value: Any, budget: int = _MAX_RENDERED_NODES) -> bool:
    """Return False for literals too large or self-referencing to render."""
    stack = [value]
    while stack:
        budget -= 1
        if budget < 0:
            return False
        node = stack.pop()
        if isinstance(node, dict):
            stack.extend(node.values())
        elif isinstance(node, list):
            stack.extend(node)
    return True


def format_default(value: Any) -> str:
    """Render a schema literal as stable field text."""
    match value:
        case None:
            return ""
        case bool():
            return "true" if value else "false"
        case int():
            return str(value)
        case float() if value.is_integer() and abs(value) < _PLAIN_INTEGER_LIMIT:
            return str(int(value))
        case float():
            return repr(value)
        case str():
            return value
        case dict() | list() if not _within_budget(value):
            return ""
        case dict() | list():
            return json.dumps(value, separators=(",", ":"), default=str)
        case _:
            return str(value)


def infer_default(node: Any) -> tuple[str, bool]:
    """Pick the seed value for a schema node.

    An explicit ``default`` wins, then the first ``enum`` entry.

    Returns:
        The value text and whether the schema backed it.
    """
    if not isinstance(node, dict):
        return "", False
    if "default" in node:
        return format_default(node["default"]), True

    enum_values = node.get("enum")
    if isinstance(enum_values, list) and enum_values:
        return format_default(enum_values[0]), True

    return "", False


def normalize_field_type(schema_type: str) -> FieldType | None:
    """Map an OpenAPI type onto a form field type."""
    match schema_type:
        case "integer" | "number":
            return "number"
        case "boolean":
            return "boolean"
        case _:
            return None
