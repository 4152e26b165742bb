"""Accessors for YAML-decoded schema and resource nodes.

Decoded YAML is a tree of ``dict``, ``list`` and scalars. These helpers read
it leniently so malformed schemas degrade to "absent" instead of raising.
"""

from typing import Any

PRESERVE_UNKNOWN_FIELDS = "x-kubernetes-preserve-unknown-fields"


def as_string(value: Any) -> str:
    """Return a trimmed string, or "" for anything that is not a string."""
    if isinstance(value, str):
        return value.strip()
    return ""


def as_bool(value: Any) -> bool:
    """Return the value only when it is a real boolean."""
    return value if isinstance(value, bool) else False


def as_mapping(value: Any) -> dict[str, Any]:
    """Return the value when it is a mapping, else an empty one."""
    return value if isinstance(value, dict) else {}


def as_sequence(value: Any) -> list[Any]:
    """Return the value when it is a list, else an empty one."""
    return value if isinstance(value, list) else []


def nested(root: Any, *keys: str) -> Any:
    """Walk mapping keys, returning None as soon as one is missing."""
    current = root
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current


def properties_of(node: Any) -> dict[str, Any]:
    """Return a schema node's ``properties`` mapping."""
    return as_mapping(as_mapping(node).get("properties"))


def required_set(value: Any) -> set[str]:
    """Parse a schema ``required`` list into a set of property names."""
    return {name for name in map(as_string, as_sequence(value)) if name}


def is_preserve_unknown(node: Any) -> bool:
    """Check the marker that declares a subtree free-form."""
    return as_bool(as_mapping(node).get(PRESERVE_UNKNOWN_FIELDS))


def is_map_shaped(node: dict[str, Any]) -> bool:
    """Check whether a node is an object or an untyped map declaration."""
    node_type = as_string(node.get("type"))
    return node_type == "object" or (node_type == "" and node.get("additionalProperties") is not None)


def sorted_items(mapping: dict[Any, Any]) -> list[tuple[str, Any]]:
    """Return (name, value) pairs ordered by name.

    YAML allows non-string keys (``200:``), so names are stringified.
    """
    return sorted(((str(key), value) for key, value in mapping.items()), key=lambda item: item[0])
