"""Path expressions for addressing values inside nested documents.

A path is a dot-separated list of segments. Each segment is a key optionally
followed by one or more bracketed indices, e.g. ``spec.containers[0].ports[1]``
or ``matrix[0][2]``.
"""

import re
from typing import Any

PathSegment = str | int

_SEGMENT_PATTERN = re.compile(r"^([^.\[\]]+)((?:\[\d+\])*)$")
_INDEX_PATTERN = re.compile(r"\[(\d+)\]")


class PathSyntaxError(ValueError):
    """Exception raised when a field path does not follow the grammar."""

    pass


def parse_path(path: str) -> list[PathSegment]:
    """Split a path expression into key and index segments.

    Args:
        path: The address, e.g. ``spec.template.spec.containers[0].name``.

    Returns:
        Ordered segments: ``str`` for mapping keys, ``int`` for list indices.

    Raises:
        PathSyntaxError: If the path is blank or a segment is malformed.
    """
    path = path.strip()
    if not path:
        raise PathSyntaxError("path is empty")

    segments: list[PathSegment] = []
    for part in path.split("."):
        match = _SEGMENT_PATTERN.match(part)
        if match is None:
            raise PathSyntaxError(f"invalid path segment {part!r} in {path!r}")
        segments.append(match.group(1))
        segments.extend(int(index) for index in _INDEX_PATTERN.findall(match.group(2)))
    return segments


def format_path(segments: list[PathSegment]) -> str:
    """Render segments back into a path expression."""
    rendered = ""
    for segment in segments:
        if isinstance(segment, int):
            rendered += f"[{segment}]"
        elif rendered:
            rendered += f".{segment}"
        else:
            rendered = segment
    return rendered


def _empty_container(segment: PathSegment) -> dict[str, Any] | list[Any]:
    return [] if isinstance(segment, int) else {}


def set_path(root: dict[str, Any], segments: list[PathSegment], value: Any) -> bool:
    """Write a value at the addressed location, creating containers on the way.

    Missing mappings and lists are created to match the next segment; lists
    are padded with ``None`` up to the requested index. The final segment
    overwrites whatever was there.

    Args:
        root: The document being built. Mutated in place.
        segments: Segments produced by :func:`parse_path`.
        value: The value to store.

    Returns:
        True if the value was written. False if an existing node has a shape
        that does not fit the segment (a scalar where a mapping or list is
        needed, or a mapping where a list is needed); nothing is modified then.
    """
    if not segments:
        return False

    node: Any = root
    last = len(segments) - 1
    for position, segment in enumerate(segments):
        match segment:
            case str():
                if not isinstance(node, dict):
                    return False
                if position == last:
                    node[segment] = value
                    return True
                child = node.get(segment)
                if child is None:
                    child = _empty_container(segments[position + 1])
                    node[segment] = child
            case int():
                if not isinstance(node, list):
                    return False
                if len(node) <= segment:
                    node.extend([None] * (segment + 1 - len(node)))
                if position == last:
                    node[segment] = value
                    return True
                child = node[segment]
                if child is None:
                    child = _empty_container(segments[position + 1])
                    node[segment] = child
        node = child

    return False


def get_path(root: Any, path: str | list[PathSegment], default: Any = None) -> Any:
    """Read the value at an address, or ``default`` when it does not resolve."""
    segments = parse_path(path) if isinstance(path, str) else path

    node = root
    for segment in segments:
        match segment:
            case str() if isinstance(node, dict) and segment in node:
                node = node[segment]
            case int() if isinstance(node, list) and 0 <= segment < len(node):
                node = node[segment]
            case _:
                return default
    return node
