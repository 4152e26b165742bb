"""Schema field collection.

Walks an openAPIV3Schema property tree and flattens it into field candidates.
The walk is bounded twice: by nesting depth and by a global candidate cap, so
huge or deeply recursive CRDs cannot blow up the form.
"""

import logging
from dataclasses import dataclass
from typing import Any

from crdforge.interfaces.schema import FieldDefinition
from crdforge.strategies.schema.coercion import infer_default, normalize_field_type
from crdforge.strategies.schema.nodes import (
    as_mapping,
    as_string,
    is_map_shaped,
    is_preserve_unknown,
    properties_of,
    required_set,
    sorted_items,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 4
DEFAULT_FIELD_LIMIT = 420
DEFAULT_MAX_VISITS = 20000

MAP_SEED_KEY = "exampleKey"


@dataclass
class Candidate:
    """A field found in the schema, with the signals used to rank it.

    Attributes:
        field: The field as it would appear in a template.
        required: Whether the property is listed in its parent's required set.
        depth: Object nesting level below ``spec`` (array items do not count).
        has_default: Whether the schema supplied a default or enum seed.
    """

    field: FieldDefinition
    required: bool
    depth: int
    has_default: bool


@dataclass(frozen=True)
class _Visit:
    prefix: str
    name: str
    node: Any
    required: frozenset[str]
    depth: int
    ancestors: frozenset[int] = frozenset()


def describe(name: str, node: dict[str, Any]) -> str:
    """Return the schema description or a generated one."""
    return as_string(node.get("description")) or f"Inferred from CRD schema field '{name}'."


def map_seed_field(path: str, node: dict[str, Any], description: str) -> FieldDefinition | None:
    """Build one example key/value field for a map-typed object.

    Returns None unless ``additionalProperties`` describes the value schema.
    """
    additional = node.get("additionalProperties")
    if not isinstance(additional, dict):
        return None

    value, _ = infer_default(additional)
    return FieldDefinition(
        path=f"{path}.{MAP_SEED_KEY}",
        type=normalize_field_type(as_string(additional.get("type"))),
        value=value,
        description=f"{description} (map entry key/value).",
    )


class SchemaFieldCollector:
    """Flattens a schema property tree into ordered field candidates.

    Properties are visited in name order, depth first, using an explicit
    stack. Arrays of objects are entered at index ``[0]`` without consuming a
    depth level; preserve-unknown subtrees are treated as opaque.

    YAML aliases can make a schema refer to itself or repeat a subtree many
    times. A node already on the current ancestor chain is skipped, and the
    walk stops after ``max_visits`` nodes however few fields it produced.
    """

    def __init__(
        self,
        max_depth: int = DEFAULT_MAX_DEPTH,
        limit: int = DEFAULT_FIELD_LIMIT,
        max_visits: int = DEFAULT_MAX_VISITS,
    ) -> None:
        """Initialize the collector.

        Args:
            max_depth: Deepest object level whose children are still walked.
            limit: Global cap on candidates returned from one walk.
            max_visits: Global cap on schema nodes examined in one walk.
        """
        self._max_depth = max_depth
        self._limit = limit
        self._max_visits = max_visits

    @property
    def limit(self) -> int:
        return self._limit

    def collect(
        self,
        prefix: str,
        properties: dict[str, Any],
        required: set[str] | None = None,
        depth: int = 0,
    ) -> list[Candidate]:
        """Collect field candidates below ``prefix``.

        Args:
            prefix: Path of the object owning ``properties`` (usually "spec").
            properties: The schema ``properties`` mapping to walk.
            required: Names required at this level.
            depth: Starting depth.

        Returns:
            At most ``limit`` candidates in traversal order.
        """
        out: list[Candidate] = []
        pending: list[_Visit] = []
        self._schedule(pending, prefix, properties, required or set(), depth)

        visits = 0
        while pending and len(out) < self._limit and visits < self._max_visits:
            visits += 1
            self._visit(pending.pop(), pending, out)

        if pending and visits >= self._max_visits:
            logger.warning(f"Visited {visits} schema nodes under '{prefix}'; remaining schema ignored")
        elif pending:
            logger.info(f"Field limit of {self._limit} reached under '{prefix}'; remaining schema ignored")
        return out

    @staticmethod
    def _schedule(
        pending: list[_Visit],
        prefix: str,
        properties: dict[str, Any],
        required: set[str],
        depth: int,
        ancestors: frozenset[int] = frozenset(),
    ) -> None:
        # Reverse order so the first name is popped first.
        frozen = frozenset(required)
        for name, node in reversed(sorted_items(properties)):
            pending.append(_Visit(prefix, name, node, frozen, depth, ancestors))

    def _visit(self, visit: _Visit, pending: list[_Visit], out: list[Candidate]) -> None:
        node = visit.node
        if not isinstance(node, dict):
            return

        depth = visit.depth
        if is_preserve_unknown(node) and depth >= 2:
            return
        if depth > self._max_depth:
            return
        if id(node) in visit.ancestors:
            return
        lineage = visit.ancestors | {id(node)}

        path = f"{visit.prefix}.{visit.name}"
        node_type = as_string(node.get("type"))
        description = describe(visit.name, node)
        default_value, has_default = infer_default(node)
        is_required = visit.name in visit.required

        def leaf(leaf_path: str) -> Candidate:
            return Candidate(
                field=FieldDefinition(
                    path=leaf_path,
                    type=normalize_field_type(node_type),
                    value=default_value,
                    description=description,
                ),
                required=is_required,
                depth=depth,
                has_default=has_default,
            )

        if node_type == "array":
            items = as_mapping(node.get("items"))
            item_properties = properties_of(items)
            if item_properties and not is_preserve_unknown(items):
                self._schedule(
                    pending,
                    f"{path}[0]",
                    item_properties,
                    required_set(items.get("required")),
                    depth,
                    lineage | {id(items)},
                )
                return
            out.append(leaf(f"{path}[0]"))
            return

        nested_properties = properties_of(node)
        if nested_properties:
            if depth < self._max_depth and not is_preserve_unknown(node):
                self._schedule(
                    pending, path, nested_properties, required_set(node.get("required")), depth + 1, lineage
                )
            return

        if is_map_shaped(node):
            seed = map_seed_field(path, node, description)
            if seed is not None:
                out.append(
                    Candidate(field=seed, required=is_required, depth=depth, has_default=has_default)
                )
            return

        out.append(leaf(path))
