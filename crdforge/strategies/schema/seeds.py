"""Service-seed heuristics.

Operator CRDs often model each managed component as a sub-object of
``spec`` with config-map mounts, secret references or a nested pod ``spec``.
Such components are too large to expose flatly, so one representative field
is synthesized per component. The same seeds backfill any top-level ``spec``
key that ranking left without a default field.
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from crdforge.interfaces.schema import FieldDefinition
from crdforge.strategies.schema.coercion import infer_default, normalize_field_type
from crdforge.strategies.schema.collector import MAP_SEED_KEY, Candidate, describe, map_seed_field
from crdforge.strategies.schema.nodes import (
    as_mapping,
    as_string,
    is_map_shaped,
    properties_of,
    sorted_items,
)
from crdforge.strategies.schema.ranking import dedupe_fields

logger = logging.getLogger(__name__)

ComponentRecognizer = Callable[[str, dict[str, Any]], bool]

CONFIG_ENTRIES_KEY = "configMaps"
SECRET_REFERENCE_KEY = "envFromSecret"
NESTED_SPEC_KEY = "spec"

DEFAULT_COMPONENT_KEYWORDS = ("madara", "bootstrapper", "orchestrator", "path", "dna", "faucet")
DEFAULT_PREFERRED_SPEC_KEYS = ("roleArn", "serviceAccountName", "minUnavailable")

_SCALAR_SCAN_DEPTH = 2


# =============================================================================
# Recognizers
# =============================================================================


def has_config_entries(name: str, node: dict[str, Any]) -> bool:
    """Component mounts a list of config maps."""
    return CONFIG_ENTRIES_KEY in properties_of(node)


def has_secret_reference(name: str, node: dict[str, Any]) -> bool:
    """Component pulls its environment from a secret."""
    return SECRET_REFERENCE_KEY in properties_of(node)


def nested_spec_named(keywords: Iterable[str]) -> ComponentRecognizer:
    """Build a recognizer for components that wrap their own ``spec``.

    Only owners whose name contains one of ``keywords`` qualify, since a
    nested ``spec`` alone is too common to be a signal.
    """
    lowered = tuple(keyword.lower() for keyword in keywords if keyword)

    def recognize(name: str, node: dict[str, Any]) -> bool:
        if NESTED_SPEC_KEY not in properties_of(node):
            return False
        lower_name = name.lower()
        return any(keyword in lower_name for keyword in lowered)

    return recognize


def default_recognizers(
    keywords: Iterable[str] = DEFAULT_COMPONENT_KEYWORDS,
) -> list[ComponentRecognizer]:
    """Return the standard recognizer set."""
    return [has_config_entries, has_secret_reference, nested_spec_named(keywords)]


# =============================================================================
# Seed construction
# =============================================================================


class ServiceSeeder:
    """Synthesizes representative fields for component-like schema nodes."""

    def __init__(
        self,
        recognizers: Sequence[ComponentRecognizer] | None = None,
        preferred_spec_keys: Sequence[str] = DEFAULT_PREFERRED_SPEC_KEYS,
    ) -> None:
        """Initialize the seeder.

        Args:
            recognizers: Predicates deciding whether a top-level property is a
                component. Defaults to :func:`default_recognizers`.
            preferred_spec_keys: Keys tried first inside a component's nested spec.
        """
        self._recognizers = list(recognizers) if recognizers is not None else default_recognizers()
        self._preferred_spec_keys = tuple(preferred_spec_keys)

    def is_component_like(self, name: str, node: Any) -> bool:
        """Check whether a top-level ``spec`` property looks like a component."""
        if not isinstance(node, dict):
            return False
        node_type = as_string(node.get("type"))
        if node_type not in ("", "object"):
            return False
        if not properties_of(node):
            return False
        return any(recognize(name, node) for recognize in self._recognizers)

    def extract_service_seeds(self, spec_schema: dict[str, Any]) -> list[FieldDefinition]:
        """Return one seed field per component-like top-level property."""
        seeds: list[FieldDefinition] = []
        for name, node in sorted_items(properties_of(spec_schema)):
            if not self.is_component_like(name, node):
                continue
            seed = self.build_service_seed(name, node)
            if seed is not None:
                seeds.append(seed)

        if seeds:
            logger.debug(f"Synthesized {len(seeds)} service seed fields")
        return dedupe_fields(seeds)

    def build_service_seed(self, name: str, node: Any) -> FieldDefinition | None:
        """Pick one representative field inside a component node.

        Tries the config-map list, then the secret reference, then the nested
        spec. Returns None when the node has none of these shapes.
        """
        properties = properties_of(node)
        if not properties:
            return None

        description = f"Service component '{name}'. Expand as needed with optional fields."
        prefix = f"spec.{name}"

        return (
            _seed_from_config_entries(prefix, properties.get(CONFIG_ENTRIES_KEY), description)
            or _seed_from_secret_reference(prefix, properties.get(SECRET_REFERENCE_KEY), description)
            or self._seed_from_nested_spec(prefix, properties.get(NESTED_SPEC_KEY), description)
        )

    def _seed_from_nested_spec(self, prefix: str, raw: Any, description: str) -> FieldDefinition | None:
        spec_node = as_mapping(raw)
        if as_string(spec_node.get("type")) != "object":
            return None

        properties = properties_of(spec_node)
        if not properties:
            return None

        for key in self._preferred_spec_keys:
            candidate = properties.get(key)
            if not isinstance(candidate, dict):
                continue
            value, _ = infer_default(candidate)
            return FieldDefinition(
                path=f"{prefix}.spec.{key}",
                type=normalize_field_type(as_string(candidate.get("type"))),
                value=value,
                description=description,
            )

        return first_scalar_seed(f"{prefix}.spec", properties, description)

    def ensure_top_level_coverage(
        self,
        spec_schema: dict[str, Any],
        defaults: list[FieldDefinition],
        candidates: list[Candidate],
    ) -> list[FieldDefinition]:
        """Make sure every top-level ``spec`` property has a default field.

        Missing keys get, in order of preference: the best-ranked collected
        candidate under that key, a service seed, or a generic seed shaped
        after the schema node.

        Args:
            spec_schema: The ``spec`` schema node.
            defaults: Default fields chosen so far.
            candidates: Collected candidates in rank order.

        Returns:
            The defaults with coverage fields appended.
        """
        properties = properties_of(spec_schema)
        if not properties:
            return defaults

        by_top: dict[str, FieldDefinition] = {}
        for candidate in candidates:
            top = top_level_spec_key(candidate.field.path)
            if top and top not in by_top:
                by_top[top] = candidate.field

        covered = {top_level_spec_key(item.path) for item in defaults}

        extra: list[FieldDefinition] = []
        for name, node in sorted_items(properties):
            if name in covered:
                continue
            seed = by_top.get(name) or self.build_service_seed(name, node) or generic_seed(name, node)
            if seed is not None:
                extra.append(seed)

        if not extra:
            return defaults

        logger.debug(f"Backfilled {len(extra)} top-level spec keys into defaults")
        return dedupe_fields(defaults + extra)


def _seed_from_config_entries(prefix: str, raw: Any, description: str) -> FieldDefinition | None:
    config_maps = as_mapping(raw)
    if as_string(config_maps.get("type")) != "array":
        return None

    item_properties = properties_of(config_maps.get("items"))
    if not item_properties:
        return None

    for key in ("name", "mountPath"):
        if key in item_properties:
            return FieldDefinition(path=f"{prefix}.{CONFIG_ENTRIES_KEY}[0].{key}", description=description)

    first_key = sorted_items(item_properties)[0][0]
    return FieldDefinition(path=f"{prefix}.{CONFIG_ENTRIES_KEY}[0].{first_key}", description=description)


def _seed_from_secret_reference(prefix: str, raw: Any, description: str) -> FieldDefinition | None:
    secret = as_mapping(raw)
    if as_string(secret.get("type")) != "object":
        return None

    properties = properties_of(secret)
    if not properties:
        return None

    key = "name" if "name" in properties else sorted_items(properties)[0][0]
    return FieldDefinition(path=f"{prefix}.{SECRET_REFERENCE_KEY}.{key}", description=description)


def first_scalar_seed(
    prefix: str,
    properties: dict[str, Any],
    description: str,
    depth: int = 0,
    max_depth: int = _SCALAR_SCAN_DEPTH,
) -> FieldDefinition | None:
    """Find the first writable field below ``prefix`` in name order.

    Descends into nested objects and array items up to ``max_depth`` levels.
    """
    if not properties or depth > max_depth:
        return None

    for name, node in sorted_items(properties):
        if not isinstance(node, dict):
            continue

        path = f"{prefix}.{name}"
        node_type = as_string(node.get("type"))

        if node_type == "array":
            item_properties = properties_of(node.get("items"))
            if item_properties:
                return first_scalar_seed(f"{path}[0]", item_properties, description, depth + 1, max_depth)
            return FieldDefinition(path=f"{path}[0]", description=description)

        nested_properties = properties_of(node)
        if nested_properties:
            seed = first_scalar_seed(path, nested_properties, description, depth + 1, max_depth)
            if seed is not None:
                return seed
            continue

        if is_map_shaped(node):
            seed = map_seed_field(path, node, description)
            if seed is not None:
                return seed
            continue

        value, _ = infer_default(node)
        return FieldDefinition(
            path=path,
            type=normalize_field_type(node_type),
            value=value,
            description=description,
        )

    return None


def generic_seed(name: str, node: Any) -> FieldDefinition:
    """Seed a top-level ``spec`` key that nothing else could represent."""
    node = as_mapping(node)
    path = f"spec.{name}"
    description = describe(name, node)

    seed = first_scalar_seed(path, properties_of(node), description)
    if seed is not None:
        return seed

    if as_string(node.get("type")) == "array":
        return FieldDefinition(path=f"{path}[0]", description=description)

    if is_map_shaped(node):
        seed = map_seed_field(path, node, description)
        if seed is not None:
            return seed
        return FieldDefinition(path=f"{path}.{MAP_SEED_KEY}", description=description)

    value, _ = infer_default(node)
    return FieldDefinition(
        path=path,
        type=normalize_field_type(as_string(node.get("type"))),
        value=value,
        description=description,
    )


def top_level_spec_key(path: str) -> str:
    """Return the first key under ``spec`` in a path, or "" outside spec."""
    parts = path.split(".")
    if len(parts) < 2 or parts[0] != "spec":
        return ""
    return parts[1].split("[", 1)[0]
