"""CRD schema extractor.

Turns CRD YAML (or any Kubernetes resource manifest) into a
TemplateDefinition. Structured decoding is tried first; text that is not
YAML, or YAML without a resource kind, is handed to the fallback extractor.
"""

import logging
from typing import Any

import yaml

from crdforge.interfaces.schema import BaseSchemaExtractor, EmptyInputError, FieldDefinition, TemplateDefinition
from crdforge.strategies.schema.collector import Candidate, SchemaFieldCollector
from crdforge.strategies.schema.documents import (
    CRD_KIND,
    decode_documents,
    first_version_name,
    select_primary_document,
    select_spec_schema,
)
from crdforge.strategies.schema.fallback import (
    DEFAULT_API_VERSION,
    DEFAULT_KIND,
    FallbackSchemaExtractor,
    metadata_defaults,
    metadata_optionals,
    normalize_id,
)
from crdforge.strategies.schema.nodes import as_mapping, as_string, nested, properties_of, required_set, sorted_items
from crdforge.strategies.schema.ranking import DEFAULT_MAX_DEFAULT_FIELDS, dedupe_fields, rank_candidates
from crdforge.strategies.schema.seeds import ServiceSeeder, top_level_spec_key

logger = logging.getLogger(__name__)

MAX_RESOURCE_FIELDS = 10

CRD_NOTE = "Generated from CRD schema. Prioritizing required and high-signal fields for cleaner authoring."
RESOURCE_NOTE = "Parsed from a Kubernetes object. Fields were inferred from current manifest."
EMPTY_SCHEMA_DESCRIPTION = "No explicit schema fields found in CRD. Replace with a valid spec field."


class CRDSchemaExtractor(BaseSchemaExtractor):
    """Structured extractor for CRDs and resource manifests.

    Pipeline for a CRD: select the ``spec`` schema, collect candidates, rank
    them into defaults and optionals, add service seeds and top-level
    coverage, then enforce the default cap.
    """

    def __init__(
        self,
        collector: SchemaFieldCollector | None = None,
        seeder: ServiceSeeder | None = None,
        max_default_fields: int = DEFAULT_MAX_DEFAULT_FIELDS,
        fallback: BaseSchemaExtractor | None = None,
    ) -> None:
        """Initialize the extractor.

        Args:
            collector: Schema walker; defaults to depth 4 and 420 fields.
            seeder: Service-seed heuristics; defaults to the standard recognizers.
            max_default_fields: Cap on the default field list.
            fallback: Extractor for undecodable input.
        """
        self.collector = collector or SchemaFieldCollector()
        self.seeder = seeder or ServiceSeeder()
        self.max_default_fields = max_default_fields
        self.fallback = fallback or FallbackSchemaExtractor()

    def extract(self, raw: str) -> TemplateDefinition:
        """Extract a template from CRD or resource YAML.

        Args:
            raw: The YAML text.

        Returns:
            A TemplateDefinition. Never fails for non-blank input.

        Raises:
            EmptyInputError: If the input is blank.
        """
        if not raw.strip():
            raise EmptyInputError("CRD payload is empty")

        try:
            docs = decode_documents(raw)
        except (yaml.YAMLError, RecursionError) as e:
            logger.warning(f"Structured parse failed, using fallback extractor: {e}")
            return self.fallback.extract(raw)

        root = select_primary_document(docs)
        kind = as_string(root.get("kind")) if root else ""

        if root is not None and kind.lower() == CRD_KIND.lower():
            return self.extract_crd(root)
        if root is not None and kind:
            return self.extract_resource(root)

        logger.info("No resource kind found in YAML, using fallback extractor")
        return self.fallback.extract(raw)

    # =========================================================================
    # CRD documents
    # =========================================================================

    def extract_crd(self, root: dict[str, Any]) -> TemplateDefinition:
        """Build a template from a decoded CustomResourceDefinition."""
        kind = as_string(nested(root, "spec", "names", "kind")) or DEFAULT_KIND
        group = as_string(nested(root, "spec", "group"))

        spec_schema, schema_version = select_spec_schema(root)
        version = (
            as_string(nested(root, "spec", "version"))
            or schema_version
            or first_version_name(nested(root, "spec", "versions"))
        )
        api_version = f"{group}/{version}" if group and version else DEFAULT_API_VERSION

        defaults, optionals = self._spec_fields(kind, spec_schema)

        logger.info(
            f"Extracted CRD template: kind={kind}, apiVersion={api_version}, "
            f"defaults={len(defaults)}, optionals={len(optionals)}"
        )

        return TemplateDefinition(
            id=normalize_id(f"parsed-{kind}"),
            title=f"{kind} (Parsed)",
            api_version=api_version,
            kind=kind,
            note=CRD_NOTE,
            default_fields=defaults,
            optional_fields=optionals,
        )

    def _spec_fields(
        self,
        kind: str,
        spec_schema: dict[str, Any] | None,
    ) -> tuple[list[FieldDefinition], list[FieldDefinition]]:
        metadata = metadata_defaults(kind, noun="custom resource")
        properties = properties_of(spec_schema)

        candidates: list[Candidate] = []
        if properties:
            candidates = self.collector.collect("spec", properties, required_set(spec_schema.get("required")))

        ranked = rank_candidates(candidates, self.max_default_fields)
        required_paths = {item.field.path for item in ranked.ordered if item.required}

        seeds = self.seeder.extract_service_seeds(spec_schema) if spec_schema else []
        # Required leaves beyond the rank cap still belong in defaults.
        overflow = [item.field for item in ranked.ordered if item.required]
        body = dedupe_fields(seeds + ranked.defaults + overflow)
        if spec_schema:
            body = self.seeder.ensure_top_level_coverage(spec_schema, body, ranked.ordered)
        if not body:
            body = [FieldDefinition(path="spec.example", description=EMPTY_SCHEMA_DESCRIPTION)]

        protected = {item.path for item in metadata} | {item.path for item in seeds} | required_paths
        defaults, demoted = self._enforce_default_cap(dedupe_fields(metadata + body), protected)

        default_paths = {item.path for item in defaults}
        optionals = dedupe_fields([item for item in demoted + ranked.optionals if item.path not in default_paths])

        extra = [item for item in metadata_optionals() if item.path not in default_paths]
        room = max(self.collector.limit - len(defaults), 0)
        if len(optionals) + len(extra) > room:
            logger.debug(f"Trimmed optional fields from {len(optionals)} to {max(room - len(extra), 0)}")
            optionals = optionals[: max(room - len(extra), 0)]

        return defaults, dedupe_fields(optionals + extra)[:room]

    def _enforce_default_cap(
        self,
        fields: list[FieldDefinition],
        protected: set[str],
    ) -> tuple[list[FieldDefinition], list[FieldDefinition]]:
        """Demote unprotected fields until the default list fits the cap.

        The first field under each top-level ``spec`` key is also protected so
        coverage survives. Protected fields are never demoted, so the cap can
        only be exceeded when they alone outnumber it.
        """
        if len(fields) <= self.max_default_fields:
            return fields, []

        keep = set(protected)
        seen_tops: set[str] = set()
        for item in fields:
            top = top_level_spec_key(item.path)
            if top and top not in seen_tops:
                seen_tops.add(top)
                keep.add(item.path)

        room = self.max_default_fields - sum(1 for item in fields if item.path in keep)
        defaults: list[FieldDefinition] = []
        demoted: list[FieldDefinition] = []
        for item in fields:
            if item.path in keep:
                defaults.append(item)
            elif room > 0:
                defaults.append(item)
                room -= 1
            else:
                demoted.append(item)

        if len(defaults) > self.max_default_fields:
            logger.warning(
                f"Default fields exceed cap ({len(defaults)} > {self.max_default_fields}); "
                f"all are required, seeded or coverage fields"
            )
        logger.debug(f"Demoted {len(demoted)} default fields to optionals")
        return defaults, demoted

    # =========================================================================
    # Arbitrary resources
    # =========================================================================

    def extract_resource(self, root: dict[str, Any]) -> TemplateDefinition:
        """Build a template from an ordinary resource manifest.

        Identity comes from the manifest itself and up to a handful of
        ``spec`` keys are surfaced with their current values.
        """
        kind = as_string(root.get("kind"))
        api_version = as_string(root.get("apiVersion")) or DEFAULT_API_VERSION
        name = as_string(nested(root, "metadata", "name")) or f"{kind.lower()}-sample"
        namespace = as_string(nested(root, "metadata", "namespace")) or "default"

        fields = [
            FieldDefinition(path="metadata.name", value=name, description="Name for this resource."),
            FieldDefinition(path="metadata.namespace", value=namespace, description="Namespace for this resource."),
        ]

        for key, value in sorted_items(as_mapping(root.get("spec"))):
            if len(fields) >= MAX_RESOURCE_FIELDS:
                break
            fields.append(_resource_field(key, value))

        logger.info(f"Extracted resource template: kind={kind}, apiVersion={api_version}, fields={len(fields)}")

        return TemplateDefinition(
            id=normalize_id(f"parsed-{kind}"),
            title=f"{kind} (Parsed)",
            api_version=api_version,
            kind=kind,
            note=RESOURCE_NOTE,
            default_fields=fields,
        )


def _resource_field(key: str, value: Any) -> FieldDefinition:
    field = FieldDefinition(path=f"spec.{key}", description=f"Inferred from resource spec field '{key}'.")
    match value:
        case bool():
            return field.model_copy(update={"value": "true" if value else "false", "type": "boolean"})
        case int() | float():
            return field.model_copy(update={"value": str(value), "type": "number"})
        case str():
            return field.model_copy(update={"value": value})
        case _:
            return field
