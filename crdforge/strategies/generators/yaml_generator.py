"""YAML document generator.

Writes each field's coerced value at its path inside a fresh document and
renders the result with PyYAML, keeping insertion order.
"""

import logging
from typing import Any

import yaml

from crdforge.interfaces.generator import BaseDocumentGenerator, GenerationError, GenerationResult
from crdforge.interfaces.schema import FieldDefinition
from crdforge.strategies.schema.coercion import coerce_value
from crdforge.strategies.schema.paths import PathSyntaxError, parse_path, set_path

logger = logging.getLogger(__name__)


class YAMLDocumentGenerator(BaseDocumentGenerator):
    """Builds Kubernetes-style YAML manifests from flat field lists."""

    def generate(
        self,
        api_version: str,
        kind: str,
        fields: list[FieldDefinition],
    ) -> GenerationResult:
        """Build and render a resource document.

        Fields are applied in order, so a later field overwrites an earlier
        one at the same path. A field whose path cannot be parsed, or whose
        write meets an incompatible node, is skipped and reported.

        Args:
            api_version: The resource's apiVersion.
            kind: The resource kind.
            fields: Ordered fields to write.

        Returns:
            GenerationResult with the document, its YAML and skipped paths.

        Raises:
            GenerationError: If api_version or kind is blank.
        """
        if not api_version.strip():
            raise GenerationError("apiVersion is required")
        if not kind.strip():
            raise GenerationError("kind is required")

        document: dict[str, Any] = {"apiVersion": api_version, "kind": kind}
        skipped: list[str] = []

        for item in fields:
            path = item.path.strip()
            if not path:
                continue
            try:
                segments = parse_path(path)
            except PathSyntaxError as e:
                logger.warning(f"Skipping field with malformed path: {e}")
                skipped.append(path)
                continue
            if not set_path(document, segments, coerce_value(item.value, item.type)):
                logger.warning(f"Skipping field '{path}': conflicts with a value already written")
                skipped.append(path)

        text = yaml.safe_dump(document, sort_keys=False, default_flow_style=False, allow_unicode=True)
        logger.info(f"Generated {kind} document from {len(fields)} fields ({len(skipped)} skipped)")
        return GenerationResult(document=document, text=text, skipped_paths=skipped)
