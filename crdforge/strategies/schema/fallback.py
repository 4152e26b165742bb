"""Regex fallback extractor.

Used when the input is not decodable YAML or carries no resource kind. It
recovers identity and a handful of likely field names from the raw text so
the caller still gets a usable template.
"""

import logging
import re

from crdforge.interfaces.schema import BaseSchemaExtractor, EmptyInputError, FieldDefinition, TemplateDefinition

logger = logging.getLogger(__name__)

DEFAULT_KIND = "CustomResource"
DEFAULT_API_VERSION = "example.io/v1"
CRD_KIND = "CustomResourceDefinition"

MAX_FALLBACK_FIELDS = 8

_GROUP_PATTERN = re.compile(r"^\s*group:\s*([A-Za-z0-9.-]+)\s*$", re.MULTILINE)
_VERSION_PATTERN = re.compile(r"^\s*version:\s*(v[0-9A-Za-z.-]+)\s*$", re.MULTILINE)
_VERSION_ENTRY_PATTERN = re.compile(r"^\s*-\s*name:\s*(v[0-9A-Za-z.-]+)\s*$", re.MULTILINE)
_NAMES_KIND_PATTERN = re.compile(r"names:\s*(?:\n[^\n]*){0,20}\n\s*kind:\s*([A-Za-z0-9]+)\s*")
_TOP_LEVEL_KIND_PATTERN = re.compile(r"^kind:\s*([A-Za-z0-9]+)\s*$", re.MULTILINE)
_TOP_LEVEL_API_VERSION_PATTERN = re.compile(r"^apiVersion:\s*([A-Za-z0-9./-]+)\s*$", re.MULTILINE)
_INDENTED_KEY_PATTERN = re.compile(r"^ {8,}([A-Za-z][A-Za-z0-9_-]*):[ \t]*$", re.MULTILINE)
_NON_ID_PATTERN = re.compile(r"[^a-z0-9]+")

# Schema keywords that look like property names in indented YAML.
_STRUCTURAL_KEYS = frozenset(
    {"type", "properties", "items", "description", "required", "metadata", "spec", "status"}
)


def normalize_id(text: str) -> str:
    """Lower-case an identifier and collapse non-alphanumeric runs to hyphens."""
    normalized = _NON_ID_PATTERN.sub("-", text.lower()).strip("-")
    return normalized or "parsed-custom-resource"


def metadata_defaults(kind: str, noun: str = "resource") -> list[FieldDefinition]:
    """Name and namespace seeds every generated template starts with."""
    return [
        FieldDefinition(
            path="metadata.name",
            value=f"{kind.lower()}-sample",
            description=f"Name for this {noun}.",
        ),
        FieldDefinition(
            path="metadata.namespace",
            value="default",
            description=f"Namespace for this {noun}.",
        ),
    ]


def metadata_optionals() -> list[FieldDefinition]:
    """Generic label and annotation fields offered on demand."""
    return [
        FieldDefinition(path="metadata.labels.app", description="Optional labels for grouping and selectors."),
        FieldDefinition(path="metadata.annotations.owner", description="Optional metadata annotation for ownership."),
    ]


def _first_capture(pattern: re.Pattern[str], text: str) -> str:
    match = pattern.search(text)
    return match.group(1).strip() if match else ""


class FallbackSchemaExtractor(BaseSchemaExtractor):
    """Line-pattern extractor for inputs that cannot be decoded structurally."""

    def __init__(self, max_fields: int = MAX_FALLBACK_FIELDS) -> None:
        """Initialize the fallback extractor.

        Args:
            max_fields: Cap on ``spec.*`` fields inferred from indented keys.
        """
        self._max_fields = max_fields

    def extract(self, raw: str) -> TemplateDefinition:
        """Recover a minimal template from raw text.

        Args:
            raw: The schema text.

        Returns:
            A template that always has at least one ``spec`` field.

        Raises:
            EmptyInputError: If the input is blank.
        """
        if not raw.strip():
            raise EmptyInputError("CRD payload is empty")

        kind = self._recover_kind(raw)
        api_version = self._recover_api_version(raw)
        fields = self._recover_fields(raw)

        logger.info(f"Fallback extraction: kind={kind}, apiVersion={api_version}, fields={len(fields)}")

        return TemplateDefinition(
            id=normalize_id(f"parsed-{kind}"),
            title=f"{kind} (Parsed)",
            api_version=api_version,
            kind=kind,
            note="Generated with fallback parser. Prefer full CRD YAML for richer field inference.",
            default_fields=metadata_defaults(kind) + fields,
            optional_fields=metadata_optionals(),
        )

    @staticmethod
    def _top_level_kind(raw: str) -> str:
        return _first_capture(_TOP_LEVEL_KIND_PATTERN, raw)

    def _recover_kind(self, raw: str) -> str:
        kind = _first_capture(_NAMES_KIND_PATTERN, raw)
        if kind:
            return kind

        top_kind = self._top_level_kind(raw)
        if top_kind and top_kind.lower() != CRD_KIND.lower():
            return top_kind
        return DEFAULT_KIND

    def _recover_api_version(self, raw: str) -> str:
        group = _first_capture(_GROUP_PATTERN, raw)
        version = _first_capture(_VERSION_ENTRY_PATTERN, raw) or _first_capture(_VERSION_PATTERN, raw)
        if group and version:
            return f"{group}/{version}"

        # A CRD's own apiVersion (apiextensions) is not the custom resource's.
        if self._top_level_kind(raw).lower() != CRD_KIND.lower():
            top_api_version = _first_capture(_TOP_LEVEL_API_VERSION_PATTERN, raw)
            if top_api_version:
                return top_api_version
        return DEFAULT_API_VERSION

    def _recover_fields(self, raw: str) -> list[FieldDefinition]:
        fields: list[FieldDefinition] = []
        seen: set[str] = set()
        for match in _INDENTED_KEY_PATTERN.finditer(raw):
            name = match.group(1)
            if name.lower() in _STRUCTURAL_KEYS:
                continue
            path = f"spec.{name}"
            if path in seen:
                continue
            seen.add(path)
            fields.append(FieldDefinition(path=path, description=f"Inferred from parsed field '{name}'."))
            if len(fields) >= self._max_fields:
                break

        if not fields:
            fields.append(
                FieldDefinition(
                    path="spec.example",
                    description="No schema fields inferred from input. Replace this with real fields.",
                )
            )
        return fields
