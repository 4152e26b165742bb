"""Abstract base classes for schema, generation, fetch and storage strategies."""

from crdforge.interfaces.fetcher import BaseSchemaFetcher, FetchedSchema, FetchError
from crdforge.interfaces.generator import BaseDocumentGenerator, GenerationError, GenerationResult
from crdforge.interfaces.schema import (
    BaseSchemaExtractor,
    EmptyInputError,
    FieldDefinition,
    TemplateDefinition,
    ValidationReport,
)
from crdforge.interfaces.store import (
    BaseManifestStore,
    BaseTemplateStore,
    ManifestCreate,
    ManifestRecord,
)

__all__ = [
    "BaseSchemaExtractor",
    "BaseDocumentGenerator",
    "BaseSchemaFetcher",
    "BaseTemplateStore",
    "BaseManifestStore",
    "FieldDefinition",
    "TemplateDefinition",
    "ValidationReport",
    "GenerationResult",
    "FetchedSchema",
    "ManifestCreate",
    "ManifestRecord",
    "EmptyInputError",
    "GenerationError",
    "FetchError",
]
