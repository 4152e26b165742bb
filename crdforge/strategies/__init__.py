"""Concrete strategy implementations."""

from crdforge.strategies.fetchers import HTTPSchemaFetcher
from crdforge.strategies.generators import YAMLDocumentGenerator
from crdforge.strategies.schema import CRDSchemaExtractor, FallbackSchemaExtractor
from crdforge.strategies.stores import (
    MemoryManifestStore,
    MemoryTemplateStore,
    SQLManifestStore,
    SQLTemplateStore,
)

__all__ = [
    "CRDSchemaExtractor",
    "FallbackSchemaExtractor",
    "YAMLDocumentGenerator",
    "HTTPSchemaFetcher",
    "MemoryTemplateStore",
    "MemoryManifestStore",
    "SQLTemplateStore",
    "SQLManifestStore",
]
