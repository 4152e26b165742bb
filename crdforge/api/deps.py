"""FastAPI dependencies for dependency injection.

Each application instance owns a ComponentFactory on ``app.state`` so
strategies (and their in-memory state) are scoped to the app.
"""

from fastapi import Request

from crdforge.core.factory import ComponentFactory, get_factory
from crdforge.interfaces.fetcher import BaseSchemaFetcher
from crdforge.interfaces.generator import BaseDocumentGenerator
from crdforge.interfaces.schema import BaseSchemaExtractor
from crdforge.interfaces.store import BaseManifestStore, BaseTemplateStore


def get_component_factory(request: Request) -> ComponentFactory:
    """Return the app's factory, or the global one outside create_app."""
    return getattr(request.app.state, "factory", None) or get_factory()


def get_extractor(request: Request) -> BaseSchemaExtractor:
    return get_component_factory(request).get_schema_extractor()


def get_generator(request: Request) -> BaseDocumentGenerator:
    return get_component_factory(request).get_document_generator()


def get_fetcher(request: Request) -> BaseSchemaFetcher:
    return get_component_factory(request).get_schema_fetcher()


def get_template_store(request: Request) -> BaseTemplateStore:
    return get_component_factory(request).get_template_store()


def get_manifest_store(request: Request) -> BaseManifestStore:
    return get_component_factory(request).get_manifest_store()
