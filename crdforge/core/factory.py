"""Component Factory for strategy instantiation.

The Factory Pattern lets the application pick extractor, generator, fetcher
and store implementations at runtime from configuration.
"""

import logging

from crdforge.core.config import Settings, get_settings
from crdforge.interfaces.fetcher import BaseSchemaFetcher
from crdforge.interfaces.generator import BaseDocumentGenerator
from crdforge.interfaces.schema import BaseSchemaExtractor
from crdforge.interfaces.store import BaseManifestStore, BaseTemplateStore
from crdforge.strategies.fetchers import HTTPSchemaFetcher
from crdforge.strategies.generators import YAMLDocumentGenerator
from crdforge.strategies.schema import (
    CRDSchemaExtractor,
    FallbackSchemaExtractor,
    SchemaFieldCollector,
    ServiceSeeder,
    default_recognizers,
)
from crdforge.strategies.stores import (
    MemoryManifestStore,
    MemoryTemplateStore,
    SQLManifestStore,
    SQLTemplateStore,
)

logger = logging.getLogger(__name__)


class ComponentFactory:
    """Factory for creating component instances based on configuration.

    Example:
        ```python
        factory = ComponentFactory(get_settings())

        extractor = factory.get_schema_extractor()
        template = extractor.extract(raw_crd)
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: Application settings. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._extractor_cache: BaseSchemaExtractor | None = None
        self._generator_cache: BaseDocumentGenerator | None = None
        self._fetcher_cache: BaseSchemaFetcher | None = None
        self._template_store_cache: BaseTemplateStore | None = None
        self._manifest_store_cache: BaseManifestStore | None = None

    def get_schema_extractor(self) -> BaseSchemaExtractor:
        """Get the CRD schema extractor configured with the schema limits."""
        if self._extractor_cache is None:
            settings = self._settings
            logger.info(
                f"Instantiating schema extractor: depth={settings.max_schema_depth}, "
                f"fields={settings.max_schema_fields}, defaults={settings.max_default_fields}"
            )
            self._extractor_cache = CRDSchemaExtractor(
                collector=SchemaFieldCollector(
                    max_depth=settings.max_schema_depth,
                    limit=settings.max_schema_fields,
                ),
                seeder=ServiceSeeder(recognizers=default_recognizers(settings.component_keywords)),
                max_default_fields=settings.max_default_fields,
                fallback=FallbackSchemaExtractor(),
            )

        return self._extractor_cache

    def get_document_generator(self) -> BaseDocumentGenerator:
        """Get the YAML document generator."""
        if self._generator_cache is None:
            logger.info("Instantiating document generator")
            self._generator_cache = YAMLDocumentGenerator()

        return self._generator_cache

    def get_schema_fetcher(self) -> BaseSchemaFetcher:
        """Get the HTTP schema fetcher."""
        if self._fetcher_cache is None:
            logger.info("Instantiating schema fetcher")
            self._fetcher_cache = HTTPSchemaFetcher(
                timeout=self._settings.fetch_timeout_seconds,
                max_bytes=self._settings.fetch_max_bytes,
                user_agent=self._settings.fetch_user_agent,
            )

        return self._fetcher_cache

    def get_template_store(self, store_type: str | None = None) -> BaseTemplateStore:
        """Get a template store instance based on the specified type.

        Args:
            store_type: "memory" or "sql". If None, uses settings.

        Raises:
            ValueError: If the store type is unknown.
        """
        if self._template_store_cache is None or store_type is not None:
            store_type = store_type or self._settings.template_store_type

            logger.info(f"Instantiating template store: {store_type}")

            match store_type:
                case "memory":
                    self._template_store_cache = MemoryTemplateStore()
                case "sql":
                    self._template_store_cache = SQLTemplateStore(self._session_factory)
                case _:
                    raise ValueError(
                        f"Unknown template store type: {store_type}. "
                        f"Valid options: 'memory', 'sql'"
                    )

        return self._template_store_cache

    def get_manifest_store(self, store_type: str | None = None) -> BaseManifestStore:
        """Get a manifest store instance based on the specified type.

        Args:
            store_type: "memory" or "sql". If None, uses settings.

        Raises:
            ValueError: If the store type is unknown.
        """
        if self._manifest_store_cache is None or store_type is not None:
            store_type = store_type or self._settings.manifest_store_type

            logger.info(f"Instantiating manifest store: {store_type}")

            match store_type:
                case "memory":
                    self._manifest_store_cache = MemoryManifestStore()
                case "sql":
                    self._manifest_store_cache = SQLManifestStore(self._session_factory)
                case _:
                    raise ValueError(
                        f"Unknown manifest store type: {store_type}. "
                        f"Valid options: 'memory', 'sql'"
                    )

        return self._manifest_store_cache

    def uses_database(self) -> bool:
        """Whether any configured store needs the SQL engine."""
        return "sql" in (self._settings.template_store_type, self._settings.manifest_store_type)

    def _session_factory(self):
        from crdforge.db.session import get_session_maker

        return get_session_maker(self._settings)

    def clear_cache(self) -> None:
        """Clear all cached component instances.

        This forces new instances to be created on next access.
        Useful for testing or when settings change.
        """
        self._extractor_cache = None
        self._generator_cache = None
        self._fetcher_cache = None
        self._template_store_cache = None
        self._manifest_store_cache = None
        logger.debug("Component factory cache cleared")


# Global factory instance
_factory: ComponentFactory | None = None


def get_factory() -> ComponentFactory:
    """Get or create the global ComponentFactory instance.

    Returns:
        The singleton ComponentFactory instance.
    """
    global _factory
    if _factory is None:
        _factory = ComponentFactory()
    return _factory
