"""In-memory template and manifest stores.

Used for development and tests. State lives for the lifetime of the
process; each store guards its state with an asyncio lock.
"""

import asyncio
import logging

from crdforge.interfaces.schema import TemplateDefinition
from crdforge.interfaces.store import (
    DEFAULT_MANIFEST_LIMIT,
    BaseManifestStore,
    BaseTemplateStore,
    ManifestCreate,
    ManifestRecord,
    build_manifest_record,
    manifest_matches,
    normalize_manifest_limit,
)
from crdforge.strategies.stores.catalog import BUILTIN_TEMPLATE_IDS, builtin_templates

logger = logging.getLogger(__name__)

MAX_MEMORY_MANIFESTS = 200
MAX_MEMORY_TEMPLATES = 200


class MemoryTemplateStore(BaseTemplateStore):
    """Built-in catalog plus parsed templates kept in a dict.

    Once ``capacity`` stored templates exist, saving a new id evicts the one
    written longest ago.
    """

    def __init__(self, capacity: int = MAX_MEMORY_TEMPLATES):
        self._templates: dict[str, TemplateDefinition] = {}
        self._capacity = capacity
        self._lock = asyncio.Lock()

    async def list_templates(self) -> list[TemplateDefinition]:
        async with self._lock:
            stored = [template.model_copy(deep=True) for template in self._templates.values()]
        return builtin_templates() + stored

    async def get_template(self, template_id: str) -> TemplateDefinition | None:
        for template in builtin_templates():
            if template.id == template_id:
                return template
        async with self._lock:
            template = self._templates.get(template_id)
            return template.model_copy(deep=True) if template else None

    async def upsert_template(self, template: TemplateDefinition) -> TemplateDefinition:
        if template.id in BUILTIN_TEMPLATE_IDS:
            raise ValueError(f"Template id '{template.id}' is reserved for a built-in template")
        async with self._lock:
            self._templates.pop(template.id, None)
            self._templates[template.id] = template.model_copy(deep=True)
            while len(self._templates) > self._capacity:
                evicted = next(iter(self._templates))
                del self._templates[evicted]
                logger.info(f"Evicted template {evicted}")
        logger.info(f"Stored template {template.id}")
        return template


class MemoryManifestStore(BaseManifestStore):
    """Newest-first manifest history capped at a fixed size."""

    def __init__(self, capacity: int = MAX_MEMORY_MANIFESTS):
        self._records: list[ManifestRecord] = []
        self._capacity = capacity
        self._lock = asyncio.Lock()

    async def save_manifest(self, payload: ManifestCreate) -> ManifestRecord:
        record = build_manifest_record(payload)
        async with self._lock:
            self._records.insert(0, record)
            del self._records[self._capacity :]
        logger.info(f"Saved manifest {record.id} ({record.kind or 'unknown kind'})")
        return record

    async def list_manifests(
        self,
        query: str = "",
        limit: int | None = DEFAULT_MANIFEST_LIMIT,
    ) -> list[ManifestRecord]:
        limit = normalize_manifest_limit(limit)
        async with self._lock:
            matches = [record for record in self._records if manifest_matches(record, query)]
        return [record.model_copy() for record in matches[:limit]]
