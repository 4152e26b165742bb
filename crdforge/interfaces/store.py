"""Abstract base classes for template and manifest persistence.

The Strategy Pattern allows the in-memory stores used in development and
tests to be swapped for the SQL-backed stores without touching the routes.
"""

import datetime
import uuid
from abc import ABC, abstractmethod

from pydantic import Field

from crdforge.interfaces.schema import CamelModel, TemplateDefinition

DEFAULT_MANIFEST_LIMIT = 50
MAX_MANIFEST_LIMIT = 200


class ManifestCreate(CamelModel):
    """Payload for recording a generated manifest in the history."""

    title: str = ""
    resource: str = ""
    api_version: str = ""
    kind: str = ""
    yaml: str = ""


class ManifestRecord(CamelModel):
    """A manifest stored in the history."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    title: str
    resource: str = ""
    api_version: str = ""
    kind: str = ""
    yaml: str
    created_at: datetime.datetime
    updated_at: datetime.datetime


def build_manifest_record(payload: ManifestCreate) -> ManifestRecord:
    """Validate a save request and stamp it into a new record.

    Raises:
        ValueError: If the payload carries no YAML.
    """
    if not payload.yaml.strip():
        raise ValueError("yaml is required")

    now = datetime.datetime.now(datetime.timezone.utc)
    return ManifestRecord(
        title=payload.title.strip() or "Manifest",
        resource=payload.resource.strip(),
        api_version=payload.api_version.strip(),
        kind=payload.kind.strip(),
        yaml=payload.yaml,
        created_at=now,
        updated_at=now,
    )


def normalize_manifest_limit(limit: int | None) -> int:
    """Clamp a requested page size to the supported range."""
    if limit is None or limit <= 0 or limit > MAX_MANIFEST_LIMIT:
        return DEFAULT_MANIFEST_LIMIT
    return limit


def manifest_matches(record: ManifestRecord, query: str) -> bool:
    """Case-insensitive substring match over a manifest's searchable text."""
    lowered = query.strip().lower()
    if not lowered:
        return True
    haystacks = (record.title, record.resource, record.kind, record.api_version, record.yaml)
    return any(lowered in text.lower() for text in haystacks)


class BaseTemplateStore(ABC):
    """Abstract base class for template catalog strategies."""

    @abstractmethod
    async def list_templates(self) -> list[TemplateDefinition]:
        """Return built-in templates followed by stored ones."""
        ...

    @abstractmethod
    async def get_template(self, template_id: str) -> TemplateDefinition | None:
        """Return one template by id, or None when unknown."""
        ...

    @abstractmethod
    async def upsert_template(self, template: TemplateDefinition) -> TemplateDefinition:
        """Insert or replace a template keyed by its id."""
        ...


class BaseManifestStore(ABC):
    """Abstract base class for manifest history strategies."""

    @abstractmethod
    async def save_manifest(self, payload: ManifestCreate) -> ManifestRecord:
        """Persist a generated manifest.

        Raises:
            ValueError: If the payload carries no YAML.
        """
        ...

    @abstractmethod
    async def list_manifests(
        self,
        query: str = "",
        limit: int | None = DEFAULT_MANIFEST_LIMIT,
    ) -> list[ManifestRecord]:
        """Return manifests newest first, optionally filtered by a search term."""
        ...
