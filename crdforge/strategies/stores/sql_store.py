"""SQLModel-backed template and manifest stores."""

import datetime
import logging
from collections.abc import Callable

from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import col, select

from crdforge.db.models import ManifestRow, TemplateRow
from crdforge.interfaces.schema import TemplateDefinition
from crdforge.interfaces.store import (
    DEFAULT_MANIFEST_LIMIT,
    BaseManifestStore,
    BaseTemplateStore,
    ManifestCreate,
    ManifestRecord,
    build_manifest_record,
    normalize_manifest_limit,
)
from crdforge.strategies.stores.catalog import BUILTIN_TEMPLATE_IDS, builtin_templates

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], async_sessionmaker[AsyncSession]]


class SQLTemplateStore(BaseTemplateStore):
    """Template catalog persisted in the ``templates`` table."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize the store.

        Args:
            session_factory: Returns the session maker; resolved lazily so the
                engine is only created on first use.
        """
        self._session_factory = session_factory

    async def list_templates(self) -> list[TemplateDefinition]:
        async with self._session_factory()() as session:
            result = await session.execute(select(TemplateRow).order_by(col(TemplateRow.id)))
            rows = result.scalars().all()
        stored = [row.to_template() for row in rows if row.id not in BUILTIN_TEMPLATE_IDS]
        return builtin_templates() + stored

    async def get_template(self, template_id: str) -> TemplateDefinition | None:
        for template in builtin_templates():
            if template.id == template_id:
                return template
        async with self._session_factory()() as session:
            row = await session.get(TemplateRow, template_id)
        return row.to_template() if row else None

    async def upsert_template(self, template: TemplateDefinition) -> TemplateDefinition:
        if template.id in BUILTIN_TEMPLATE_IDS:
            raise ValueError(f"Template id '{template.id}' is reserved for a built-in template")

        incoming = TemplateRow.from_template(template)
        async with self._session_factory()() as session:
            row = await session.get(TemplateRow, template.id)
            if row is None:
                session.add(incoming)
            else:
                row.title = incoming.title
                row.api_version = incoming.api_version
                row.kind = incoming.kind
                row.note = incoming.note
                row.default_fields = incoming.default_fields
                row.optional_fields = incoming.optional_fields
                row.updated_at = datetime.datetime.now(datetime.timezone.utc)
                session.add(row)
            await session.commit()

        logger.info(f"Upserted template {template.id}")
        return template


class SQLManifestStore(BaseManifestStore):
    """Manifest history persisted in the ``manifests`` table."""

    def __init__(self, session_factory: SessionFactory):
        self._session_factory = session_factory

    async def save_manifest(self, payload: ManifestCreate) -> ManifestRecord:
        record = build_manifest_record(payload)
        async with self._session_factory()() as session:
            session.add(ManifestRow.from_record(record))
            await session.commit()
        logger.info(f"Saved manifest {record.id} ({record.kind or 'unknown kind'})")
        return record

    async def list_manifests(
        self,
        query: str = "",
        limit: int | None = DEFAULT_MANIFEST_LIMIT,
    ) -> list[ManifestRecord]:
        statement = select(ManifestRow).order_by(col(ManifestRow.created_at).desc())

        term = query.strip()
        if term:
            pattern = f"%{term}%"
            statement = statement.where(
                or_(
                    col(ManifestRow.title).ilike(pattern),
                    col(ManifestRow.resource).ilike(pattern),
                    col(ManifestRow.kind).ilike(pattern),
                    col(ManifestRow.api_version).ilike(pattern),
                    col(ManifestRow.yaml).ilike(pattern),
                )
            )

        statement = statement.limit(normalize_manifest_limit(limit))
        async with self._session_factory()() as session:
            result = await session.execute(statement)
            rows = result.scalars().all()
        return [row.to_record() for row in rows]
