"""Unit tests for template and manifest stores."""

import asyncio
import datetime

import pytest

from crdforge.db.models import ManifestRow, TemplateRow
from crdforge.interfaces.schema import FieldDefinition, TemplateDefinition
from crdforge.interfaces.store import ManifestCreate, build_manifest_record, normalize_manifest_limit
from crdforge.strategies.stores.catalog import BUILTIN_TEMPLATE_IDS, builtin_templates
from crdforge.strategies.stores.memory_store import MemoryManifestStore, MemoryTemplateStore


def _template(template_id="parsed-widget"):
    return TemplateDefinition(
        id=template_id,
        title="Widget (Parsed)",
        api_version="example.io/v1",
        kind="Widget",
        note="parsed",
        default_fields=[
            FieldDefinition(path="metadata.name", value="widget-sample"),
            FieldDefinition(path="spec.replicas", value="2", type="number"),
        ],
        optional_fields=[FieldDefinition(path="metadata.labels.app", description="labels")],
    )


def _manifest(title="Demo", kind="Deployment", yaml="kind: Deployment\n"):
    return ManifestCreate(title=title, resource=f"{kind} (apps/v1)", api_version="apps/v1", kind=kind, yaml=yaml)


# =============================================================================
# Built-in Catalog Tests
# =============================================================================


class TestCatalog:
    """Test suite for the built-in template catalog."""

    def test_builtin_ids(self):
        assert [t.id for t in builtin_templates()] == ["deployment", "statefulset", "pvc", "volumesnapshot", "cronjob"]
        assert BUILTIN_TEMPLATE_IDS == frozenset(t.id for t in builtin_templates())

    def test_builtins_are_copies(self):
        first = builtin_templates()
        first[0].default_fields.clear()

        assert builtin_templates()[0].default_fields

    def test_builtin_paths_are_disjoint(self):
        for template in builtin_templates():
            default_paths = {f.path for f in template.default_fields}
            optional_paths = {f.path for f in template.optional_fields}
            assert not default_paths & optional_paths, template.id


# =============================================================================
# Memory Template Store Tests
# =============================================================================


class TestMemoryTemplateStore:
    """Test suite for MemoryTemplateStore."""

    def test_lists_builtins_then_stored(self):
        store = MemoryTemplateStore()

        async def run_test():
            await store.upsert_template(_template())
            return await store.list_templates()

        templates = asyncio.run(run_test())

        assert [t.id for t in templates][:5] == ["deployment", "statefulset", "pvc", "volumesnapshot", "cronjob"]
        assert templates[-1].id == "parsed-widget"

    def test_upsert_replaces_by_id(self):
        store = MemoryTemplateStore()

        async def run_test():
            await store.upsert_template(_template())
            await store.upsert_template(_template().model_copy(update={"title": "Renamed"}))
            return await store.list_templates(), await store.get_template("parsed-widget")

        templates, fetched = asyncio.run(run_test())

        assert sum(1 for t in templates if t.id == "parsed-widget") == 1
        assert fetched.title == "Renamed"

    def test_capacity_evicts_oldest(self):
        store = MemoryTemplateStore(capacity=2)

        async def run_test():
            for template_id in ("parsed-a", "parsed-b", "parsed-c"):
                await store.upsert_template(_template(template_id))
            return await store.list_templates(), await store.get_template("parsed-a")

        templates, evicted = asyncio.run(run_test())

        assert [t.id for t in templates if t.id.startswith("parsed-")] == ["parsed-b", "parsed-c"]
        assert evicted is None

    def test_replacing_refreshes_eviction_order(self):
        """Test that re-saving a template keeps it over older entries."""
        store = MemoryTemplateStore(capacity=2)

        async def run_test():
            await store.upsert_template(_template("parsed-a"))
            await store.upsert_template(_template("parsed-b"))
            await store.upsert_template(_template("parsed-a"))
            await store.upsert_template(_template("parsed-c"))
            return await store.list_templates()

        templates = asyncio.run(run_test())

        assert [t.id for t in templates if t.id.startswith("parsed-")] == ["parsed-a", "parsed-c"]

    def test_get_builtin_and_unknown(self):
        store = MemoryTemplateStore()

        async def run_test():
            return await store.get_template("deployment"), await store.get_template("missing")

        builtin, missing = asyncio.run(run_test())

        assert builtin.kind == "Deployment"
        assert missing is None

    def test_reserved_ids_are_rejected(self):
        """Test that a parsed template cannot shadow a built-in."""
        store = MemoryTemplateStore()

        with pytest.raises(ValueError, match="reserved"):
            asyncio.run(store.upsert_template(_template("deployment")))


# =============================================================================
# Memory Manifest Store Tests
# =============================================================================


class TestMemoryManifestStore:
    """Test suite for MemoryManifestStore."""

    def test_save_and_list_newest_first(self):
        store = MemoryManifestStore()

        async def run_test():
            await store.save_manifest(_manifest(title="first"))
            await store.save_manifest(_manifest(title="second"))
            return await store.list_manifests()

        records = asyncio.run(run_test())

        assert [r.title for r in records] == ["second", "first"]
        assert records[0].id != records[1].id
        assert records[0].created_at.tzinfo is not None

    def test_blank_yaml_is_rejected(self):
        store = MemoryManifestStore()

        with pytest.raises(ValueError, match="yaml is required"):
            asyncio.run(store.save_manifest(_manifest(yaml="   ")))

    def test_blank_title_defaults(self):
        record = asyncio.run(MemoryManifestStore().save_manifest(_manifest(title="  ")))

        assert record.title == "Manifest"

    def test_capacity_keeps_newest(self):
        store = MemoryManifestStore(capacity=3)

        async def run_test():
            for i in range(5):
                await store.save_manifest(_manifest(title=f"m{i}"))
            return await store.list_manifests()

        records = asyncio.run(run_test())

        assert [r.title for r in records] == ["m4", "m3", "m2"]

    def test_search_is_case_insensitive(self):
        store = MemoryManifestStore()

        async def run_test():
            await store.save_manifest(_manifest(title="web", kind="Deployment"))
            await store.save_manifest(_manifest(title="db", kind="StatefulSet", yaml="kind: StatefulSet\n"))
            return (
                await store.list_manifests(query="statefulset"),
                await store.list_manifests(query="  "),
                await store.list_manifests(query="nothing-matches"),
            )

        found, everything, nothing = asyncio.run(run_test())

        assert [r.title for r in found] == ["db"]
        assert len(everything) == 2
        assert nothing == []

    def test_limit_is_applied(self):
        store = MemoryManifestStore()

        async def run_test():
            for i in range(4):
                await store.save_manifest(_manifest(title=f"m{i}"))
            return await store.list_manifests(limit=2), await store.list_manifests(limit=0)

        limited, defaulted = asyncio.run(run_test())

        assert len(limited) == 2
        assert len(defaulted) == 4


class TestManifestHelpers:
    """Test suite for manifest record helpers."""

    @pytest.mark.parametrize(
        "requested,expected",
        [(None, 50), (0, 50), (-3, 50), (201, 50), (1, 1), (200, 200), (75, 75)],
    )
    def test_normalize_manifest_limit(self, requested, expected):
        assert normalize_manifest_limit(requested) == expected

    def test_build_manifest_record_trims(self):
        record = build_manifest_record(
            ManifestCreate(title=" Demo ", resource=" Deployment (apps/v1) ", kind=" Deployment ", yaml="a: 1\n")
        )

        assert record.title == "Demo"
        assert record.resource == "Deployment (apps/v1)"
        assert record.kind == "Deployment"
        assert record.yaml == "a: 1\n"
        assert record.created_at == record.updated_at


# =============================================================================
# Row Conversion Tests
# =============================================================================


class TestRowConversion:
    """Test suite for SQL row conversions."""

    def test_template_row_round_trip(self):
        template = _template()

        row = TemplateRow.from_template(template)

        assert row.default_fields[1] == {"path": "spec.replicas", "value": "2", "description": "", "type": "number"}
        assert row.to_template() == template

    def test_manifest_row_round_trip(self):
        now = datetime.datetime(2026, 1, 2, 3, 4, 5, tzinfo=datetime.timezone.utc)
        record = build_manifest_record(_manifest()).model_copy(update={"created_at": now, "updated_at": now})

        row = ManifestRow.from_record(record)

        assert row.id == record.id
        assert row.to_record() == record
