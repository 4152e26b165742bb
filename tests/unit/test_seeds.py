"""Unit tests for service-seed heuristics."""

import pytest

from crdforge.interfaces.schema import FieldDefinition
from crdforge.strategies.schema.collector import Candidate
from crdforge.strategies.schema.seeds import (
    ServiceSeeder,
    default_recognizers,
    first_scalar_seed,
    generic_seed,
    has_config_entries,
    nested_spec_named,
    top_level_spec_key,
)


def _config_maps_component():
    return {
        "type": "object",
        "properties": {
            "configMaps": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {"mountPath": {"type": "string"}, "name": {"type": "string"}},
                },
            },
            "replicas": {"type": "integer"},
        },
    }


def _nested_spec_component(**spec_properties):
    return {
        "type": "object",
        "properties": {"spec": {"type": "object", "properties": spec_properties}},
    }


# =============================================================================
# Recognizer Tests
# =============================================================================


class TestRecognizers:
    """Test suite for component recognizers."""

    def test_config_entries(self):
        assert has_config_entries("anything", _config_maps_component()) is True
        assert has_config_entries("anything", {"properties": {"name": {}}}) is False

    def test_nested_spec_requires_keyword(self):
        recognize = nested_spec_named(["orchestrator"])
        node = _nested_spec_component(replicas={"type": "integer"})

        assert recognize("madaraOrchestrator", node) is True
        assert recognize("worker", node) is False

    def test_keywords_are_configurable(self):
        seeder = ServiceSeeder(recognizers=default_recognizers(["worker"]))
        node = _nested_spec_component(replicas={"type": "integer"})

        assert seeder.is_component_like("worker", node) is True
        assert seeder.is_component_like("orchestrator", node) is False

    def test_scalar_nodes_are_never_components(self):
        seeder = ServiceSeeder()
        assert seeder.is_component_like("madara", {"type": "string"}) is False
        assert seeder.is_component_like("madara", "not a node") is False


# =============================================================================
# Seed Construction Tests
# =============================================================================


class TestServiceSeeder:
    """Test suite for ServiceSeeder."""

    @pytest.fixture
    def seeder(self):
        return ServiceSeeder()

    def test_config_map_seed_prefers_name(self, seeder):
        seed = seeder.build_service_seed("dna", _config_maps_component())

        assert seed.path == "spec.dna.configMaps[0].name"
        assert seed.description == "Service component 'dna'. Expand as needed with optional fields."

    def test_secret_reference_seed(self, seeder):
        node = {
            "type": "object",
            "properties": {
                "envFromSecret": {"type": "object", "properties": {"key": {"type": "string"}, "name": {"type": "string"}}}
            },
        }

        assert seeder.build_service_seed("faucet", node).path == "spec.faucet.envFromSecret.name"

    def test_nested_spec_prefers_known_keys(self, seeder):
        node = _nested_spec_component(
            affinity={"type": "object", "properties": {"zone": {"type": "string"}}},
            roleArn={"type": "string", "default": "arn:aws:iam::1:role/x"},
        )

        seed = seeder.build_service_seed("orchestrator", node)

        assert seed.path == "spec.orchestrator.spec.roleArn"
        assert seed.value == "arn:aws:iam::1:role/x"

    def test_nested_spec_falls_back_to_first_scalar(self, seeder):
        node = _nested_spec_component(
            affinity={"type": "object", "properties": {"zone": {"type": "string"}}},
            replicas={"type": "integer"},
        )

        seed = seeder.build_service_seed("bootstrapper", node)

        assert seed.path == "spec.bootstrapper.spec.affinity.zone"

    def test_extract_service_seeds_covers_every_component(self, seeder):
        spec_schema = {
            "type": "object",
            "properties": {
                "madara": _config_maps_component(),
                "dna": _config_maps_component(),
                "plain": {"type": "object", "properties": {"name": {"type": "string"}}},
            },
        }

        seeds = seeder.extract_service_seeds(spec_schema)

        assert [s.path for s in seeds] == ["spec.dna.configMaps[0].name", "spec.madara.configMaps[0].name"]

    def test_coverage_prefers_collected_candidate(self, seeder):
        spec_schema = {
            "properties": {
                "a": {"type": "string"},
                "b": {"type": "object", "properties": {"c": {"type": "string"}}},
            }
        }
        defaults = [FieldDefinition(path="spec.a")]
        candidates = [
            Candidate(field=FieldDefinition(path="spec.a"), required=False, depth=0, has_default=False),
            Candidate(field=FieldDefinition(path="spec.b.c"), required=False, depth=1, has_default=False),
        ]

        result = seeder.ensure_top_level_coverage(spec_schema, defaults, candidates)

        assert [f.path for f in result] == ["spec.a", "spec.b.c"]

    def test_coverage_falls_back_to_generic_seed(self, seeder):
        spec_schema = {
            "properties": {
                "tags": {"type": "array", "items": {"type": "string"}},
                "settings": {"type": "object"},
            }
        }

        result = seeder.ensure_top_level_coverage(spec_schema, [], [])

        assert [f.path for f in result] == ["spec.settings.exampleKey", "spec.tags[0]"]


# =============================================================================
# Helper Tests
# =============================================================================


class TestSeedHelpers:
    """Test suite for module-level seed helpers."""

    def test_first_scalar_seed_descends_into_arrays(self):
        properties = {
            "volumes": {
                "type": "array",
                "items": {"type": "object", "properties": {"size": {"type": "integer", "default": 10}}},
            }
        }

        seed = first_scalar_seed("spec.x", properties, "desc")

        assert seed.path == "spec.x.volumes[0].size"
        assert seed.type == "number"
        assert seed.value == "10"

    def test_first_scalar_seed_respects_depth(self):
        properties = {
            "a": {"type": "object", "properties": {"b": {"type": "object", "properties": {"c": {"type": "object", "properties": {"d": {"type": "string"}}}}}}}
        }

        assert first_scalar_seed("spec", properties, "desc", max_depth=1) is None

    def test_generic_seed_for_scalar(self):
        seed = generic_seed("enabled", {"type": "boolean", "default": True})

        assert seed.path == "spec.enabled"
        assert seed.type == "boolean"
        assert seed.value == "true"

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("spec.containers[0].name", "containers"),
            ("spec.size", "size"),
            ("metadata.name", ""),
            ("spec", ""),
        ],
    )
    def test_top_level_spec_key(self, path, expected):
        assert top_level_spec_key(path) == expected
