"""Unit tests for the YAML document generator."""

import pytest
import yaml

from crdforge.interfaces.generator import GenerationError
from crdforge.interfaces.schema import FieldDefinition
from crdforge.strategies.generators.yaml_generator import YAMLDocumentGenerator


@pytest.fixture
def generator():
    return YAMLDocumentGenerator()


def _field(path, value="", type=None):
    return FieldDefinition(path=path, value=value, type=type)


# =============================================================================
# Generation Tests
# =============================================================================


class TestYAMLDocumentGenerator:
    """Test suite for YAMLDocumentGenerator."""

    def test_generates_deployment(self, generator):
        fields = [
            _field("metadata.name", "demo"),
            _field("spec.replicas", "3", "number"),
        ]

        result = generator.generate("apps/v1", "Deployment", fields)

        assert "apiVersion: apps/v1" in result.text
        assert "kind: Deployment" in result.text
        assert "name: demo" in result.text
        assert "replicas: 3" in result.text
        assert result.document["spec"]["replicas"] == 3
        assert result.skipped_paths == []

    def test_identity_comes_first(self, generator):
        result = generator.generate("apps/v1", "Deployment", [_field("metadata.name", "demo")])

        assert result.text.startswith("apiVersion: apps/v1\nkind: Deployment\n")

    def test_text_round_trips(self, generator):
        fields = [
            _field("spec.template.spec.containers[0].name", "web"),
            _field("spec.template.spec.containers[0].ports[0].containerPort", "8080", "number"),
            _field("spec.paused", "false", "boolean"),
        ]

        result = generator.generate("apps/v1", "Deployment", fields)

        assert yaml.safe_load(result.text) == result.document
        container = result.document["spec"]["template"]["spec"]["containers"][0]
        assert container == {"name": "web", "ports": [{"containerPort": 8080}]}
        assert result.document["spec"]["paused"] is False

    def test_later_field_overwrites(self, generator):
        fields = [_field("metadata.name", "first"), _field("metadata.name", "second")]

        result = generator.generate("v1", "ConfigMap", fields)

        assert result.document["metadata"]["name"] == "second"

    def test_untyped_text_is_kept(self, generator):
        result = generator.generate("v1", "ConfigMap", [_field("data.greeting", "héllo wörld")])

        assert result.document["data"]["greeting"] == "héllo wörld"
        assert "héllo wörld" in result.text

    def test_conflicting_path_is_skipped(self, generator):
        fields = [_field("spec.a", "x"), _field("spec.a.b", "y")]

        result = generator.generate("v1", "Thing", fields)

        assert result.document["spec"] == {"a": "x"}
        assert result.skipped_paths == ["spec.a.b"]

    def test_malformed_path_is_skipped(self, generator):
        fields = [_field("spec..broken", "x"), _field("spec.ok", "y")]

        result = generator.generate("v1", "Thing", fields)

        assert result.document["spec"] == {"ok": "y"}
        assert result.skipped_paths == ["spec..broken"]

    def test_blank_paths_are_ignored(self, generator):
        result = generator.generate("v1", "Thing", [_field("   ", "x")])

        assert result.document == {"apiVersion": "v1", "kind": "Thing"}
        assert result.skipped_paths == []

    def test_sparse_index_pads_list(self, generator):
        result = generator.generate("v1", "Thing", [_field("spec.items[2]", "c")])

        assert result.document["spec"]["items"] == [None, None, "c"]

    @pytest.mark.parametrize(
        "api_version,kind,message",
        [
            ("", "Deployment", "apiVersion is required"),
            ("   ", "Deployment", "apiVersion is required"),
            ("apps/v1", "", "kind is required"),
        ],
    )
    def test_missing_identity_raises(self, generator, api_version, kind, message):
        with pytest.raises(GenerationError, match=message):
            generator.generate(api_version, kind, [_field("metadata.name", "demo")])
