"""Unit tests for path expressions."""

import pytest

from crdforge.strategies.schema.paths import PathSyntaxError, format_path, get_path, parse_path, set_path


# =============================================================================
# Parsing Tests
# =============================================================================


class TestParsePath:
    """Test suite for parse_path."""

    def test_dotted_keys(self):
        assert parse_path("metadata.labels.app") == ["metadata", "labels", "app"]

    def test_indexed_segment(self):
        assert parse_path("spec.containers[0].image") == ["spec", "containers", 0, "image"]

    def test_multiple_indices_on_one_segment(self):
        assert parse_path("matrix[1][2]") == ["matrix", 1, 2]

    def test_surrounding_whitespace_is_ignored(self):
        assert parse_path("  spec.size  ") == ["spec", "size"]

    @pytest.mark.parametrize("path", ["", "   ", "spec..size", "spec.[0]", "spec.items[x]", "spec.items[0"])
    def test_malformed_paths_raise(self, path):
        with pytest.raises(PathSyntaxError):
            parse_path(path)

    def test_format_round_trip(self):
        path = "spec.template.spec.containers[0].ports[1].containerPort"
        assert format_path(parse_path(path)) == path


# =============================================================================
# Write Tests
# =============================================================================


class TestSetPath:
    """Test suite for set_path."""

    def test_creates_nested_structure(self):
        root: dict = {}
        assert set_path(root, parse_path("a.b[0].c"), "V") is True
        assert root == {"a": {"b": [{"c": "V"}]}}
        assert root["a"]["b"][0]["c"] == "V"

    def test_backfills_short_sequence_with_none(self):
        root: dict = {}
        assert set_path(root, parse_path("a.b[2]"), "x") is True
        assert root == {"a": {"b": [None, None, "x"]}}

    def test_extends_existing_sequence(self):
        root = {"a": {"b": ["first"]}}
        assert set_path(root, parse_path("a.b[3]"), "fourth") is True
        assert root["a"]["b"] == ["first", None, None, "fourth"]

    def test_later_write_overwrites(self):
        root: dict = {}
        set_path(root, parse_path("spec.replicas"), 1)
        set_path(root, parse_path("spec.replicas"), 3)
        assert root == {"spec": {"replicas": 3}}

    def test_fills_none_slot_with_container(self):
        root = {"items": [None]}
        assert set_path(root, parse_path("items[0].name"), "web") is True
        assert root == {"items": [{"name": "web"}]}

    def test_scalar_in_the_way_is_skipped(self):
        root = {"spec": {"size": "small"}}
        assert set_path(root, parse_path("spec.size.value"), "x") is False
        assert root == {"spec": {"size": "small"}}

    def test_mapping_where_list_expected_is_skipped(self):
        root = {"spec": {"ports": {"http": 80}}}
        assert set_path(root, parse_path("spec.ports[0]"), 443) is False
        assert root == {"spec": {"ports": {"http": 80}}}

    def test_list_where_mapping_expected_is_skipped(self):
        root = {"spec": {"ports": [80]}}
        assert set_path(root, parse_path("spec.ports.http"), 443) is False
        assert root == {"spec": {"ports": [80]}}

    def test_empty_segments_write_nothing(self):
        root: dict = {}
        assert set_path(root, [], "x") is False
        assert root == {}


# =============================================================================
# Read Tests
# =============================================================================


class TestGetPath:
    """Test suite for get_path."""

    @pytest.fixture
    def document(self):
        return {"spec": {"containers": [{"name": "app", "ports": [{"containerPort": 8080}]}]}}

    def test_reads_nested_value(self, document):
        assert get_path(document, "spec.containers[0].ports[0].containerPort") == 8080

    def test_accepts_segments(self, document):
        assert get_path(document, ["spec", "containers", 0, "name"]) == "app"

    def test_missing_key_returns_default(self, document):
        assert get_path(document, "spec.volumes", default=[]) == []

    def test_out_of_range_index_returns_default(self, document):
        assert get_path(document, "spec.containers[4].name") is None

    def test_wrong_shape_returns_default(self, document):
        assert get_path(document, "spec.containers.name", default="n/a") == "n/a"
