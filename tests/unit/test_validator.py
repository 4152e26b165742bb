"""Unit tests for structural CRD validation."""

from crdforge.strategies.schema.validator import validate_crd


VALID_CRD = """
apiVersion: apiextensions.k8s.io/v1
kind: CustomResourceDefinition
spec:
  group: example.io
  names:
    kind: Widget
  versions:
    - name: v1
      schema:
        openAPIV3Schema:
          type: object
"""


# =============================================================================
# Validation Tests
# =============================================================================


class TestValidateCRD:
    """Test suite for validate_crd."""

    def test_valid_crd(self):
        report = validate_crd(VALID_CRD)

        assert report.valid is True
        assert report.errors == []
        assert report.warnings == []
        assert report.kind == "CustomResourceDefinition"
        assert report.api_version == "apiextensions.k8s.io/v1"

    def test_empty_payload(self):
        report = validate_crd("  \n")

        assert report.valid is False
        assert report.errors == ["CRD payload is empty."]

    def test_yaml_parse_error(self):
        report = validate_crd('kind: "unterminated\n')

        assert report.valid is False
        assert report.errors[0].startswith("YAML parse error:")

    def test_no_resource_documents(self):
        report = validate_crd("just a string")

        assert report.valid is False
        assert report.errors == ["YAML payload has no valid resource documents."]

    def test_missing_top_level_fields(self):
        report = validate_crd("metadata:\n  name: thing\n")

        assert report.valid is False
        assert "Missing required top-level field: kind" in report.errors
        assert "Missing required top-level field: apiVersion" in report.errors

    def test_missing_crd_fields(self):
        raw = "apiVersion: apiextensions.k8s.io/v1\nkind: CustomResourceDefinition\nspec:\n  scope: Namespaced\n"

        report = validate_crd(raw)

        assert report.valid is False
        assert "Missing required CRD field: spec.group" in report.errors
        assert "Missing required CRD field: spec.names.kind" in report.errors
        assert "Missing required CRD version field: spec.version or spec.versions" in report.errors
        assert report.warnings == ["CRD schema not found. Add openAPIV3Schema for richer field guidance."]

    def test_missing_spec(self):
        report = validate_crd("apiVersion: apiextensions.k8s.io/v1\nkind: CustomResourceDefinition\n")

        assert report.errors == ["Missing required object: spec"]

    def test_unnamed_version_entry(self):
        raw = VALID_CRD.replace("    - name: v1\n", "    - served: true\n")

        report = validate_crd(raw)

        assert report.valid is False
        assert "Invalid spec.versions[0]: missing name" in report.errors

    def test_legacy_version_field(self):
        raw = """
apiVersion: apiextensions.k8s.io/v1beta1
kind: CustomResourceDefinition
spec:
  group: example.io
  version: v1beta1
  names:
    kind: Widget
  validation:
    openAPIV3Schema:
      type: object
"""
        report = validate_crd(raw)

        assert report.valid is True
        assert report.warnings == []

    def test_other_kind_is_accepted_with_warning(self):
        report = validate_crd("apiVersion: apps/v1\nkind: Deployment\nmetadata:\n  name: web\n")

        assert report.valid is True
        assert report.warnings == ["Input kind is not CustomResourceDefinition. It will still be accepted."]
        assert report.kind == "Deployment"

    def test_serializes_with_camel_case(self):
        dumped = validate_crd(VALID_CRD).model_dump(by_alias=True)

        assert dumped["apiVersion"] == "apiextensions.k8s.io/v1"
        assert dumped["valid"] is True

    def test_nesting_past_recursion_limit(self):
        raw = "kind: Thing\nspec:\n  x: " + "[" * 20000 + "]" * 20000 + "\n"

        report = validate_crd(raw)

        assert report.valid is False
        assert report.errors[0].startswith("YAML parse error:")
