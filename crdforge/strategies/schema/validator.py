"""Structural CRD checks.

Validation never raises; every problem becomes a message in the report so
the caller can show all of them at once.
"""

import yaml

from crdforge.interfaces.schema import ValidationReport
from crdforge.strategies.schema.documents import (
    CRD_KIND,
    decode_documents,
    has_crd_schema,
    select_primary_document,
)
from crdforge.strategies.schema.nodes import as_mapping, as_sequence, as_string, nested


def validate_crd(raw: str) -> ValidationReport:
    """Check that the text is a decodable resource and, for CRDs, that the
    identity and version fields are present.

    Args:
        raw: CRD or resource YAML.

    Returns:
        A ValidationReport; ``valid`` is True when there are no errors.
    """
    report = ValidationReport()

    if not raw.strip():
        report.errors.append("CRD payload is empty.")
        return report

    try:
        docs = decode_documents(raw)
    except (yaml.YAMLError, RecursionError) as e:
        report.errors.append(f"YAML parse error: {e}")
        return report

    root = select_primary_document(docs)
    if not root:
        report.errors.append("YAML payload has no valid resource documents.")
        return report

    kind = as_string(root.get("kind"))
    api_version = as_string(root.get("apiVersion"))
    report.kind = kind
    report.api_version = api_version

    if not kind:
        report.errors.append("Missing required top-level field: kind")
    if not api_version:
        report.errors.append("Missing required top-level field: apiVersion")

    if kind.lower() == CRD_KIND.lower():
        _check_crd(root, report)
    elif kind:
        report.warnings.append("Input kind is not CustomResourceDefinition. It will still be accepted.")

    report.valid = not report.errors
    return report


def _check_crd(root: dict, report: ValidationReport) -> None:
    spec = root.get("spec")
    if not isinstance(spec, dict):
        report.errors.append("Missing required object: spec")
        return

    if not as_string(spec.get("group")):
        report.errors.append("Missing required CRD field: spec.group")
    if not as_string(nested(spec, "names", "kind")):
        report.errors.append("Missing required CRD field: spec.names.kind")

    versions = as_sequence(spec.get("versions"))
    if not as_string(spec.get("version")) and not versions:
        report.errors.append("Missing required CRD version field: spec.version or spec.versions")
    for index, entry in enumerate(versions):
        if not as_string(as_mapping(entry).get("name")):
            report.errors.append(f"Invalid spec.versions[{index}]: missing name")

    if not has_crd_schema(root):
        report.warnings.append("CRD schema not found. Add openAPIV3Schema for richer field guidance.")
