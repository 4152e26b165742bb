"""YAML document decoding and CRD version/schema selection."""

from typing import Any

import yaml

from crdforge.strategies.schema.nodes import as_bool, as_mapping, as_sequence, as_string, nested

CRD_KIND = "CustomResourceDefinition"
LIST_KIND = "List"


def decode_documents(raw: str) -> list[dict[str, Any]]:
    """Decode every non-empty mapping document in a YAML stream.

    Raises:
        yaml.YAMLError: If the stream is not valid YAML.
    """
    return [doc for doc in yaml.safe_load_all(raw) if isinstance(doc, dict) and doc]


def _is_kind(doc: dict[str, Any], kind: str) -> bool:
    return as_string(doc.get("kind")).lower() == kind.lower()


def select_primary_document(docs: list[dict[str, Any]]) -> dict[str, Any] | None:
    """Pick the document a template should be built from.

    Preference: the first CRD, then the first CRD inside a ``List``, then the
    first document with any kind, then the first document.
    """
    for doc in docs:
        if _is_kind(doc, CRD_KIND):
            return doc

    for doc in docs:
        if not _is_kind(doc, LIST_KIND):
            continue
        for item in as_sequence(doc.get("items")):
            if isinstance(item, dict) and _is_kind(item, CRD_KIND):
                return item

    for doc in docs:
        if as_string(doc.get("kind")):
            return doc

    return docs[0] if docs else None


def _spec_schema_of(open_api_schema: Any) -> dict[str, Any] | None:
    spec_schema = as_mapping(as_mapping(open_api_schema).get("properties")).get("spec")
    return spec_schema if isinstance(spec_schema, dict) else None


def select_spec_schema(root: dict[str, Any]) -> tuple[dict[str, Any] | None, str]:
    """Find the ``spec`` schema of a CRD and the version it belongs to.

    ``spec.versions`` entries are preferred storage first, then served, then
    in order. Legacy ``spec.validation.openAPIV3Schema`` is used otherwise.

    Returns:
        The ``spec`` schema node (or None) and the version name (or "").
    """
    spec = as_mapping(root.get("spec"))
    if not spec:
        return None, ""

    picked: list[tuple[dict[str, Any], str, bool, bool]] = []
    for entry in as_sequence(spec.get("versions")):
        if not isinstance(entry, dict):
            continue
        spec_schema = _spec_schema_of(nested(entry, "schema", "openAPIV3Schema"))
        if spec_schema is None:
            continue
        picked.append(
            (spec_schema, as_string(entry.get("name")), as_bool(entry.get("storage")), as_bool(entry.get("served")))
        )

    if picked:
        for spec_schema, name, storage, _ in picked:
            if storage:
                return spec_schema, name
        for spec_schema, name, _, served in picked:
            if served:
                return spec_schema, name
        return picked[0][0], picked[0][1]

    legacy = _spec_schema_of(nested(spec, "validation", "openAPIV3Schema"))
    return legacy, as_string(spec.get("version"))


def first_version_name(versions: Any) -> str:
    """Return the first named entry of ``spec.versions``."""
    for entry in as_sequence(versions):
        name = as_string(as_mapping(entry).get("name"))
        if name:
            return name
    return ""


def has_crd_schema(root: dict[str, Any]) -> bool:
    """Check whether a CRD declares any openAPIV3Schema."""
    if nested(root, "spec", "validation", "openAPIV3Schema") is not None:
        return True
    return any(
        as_mapping(as_mapping(entry).get("schema")).get("openAPIV3Schema") is not None
        for entry in as_sequence(nested(root, "spec", "versions"))
    )
