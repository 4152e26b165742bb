"""Bulk import of upstream CRD bundles into the template catalog.

Fetches each source, splits it into CRD documents, parses every CRD and
upserts the result under a stable ``parsed-<kind>-<group>`` id.
"""

import logging
import re
from collections.abc import Iterable

import yaml

from crdforge.interfaces.fetcher import BaseSchemaFetcher, FetchError
from crdforge.interfaces.schema import BaseSchemaExtractor, EmptyInputError, TemplateDefinition
from crdforge.interfaces.store import BaseTemplateStore
from crdforge.strategies.schema.documents import CRD_KIND

logger = logging.getLogger(__name__)

UPSTREAM_CRD_SOURCES = (
    "https://raw.githubusercontent.com/argoproj/argo-cd/stable/manifests/crds/application-crd.yaml",
    "https://raw.githubusercontent.com/argoproj/argo-cd/stable/manifests/crds/appproject-crd.yaml",
    "https://raw.githubusercontent.com/argoproj/argo-cd/stable/manifests/crds/applicationset-crd.yaml",
    "https://raw.githubusercontent.com/external-secrets/external-secrets/main/config/crds/bases/external-secrets.io_externalsecrets.yaml",
    "https://raw.githubusercontent.com/external-secrets/external-secrets/main/config/crds/bases/external-secrets.io_secretstores.yaml",
    "https://raw.githubusercontent.com/external-secrets/external-secrets/main/config/crds/bases/external-secrets.io_clustersecretstores.yaml",
    "https://raw.githubusercontent.com/prometheus-operator/prometheus-operator/main/example/prometheus-operator-crd/monitoring.coreos.com_servicemonitors.yaml",
    "https://raw.githubusercontent.com/prometheus-operator/prometheus-operator/main/example/prometheus-operator-crd/monitoring.coreos.com_prometheusrules.yaml",
    "https://github.com/cert-manager/cert-manager/releases/latest/download/cert-manager.crds.yaml",
)

IMPORT_NOTE = "Imported from official upstream CRD source."

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def imported_template_id(kind: str, group: str) -> str:
    """Stable catalog id for an imported CRD."""
    slug = _SLUG_PATTERN.sub("-", f"{kind}-{group}".strip().lower()).strip("-")
    return f"parsed-{slug}" if slug else "parsed-imported-crd"


def split_crd_documents(raw: str) -> list[str]:
    """Re-serialize each CRD document of a multi-document bundle.

    Raises:
        yaml.YAMLError: If the bundle is not valid YAML.
    """
    out: list[str] = []
    for doc in yaml.safe_load_all(raw):
        if not isinstance(doc, dict) or not doc:
            continue
        kind = doc.get("kind")
        if not isinstance(kind, str) or kind.strip() != CRD_KIND:
            continue
        out.append(yaml.safe_dump(doc, sort_keys=False))
    return out


def as_imported(template: TemplateDefinition) -> TemplateDefinition:
    """Rename a parsed template for the imported catalog."""
    group = template.api_version.split("/", 1)[0]
    return template.model_copy(
        update={
            "id": imported_template_id(template.kind, group),
            "title": f"{template.kind} ({group})",
            "note": IMPORT_NOTE,
        }
    )


async def import_sources(
    sources: Iterable[str],
    fetcher: BaseSchemaFetcher,
    extractor: BaseSchemaExtractor,
    store: BaseTemplateStore,
) -> list[str]:
    """Import every CRD found at the given URLs.

    Failures are logged per source or document and do not stop the run.

    Returns:
        Unique ids of the imported templates, in import order.
    """
    imported: list[str] = []

    for source in sources:
        try:
            fetched = await fetcher.fetch(source)
        except FetchError as e:
            logger.warning(f"Fetch failed: {source} ({e})")
            continue

        try:
            documents = split_crd_documents(fetched.raw)
        except (yaml.YAMLError, RecursionError) as e:
            logger.warning(f"Decode failed: {source} ({e})")
            continue

        if not documents:
            logger.warning(f"No CRDs found in: {source}")
            continue

        for document in documents:
            try:
                template = as_imported(extractor.extract(document))
            except EmptyInputError as e:
                logger.warning(f"Parse failed from {source}: {e}")
                continue

            try:
                await store.upsert_template(template)
            except ValueError as e:
                logger.warning(f"Upsert failed for {template.id} from {source}: {e}")
                continue

            if template.id not in imported:
                imported.append(template.id)

    logger.info(f"Imported/updated {len(imported)} templates")
    return imported
