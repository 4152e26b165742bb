"""Upstream CRD import script.

Fetches well-known CRD bundles (Argo CD, External Secrets, Prometheus
Operator, cert-manager), parses them and upserts the templates into the
SQL template store.

Usage:
    python -m scripts.import_crds [URL ...]
    or
    python scripts/import_crds.py (after pip install -e .)
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from crdforge.core.config import get_settings
from crdforge.core.factory import ComponentFactory
from crdforge.core.logging_config import setup_logging
from crdforge.db.session import close_db, init_db
from crdforge.importer import UPSTREAM_CRD_SOURCES, import_sources
from crdforge.strategies.fetchers import HTTPSchemaFetcher

# Upstream bundles such as cert-manager exceed the API's upload cap.
IMPORT_MAX_BYTES = 5 * 1024 * 1024
IMPORT_TIMEOUT_SECONDS = 20.0


async def main(sources: list[str]) -> None:
    """Import the given sources, or the default upstream set."""
    settings = get_settings()
    setup_logging(settings)

    factory = ComponentFactory(settings)
    fetcher = HTTPSchemaFetcher(
        timeout=IMPORT_TIMEOUT_SECONDS,
        max_bytes=IMPORT_MAX_BYTES,
        user_agent=settings.fetch_user_agent,
    )

    await init_db(settings)
    try:
        imported = await import_sources(
            sources or UPSTREAM_CRD_SOURCES,
            fetcher=fetcher,
            extractor=factory.get_schema_extractor(),
            store=factory.get_template_store("sql"),
        )
    finally:
        await close_db()

    if not imported:
        print("No templates were imported.")
        return

    print(f"Imported/updated {len(imported)} templates.")
    for template_id in imported:
        print(f"- {template_id}")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:]))
