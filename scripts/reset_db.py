"""Database reset script.

Run this script to drop all tables and recreate them.
This deletes every stored template and saved manifest.

Usage:
    python -m scripts.reset_db
    or
    python scripts/reset_db.py (after pip install -e .)
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from crdforge.core.config import get_settings
from crdforge.db.session import close_db, drop_all_tables, init_db


async def main() -> None:
    """Reset the database by dropping all tables and reinitializing."""
    settings = get_settings()

    print("Dropping all database tables...")
    await drop_all_tables(settings)
    print("All tables dropped successfully!")

    print("Recreating tables...")
    await init_db(settings)
    await close_db()
    print("Database reinitialized successfully!")


if __name__ == "__main__":
    asyncio.run(main())
