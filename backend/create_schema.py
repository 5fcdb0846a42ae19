"""Create the replay source tables and the cache table (local/dev). Usage: python create_schema.py (from backend dir)."""

import asyncio
import sys

from core.config import get_settings
from core.database import init_database, dispose_database
from tools.schema_check import check_sqlite_schema_mismatch


def _is_sqlite_file_url(url: str) -> bool:
    if not url or "sqlite" not in url.lower():
        return False
    if ":memory:" in url:
        return False
    return True


async def main() -> int:
    settings = get_settings()
    db = await init_database(settings.database_url)

    if _is_sqlite_file_url(settings.database_url or ""):
        async with db.engine.connect() as conn:
            has_mismatch, message = await conn.run_sync(
                lambda sync_conn: check_sqlite_schema_mismatch(sync_conn)
            )
        if has_mismatch:
            print(f"Schema mismatch: {message}", file=sys.stderr)
            await dispose_database()
            return 1

    await db.create_all()
    await dispose_database()
    print("schema ok")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
