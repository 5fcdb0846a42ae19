# Ensure backend is at sys.path[0] when collecting integration tests; shared seeded database
import sys
from pathlib import Path

_backend = Path(__file__).resolve().parent.parent.parent
_str_backend = str(_backend)
if _str_backend not in sys.path:
    sys.path.insert(0, _str_backend)

import pytest_asyncio

from core.database import DatabaseManager
from seed.seed_sample_match import seed_sample_match


@pytest_asyncio.fixture
async def seeded_db(tmp_path):
    """Temp-file SQLite with every table and the sample match seeded."""
    db = DatabaseManager(f"sqlite+aiosqlite:///{tmp_path / 'replays.db'}")
    await db.init()
    await db.create_all()
    async with db.session() as session:
        await seed_sample_match(session)
    yield db
    await db.dispose()
