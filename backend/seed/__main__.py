"""CLI entry: seed the sample match. Usage: python -m seed [--match-id ID] [--frames N] (from backend dir)."""
from __future__ import annotations

import argparse
import asyncio
import sys

from core.config import get_settings
from core.database import init_database, dispose_database
from seed.seed_sample_match import SAMPLE_FRAME_COUNT, SAMPLE_MATCH_ID, seed_sample_match


async def _main(match_id: str, frames: int) -> int:
    settings = get_settings()
    manager = await init_database(settings.database_url)
    await manager.create_all()
    async with manager.session() as session:
        counts = await seed_sample_match(session, match_id=match_id, frame_count=frames)
    await dispose_database()
    print("Seed complete:", counts)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed a synthetic match into the replay source tables.")
    parser.add_argument("--match-id", default=SAMPLE_MATCH_ID)
    parser.add_argument("--frames", type=int, default=SAMPLE_FRAME_COUNT)
    args = parser.parse_args()
    exit_code = asyncio.run(_main(args.match_id, args.frames))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
