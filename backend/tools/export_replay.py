"""
Reconstruct one replay against the configured database and write it as JSON.
Usage (from backend dir):
  python -m tools.export_replay --match-id ID --frame-start 0 --frame-end 119 [--out replay.json] [--no-cache]
Exit code 0 on success, 1 on a replay error (message on stderr).
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

# Allow running from repo root or backend
_backend = Path(__file__).resolve().parent.parent
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

from core.config import get_settings
from core.database import init_database, dispose_database
from core.logging import setup_logging
from replay.errors import ReplayError
from replay.request import parse_replay_request
from replay.schema import serialize_snapshot
from replay.service import build_replay_service
from storage.sql_blob_store import SqlBlobStore


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Export a reconstructed replay as JSON.")
    parser.add_argument("--match-id", required=True)
    parser.add_argument("--frame-start", type=int, required=True)
    parser.add_argument("--frame-end", type=int, required=True)
    parser.add_argument("--out", default="-", help="Output file, or - for stdout (default)")
    parser.add_argument("--no-cache", action="store_true", help="Reconstruct without reading or writing the cache")
    return parser.parse_args(argv)


async def export_replay(
    match_id: str,
    frame_start: int,
    frame_end: int,
    *,
    use_cache: bool = True,
) -> bytes:
    """Serialized replay for the range using the configured database and cache."""
    settings = get_settings()
    request = parse_replay_request(
        {"matchId": match_id, "frameStart": frame_start, "frameEnd": frame_end}
    )
    db = await init_database(settings.database_url)
    try:
        service = build_replay_service(settings, db)
        if use_cache and isinstance(service.cache.blob_store, SqlBlobStore):
            await service.cache.blob_store.ensure_table()
        if use_cache:
            snapshot = await service.get_replay(request)
        else:
            snapshot = await service.reconstruct(request)
    finally:
        await dispose_database()
    return serialize_snapshot(snapshot)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    setup_logging(get_settings())
    try:
        body = asyncio.run(
            export_replay(
                args.match_id,
                args.frame_start,
                args.frame_end,
                use_cache=not args.no_cache,
            )
        )
    except ReplayError as e:
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        return 1

    if args.out == "-":
        sys.stdout.write(body.decode("utf-8") + "\n")
    else:
        Path(args.out).write_bytes(body)
        print(f"Wrote {len(body)} bytes to {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
