"""
Single source of version: the first line of the repo root VERSION file.
Used by the API (/api/v1/meta/version, OpenAPI) and by tools/export_replay.py.
"""

from __future__ import annotations

from pathlib import Path


def _version_file_path() -> Path:
    # backend/version.py -> repo root
    return Path(__file__).resolve().parent.parent / "VERSION"


def get_version() -> str:
    """Return version string from VERSION file, or '0.0.0' if missing/unreadable."""
    path = _version_file_path()
    if not path.is_file():
        return "0.0.0"
    try:
        raw = path.read_text(encoding="utf-8").strip()
    except OSError:
        return "0.0.0"
    return raw.splitlines()[0].strip() if raw else "0.0.0"
