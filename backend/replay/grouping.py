from __future__ import annotations

from typing import Any, Dict, Hashable, Iterable, List, Mapping, TypeVar

R = TypeVar("R", bound=Mapping[str, Any])


def group_by_frame(records: Iterable[R], key: str = "frame_number") -> Dict[Hashable, List[R]]:
    """Group records by frame number in one pass.

    Groups appear in first-seen order and rows keep their relative input order
    within a group. No other ordering is applied.
    """
    groups: Dict[Hashable, List[R]] = {}
    for record in records:
        groups.setdefault(record[key], []).append(record)
    return groups
