"""
Schema-driven decoding of string-typed query results into typed records.

Every numeric and boolean coercion of query output happens here. Cells that
do not parse become NaN instead of raising; the typed replay records reject
NaN, so bad data is reported where it is consumed.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from query.types import QueryResult


class Coercion(str, Enum):
    IDENTITY = "identity"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"


Schema = Mapping[str, Coercion]


def _to_integer(text: str) -> float | int:
    try:
        return int(text)
    except ValueError:
        pass
    try:
        value = float(text)
    except ValueError:
        return math.nan
    # "3.0" is an integer; "3.5" is passed through for the consumer to reject
    if value.is_integer():
        return int(value)
    return value


def _to_number(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        return math.nan


def coerce(cell: Optional[str], coercion: Coercion) -> Any:
    """Coerce one cell. Missing cells are treated as the empty string."""
    text = "" if cell is None else cell
    if coercion is Coercion.BOOLEAN:
        return text == "true"
    if coercion is Coercion.INTEGER:
        return _to_integer(text.strip())
    if coercion is Coercion.NUMBER:
        return _to_number(text.strip())
    return text


def normalize_rows(result: QueryResult, schema: Schema) -> List[Dict[str, Any]]:
    """Decode every data row into a dict keyed by header name.

    Fields absent from schema pass through unchanged.
    """
    records: List[Dict[str, Any]] = []
    for row in result.rows:
        record: Dict[str, Any] = {}
        for idx, name in enumerate(result.header):
            cell = row[idx] if idx < len(row) else ""
            record[name] = coerce(cell, schema.get(name, Coercion.IDENTITY))
        records.append(record)
    return records
