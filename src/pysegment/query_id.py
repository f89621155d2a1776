"""Deterministic query identities.

A query id keys the segment state and lets the store recognise two
subscriptions asking for the same thing.  Structurally equal queries must
map to the same string regardless of mapping key order.
"""

from __future__ import annotations

import dataclasses
import enum
import json
import math
from collections.abc import Mapping, Set
from typing import Any

from pydantic import BaseModel

from pysegment.exceptions import QueryIdError


def _normalize(value: Any) -> Any:
    """Reduce *value* to plain JSON types with a canonical ordering."""
    if value is None or isinstance(value, (bool, int, str)):
        return value
    if isinstance(value, enum.Enum):
        return _normalize(value.value)
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise QueryIdError(f"Non-finite float in query: {value!r}")
        if value.is_integer():
            return int(value)
        return value
    if isinstance(value, BaseModel):
        return _normalize(value.model_dump(mode="json"))
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return _normalize(dataclasses.asdict(value))
    if isinstance(value, Mapping):
        normalized: dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise QueryIdError(f"Query mapping keys must be strings, got {key!r}")
            normalized[key] = _normalize(item)
        return normalized
    if isinstance(value, Set):
        items = [_normalize(item) for item in value]
        return sorted(items, key=lambda item: json.dumps(item, sort_keys=True))
    if isinstance(value, (list, tuple)):
        return [_normalize(item) for item in value]
    raise QueryIdError(f"Unsupported value in query: {type(value).__name__}")


def canonical_query_id(query: Any) -> str:
    """Render *query* as compact JSON with sorted keys.

    Integral floats render as ints, so ``{"page": 1.0}`` and ``{"page": 1}``
    share an id.  Sequences and sets are not told apart: tuples, lists and
    sets with the same items (sets in sorted order) render as the same JSON
    array.

    >>> canonical_query_id({"b": 1, "a": [1, 2]})
    '{"a":[1,2],"b":1}'
    """
    return json.dumps(_normalize(query), sort_keys=True, separators=(",", ":"))
