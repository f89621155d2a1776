"""Immutable value models for segment state and events.

A segment state is a plain ``dict`` mapping query ids to :class:`Piece`
objects.  Neither the mapping nor its pieces are edited once published:
every transition builds a new mapping and shares untouched pieces by
reference, so ``is`` doubles as a change test.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


def now_ms() -> int:
    """Current epoch timestamp in milliseconds."""
    return int(time.time() * 1000)


class EventKind(StrEnum):
    LOAD = "LOAD"
    INIT = "INIT"
    CLEAR = "CLEAR"


class Piece(BaseModel):
    """Cached value, error, freshness and load status for one query.

    Parameters
    ----------
    data : Any
        Fetched value, ``None`` until a fetch completes.
    updated : int
        Epoch milliseconds of the transition that produced this piece.
    errors : Any
        ``None`` on success, otherwise the error payload of the fetch.
    loaded : bool
        ``True`` once a fetch completed without errors.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    data: Any = None
    updated: int = 0
    errors: Any = None
    loaded: bool = False

    @model_validator(mode="after")
    def _loaded_implies_no_errors(self) -> Piece:
        if self.loaded and self.errors is not None:
            raise ValueError("a loaded piece cannot carry errors")
        return self

    @classmethod
    def uninitialized(cls, updated: int | None = None) -> Piece:
        return cls(updated=now_ms() if updated is None else updated)

    @classmethod
    def from_result(cls, data: Any, errors: Any = None, updated: int | None = None) -> Piece:
        return cls(
            data=data,
            updated=now_ms() if updated is None else updated,
            errors=errors,
            loaded=errors is None,
        )

    @property
    def failed(self) -> bool:
        """Whether the last fetch for this query ended with errors."""
        return self.errors is not None


SegmentState = Mapping[str, Piece]
"""Query id to piece mapping owned by the store; never mutated in place."""


class SegmentEvent(BaseModel):
    """A state transition to apply to one segment.

    ``query_id`` and ``payload`` are set for ``LOAD`` and ``INIT`` events and
    left empty for ``CLEAR``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: str
    query_id: str | None = None
    payload: Piece | None = None
