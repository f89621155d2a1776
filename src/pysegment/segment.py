"""Segment contract.

A segment is a named slice of cached state.  The store only talks to
segments through this interface: it reads the segment id, folds events with
:meth:`Segment.reducer`, builds actions with :meth:`Segment.action_creator`
and decides which subscribers to notify with :meth:`Segment.comparator`.
"""

from __future__ import annotations

import abc
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar

from pysegment.exceptions import SegmentSetupError
from pysegment.state.events import Piece, SegmentEvent, SegmentState
from pysegment.state.reducer import Reducer
from pysegment.thunk import Thunk

Comparator = Callable[[SegmentState | None, SegmentState | None, str], list[Piece | None] | None]


@dataclass(frozen=True, slots=True)
class ActionCreator:
    """Public event creators exposed by a segment."""

    clear: Callable[[], SegmentEvent]
    load: Callable[[Any], Thunk]


class Segment(abc.ABC):
    """Base class for every segment type.

    Subclasses set ``segment_id`` to a name that is unique within the store.
    """

    segment_id: ClassVar[str | None] = None

    @classmethod
    def id(cls) -> str:
        segment_id = cls.segment_id
        if not segment_id:
            raise SegmentSetupError(f"{cls.__name__} must define a non-empty segment_id.")
        return segment_id

    def __repr__(self) -> str:
        return f"{type(self).__name__}(segment_id={type(self).segment_id!r})"

    @abc.abstractmethod
    def query_id(self, query: Any) -> str:
        """Stable identity for *query* within this segment."""

    @abc.abstractmethod
    def reducer(self) -> Reducer: ...

    @abc.abstractmethod
    def action_creator(self) -> ActionCreator: ...

    @abc.abstractmethod
    def comparator(self) -> Comparator: ...

    @abc.abstractmethod
    def create_init_event(self, query_id: str) -> SegmentEvent:
        """Placeholder event the store publishes on first subscription."""

    @abc.abstractmethod
    def is_loaded(self, piece: Piece | None) -> bool: ...
