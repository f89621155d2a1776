"""Key-value segment.

Organizes pieces inside the segment as a flat map from query id to piece.
Granularity is limited to whole queries: a subscriber cannot ask for one
field of a cached value.
"""

from __future__ import annotations

import abc
from collections.abc import Callable
from typing import Any

from pysegment import action_names
from pysegment.config import SegmentConfig
from pysegment.exceptions import SegmentSetupError
from pysegment.segment import ActionCreator, Comparator, Segment
from pysegment.state.compare import compare_piece
from pysegment.state.events import EventKind, Piece, SegmentEvent, now_ms
from pysegment.state.reducer import Reducer, make_map_reducer
from pysegment.thunk import Thunk


class MapSegment(Segment):
    """Segment whose state is a flat ``{query_id: Piece}`` mapping.

    Concrete subclasses provide two hooks:

    * :meth:`_generate_query_id` maps a query to a stable string.
    * :meth:`_generate_thunk_function` attaches the fetch work to a
      :class:`~pysegment.thunk.Thunk`.  The attached function must publish
      the result itself and return only after publishing.

    Everything else (event creators, reducer, comparator) is shared.
    """

    def __init__(
        self,
        config: SegmentConfig | None = None,
        *,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._config = config or SegmentConfig()
        self._clock = clock

        # Segment ids are unique per store, so they namespace the event types.
        segment_id = type(self).id()
        self._load_action_type = action_names.generate(segment_id, EventKind.LOAD)
        self._init_action_type = action_names.generate(segment_id, EventKind.INIT)
        self._clear_action_type = action_names.generate(segment_id, EventKind.CLEAR)

        self._action_creator = ActionCreator(
            clear=self._create_sync_clear_action,
            load=self._load,
        )
        self._reducer = make_map_reducer(
            self._load_action_type,
            self._init_action_type,
            self._clear_action_type,
        )

    @property
    def config(self) -> SegmentConfig:
        return self._config

    @property
    def load_action_type(self) -> str:
        return self._load_action_type

    @property
    def init_action_type(self) -> str:
        return self._init_action_type

    @property
    def clear_action_type(self) -> str:
        return self._clear_action_type

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def _generate_query_id(self, query: Any) -> str:
        """Generate a unique string for *query*; equal queries give equal ids."""
        raise SegmentSetupError(f"{type(self).__name__} must override _generate_query_id.")

    @abc.abstractmethod
    def _generate_thunk_function(self, thunk: Thunk) -> None:
        """Attach the fetch work to ``thunk.func``."""
        raise SegmentSetupError(f"{type(self).__name__} must override _generate_thunk_function.")

    # ------------------------------------------------------------------
    # Event creators
    # ------------------------------------------------------------------

    def query_id(self, query: Any) -> str:
        return self._generate_query_id(query)

    def _load(self, query: Any) -> Thunk:
        return self._create_load_action(query, self._generate_query_id(query))

    def _create_load_action(self, query: Any, query_id: str) -> Thunk:
        thunk = Thunk(type(self).id(), query_id, query, self._create_sync_load_action)
        self._generate_thunk_function(thunk)
        return thunk

    def _create_sync_load_action(self, query_id: str, data: Any, errors: Any = None) -> SegmentEvent:
        return SegmentEvent(
            type=self._load_action_type,
            query_id=query_id,
            payload=Piece.from_result(data, errors, updated=self._clock()),
        )

    def create_init_event(self, query_id: str) -> SegmentEvent:
        return SegmentEvent(
            type=self._init_action_type,
            query_id=query_id,
            payload=Piece.uninitialized(updated=self._clock()),
        )

    def _create_sync_clear_action(self) -> SegmentEvent:
        return SegmentEvent(type=self._clear_action_type)

    # ------------------------------------------------------------------
    # Store-facing accessors
    # ------------------------------------------------------------------

    def action_creator(self) -> ActionCreator:
        return self._action_creator

    def reducer(self) -> Reducer:
        return self._reducer

    def comparator(self) -> Comparator:
        return compare_piece

    def is_loaded(self, piece: Piece | None) -> bool:
        return piece is not None and piece.loaded
