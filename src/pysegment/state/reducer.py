"""Pure state-transition function for key-value segments.

Transitions never edit the incoming state.  ``LOAD`` and effective
``INIT`` events return a new top-level mapping that shares every untouched
piece with the previous one; events that change nothing return the very
same object.  The change detector in :mod:`pysegment.state.compare` relies
on both properties.
"""

from __future__ import annotations

from collections.abc import Callable

from pysegment.state.events import Piece, SegmentEvent, SegmentState

Reducer = Callable[[SegmentState | None, SegmentEvent], SegmentState]


def copy_state(state: SegmentState) -> dict[str, Piece]:
    """Shallow copy: new mapping, same piece objects."""
    return dict(state)


def make_map_reducer(load_type: str, init_type: str, clear_type: str) -> Reducer:
    """Build the reducer for a segment owning the three given event types."""

    def transition(state: SegmentState | None, event: SegmentEvent) -> SegmentState:
        if state is None:
            state = {}

        if event.type == clear_type:
            return {}

        if event.type == load_type:
            new_state = copy_state(state)
            new_state[event.query_id] = event.payload
            return new_state

        if event.type == init_type:
            current = state.get(event.query_id)
            if current is None or not current.loaded:
                new_state = copy_state(state)
                new_state[event.query_id] = event.payload
                return new_state

        # Foreign event, or INIT that lost to a completed load.
        return state

    return transition
