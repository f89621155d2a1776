"""Fine-grained change detection between two segment states."""

from __future__ import annotations

from pysegment.state.events import Piece, SegmentState


def compare_piece(
    prev_state: SegmentState | None,
    state: SegmentState | None,
    query_id: str,
) -> list[Piece | None] | None:
    """Return ``[piece]`` when the piece for *query_id* changed, else ``None``.

    Uses identity only.  The reducer returns the same state object for
    no-op events and shares untouched pieces between states, so a piece
    that is the same object in both states did not change.
    """
    if prev_state is state:
        return None

    prev_piece = prev_state.get(query_id) if prev_state is not None else None
    piece = state.get(query_id) if state is not None else None
    if prev_piece is piece:
        return None

    return [piece]
