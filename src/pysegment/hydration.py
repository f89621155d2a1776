"""Server/client hydration helpers.

The same component tree subscribes to the same queries on the server and on
the client.  The server fetches (unless a subscription opts out), dumps the
resulting segment states, and the client store starts from that dump so
already-loaded pieces are not fetched again.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict

from pysegment.state.events import Piece, SegmentState


class RenderType(StrEnum):
    SERVER = "server"
    CLIENT = "client"


class HydrationOption(BaseModel):
    """Per-subscription hydration behaviour.

    ``server_should_fetch=False`` leaves the query unfetched during server
    rendering; the client fetches it after mount.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    server_should_fetch: bool = True


def should_fetch(render_type: RenderType, option: HydrationOption | None, *, default: bool = True) -> bool:
    """Whether a subscription may trigger a load in the given render context."""
    if render_type != RenderType.SERVER:
        return True
    if option is None:
        return default
    return option.server_should_fetch


def dump_segment_state(state: SegmentState) -> dict[str, dict[str, Any]]:
    """JSON-ready copy of a segment state."""
    return {query_id: piece.model_dump(mode="json") for query_id, piece in state.items()}


def load_segment_state(raw: Mapping[str, Any]) -> dict[str, Piece]:
    """Rebuild a segment state from :func:`dump_segment_state` output."""
    return {str(query_id): Piece.model_validate(piece) for query_id, piece in raw.items()}
