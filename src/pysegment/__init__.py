"""pysegment - Query-keyed async segment cache shared by server and client renders."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pysegment")
except PackageNotFoundError:
    __version__ = "0+local"
from pysegment.config import SegmentConfig
from pysegment.exceptions import (
    QueryIdError,
    SegmentConfigError,
    SegmentError,
    SegmentFetchError,
    SegmentSetupError,
    SegmentTransportError,
)
from pysegment.hydration import HydrationOption, RenderType
from pysegment.query_id import canonical_query_id
from pysegment.segment import ActionCreator, Segment
from pysegment.segments import FetchResult, FunctionSegment, HttpSegment, MapSegment
from pysegment.state.compare import compare_piece
from pysegment.state.events import EventKind, Piece, SegmentEvent, SegmentState
from pysegment.state.reducer import make_map_reducer
from pysegment.store import SegmentStore, Subscription
from pysegment.thunk import Thunk

__all__ = [
    "__version__",
    "ActionCreator",
    "EventKind",
    "FetchResult",
    "FunctionSegment",
    "HttpSegment",
    "HydrationOption",
    "MapSegment",
    "Piece",
    "QueryIdError",
    "RenderType",
    "Segment",
    "SegmentConfig",
    "SegmentConfigError",
    "SegmentError",
    "SegmentEvent",
    "SegmentFetchError",
    "SegmentSetupError",
    "SegmentState",
    "SegmentStore",
    "SegmentTransportError",
    "Subscription",
    "Thunk",
    "canonical_query_id",
    "compare_piece",
    "make_map_reducer",
]
