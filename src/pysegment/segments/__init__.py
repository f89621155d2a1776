"""Bundled segment types."""

from pysegment.segments.function import FetchResult, FunctionSegment
from pysegment.segments.http import HttpSegment
from pysegment.segments.map import MapSegment

__all__ = [
    "FetchResult",
    "FunctionSegment",
    "HttpSegment",
    "MapSegment",
]
