"""Segment backed by an async fetch callable."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pysegment.exceptions import SegmentSetupError
from pysegment.query_id import canonical_query_id
from pysegment.segments.map import MapSegment
from pysegment.thunk import Publish, Thunk


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Outcome of a fetch that reports soft errors instead of raising."""

    data: Any = None
    errors: Any = None


FetchFunction = Callable[[Any], Awaitable[Any]]


class FunctionSegment(MapSegment):
    """Map segment that delegates fetching to :meth:`fetch`.

    Subclasses either override :meth:`fetch` or pass ``fetch=`` to the
    constructor.  ``fetch`` returns the data directly or a
    :class:`FetchResult`; raising marks the piece as failed.

    Usage::

        class UserSegment(FunctionSegment):
            segment_id = "user"

            async def fetch(self, query):
                return await users.get(query["username"])
    """

    def __init__(self, *args: Any, fetch: FetchFunction | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        if fetch is None and type(self).fetch is FunctionSegment.fetch:
            raise SegmentSetupError(f"{type(self).__name__} has no fetch function; override fetch() or pass fetch=.")
        self._fetch = fetch

    def _generate_query_id(self, query: Any) -> str:
        return canonical_query_id(query)

    async def fetch(self, query: Any) -> Any:
        if self._fetch is None:
            raise SegmentSetupError(f"{type(self).__name__} has no fetch function.")
        return await self._fetch(query)

    def _generate_thunk_function(self, thunk: Thunk) -> None:
        async def run(publish: Publish) -> None:
            result = await self.fetch(thunk.query)
            if isinstance(result, FetchResult):
                event = self._create_sync_load_action(thunk.query_id, result.data, result.errors)
            else:
                event = self._create_sync_load_action(thunk.query_id, result)
            publish(event)

        thunk.func = run
