"""Segment that fetches pieces from a JSON HTTP endpoint."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

import aiohttp

from pysegment._transport import JsonTransport, Transport
from pysegment.config import SegmentConfig
from pysegment.exceptions import SegmentSetupError
from pysegment.query_id import canonical_query_id
from pysegment.segments.map import MapSegment
from pysegment.thunk import Publish, Thunk


class HttpSegment(MapSegment):
    """Map segment whose queries are query-string parameters for ``path``.

    Usage::

        class UserSegment(HttpSegment):
            segment_id = "user"
            path = "/api/users"

        async with aiohttp.ClientSession() as http:
            segment = UserSegment(config, http_session=http)

    A failed request (non-200, network error, invalid JSON) is stored as a
    piece with ``errors`` set.
    """

    path: ClassVar[str] = ""

    def __init__(
        self,
        config: SegmentConfig | None = None,
        *,
        transport: Transport | None = None,
        http_session: aiohttp.ClientSession | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(config, **kwargs)
        if transport is None:
            if http_session is None:
                raise SegmentSetupError(f"{type(self).__name__} needs a transport or an aiohttp session.")
            transport = JsonTransport(self.config, http_session)
        self._transport = transport

    def _generate_query_id(self, query: Any) -> str:
        return canonical_query_id(query)

    def _build_request(self, query: Any) -> tuple[str, Mapping[str, Any]]:
        """Return ``(path, params)`` for *query*."""
        if not isinstance(query, Mapping):
            raise SegmentSetupError(f"{type(self).__name__} expects mapping queries; override _build_request.")
        return type(self).path, query

    def _parse_response(self, body: Any) -> Any:
        return body

    def _generate_thunk_function(self, thunk: Thunk) -> None:
        async def run(publish: Publish) -> None:
            path, params = self._build_request(thunk.query)
            body = await self._transport.get_json(path, params)
            publish(self._create_sync_load_action(thunk.query_id, self._parse_response(body)))

        thunk.func = run
