"""JSON-over-HTTP transport used by :class:`~pysegment.segments.http.HttpSegment`."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pysegment.config import SegmentConfig
from pysegment.exceptions import SegmentTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by HTTP segments.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`JsonTransport`) concrete.
    """

    async def get_json(self, path: str, params: Mapping[str, Any]) -> Any: ...


class JsonTransport:
    """GETs JSON documents relative to ``config.base_url``."""

    def __init__(self, config: SegmentConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _url(self, path: str) -> str:
        return f"{self._config.base_url.rstrip('/')}/{path.lstrip('/')}"

    async def get_json(self, path: str, params: Mapping[str, Any]) -> Any:
        url = self._url(path)
        headers = {"accept": "application/json", "user-agent": self._config.user_agent}
        query = {key: str(value) for key, value in params.items() if value is not None}

        _logger.debug("GET %s params=%s", url, query)

        try:
            async with self._http.get(url, params=query, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise SegmentTransportError(
                        f"HTTP {resp.status} from {path}: {text[:200]}",
                        status_code=resp.status,
                        path=path,
                    )
        except SegmentTransportError:
            raise
        except TimeoutError as exc:
            raise SegmentTransportError(f"Request to {path} timed out", path=path) from exc
        except aiohttp.ClientError as exc:
            raise SegmentTransportError(f"Request to {path} failed: {exc}", path=path) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise SegmentTransportError(
                f"Invalid JSON from {path}: {text[:200]}",
                status_code=200,
                path=path,
            ) from exc
