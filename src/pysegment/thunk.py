"""Deferred fetch handlers.

A :class:`Thunk` binds one segment and one query id to the asynchronous work
that fills the piece for that query.  Segments attach the work as
``thunk.func``; the store awaits the thunk with its ``publish`` callable.

Protocol guarantees:

* exactly one terminal ``LOAD`` event is published per run;
* the awaitable resolves only after that event was published, so the store
  already holds the result when the caller resumes;
* fetch failures become a ``LOAD`` event with ``errors`` set and are not
  re-raised; setup defects are.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pysegment.exceptions import SegmentFetchError, SegmentSetupError
from pysegment.state.events import SegmentEvent

_logger = logging.getLogger(__name__)

Publish = Callable[[SegmentEvent], None]
ThunkFunction = Callable[[Publish], Awaitable[None]]
LoadEventFactory = Callable[[str, Any, Any], SegmentEvent]


def errors_from_exception(exc: BaseException) -> list[dict[str, Any]]:
    """Build the ``errors`` payload stored for a failed fetch."""
    if isinstance(exc, SegmentFetchError) and exc.errors is not None:
        errors = exc.errors
        return list(errors) if isinstance(errors, (list, tuple)) else [errors]
    return [{"type": type(exc).__name__, "message": str(exc)}]


class Thunk:
    """Asynchronous unit of work for one ``(segment_id, query_id)`` pair."""

    def __init__(
        self,
        segment_id: str,
        query_id: str,
        query: Any,
        load_event: LoadEventFactory,
    ) -> None:
        self.segment_id = segment_id
        self.query_id = query_id
        self.query = query
        self.func: ThunkFunction | None = None
        self._load_event = load_event
        self._started = False
        self._done = False

    def __repr__(self) -> str:
        return f"Thunk(segment_id={self.segment_id!r}, query_id={self.query_id!r})"

    @property
    def done(self) -> bool:
        return self._done

    async def __call__(self, publish: Publish) -> None:
        if self.func is None:
            raise SegmentSetupError(f"No thunk function attached to {self!r}; check _generate_thunk_function.")
        if self._started:
            raise SegmentSetupError(f"{self!r} was already dispatched.")
        self._started = True

        published = False

        def publish_once(event: SegmentEvent) -> None:
            nonlocal published
            if published:
                raise SegmentSetupError(f"{self!r} published more than one terminal event.")
            published = True
            publish(event)

        _logger.debug("Fetching %s/%s", self.segment_id, self.query_id)
        try:
            await self.func(publish_once)
        except SegmentSetupError:
            raise
        except Exception as exc:
            if published:
                _logger.warning(
                    "Fetch for %s/%s failed after publishing its result",
                    self.segment_id,
                    self.query_id,
                    exc_info=True,
                )
            else:
                _logger.warning(
                    "Fetch for %s/%s failed: %s",
                    self.segment_id,
                    self.query_id,
                    exc,
                    exc_info=_logger.isEnabledFor(logging.DEBUG),
                )
                publish_once(self._load_event(self.query_id, None, errors_from_exception(exc)))
        finally:
            self._done = True

        if not published:
            raise SegmentSetupError(f"{self!r} finished without publishing a LOAD event.")
