"""In-memory segment store.

The store is the single writer of every segment state.  Events are applied
one at a time on the running event loop; fetch work runs concurrently and
rejoins only when its handler publishes.  Subscribers are told about a
query only when the segment comparator reports that its piece changed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pysegment.config import SegmentConfig
from pysegment.exceptions import SegmentError, SegmentSetupError
from pysegment.hydration import HydrationOption, dump_segment_state, load_segment_state, should_fetch
from pysegment.segment import ActionCreator, Segment
from pysegment.state.events import Piece, SegmentEvent, SegmentState
from pysegment.thunk import Thunk

_logger = logging.getLogger(__name__)

Listener = Callable[[Piece | None], None]


@dataclass(eq=False)
class Subscription:
    """A listener attached to one query of one segment."""

    store: SegmentStore
    segment_id: str
    query_id: str
    listener: Listener
    task: asyncio.Task[None] | None = None
    active: bool = field(default=True)

    @property
    def piece(self) -> Piece | None:
        return self.store.get_state(self.segment_id).get(self.query_id)

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self.store._remove_subscription(self)


class SegmentStore:
    """Holds segment states and routes events, loads and notifications.

    Usage::

        store = SegmentStore(config)
        store.register(UserSegment(config))
        sub = store.subscribe("user", {"username": "alice"}, on_user)
        await store.settle()
        sub.piece.data
    """

    def __init__(
        self,
        config: SegmentConfig | None = None,
        *,
        initial_state: Mapping[str, Mapping[str, Any]] | None = None,
    ) -> None:
        self._config = config or SegmentConfig()
        self._segments: dict[str, Segment] = {}
        self._states: dict[str, SegmentState] = {}
        self._subscriptions: dict[tuple[str, str], list[Subscription]] = {}
        self._pending: dict[tuple[str, str], asyncio.Task[None]] = {}
        self._initial_state = dict(initial_state or {})

    @property
    def config(self) -> SegmentConfig:
        return self._config

    # ------------------------------------------------------------------
    # Segments and state
    # ------------------------------------------------------------------

    def register(self, segment: Segment) -> Segment:
        """Add *segment*, seeding its state from hydration data when present."""
        segment_id = type(segment).id()
        if segment_id in self._segments:
            raise SegmentSetupError(f"Segment id {segment_id!r} is already registered.")
        self._segments[segment_id] = segment

        raw = self._initial_state.pop(segment_id, None)
        self._states[segment_id] = load_segment_state(raw) if raw else {}
        _logger.debug("Registered segment %s", segment_id)
        return segment

    def segment(self, segment_id: str) -> Segment:
        try:
            return self._segments[segment_id]
        except KeyError:
            raise SegmentError(f"Unknown segment: {segment_id!r}") from None

    def get_state(self, segment_id: str) -> SegmentState:
        self.segment(segment_id)
        return self._states[segment_id]

    def action_creator(self, segment_id: str) -> ActionCreator:
        return self.segment(segment_id).action_creator()

    def dump_state(self) -> dict[str, dict[str, dict[str, Any]]]:
        """JSON-ready snapshot of every segment, for client hydration."""
        return {segment_id: dump_segment_state(state) for segment_id, state in self._states.items()}

    # ------------------------------------------------------------------
    # Event timeline
    # ------------------------------------------------------------------

    def publish(self, event: SegmentEvent) -> None:
        """Apply *event* to every segment, then notify changed subscriptions."""
        changed: list[tuple[str, SegmentState, SegmentState]] = []
        for segment_id, segment in self._segments.items():
            prev_state = self._states[segment_id]
            state = segment.reducer()(prev_state, event)
            if state is not prev_state:
                self._states[segment_id] = state
                changed.append((segment_id, prev_state, state))

        _logger.debug("Published %s (%s)", event.type, event.query_id)
        for segment_id, prev_state, state in changed:
            self._notify(segment_id, prev_state, state)

    async def dispatch(self, action: Thunk | SegmentEvent) -> None:
        """Run a fetch handler or publish a plain event."""
        if isinstance(action, Thunk):
            await action(self.publish)
        elif isinstance(action, SegmentEvent):
            self.publish(action)
        else:
            raise SegmentSetupError(f"Cannot dispatch {type(action).__name__}.")

    def _notify(self, segment_id: str, prev_state: SegmentState, state: SegmentState) -> None:
        comparator = self._segments[segment_id].comparator()
        for (sub_segment_id, query_id), subscriptions in list(self._subscriptions.items()):
            if sub_segment_id != segment_id:
                continue
            result = comparator(prev_state, state, query_id)
            if result is None:
                continue
            for subscription in list(subscriptions):
                # Removed by an earlier listener in this round.
                if not subscription.active:
                    continue
                try:
                    subscription.listener(result[0])
                except Exception:
                    _logger.warning("Listener for %s/%s failed", segment_id, query_id, exc_info=True)

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(
        self,
        segment_id: str,
        query: Any,
        listener: Listener,
        hydration: HydrationOption | None = None,
    ) -> Subscription:
        """Subscribe *listener* to *query* and start loading it if needed.

        A load is scheduled unless the piece is already loaded, a load for
        the same query id is in flight, or this is a server render and the
        hydration option opts out.  Must be called from a running loop when a
        load can be scheduled.
        """
        segment = self.segment(segment_id)
        query_id = segment.query_id(query)
        key = (segment_id, query_id)

        # Seeds a placeholder unless a load is already running; no-op once loaded.
        if key not in self._pending:
            self.publish(segment.create_init_event(query_id))

        subscription = Subscription(self, segment_id, query_id, listener)
        self._subscriptions.setdefault(key, []).append(subscription)

        if segment.is_loaded(self._states[segment_id].get(query_id)):
            return subscription

        if not should_fetch(self._config.render_type, hydration, default=self._config.server_should_fetch):
            _logger.debug("Skipping server fetch for %s/%s", segment_id, query_id)
            return subscription

        task = self._pending.get(key)
        if task is None:
            thunk = segment.action_creator().load(query)
            task = asyncio.get_running_loop().create_task(self._run_load(key, thunk))
            task.add_done_callback(self._log_load_failure)
            self._pending[key] = task
        subscription.task = task
        return subscription

    async def _run_load(self, key: tuple[str, str], thunk: Thunk) -> None:
        try:
            await self.dispatch(thunk)
        finally:
            self._pending.pop(key, None)

    @staticmethod
    def _log_load_failure(task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _logger.error("Load task failed: %s", exc, exc_info=exc)

    def _remove_subscription(self, subscription: Subscription) -> None:
        key = (subscription.segment_id, subscription.query_id)
        subscriptions = self._subscriptions.get(key)
        if not subscriptions:
            return
        if subscription in subscriptions:
            subscriptions.remove(subscription)
        if not subscriptions:
            del self._subscriptions[key]

    async def settle(self) -> None:
        """Wait until no load is in flight.

        Setup defects raised by a handler propagate from here.
        """
        while self._pending:
            await asyncio.gather(*list(self._pending.values()))
