from __future__ import annotations

import pytest

from pysegment.exceptions import SegmentFetchError, SegmentSetupError
from pysegment.state.events import Piece, SegmentEvent
from pysegment.thunk import Publish, Thunk, errors_from_exception


def _load_event(query_id: str, data: object, errors: object = None) -> SegmentEvent:
    return SegmentEvent(type="seg/LOAD", query_id=query_id, payload=Piece.from_result(data, errors, updated=1))


def _thunk() -> Thunk:
    return Thunk("seg", "Q1", {"id": 1}, _load_event)


@pytest.mark.asyncio
async def test_publishes_exactly_once_before_resolving() -> None:
    thunk = _thunk()
    published: list[SegmentEvent] = []

    async def run(publish: Publish) -> None:
        publish(_load_event(thunk.query_id, "data"))

    thunk.func = run
    await thunk(published.append)

    assert thunk.done
    assert len(published) == 1
    assert published[0].payload is not None
    assert published[0].payload.loaded is True


@pytest.mark.asyncio
async def test_fetch_failure_becomes_terminal_load_event() -> None:
    thunk = _thunk()
    published: list[SegmentEvent] = []

    async def run(publish: Publish) -> None:
        raise RuntimeError("backend down")

    thunk.func = run
    await thunk(published.append)

    assert len(published) == 1
    piece = published[0].payload
    assert piece is not None
    assert piece.loaded is False
    assert piece.data is None
    assert piece.errors == [{"type": "RuntimeError", "message": "backend down"}]


@pytest.mark.asyncio
async def test_fetch_error_payload_is_kept() -> None:
    thunk = _thunk()
    published: list[SegmentEvent] = []

    async def run(publish: Publish) -> None:
        raise SegmentFetchError("not found", errors={"code": 404})

    thunk.func = run
    await thunk(published.append)

    assert published[0].payload is not None
    assert published[0].payload.errors == [{"code": 404}]


@pytest.mark.asyncio
async def test_failure_after_publish_is_not_republished() -> None:
    thunk = _thunk()
    published: list[SegmentEvent] = []

    async def run(publish: Publish) -> None:
        publish(_load_event(thunk.query_id, "data"))
        raise RuntimeError("late")

    thunk.func = run
    await thunk(published.append)

    assert len(published) == 1
    assert published[0].payload is not None
    assert published[0].payload.loaded is True


@pytest.mark.asyncio
async def test_missing_function_is_setup_error() -> None:
    with pytest.raises(SegmentSetupError):
        await _thunk()(lambda _event: None)


@pytest.mark.asyncio
async def test_double_publish_is_setup_error() -> None:
    thunk = _thunk()

    async def run(publish: Publish) -> None:
        publish(_load_event(thunk.query_id, 1))
        publish(_load_event(thunk.query_id, 2))

    thunk.func = run
    with pytest.raises(SegmentSetupError):
        await thunk(lambda _event: None)


@pytest.mark.asyncio
async def test_returning_without_publish_is_setup_error() -> None:
    thunk = _thunk()

    async def run(publish: Publish) -> None:
        return None

    thunk.func = run
    with pytest.raises(SegmentSetupError):
        await thunk(lambda _event: None)


@pytest.mark.asyncio
async def test_thunk_runs_once() -> None:
    thunk = _thunk()

    async def run(publish: Publish) -> None:
        publish(_load_event(thunk.query_id, 1))

    thunk.func = run
    await thunk(lambda _event: None)
    with pytest.raises(SegmentSetupError):
        await thunk(lambda _event: None)


def test_errors_from_exception_wraps_single_payload() -> None:
    assert errors_from_exception(SegmentFetchError("x", errors="bad")) == ["bad"]
    assert errors_from_exception(ValueError("v")) == [{"type": "ValueError", "message": "v"}]
