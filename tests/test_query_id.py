from __future__ import annotations

import dataclasses
import enum

import pytest
from pydantic import BaseModel

from pysegment.exceptions import QueryIdError
from pysegment.query_id import canonical_query_id


class _Color(enum.Enum):
    RED = "red"


class _UserQuery(BaseModel):
    username: str
    fields: list[str] = []


@dataclasses.dataclass
class _Page:
    number: int
    size: int


def test_key_order_does_not_change_identity() -> None:
    assert canonical_query_id({"a": 1, "b": {"x": 1, "y": 2}}) == canonical_query_id({"b": {"y": 2, "x": 1}, "a": 1})


def test_structurally_equal_queries_share_identity() -> None:
    first = {"username": "alice"}
    second = dict(username="alice")
    assert first is not second
    assert canonical_query_id(first) == canonical_query_id(second)


def test_different_queries_get_different_identities() -> None:
    assert canonical_query_id({"username": "alice"}) != canonical_query_id({"username": "bob"})
    assert canonical_query_id("1") != canonical_query_id(1)
    assert canonical_query_id(None) != canonical_query_id("")


def test_compact_sorted_json() -> None:
    assert canonical_query_id({"b": 1, "a": [1, 2]}) == '{"a":[1,2],"b":1}'


def test_tuples_and_lists_are_equivalent() -> None:
    assert canonical_query_id((1, 2)) == canonical_query_id([1, 2])


def test_sets_are_order_independent() -> None:
    assert canonical_query_id({"tags": {"b", "a", "c"}}) == canonical_query_id({"tags": frozenset(["c", "a", "b"])})


def test_models_dataclasses_and_enums() -> None:
    assert canonical_query_id(_UserQuery(username="alice")) == canonical_query_id({"username": "alice", "fields": []})
    assert canonical_query_id(_Page(number=2, size=10)) == '{"number":2,"size":10}'
    assert canonical_query_id({"color": _Color.RED}) == '{"color":"red"}'


def test_non_string_keys_rejected() -> None:
    with pytest.raises(QueryIdError):
        canonical_query_id({1: "x"})


def test_non_finite_float_rejected() -> None:
    with pytest.raises(QueryIdError):
        canonical_query_id({"x": float("nan")})


def test_unsupported_object_rejected() -> None:
    with pytest.raises(QueryIdError):
        canonical_query_id({"x": object()})


def test_integral_floats_share_identity_with_ints() -> None:
    assert canonical_query_id({"a": 1}) == canonical_query_id({"a": 1.0})
    assert canonical_query_id({"page": [2.0, 3]}) == '{"page":[2,3]}'
    assert canonical_query_id({"a": 1.5}) != canonical_query_id({"a": 1})


def test_sets_and_sequences_render_alike() -> None:
    assert canonical_query_id(frozenset({2, 1})) == canonical_query_id([1, 2])
