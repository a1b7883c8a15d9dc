"""Tests for result trees, awaitable classification and the lifetime registry."""

from __future__ import annotations

import asyncio

import pytest

from waitcase import AwaitableKind, CombinatorException, ErrorCode, Event, classify
from waitcase.runtime.combinators import (
    Failure,
    Leaf,
    LifetimeRegistry,
    Nested,
    ResultRecord,
    ResultTree,
    require_awaitable,
)
from waitcase.runtime.combinators.result import wrap


def tree_of(*records: ResultRecord) -> ResultTree:
    tree = ResultTree()
    for record in records:
        tree.append(record)
    return tree


# ═════════════════════════════════════════════════════════════════════════════
# ResultTree
# ═════════════════════════════════════════════════════════════════════════════


def test_wrap_variants() -> None:
    inner = ResultTree()
    failure = Failure(ValueError())
    assert wrap(3) == Leaf(3)
    assert wrap(inner) == Nested(inner)
    assert wrap(failure) is failure


def test_sealed_tree_rejects_append() -> None:
    tree = tree_of(ResultRecord("a", Leaf(1))).seal()

    with pytest.raises(CombinatorException) as info:
        tree.append(ResultRecord("b", Leaf(2)))

    assert info.value.code is ErrorCode.TREE_SEALED
    assert len(tree) == 1


def test_has_uses_identity() -> None:
    key = ["mutable"]
    tree = tree_of(ResultRecord(key, Leaf(1)))
    assert tree.has(key)
    assert not tree.has(["mutable"])


def test_flatten_depth_first() -> None:
    a, b, c, d = object(), object(), object(), object()
    inner = tree_of(ResultRecord(b, Leaf("b")), ResultRecord(c, Leaf("c"))).seal()
    middle_event = Event()
    outer = tree_of(
        ResultRecord(a, Leaf("a")),
        ResultRecord(middle_event, Nested(inner)),
        ResultRecord(d, Failure(RuntimeError("d"))),
    )

    assert [r.awaited for r in outer.flatten()] == [a, b, c, d]
    assert outer.has(middle_event)
    assert outer.find(c).value == "c"
    assert outer.find(middle_event).value is inner
    assert outer.find(object()) is None
    assert [r.awaited for r in outer.failures()] == [d]


def test_record_accessors() -> None:
    ok = ResultRecord("x", Leaf(5))
    bad = ResultRecord("y", Failure(KeyError("k")))

    assert ok.ok and ok.value == 5 and ok.error is None and ok.unwrap() == 5
    assert not bad.ok and bad.value is None and isinstance(bad.error, KeyError)
    with pytest.raises(KeyError):
        bad.unwrap()


def test_records_snapshot_is_immutable() -> None:
    tree = tree_of(ResultRecord("a", Leaf(1)))
    snapshot = tree.records
    tree.append(ResultRecord("b", Leaf(2)))
    assert len(snapshot) == 1
    assert len(tree) == 2


# ═════════════════════════════════════════════════════════════════════════════
# classify
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_classify() -> None:
    async def coro() -> None:
        return None

    c = coro()
    future = asyncio.get_running_loop().create_future()

    assert classify(Event()) is AwaitableKind.EVENT
    assert classify(c) is AwaitableKind.TASK
    assert classify(future) is AwaitableKind.TASK
    assert classify(coro) is AwaitableKind.INVALID
    assert classify("text") is AwaitableKind.INVALID
    c.close()


def test_require_awaitable() -> None:
    assert require_awaitable(Event()) is AwaitableKind.EVENT
    with pytest.raises(CombinatorException) as info:
        require_awaitable(3.5, index=4)
    assert info.value.error.index == 4
    assert info.value.error.kind == "float"


# ═════════════════════════════════════════════════════════════════════════════
# LifetimeRegistry
# ═════════════════════════════════════════════════════════════════════════════


def test_registry_adopt_release() -> None:
    registry: LifetimeRegistry[object] = LifetimeRegistry()
    obj = object()
    handle = registry.adopt(obj)

    assert registry.active() == 1
    assert registry.get(handle) is obj
    assert registry.release(handle)
    assert registry.active() == 0
    assert registry.get(handle) is None


def test_registry_stale_handle() -> None:
    registry: LifetimeRegistry[object] = LifetimeRegistry()
    first = registry.adopt("first")
    registry.release(first)
    second = registry.adopt("second")

    assert second.slot == first.slot
    assert second.generation == first.generation + 1
    assert not registry.release(first)
    assert registry.live() == ["second"]
