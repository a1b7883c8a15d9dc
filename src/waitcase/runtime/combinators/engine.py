"""Combinator engine: merge heterogeneous awaitables into one event.

    - any_of: fires with the first completion
    - all_of: fires once every valid input has completed

Both return an Event that fires exactly once with a sealed ResultTree. Since
that is an ordinary Event, combinators nest:

    >>> inner = all_of([fetch_a(), fetch_b()])
    >>> tree = await any_of([inner, timer(2.0)]).wait()
    >>> tree.has(inner)
    True

Inputs that are neither Events nor Tasks are reported and excluded from the
target count; they never block completion.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Iterable
from functools import partial
from typing import Any

from waitcase.foundation.config import get_settings
from waitcase.foundation.errors import CombinatorError
from waitcase.runtime.observability import get_logger
from waitcase.runtime.observability.logging import level_number
from waitcase.runtime.signals import Event, Subscription, collapse

from .awaitables import AwaitableKind, classify
from .bridge import TaskBridge
from .lifetime import LifetimeRegistry, default_registry
from .result import ResultRecord, ResultTree, wrap

_log = get_logger("waitcase.combinator")


class Combinator:
    """One any/all wait over a sequence of awaitables.

    Attributes:
        kind: "any" or "all"
        target: Completions needed before ``completed`` fires
        tree: Result tree being accumulated
        completed: Event fired once with the sealed tree
        errors: Reports for inputs that were excluded
    """

    __slots__ = ("kind", "target", "tree", "completed", "errors", "done",
                 "_feed", "_subs", "_registry", "_handle", "_log")

    def __init__(
        self,
        awaitables: Iterable[object],
        *,
        first: bool = False,
        name: str | None = None,
        registry: LifetimeRegistry[object] | None = None,
    ) -> None:
        self.kind = "any" if first else "all"
        self._log = _log.bind(mode=self.kind, **({"combinator": name} if name else {}))
        valid = self._validate(awaitables)
        self.target = min(1, len(valid)) if first else len(valid)
        self.tree = ResultTree()
        self.completed = Event(name or f"{self.kind}-completed")
        self.done = False
        self._feed = Event(f"{self.completed.name}:feed")
        self._feed.subscribe(self._accumulate)
        self._subs: list[Subscription] = []
        self._registry = registry or default_registry()
        self._handle = self._registry.adopt(self)
        self._log.debug("combinator started", inputs=len(valid), target=self.target, skipped=len(self.errors))

        if self.target == 0:
            self._complete_empty()
            return
        started = 0
        try:
            for awaited, kind in valid:
                source = awaited if kind is AwaitableKind.EVENT else TaskBridge(awaited, registry=self._registry).completed
                self._subs.append(source.subscribe(partial(self._forward, awaited), once=True))
                started += 1
        except BaseException:
            self._registry.release(self._handle)
            for awaited, _ in valid[started:]:
                if inspect.iscoroutine(awaited):
                    awaited.close()
            raise

    def __repr__(self) -> str:
        return f"Combinator({self.kind}, {len(self.tree)}/{self.target}, done={self.done})"

    def _validate(self, awaitables: Iterable[object]) -> list[tuple[object, AwaitableKind]]:
        level = level_number(get_settings().combinator.invalid_log_level)
        valid: list[tuple[object, AwaitableKind]] = []
        errors: list[CombinatorError] = []
        for index, obj in enumerate(awaitables):
            if (kind := classify(obj)) is AwaitableKind.INVALID:
                err = CombinatorError.invalid_awaitable(obj, index)
                errors.append(err)
                self._log.log(level, "invalid awaitable skipped", **err.model_dump(exclude_none=True))
                continue
            valid.append((obj, kind))
        self.errors = tuple(errors)
        return valid

    def _forward(self, awaited: object, *values: Any) -> None:
        self._feed.emit(ResultRecord(awaited, wrap(collapse(values))))

    def _accumulate(self, record: ResultRecord) -> None:
        if self.done:
            return
        self.tree.append(record)
        if len(self.tree) >= self.target:
            self._complete()

    def _complete_empty(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._complete()
        else:
            loop.call_soon(self._complete)

    def _complete(self) -> None:
        if self.done:
            return
        self.done = True
        # any_of leaves other inputs running; their late completions go nowhere
        for sub in self._subs:
            sub.cancel()
        self._subs.clear()
        self.tree.seal()
        self._log.debug("combinator completed", size=len(self.tree), target=self.target)
        try:
            self.completed.emit(self.tree)
        finally:
            self._registry.release(self._handle)


def any_of(awaitables: Iterable[object], *, name: str | None = None) -> Event:
    """Event firing once with a one-record tree for the first input to complete.

    Example:
        >>> tree = await any_of([server_ready, timer(10.0)]).wait()
        >>> started = tree.has(server_ready)
    """
    return Combinator(awaitables, first=True, name=name).completed


def all_of(awaitables: Iterable[object], *, name: str | None = None) -> Event:
    """Event firing once every valid input has completed.

    Records are in completion order. ``all_of([])`` fires on the next loop
    iteration (immediately when no loop is running) with an empty tree.
    """
    return Combinator(awaitables, first=False, name=name).completed
