"""Adapters between tasks and events.

- task_to_event: run a single-consumer task and broadcast its completion
- event_to_task: a one-shot future resolving with an event's next emission

Example:
    >>> done = task_to_event(fetch_user, 42)
    >>> done.subscribe(lambda user: print("a", user))
    >>> done.subscribe(lambda user: print("b", user))   # both see the same value
    >>>
    >>> clicks = Event("clicks")
    >>> x, y = await event_to_task(clicks)
"""

from __future__ import annotations

import asyncio
import inspect
import itertools
from collections.abc import Awaitable, Callable
from typing import Any

from waitcase.foundation.config import get_settings
from waitcase.foundation.errors import CombinatorError, CombinatorException, ErrorCode, InvalidAwaitable
from waitcase.runtime.observability import get_logger
from waitcase.runtime.signals import Event, collapse

from .lifetime import Handle, LifetimeRegistry, default_registry
from .result import Failure

_log = get_logger("waitcase.bridge")
_ids = itertools.count(1)


def _prepare(task: Awaitable[Any] | Callable[..., Awaitable[Any]], args: tuple[Any, ...],
             kwargs: dict[str, Any]) -> Awaitable[Any]:
    """Turn a task or an async callable plus arguments into something awaitable."""
    if inspect.isawaitable(task):
        if args or kwargs:
            if inspect.iscoroutine(task):
                task.close()
            raise CombinatorException.create(
                "arguments given for an already-created task", ErrorCode.INVALID_ARGUMENTS,
                kind=type(task).__name__,
            )
        return task
    if callable(task):
        produced = task(*args, **kwargs)
        if inspect.isawaitable(produced):
            return produced
        raise InvalidAwaitable(produced)
    raise InvalidAwaitable(task)


class TaskBridge:
    """Runs one task and re-exposes its completion as a broadcast event.

    The task starts on construction. ``completed`` fires exactly once with the
    return value, or with a Failure when the task raised or was cancelled.
    The bridge keeps itself alive in the lifetime registry until then.
    """

    __slots__ = ("task", "completed", "_registry", "_handle")

    def __init__(
        self,
        task: Awaitable[Any] | Callable[..., Awaitable[Any]],
        *args: Any,
        registry: LifetimeRegistry[object] | None = None,
        **kwargs: Any,
    ) -> None:
        awaitable = _prepare(task, args, kwargs)
        name = f"{get_settings().combinator.task_name_prefix}-bridge-{next(_ids)}"
        self.completed = Event(name)
        self._registry = registry or default_registry()
        if inspect.iscoroutine(awaitable):
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                awaitable.close()
                raise
            self.task: asyncio.Future[Any] = loop.create_task(awaitable, name=name)
        else:
            self.task = asyncio.ensure_future(awaitable)
        self._handle: Handle = self._registry.adopt(self)
        self.task.add_done_callback(self._finish)

    def __repr__(self) -> str:
        return f"TaskBridge({self.completed.name!r}, done={self.task.done()})"

    def _finish(self, task: asyncio.Future[Any]) -> None:
        error = asyncio.CancelledError() if task.cancelled() else task.exception()
        if error is not None:
            value: Any = Failure(error)
            report = CombinatorError.from_exception(error)
            _log.debug("task failed", bridge=self.completed.name, **report.model_dump(exclude_none=True))
        else:
            value = task.result()
        try:
            self.completed.emit(value)
        finally:
            self._registry.release(self._handle)


def task_to_event(task: Awaitable[Any] | Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any) -> Event:
    """Start task now and return an event firing once with its return value.

    ``task`` is either an awaitable (no arguments allowed) or an async callable
    invoked with ``args``/``kwargs``. Requires a running event loop.
    """
    return TaskBridge(task, *args, **kwargs).completed


def event_to_task(event: Event) -> asyncio.Future[Any]:
    """Future resolving with the next emission of event after this call.

    Multi-value emissions resolve to a tuple, empty ones to None. Other
    subscribers of the event are unaffected. Cancelling the future detaches it.
    """
    if not isinstance(event, Event):
        raise InvalidAwaitable(event)
    future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()

    def _resolve(*values: Any) -> None:
        if not future.done():
            future.set_result(collapse(values))

    sub = event.subscribe(_resolve, once=True)
    future.add_done_callback(lambda f: sub.cancel() if f.cancelled() else None)
    return future
