"""Classification of combinator inputs into Events and Tasks."""

from __future__ import annotations

import inspect
from enum import StrEnum

from waitcase.foundation.errors import InvalidAwaitable
from waitcase.runtime.signals import Event


class AwaitableKind(StrEnum):
    """What a combinator input turned out to be."""
    EVENT = "event"
    TASK = "task"
    INVALID = "invalid"


def classify(obj: object) -> AwaitableKind:
    """Resolve obj into the Event | Task union.

    Tasks are anything asyncio can await once: coroutine objects, futures,
    asyncio tasks and objects implementing ``__await__``. Coroutine *functions*
    are not tasks; call them first or go through task_to_event().
    """
    if isinstance(obj, Event):
        return AwaitableKind.EVENT
    if inspect.isawaitable(obj):
        return AwaitableKind.TASK
    return AwaitableKind.INVALID


def require_awaitable(obj: object, index: int | None = None) -> AwaitableKind:
    """Like classify(), but raises InvalidAwaitable instead of returning INVALID."""
    if (kind := classify(obj)) is AwaitableKind.INVALID:
        raise InvalidAwaitable(obj, index)
    return kind
