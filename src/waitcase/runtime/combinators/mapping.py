"""Concurrent map over a sequence, built on all_of.

Example:
    >>> async def square(x: int) -> int:
    ...     await asyncio.sleep(random.random())
    ...     return x * x
    >>> await map_async([1, 2, 3, 4], square)
    [1, 4, 9, 16]
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Iterable
from typing import TypeVar, overload

from waitcase.foundation.errors import InvalidAwaitable

from .awaitables import AwaitableKind, classify
from .engine import all_of
from .result import ResultRecord

T = TypeVar("T")
U = TypeVar("U")


@overload
async def map_async(
    items: Iterable[T],
    factory: Callable[[T], Awaitable[U]],
    *,
    return_exceptions: bool = False,
) -> list[U]: ...


@overload
async def map_async(
    items: Iterable[T],
    factory: Callable[[T], Awaitable[U]],
    *,
    return_exceptions: bool = True,
) -> list[U | BaseException]: ...


async def map_async(
    items: Iterable[T],
    factory: Callable[[T], Awaitable[U]],
    *,
    return_exceptions: bool = False,
) -> list[U] | list[U | BaseException]:
    """Run factory(item) for every item concurrently; results in input order.

    Every task is started before any is awaited. Failures do not cut the wait
    short: once all tasks have settled, the first failure in input order is
    raised, or with ``return_exceptions=True`` each exception is placed in
    its slot.

    Raises:
        InvalidAwaitable: If factory returns something that is not a task
    """
    tasks = [factory(item) for item in items]
    if not tasks:
        return []
    for index, task in enumerate(tasks):
        if classify(task) is not AwaitableKind.TASK:
            _discard(tasks)
            raise InvalidAwaitable(task, index)

    tree = await all_of(tasks, name="map").wait()
    by_task: dict[int, ResultRecord] = {id(r.awaited): r for r in tree.records}

    results: list[U | BaseException] = []
    for task in tasks:
        record = by_task[id(task)]
        if record.ok:
            results.append(record.value)
        elif return_exceptions:
            results.append(record.error)  # type: ignore[arg-type]
        else:
            record.unwrap()
    return results


def _discard(tasks: list[object]) -> None:
    """Close coroutine objects that will never be scheduled."""
    for task in tasks:
        if inspect.iscoroutine(task):
            task.close()
