"""waitcase - combinators for waiting on events and asyncio tasks.

Merge any mix of broadcast events and one-shot tasks into a single event that
fires on the first completion (any_of) or on every completion (all_of). The
result is a ResultTree recording which input produced what, in completion
order, nesting when combinators wait on combinators.

Quick Start:
    >>> import asyncio
    >>> from waitcase import Event, all_of, any_of, map_async, timer
    >>>
    >>> async def fetch(n: int) -> int:
    ...     await asyncio.sleep(0.1 * n)
    ...     return n
    >>>
    >>> async def main() -> None:
    ...     clicked = Event("clicked")
    ...     tree = await any_of([clicked, fetch(1)]).wait()
    ...     print(tree.records[0].value)
    ...
    ...     squares = await map_async([1, 2, 3], lambda x: fetch(x))
    ...
    ...     # Race against a timeout
    ...     deadline = timer(5.0)
    ...     tree = await any_of([all_of([fetch(1), fetch(2)]), deadline]).wait()
    ...     timed_out = tree.has(deadline)

Configuration:
    >>> from waitcase import get_settings
    >>> get_settings().combinator.invalid_log_level
    'WARNING'
"""

from __future__ import annotations

__version__ = "0.1.0"

from .foundation.config import WaitcaseSettings, clear_settings_cache, get_settings
from .foundation.errors import CombinatorError, CombinatorException, ErrorCode, InvalidAwaitable
from .runtime.combinators import (
    AwaitableKind,
    Combinator,
    Failure,
    Leaf,
    LifetimeRegistry,
    Nested,
    ResultRecord,
    ResultTree,
    TaskBridge,
    all_of,
    any_of,
    classify,
    default_registry,
    event_to_task,
    map_async,
    task_to_event,
)
from .runtime.observability import configure_from_settings, configure_logging, get_logger
from .runtime.signals import Event, Subscription, timer

__all__ = [
    # Combinators
    "any_of", "all_of", "map_async", "task_to_event", "event_to_task", "Combinator", "TaskBridge",
    # Events
    "Event", "Subscription", "timer",
    # Results
    "ResultTree", "ResultRecord", "Leaf", "Nested", "Failure",
    # Inputs & lifetime
    "AwaitableKind", "classify", "LifetimeRegistry", "default_registry",
    # Errors
    "ErrorCode", "CombinatorError", "CombinatorException", "InvalidAwaitable",
    # Config & logging
    "WaitcaseSettings", "get_settings", "clear_settings_cache",
    "configure_logging", "configure_from_settings", "get_logger",
]
