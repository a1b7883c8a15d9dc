"""Runtime layer: signals, combinators and observability."""

from .combinators import (
    Combinator,
    ResultRecord,
    ResultTree,
    all_of,
    any_of,
    event_to_task,
    map_async,
    task_to_event,
)
from .signals import Event, timer

__all__ = [
    "Combinator",
    "Event",
    "ResultRecord",
    "ResultTree",
    "all_of",
    "any_of",
    "event_to_task",
    "map_async",
    "task_to_event",
    "timer",
]
