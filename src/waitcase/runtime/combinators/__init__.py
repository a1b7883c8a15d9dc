"""Combinators over events and tasks.

Key Components:
    - any_of / all_of: merge awaitables into one completion event
    - map_async: concurrent map preserving input order
    - task_to_event / event_to_task: convert between the two awaitable kinds
    - ResultTree / ResultRecord: completion-ordered, nestable results
    - LifetimeRegistry: keeps in-flight combinators alive without caller references

Example:
    >>> from waitcase import Event, all_of, any_of
    >>>
    >>> ready = Event("ready")
    >>> tree = await any_of([ready, load_config()]).wait()
    >>> first = tree.records[0].awaited
"""

from __future__ import annotations

from .awaitables import AwaitableKind, classify, require_awaitable
from .bridge import TaskBridge, event_to_task, task_to_event
from .engine import Combinator, all_of, any_of
from .lifetime import Handle, LifetimeRegistry, default_registry
from .mapping import map_async
from .result import Failure, Leaf, Nested, ResultRecord, ResultTree, ResultValue

__all__ = [
    # Engine
    "Combinator",
    "any_of",
    "all_of",
    "map_async",
    # Adapters
    "TaskBridge",
    "task_to_event",
    "event_to_task",
    # Inputs
    "AwaitableKind",
    "classify",
    "require_awaitable",
    # Results
    "ResultTree",
    "ResultRecord",
    "ResultValue",
    "Leaf",
    "Nested",
    "Failure",
    # Lifetime
    "Handle",
    "LifetimeRegistry",
    "default_registry",
]
