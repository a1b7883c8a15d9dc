"""Broadcast events: the signal capability combinators are built on.

An Event has any number of subscribers; every emission is delivered to every
current subscriber, synchronously and in subscription order. Subscriptions
made with ``once=True`` detach themselves before their callback runs.

Example:
    >>> clicked = Event("clicked")
    >>> clicked.subscribe(lambda x, y: print(x, y))
    >>> clicked.emit(3, 4)
    3 4
"""

from __future__ import annotations

import itertools
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from waitcase.runtime.observability import get_logger

if TYPE_CHECKING:
    import asyncio

Callback = Callable[..., Any]

_log = get_logger("waitcase.event")

_ids = itertools.count(1)


@dataclass(slots=True, eq=False)
class Subscription:
    """Handle returned by Event.subscribe()."""

    event: Event = field(repr=False)
    callback: Callback
    once: bool = False
    active: bool = True

    def cancel(self) -> bool:
        """Detach from the event. Returns False if already detached."""
        return self.event.unsubscribe(self)


class Event:
    """Broadcastable signal carrying zero or more values per emission."""

    __slots__ = ("name", "_subs", "__weakref__")

    def __init__(self, name: str | None = None) -> None:
        self.name = name or f"event-{next(_ids)}"
        self._subs: list[Subscription] = []

    def __repr__(self) -> str:
        return f"Event({self.name!r}, subscribers={len(self._subs)})"

    @property
    def subscriber_count(self) -> int:
        return len(self._subs)

    def subscribe(self, callback: Callback, *, once: bool = False) -> Subscription:
        """Register callback for future emissions."""
        sub = Subscription(self, callback, once)
        self._subs.append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> bool:
        if not sub.active:
            return False
        sub.active = False
        try:
            self._subs.remove(sub)
        except ValueError:
            return False
        return True

    def emit(self, *values: Any) -> int:
        """Deliver values to every current subscriber. Returns the number notified.

        Subscribers added during emission are not notified until the next one.
        A subscriber that raises is logged and the remaining ones still run.
        """
        notified = 0
        for sub in tuple(self._subs):
            if not sub.active:
                continue
            if sub.once:
                self.unsubscribe(sub)
            try:
                sub.callback(*values)
            except Exception:
                # later subscribers still receive this emission
                _log.exception("subscriber raised", signal=self.name, callback=repr(sub.callback))
            notified += 1
        return notified

    def wait(self) -> asyncio.Future[Any]:
        """Future resolving with the next emission (see event_to_task)."""
        from waitcase.runtime.combinators.bridge import event_to_task
        return event_to_task(self)


def collapse(values: tuple[Any, ...]) -> Any:
    """Fold emitted values into one result: none -> None, one -> itself, many -> tuple."""
    match len(values):
        case 0: return None
        case 1: return values[0]
        case _: return values
