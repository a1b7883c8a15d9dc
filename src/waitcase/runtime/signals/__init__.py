"""Broadcast events and timers."""

from .event import Event, Subscription, collapse
from .timer import timer

__all__ = ["Event", "Subscription", "collapse", "timer"]
