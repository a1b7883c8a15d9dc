"""Timer-backed events for composing timeouts.

Combinators have no built-in timeout; race against a timer instead:

    >>> deadline = timer(5.0, "timeout")
    >>> tree = await any_of([work(), deadline]).wait()
    >>> timed_out = tree.has(deadline)
"""

from __future__ import annotations

import asyncio
from typing import Any

from waitcase.foundation.errors import CombinatorException, ErrorCode

from .event import Event


def timer(delay: float, *values: Any) -> Event:
    """Event that fires once with ``values`` after ``delay`` seconds.

    Requires a running event loop.
    """
    if delay < 0:
        raise CombinatorException.create(f"timer delay must be >= 0, got {delay}", ErrorCode.INVALID_ARGUMENTS)
    event = Event(f"timer-{delay:g}s")
    asyncio.get_running_loop().call_later(delay, event.emit, *values)
    return event
