"""Owning registry for in-flight combinators and task bridges.

The event loop only keeps weak references to tasks, and callers are not
required to hold on to a combinator after subscribing to its completion event.
Every combinator and bridge therefore adopts itself into a registry on
construction and releases itself right after its completion event fires.

Handles are generation-checked: releasing a handle twice, or releasing a
handle whose slot was reused, is a no-op.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class Handle:
    """Generation-checked reference to a registry slot."""

    slot: int
    generation: int


class LifetimeRegistry(Generic[T]):
    """Slot table keeping adopted objects alive until released."""

    __slots__ = ("_objects", "_generations", "_free")

    def __init__(self) -> None:
        self._objects: list[T | None] = []
        self._generations: list[int] = []
        self._free: list[int] = []

    def adopt(self, obj: T) -> Handle:
        """Keep ``obj`` alive until the returned handle is released."""
        if self._free:
            slot = self._free.pop()
            self._objects[slot] = obj
        else:
            slot = len(self._objects)
            self._objects.append(obj)
            self._generations.append(0)
        return Handle(slot, self._generations[slot])

    def release(self, handle: Handle) -> bool:
        """Drop the object behind ``handle``. Returns False for stale handles."""
        if not self.valid(handle):
            return False
        self._objects[handle.slot] = None
        self._generations[handle.slot] += 1
        self._free.append(handle.slot)
        return True

    def valid(self, handle: Handle) -> bool:
        return (
            0 <= handle.slot < len(self._objects)
            and self._generations[handle.slot] == handle.generation
            and self._objects[handle.slot] is not None
        )

    def get(self, handle: Handle) -> T | None:
        return self._objects[handle.slot] if self.valid(handle) else None

    def active(self) -> int:
        """Number of live objects."""
        return len(self._objects) - len(self._free)

    def live(self) -> list[T]:
        return [o for o in self._objects if o is not None]


_DEFAULT: LifetimeRegistry[object] = LifetimeRegistry()


def default_registry() -> LifetimeRegistry[object]:
    """Process-wide registry used by combinators and bridges."""
    return _DEFAULT
