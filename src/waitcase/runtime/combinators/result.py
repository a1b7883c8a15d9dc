"""Result records and result trees produced by combinators.

A ResultTree collects one ResultRecord per completed awaitable, in completion
order. When a combinator waits on another combinator's completion event, the
inner tree is stored as a Nested result, so trees nest arbitrarily deep.

Example:
    >>> tree = await all_of([all_of([a, b]), c]).wait()
    >>> tree.has(a)
    True
    >>> [r.awaited for r in tree.flatten()]   # leaves, depth-first
    [a, b, c]  # in completion order at each level
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from waitcase.foundation.errors import CombinatorException, ErrorCode


@dataclass(slots=True, frozen=True)
class Leaf:
    """Raw value an awaitable produced."""

    value: Any = None


@dataclass(slots=True, frozen=True)
class Nested:
    """Result tree of a combinator that was itself awaited."""

    tree: ResultTree


@dataclass(slots=True, frozen=True)
class Failure:
    """Exception a task raised (or CancelledError) instead of returning."""

    error: BaseException


ResultValue: TypeAlias = Leaf | Nested | Failure


def wrap(value: Any) -> ResultValue:
    """Classify a completion value into its result variant."""
    match value:
        case ResultTree(): return Nested(value)
        case Failure(): return value
        case _: return Leaf(value)


@dataclass(slots=True, frozen=True)
class ResultRecord:
    """One awaitable's identity paired with what it produced.

    Attributes:
        awaited: The object passed to the combinator (event or task)
        result: Leaf, Nested or Failure
    """

    awaited: object
    result: ResultValue

    @property
    def ok(self) -> bool:
        return not isinstance(self.result, Failure)

    @property
    def nested(self) -> bool:
        return isinstance(self.result, Nested)

    @property
    def value(self) -> Any:
        """Raw value, nested tree, or None for failures."""
        match self.result:
            case Leaf(value=v): return v
            case Nested(tree=t): return t
            case Failure(): return None

    @property
    def error(self) -> BaseException | None:
        return self.result.error if isinstance(self.result, Failure) else None

    def unwrap(self) -> Any:
        """Get value or raise the stored error."""
        if isinstance(self.result, Failure):
            raise self.result.error
        return self.value


@dataclass(slots=True, eq=False)
class ResultTree:
    """Append-only, completion-ordered collection of result records.

    Sealed before it is handed to subscribers; sealed trees are immutable.
    """

    _records: list[ResultRecord] = field(default_factory=list)
    _sealed: bool = False

    def append(self, record: ResultRecord) -> None:
        if self._sealed:
            raise CombinatorException.create("result tree is sealed", ErrorCode.TREE_SEALED)
        self._records.append(record)

    def seal(self) -> ResultTree:
        self._sealed = True
        return self

    @property
    def sealed(self) -> bool:
        return self._sealed

    @property
    def records(self) -> tuple[ResultRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ResultRecord]:
        return iter(tuple(self._records))

    def __contains__(self, awaitable: object) -> bool:
        return self.has(awaitable)

    def __repr__(self) -> str:
        state = "sealed" if self._sealed else "open"
        return f"ResultTree({len(self._records)} records, {state})"

    def has(self, awaitable: object) -> bool:
        """Whether awaitable completed at this level or in any nested tree."""
        return self.find(awaitable) is not None

    def find(self, awaitable: object) -> ResultRecord | None:
        """First record for awaitable, searching nested trees depth-first."""
        for record in self._records:
            if record.awaited is awaitable:
                return record
            if isinstance(record.result, Nested):
                if (hit := record.result.tree.find(awaitable)) is not None:
                    return hit
        return None

    def flatten(self) -> list[ResultRecord]:
        """Every leaf record across all nesting levels, depth-first."""
        out: list[ResultRecord] = []
        for record in self._records:
            match record.result:
                case Nested(tree=t): out.extend(t.flatten())
                case _: out.append(record)
        return out

    def failures(self) -> list[ResultRecord]:
        """Leaf records whose task raised."""
        return [r for r in self.flatten() if not r.ok]
