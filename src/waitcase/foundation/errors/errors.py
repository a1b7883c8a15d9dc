"""Standardized error reporting for combinators.

Provides error codes and structured error reports. Invalid combinator inputs
are reported, never raised; programming errors raise CombinatorException.
Uses Pydantic for validation and serialization.
"""

from __future__ import annotations

import reprlib
import traceback
from enum import StrEnum
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class ErrorCode(StrEnum):
    """Standard error codes for combinator failures."""
    INVALID_AWAITABLE = "INVALID_AWAITABLE"
    TASK_FAILED = "TASK_FAILED"
    TREE_SEALED = "TREE_SEALED"
    INVALID_ARGUMENTS = "INVALID_ARGUMENTS"
    UNKNOWN = "UNKNOWN"


def _safe_repr(obj: object) -> str:
    """Bounded repr that never raises."""
    try:
        return reprlib.repr(obj)
    except Exception:
        return f"<{type(obj).__name__}>"


class CombinatorError(BaseModel):
    """Structured report of a combinator problem.

    Attributes:
        code: Machine-readable error code
        message: Human-readable message
        index: Position of the offending input, when the error concerns one
        kind: Type name of the offending object
        details: Optional detailed information (e.g., stack trace)
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        validate_default=True,
        json_schema_extra={
            "title": "Combinator Error",
            "examples": [{
                "code": "INVALID_AWAITABLE",
                "message": "entry 1 is neither an Event nor a Task",
                "index": 1,
                "kind": "str",
            }],
        },
    )

    code: ErrorCode = Field(default=ErrorCode.UNKNOWN, description="Machine-readable error classification")
    message: Annotated[str, Field(min_length=1, description="Human-readable error message")]
    index: int | None = Field(default=None, ge=0, description="Input position the error refers to")
    kind: str | None = Field(default=None, description="Type name of the offending object")
    details: str | None = Field(default=None, repr=False)

    @field_validator("message", mode="before")
    @classmethod
    def _ensure_message(cls, v: str | BaseException) -> str:
        """Accept exception objects and extract message."""
        return (str(v) or type(v).__name__) if isinstance(v, BaseException) else v

    @computed_field
    @property
    def fatal(self) -> bool:
        """Whether the error aborts the operation that reported it."""
        return self.code in (ErrorCode.TREE_SEALED, ErrorCode.INVALID_ARGUMENTS)

    @classmethod
    def invalid_awaitable(cls, obj: object, index: int | None = None) -> Self:
        """Report for an input that is neither an Event nor a Task."""
        where = f"entry {index}" if index is not None else "value"
        return cls(
            code=ErrorCode.INVALID_AWAITABLE,
            message=f"{where} is neither an Event nor a Task: {_safe_repr(obj)}",
            index=index,
            kind=type(obj).__name__,
        )

    @classmethod
    def from_exception(cls, exc: BaseException, *, index: int | None = None, include_trace: bool = False) -> Self:
        """Report for a task that raised instead of returning."""
        return cls(
            code=ErrorCode.TASK_FAILED,
            message=exc,
            index=index,
            kind=type(exc).__name__,
            details="".join(traceback.format_exception(exc)) if include_trace else None,
        )

    def render(self) -> str:
        """Format error for display."""
        where = f" (entry {self.index})" if self.index is not None else ""
        parts = [f"[{self.code}]{where} {self.message}"]
        if self.details:
            parts.append(f"\n{self.details}")
        return "".join(parts)

    __str__ = render


class CombinatorException(Exception):
    """Exception wrapping a CombinatorError for raising."""

    __slots__ = ("error",)

    def __init__(self, error: CombinatorError) -> None:
        self.error = error
        super().__init__(error.message)

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    @classmethod
    def create(cls, message: str, code: ErrorCode = ErrorCode.UNKNOWN, **kw: object) -> Self:
        """Create exception from message and code."""
        return cls(CombinatorError(message=message, code=code, **kw))


class InvalidAwaitable(CombinatorException):
    """Raised when a value must be an awaitable and is not."""

    def __init__(self, obj: object, index: int | None = None) -> None:
        super().__init__(CombinatorError.invalid_awaitable(obj, index))
        self.value = obj
