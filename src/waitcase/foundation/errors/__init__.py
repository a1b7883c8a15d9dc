"""Unified error handling for waitcase.

- ErrorCode: Standard error codes for combinator failures
- CombinatorError/CombinatorException: Structured reports and exceptions
- InvalidAwaitable: Raised by strict awaitable checks
"""

from .errors import CombinatorError, CombinatorException, ErrorCode, InvalidAwaitable
from .types import JsonDict, JsonMapping, JsonPrimitive, JsonValue

__all__ = [
    "ErrorCode", "CombinatorError", "CombinatorException", "InvalidAwaitable",
    "JsonDict", "JsonMapping", "JsonPrimitive", "JsonValue",
]
