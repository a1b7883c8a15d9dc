"""Foundation layer: errors and configuration."""

from .config import get_settings
from .errors import CombinatorError, CombinatorException, ErrorCode, InvalidAwaitable

__all__ = ["get_settings", "CombinatorError", "CombinatorException", "ErrorCode", "InvalidAwaitable"]
