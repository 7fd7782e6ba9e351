"""Utility modules."""

from .log import Log
from .error import format_error

__all__ = ["Log", "format_error"]
