"""Environment variable access.

Reads go through a snapshot of ``os.environ`` taken on first use. ``reset``
drops the snapshot so the next read sees the current process environment.
"""

import os
from typing import Dict, Optional

_env_state: Dict[str, str] = {}
_initialized = False


def _ensure_initialized() -> None:
    global _initialized, _env_state
    if not _initialized:
        _env_state = dict(os.environ)
        _initialized = True


def get(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get environment variable value.

    Args:
        key: Environment variable name
        default: Returned when the variable is unset

    Returns:
        Variable value, or ``default`` if not set
    """
    _ensure_initialized()
    return _env_state.get(key, default)


def reset() -> None:
    """Drop the snapshot; the next read takes a fresh copy of ``os.environ``."""
    global _initialized
    _env_state.clear()
    _initialized = False


class Env:
    """Namespace class for environment variable operations."""

    get = staticmethod(get)
    reset = staticmethod(reset)
