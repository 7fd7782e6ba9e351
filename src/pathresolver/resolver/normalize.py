"""Input normalization."""

import os
from typing import Any, Optional, Tuple

from .errors import InvalidInputType


def _relative_prefixes() -> Tuple[str, ...]:
    separators = [os.sep]
    if os.altsep:
        separators.append(os.altsep)
    return tuple(prefix + sep for sep in separators for prefix in (".", ".."))


RELATIVE_PREFIXES = _relative_prefixes()


def is_explicitly_relative(value: str) -> bool:
    """True for ``./x`` and ``../x`` style inputs."""
    return value.startswith(RELATIVE_PREFIXES)


def normalize(value: Any, base_path: Optional[str]) -> str:
    """Anchor an explicitly relative input to ``base_path``.

    Bare specifiers and absolute paths are returned unchanged, as are
    relative inputs when no base path is set.

    Raises:
        InvalidInputType: ``value`` is not a string
    """
    if not isinstance(value, str):
        raise InvalidInputType(value)
    if base_path and is_explicitly_relative(value):
        return os.path.normpath(os.path.join(base_path, value))
    return value
