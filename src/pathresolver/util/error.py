"""Error formatting utilities.

Turns resolution failures into short user-facing messages for the CLI.
"""

from typing import Any

from ..resolver.errors import ResolvePathFailure, ResolverError


def format_error(error: Any) -> str | None:
    """Format known resolution errors into user-friendly messages.

    Returns None if the error type is not recognized.
    """
    if isinstance(error, ResolvePathFailure):
        lines = [f"{error} [{error.code}]"]
        cause = error.cause
        depth = 0
        while cause is not None and depth < 10:
            code = getattr(cause, "code", None)
            label = f"{type(cause).__name__}: {cause}"
            lines.append(f"  caused by {label}" + (f" [{code}]" if isinstance(code, str) else ""))
            cause = cause.__cause__
            depth += 1
        return "\n".join(lines)

    if isinstance(error, ResolverError):
        return f"{error} [{error.code}]"

    return None

