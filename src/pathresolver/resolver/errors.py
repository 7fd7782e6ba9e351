"""Failure kinds raised while resolving a path or specifier."""

from __future__ import annotations

from typing import Any, List, Optional


class ResolverError(Exception):
    """Base class for resolution failures.

    Every subclass carries a stable ``code`` so callers can branch on the
    failure kind without matching message text.
    """

    code = "E_RESOLVE_PATH_ERROR"


class InvalidInputType(ResolverError, TypeError):
    """Raised when the value to resolve is not a string."""

    code = "E_RESOLVE_PATH_INVALID_INPUT"

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Path must be a string, got {type(value).__name__}")


class UnknownPathType(ResolverError, TypeError):
    """Raised when a filesystem node is neither a file, a directory nor a link."""

    code = "E_RESOLVE_PATH_UNKNOWN_TYPE"

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Unknown path type: {path}")


class SymlinkCycle(ResolverError):
    """Raised when following symbolic links revisits a path or runs too deep."""

    code = "E_RESOLVE_PATH_SYMLINK_CYCLE"

    def __init__(self, path: str, chain: List[str]):
        self.path = path
        self.chain = chain
        super().__init__(f"Symbolic link cycle at {path} after {len(chain)} hops")


class ManifestError(ResolverError):
    """Raised when a package manifest cannot be read or parsed."""

    code = "E_RESOLVE_PATH_MANIFEST"

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Invalid package manifest {path}: {message}")


class HostResolutionFailed(ResolverError):
    """Raised when the host fallback cannot map a specifier to a file."""

    code = "E_RESOLVE_PATH_HOST"

    def __init__(self, specifier: str, base_dir: str, searched: Optional[List[str]] = None):
        self.specifier = specifier
        self.base_dir = base_dir
        self.searched = searched or []
        message = f"Cannot find module '{specifier}' from '{base_dir}'"
        if self.searched:
            message += "\n\nSearched:\n" + "\n".join(f"  - {item}" for item in self.searched)
        super().__init__(message)


class ResolvePathFailure(ResolverError):
    """Uniform failure raised by ``PathResolver.resolve``.

    Wraps whatever went wrong during normalization, classification, manifest
    lookup or the host fallback. The original failure is available as
    ``cause`` and as ``__cause__``.
    """

    code = "E_RESOLVE_PATH"

    def __init__(self, value: Any, cause: Optional[BaseException] = None):
        self.input = value
        self.cause = cause
        super().__init__(f'Could not resolve path "{value}"')
