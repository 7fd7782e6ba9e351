"""pathresolver - resolve paths and package specifiers to filesystem targets.

Accepts absolute paths, relative paths, bare package specifiers and package
self-references, and hands the concrete file or directory to a caller-supplied
handler.
"""

__version__ = "0.1.0"

# Lazy imports to avoid circular dependencies
def __getattr__(name: str):
    """Lazy import module components."""
    if name in ("PathResolver", "PackageContext", "LocalFileSystem"):
        from . import resolver
        return getattr(resolver, name)
    if name in (
        "ResolverError",
        "ResolvePathFailure",
        "InvalidInputType",
        "UnknownPathType",
    ):
        from .resolver import errors
        return getattr(errors, name)
    if name in ("ConfigManager", "ResolverConfig"):
        from .core import config
        return getattr(config, name)
    if name == "Log":
        from .util.log import Log
        return Log
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Version
    "__version__",
    # Resolver
    "PathResolver",
    "PackageContext",
    "LocalFileSystem",
    # Errors
    "ResolverError",
    "ResolvePathFailure",
    "InvalidInputType",
    "UnknownPathType",
    # Config
    "ConfigManager",
    "ResolverConfig",
    # Logging
    "Log",
]
