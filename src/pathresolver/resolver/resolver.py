"""Path and specifier resolution with file/directory dispatch."""

from __future__ import annotations

import inspect
import os
import sys
from typing import Any, Awaitable, Callable, Iterable, Optional, TypeVar, Union

from ..core.config_schema import DEFAULT_CONDITIONS, ResolverConfig, SelfReferencePolicy
from ..util.log import Log
from .classify import DEFAULT_MAX_LINK_DEPTH, Resolution, classify
from .errors import ResolvePathFailure
from .filesystem import FileSystem, LocalFileSystem
from .host import HostResolver, NodeModulesResolver, host_for
from .normalize import normalize
from .package import PackageContext
from .self_reference import SelfReference, policy_for

log = Log.create({"service": "resolver"})

R = TypeVar("R")
Handler = Callable[[str], Union[R, Awaitable[R]]]

_UNSET: Any = object()


def entry_directory() -> str:
    """Directory containing the running program's entry point."""
    main = sys.modules.get("__main__")
    entry = getattr(main, "__file__", None) or (sys.argv[0] if sys.argv and sys.argv[0] else None)
    if entry and entry not in ("-c", "-m"):
        return os.path.dirname(os.path.abspath(entry))
    return os.getcwd()


class PathResolver:
    """Resolve a path or specifier and hand the target to a handler.

    Absolute inputs are classified on the filesystem, following symbolic
    links to the final node. Explicitly relative inputs (``./x``, ``../x``)
    are first anchored to ``base_path``. Anything else is a specifier: it is
    tried as a self-reference of the current package and then handed to the
    host resolver.

    Example:
        resolver = PathResolver("/srv/app")

        async def main():
            source = await resolver.resolve("./config", read_file, read_dir)
    """

    def __init__(
        self,
        base_path: Optional[str] = _UNSET,
        *,
        package: Optional[PackageContext] = None,
        fs: Optional[FileSystem] = None,
        host: Optional[HostResolver] = None,
        self_reference: SelfReferencePolicy | str = SelfReferencePolicy.EXPORTS,
        conditions: Optional[Iterable[str]] = None,
        max_link_depth: int = DEFAULT_MAX_LINK_DEPTH,
    ) -> None:
        self.base_path = entry_directory() if base_path is _UNSET else base_path
        self.package = package
        self.fs: FileSystem = fs or LocalFileSystem()
        self.conditions = tuple(conditions if conditions is not None else DEFAULT_CONDITIONS)
        self.host: HostResolver = host or NodeModulesResolver(conditions=self.conditions)
        self.self_reference: Optional[SelfReference] = policy_for(self_reference, self.conditions)
        self.max_link_depth = max_link_depth

    @classmethod
    def from_config(
        cls,
        config: ResolverConfig,
        *,
        fs: Optional[FileSystem] = None,
        host: Optional[HostResolver] = None,
    ) -> "PathResolver":
        """Build a resolver from loaded configuration."""
        package = None
        if config.package is not None:
            package = PackageContext(
                name=config.package.name,
                manifest=os.path.abspath(config.package.manifest),
            )
        return cls(
            config.base_path if config.base_path else _UNSET,
            package=package,
            fs=fs,
            host=host or host_for(config.host, config.conditions),
            self_reference=config.self_reference,
            conditions=config.conditions,
            max_link_depth=config.max_link_depth,
        )

    @property
    def base_path(self) -> Optional[str]:
        """Anchor for explicitly relative inputs, or None."""
        return self._base_path

    @base_path.setter
    def base_path(self, value: Optional[str | os.PathLike[str]]) -> None:
        self._base_path = os.path.abspath(os.fspath(value)) if value is not None else None

    async def resolve(self, value: Any, on_file: Handler[R], on_directory: Handler[R]) -> R:
        """Resolve ``value`` and return the result of the matching handler.

        Exactly one of ``on_file`` and ``on_directory`` is called with the
        absolute path of the target. Handlers may be plain functions or
        coroutine functions.

        Raises:
            ResolvePathFailure: the input could not be resolved; the
                original failure is chained as the cause. Exceptions raised
                by the handlers propagate unchanged.
        """
        try:
            resolution = await self._locate(value, self.base_path)
        except Exception as e:
            log.warn("could not resolve path", {"input": value, "error": e})
            raise ResolvePathFailure(value, e) from e

        log.debug("resolved", {"input": value, "kind": resolution.kind, "path": resolution.path, "via": resolution.via})
        handler = on_file if resolution.kind == "file" else on_directory
        result = handler(resolution.path)
        if inspect.isawaitable(result):
            return await result
        return result

    async def _locate(self, value: Any, base_path: Optional[str]) -> Resolution:
        path = normalize(value, base_path)

        if os.path.isabs(path):
            return await classify(path, self.fs, self.max_link_depth)

        if self.self_reference is not None:
            if self.package is None:
                log.debug("no package context, skipping self-reference", {"input": path})
            else:
                resolution = await self.self_reference.resolve(path, self.package, self.fs)
                if resolution is not None:
                    return resolution

        anchor = base_path or entry_directory()
        resolved = await self.host.resolve(path, anchor)
        return Resolution("file", resolved, via="host")

    def __repr__(self) -> str:
        return f"PathResolver(base_path={self.base_path!r})"
