"""Resolution of specifiers that name the current package.

Two policies exist for the same capability. ``ExportMapPolicy`` matches the
input against the package's imports and exports maps, wildcards included.
``MainEntryPolicy`` only handles the package's own bare name and resolves it
to the main entry, the exports root or the package directory. A resolver uses
exactly one of them.

Only the first ``*`` of a map key or target is substituted; any further
``*`` stays literal in both the pattern and the resolved path.
"""

from __future__ import annotations

import os
from typing import Iterable, Optional, Protocol

from ..core.config_schema import DEFAULT_CONDITIONS, SelfReferencePolicy
from ..util.log import Log
from .classify import Resolution
from .filesystem import FileSystem
from .package import PackageContext, load_manifest, match_entries, select_target

log = Log.create({"service": "resolver.self_reference"})

VIA = "self-reference"


def _join(directory: str, target: str) -> str:
    return os.path.normpath(os.path.join(directory, target))


class SelfReference(Protocol):
    """Capability: resolve a specifier that refers to the current package."""

    async def resolve(self, value: str, context: PackageContext, fs: FileSystem) -> Optional[Resolution]:
        ...


class ExportMapPolicy:
    """Match against the merged imports/exports map, first entry wins."""

    def __init__(self, conditions: Optional[Iterable[str]] = None) -> None:
        self.conditions = tuple(conditions if conditions is not None else DEFAULT_CONDITIONS)

    async def resolve(self, value: str, context: PackageContext, fs: FileSystem) -> Optional[Resolution]:
        manifest = await load_manifest(fs, context.manifest)
        entries = manifest.combined_map()
        found = match_entries(entries, value, context.name, self.conditions)
        if found is None:
            log.debug("no map entry", {"input": value, "package": context.name, "entries": len(entries)})
            return None

        key, target = found
        path = _join(context.directory, target)
        log.debug("matched map entry", {"input": value, "key": key, "path": path})
        return Resolution("file", path, via=VIA)

    def __repr__(self) -> str:
        return "ExportMapPolicy()"


class MainEntryPolicy:
    """Resolve the package's bare name only.

    Priority: ``main``, then the exports root, then the package directory.
    """

    def __init__(self, conditions: Optional[Iterable[str]] = None) -> None:
        self.conditions = tuple(conditions if conditions is not None else DEFAULT_CONDITIONS)

    async def resolve(self, value: str, context: PackageContext, fs: FileSystem) -> Optional[Resolution]:
        if value != context.name:
            return None

        manifest = await load_manifest(fs, context.manifest)
        if manifest.main:
            return Resolution("file", _join(context.directory, manifest.main), via=VIA)

        root = manifest.export_entries().get(".")
        target = select_target(root, self.conditions) if root is not None else None
        if target is not None:
            return Resolution("file", _join(context.directory, target), via=VIA)

        return Resolution("directory", context.directory, via=VIA)

    def __repr__(self) -> str:
        return "MainEntryPolicy()"


def policy_for(
    policy: SelfReferencePolicy | str,
    conditions: Optional[Iterable[str]] = None,
) -> Optional[SelfReference]:
    """Build the policy object for a configured policy name; None when off."""
    policy = SelfReferencePolicy(policy)
    if policy == SelfReferencePolicy.EXPORTS:
        return ExportMapPolicy(conditions)
    if policy == SelfReferencePolicy.MAIN:
        return MainEntryPolicy(conditions)
    return None
