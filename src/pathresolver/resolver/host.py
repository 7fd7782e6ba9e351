"""Host module-resolution fallbacks.

Bare specifiers that are not self-references are handed to a
``HostResolver``. The resolver treats it as a black box that returns one
absolute file path or raises.
"""

from __future__ import annotations

import asyncio
import os
import sys
from importlib.machinery import PathFinder
from typing import Iterable, Iterator, List, Optional, Protocol, Tuple

from ..core.config_schema import DEFAULT_CONDITIONS, HostKind
from ..util.log import Log
from .errors import HostResolutionFailed
from .package import MANIFEST_NAME, PackageManifest, match_entries, parse_manifest

log = Log.create({"service": "resolver.host"})

EXTENSIONS = (".js", ".json", ".node", ".mjs", ".cjs")


class HostResolver(Protocol):
    """Maps a bare specifier to an absolute file path."""

    async def resolve(self, specifier: str, base_dir: str) -> str:
        ...


def split_specifier(specifier: str) -> Tuple[str, str]:
    """Split ``@scope/name/sub/path`` into ``("@scope/name", "sub/path")``."""
    parts = specifier.split("/")
    count = 2 if specifier.startswith("@") else 1
    return "/".join(parts[:count]), "/".join(parts[count:])


def node_modules_paths(base_dir: str) -> Iterator[str]:
    """``node_modules`` directories from ``base_dir`` up to the root."""
    current = os.path.abspath(base_dir)
    while True:
        if os.path.basename(current) != "node_modules":
            yield os.path.join(current, "node_modules")
        parent = os.path.dirname(current)
        if parent == current:
            return
        current = parent


def _read_manifest(directory: str) -> Optional[PackageManifest]:
    path = os.path.join(directory, MANIFEST_NAME)
    if not os.path.isfile(path):
        return None
    with open(path, "rb") as f:
        return parse_manifest(f.read(), path)


class NodeModulesResolver:
    """Node-style lookup through ``node_modules`` directories.

    Resolution order for a bare specifier:
    1. Nearest ``node_modules/<name>`` walking up from the base directory
    2. The package's ``exports`` map, when it declares one
    3. Otherwise ``<name>/<subpath>`` as a file, then as a directory

    Files are probed as-is and then with each of ``EXTENSIONS``.
    Directories use ``package.json`` ``main`` and then ``index``.
    """

    def __init__(
        self,
        extensions: Iterable[str] = EXTENSIONS,
        conditions: Optional[Iterable[str]] = None,
    ) -> None:
        self.extensions = tuple(extensions)
        self.conditions = tuple(conditions if conditions is not None else DEFAULT_CONDITIONS)

    async def resolve(self, specifier: str, base_dir: str) -> str:
        return await asyncio.to_thread(self._resolve, specifier, base_dir)

    def _resolve(self, specifier: str, base_dir: str) -> str:
        base_dir = os.path.abspath(base_dir)

        if os.path.isabs(specifier) or specifier in (".", "..") or specifier.startswith(("./", "../")):
            target = os.path.normpath(os.path.join(base_dir, specifier))
            found = self._load_as_file(target) or self._load_as_directory(target)
            if found is None:
                raise HostResolutionFailed(specifier, base_dir, [target])
            found = os.path.realpath(found)
            log.debug("resolved path specifier", {"specifier": specifier, "path": found})
            return found

        name, subpath = split_specifier(specifier)
        if not name or (name.startswith("@") and "/" not in name) or name.endswith("/"):
            raise HostResolutionFailed(specifier, base_dir)

        searched: List[str] = []
        for directory in node_modules_paths(base_dir):
            searched.append(directory)
            package_dir = os.path.join(directory, *name.split("/"))
            if not os.path.isdir(package_dir):
                continue
            found = self._load_package(package_dir, name, subpath, specifier, base_dir)
            if found is not None:
                found = os.path.realpath(found)
                log.debug("resolved package", {"specifier": specifier, "path": found})
                return found

        raise HostResolutionFailed(specifier, base_dir, searched)

    def _load_package(
        self,
        package_dir: str,
        name: str,
        subpath: str,
        specifier: str,
        base_dir: str,
    ) -> Optional[str]:
        manifest = _read_manifest(package_dir)

        if manifest is not None and manifest.exports is not None:
            found = match_entries(manifest.export_entries(), specifier, name, self.conditions)
            if found is None:
                manifest_path = os.path.join(package_dir, MANIFEST_NAME)
                raise HostResolutionFailed(specifier, base_dir, [f"{manifest_path} (not exported)"])
            target = os.path.normpath(os.path.join(package_dir, found[1]))
            if not os.path.isfile(target):
                # the first package found owns the specifier
                raise HostResolutionFailed(specifier, base_dir, [target])
            return target

        if subpath:
            target = os.path.join(package_dir, subpath)
            return self._load_as_file(target) or self._load_as_directory(target)
        return self._load_as_directory(package_dir, manifest)

    def _load_as_file(self, path: str) -> Optional[str]:
        if os.path.isfile(path):
            return path
        for ext in self.extensions:
            if os.path.isfile(path + ext):
                return path + ext
        return None

    def _load_index(self, path: str) -> Optional[str]:
        for ext in self.extensions:
            candidate = os.path.join(path, "index" + ext)
            if os.path.isfile(candidate):
                return candidate
        return None

    def _load_as_directory(self, path: str, manifest: Optional[PackageManifest] = None) -> Optional[str]:
        if not os.path.isdir(path):
            return None
        if manifest is None:
            manifest = _read_manifest(path)
        if manifest is not None and manifest.main:
            main = os.path.normpath(os.path.join(path, manifest.main))
            found = self._load_as_file(main) or self._load_index(main)
            if found is not None:
                return found
        return self._load_index(path)

    def __repr__(self) -> str:
        return "NodeModulesResolver()"


class ImportlibResolver:
    """Python module lookup without importing anything.

    Dotted names are searched through ``PathFinder`` over the base directory
    followed by ``sys.path``. The module's ``origin`` file is returned.
    """

    async def resolve(self, specifier: str, base_dir: str) -> str:
        return await asyncio.to_thread(self._resolve, specifier, base_dir)

    def _resolve(self, specifier: str, base_dir: str) -> str:
        parts = specifier.split(".")
        if not all(part.isidentifier() for part in parts):
            raise HostResolutionFailed(specifier, base_dir)

        search: List[str] = [os.path.abspath(base_dir), *sys.path]
        searched = list(search)
        spec = None
        for index in range(len(parts)):
            fullname = ".".join(parts[: index + 1])
            spec = PathFinder.find_spec(fullname, search)
            if spec is None:
                raise HostResolutionFailed(specifier, base_dir, searched)
            search = list(spec.submodule_search_locations or [])
            if index < len(parts) - 1 and not search:
                raise HostResolutionFailed(specifier, base_dir, searched)

        origin = spec.origin if spec is not None else None
        if not origin or not os.path.isfile(origin):
            # namespace packages have no file
            raise HostResolutionFailed(specifier, base_dir, searched)

        origin = os.path.realpath(origin)
        log.debug("resolved module", {"specifier": specifier, "path": origin})
        return origin

    def __repr__(self) -> str:
        return "ImportlibResolver()"


def host_for(kind: HostKind | str, conditions: Optional[Iterable[str]] = None) -> HostResolver:
    """Build the host resolver for a configured host kind."""
    kind = HostKind(kind)
    if kind == HostKind.PYTHON:
        return ImportlibResolver()
    return NodeModulesResolver(conditions=conditions)
