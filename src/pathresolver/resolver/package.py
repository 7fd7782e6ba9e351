"""Package manifests and export/import map matching."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.env import Env
from .errors import ManifestError
from .filesystem import FileSystem

MANIFEST_NAME = "package.json"

_BOM = b"\xef\xbb\xbf"


class PackageManifest(BaseModel):
    """Fields of a ``package.json`` the resolver reads."""
    name: Optional[str] = None
    main: Optional[str] = None
    exports: Any = None
    imports: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow")

    def export_entries(self) -> Dict[str, Any]:
        """The exports field as a ``{subpath: target}`` mapping.

        A string or a bare condition object is shorthand for the ``.`` entry.
        """
        exports = self.exports
        if exports is None:
            return {}
        if isinstance(exports, dict):
            if exports and not all(str(key).startswith(".") for key in exports):
                return {".": exports}
            return dict(exports)
        return {".": exports}

    def combined_map(self) -> Dict[str, Any]:
        """Imports and exports merged, exports winning on equal keys."""
        return {**self.imports, **self.export_entries()}


@dataclass(frozen=True)
class PackageContext:
    """The package the resolving code lives in."""
    name: str
    manifest: str

    @property
    def directory(self) -> str:
        return os.path.dirname(self.manifest)

    @classmethod
    def from_env(cls) -> Optional["PackageContext"]:
        """Context exported by npm to package scripts, if present."""
        name = Env.get("npm_package_name")
        manifest = Env.get("npm_package_json")
        if not name or not manifest:
            return None
        return cls(name=name, manifest=os.path.abspath(manifest))


async def load_manifest(fs: FileSystem, path: str) -> PackageManifest:
    """Read and parse the manifest at ``path``.

    Raises:
        ManifestError: unreadable file, invalid JSON or not an object
    """
    try:
        raw = await fs.read_manifest(path)
    except OSError as e:
        raise ManifestError(path, e.strerror or str(e)) from e
    return parse_manifest(raw, path)


def parse_manifest(raw: bytes, path: str) -> PackageManifest:
    if raw.startswith(_BOM):
        raw = raw[len(_BOM):]
    try:
        return PackageManifest.model_validate_json(raw)
    except ValidationError as e:
        raise ManifestError(path, e.errors()[0]["msg"] if e.errors() else str(e)) from e


def select_target(target: Any, conditions: Iterable[str]) -> Optional[str]:
    """Reduce a target to a path string.

    Condition objects are walked in their own key order and the first key
    present in ``conditions`` is taken. Arrays yield their first usable
    entry.
    """
    conditions = tuple(conditions)
    if isinstance(target, str):
        return target
    if isinstance(target, list):
        for item in target:
            selected = select_target(item, conditions)
            if selected is not None:
                return selected
        return None
    if isinstance(target, dict):
        for key, value in target.items():
            if key in conditions:
                selected = select_target(value, conditions)
                if selected is not None:
                    return selected
        return None
    return None


@lru_cache(maxsize=256)
def compile_pattern(literal: str) -> re.Pattern[str]:
    """Regex for a specifier pattern; only the first ``*`` is a wildcard."""
    head, _, tail = literal.partition("*")
    return re.compile(re.escape(head) + "(.*)" + re.escape(tail))


def match_entries(
    entries: Dict[str, Any],
    value: str,
    name: str,
    conditions: Iterable[str],
) -> Optional[Tuple[str, str]]:
    """Find the first map entry addressing ``value``.

    Each key addresses ``name + key[1:]``: ``./feat/*`` under package ``pkg``
    is ``pkg/feat/*``. Returns ``(key, target)`` with the wildcard capture
    already substituted into the target, or None.
    """
    conditions = tuple(conditions)
    for key, raw_target in entries.items():
        literal = name + key[1:]

        if literal == value:
            target = select_target(raw_target, conditions)
            if target is not None:
                return key, target
            continue

        if "*" not in key:
            continue

        match = compile_pattern(literal).fullmatch(value)
        if not match or not match.group(1):
            continue
        target = select_target(raw_target, conditions)
        if target is not None:
            return key, target.replace("*", match.group(1), 1)

    return None
