"""Shared test helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from pathresolver.resolver.filesystem import PathStat


class FakeFileSystem:
    """In-memory ``FileSystem`` that records every primitive call.

    ``nodes`` maps a path to ``"file"``, ``"directory"``, ``"device"`` or
    ``("link", target)``. ``manifests`` maps a path to raw manifest bytes.
    """

    def __init__(
        self,
        nodes: Optional[Dict[str, Any]] = None,
        manifests: Optional[Dict[str, bytes]] = None,
    ) -> None:
        self.nodes = dict(nodes or {})
        self.manifests = dict(manifests or {})
        self.calls: List[tuple[str, str]] = []

    async def stat_link(self, path: str) -> PathStat:
        self.calls.append(("stat_link", path))
        node = self.nodes.get(path)
        if node is None:
            raise FileNotFoundError(2, "No such file or directory", path)
        if isinstance(node, tuple):
            return PathStat(is_symlink=True)
        return PathStat(is_file=node == "file", is_directory=node == "directory")

    async def real_path(self, path: str) -> str:
        self.calls.append(("real_path", path))
        node = self.nodes[path]
        return node[1]

    async def read_manifest(self, path: str) -> bytes:
        self.calls.append(("read_manifest", path))
        if path not in self.manifests:
            raise FileNotFoundError(2, "No such file or directory", path)
        return self.manifests[path]


class FakeHost:
    """Host resolver returning canned paths and recording lookups."""

    def __init__(self, paths: Optional[Dict[str, str]] = None) -> None:
        self.paths = dict(paths or {})
        self.calls: List[tuple[str, str]] = []

    async def resolve(self, specifier: str, base_dir: str) -> str:
        self.calls.append((specifier, base_dir))
        if specifier not in self.paths:
            raise LookupError(f"no such module: {specifier}")
        return self.paths[specifier]


class Recorder:
    """Pair of handlers that remember what they were called with."""

    def __init__(self) -> None:
        self.files: List[str] = []
        self.directories: List[str] = []

    def on_file(self, path: str) -> str:
        self.files.append(path)
        return f"file:{path}"

    def on_directory(self, path: str) -> str:
        self.directories.append(path)
        return f"directory:{path}"


def write_manifest(directory: Path, data: Dict[str, Any]) -> Path:
    """Write ``package.json`` into ``directory`` and return its path."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "package.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def touch(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path
