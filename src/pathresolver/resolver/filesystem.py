"""Filesystem primitives used by the resolver.

The resolver only talks to the filesystem through the ``FileSystem``
protocol, so tests can substitute an in-memory fake.
"""

from __future__ import annotations

import asyncio
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass(frozen=True)
class PathStat:
    """Link-aware status of a filesystem node."""
    is_symlink: bool = False
    is_file: bool = False
    is_directory: bool = False

    @classmethod
    def from_mode(cls, mode: int) -> "PathStat":
        return cls(
            is_symlink=stat.S_ISLNK(mode),
            is_file=stat.S_ISREG(mode),
            is_directory=stat.S_ISDIR(mode),
        )


class FileSystem(Protocol):
    """Primitives the resolver needs from a filesystem."""

    async def stat_link(self, path: str) -> PathStat:
        """Status of ``path`` without following a final symbolic link."""
        ...

    async def real_path(self, path: str) -> str:
        """Canonical target of the symbolic link at ``path``."""
        ...

    async def read_manifest(self, path: str) -> bytes:
        """Raw content of a package manifest."""
        ...


class LocalFileSystem:
    """``FileSystem`` backed by the local disk.

    Each primitive runs in a worker thread so a slow disk does not block
    the event loop.
    """

    async def stat_link(self, path: str) -> PathStat:
        result = await asyncio.to_thread(os.lstat, path)
        return PathStat.from_mode(result.st_mode)

    async def real_path(self, path: str) -> str:
        return await asyncio.to_thread(os.path.realpath, path, strict=True)

    async def read_manifest(self, path: str) -> bytes:
        return await asyncio.to_thread(Path(path).read_bytes)

    def __repr__(self) -> str:
        return "LocalFileSystem()"
