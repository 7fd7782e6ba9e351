"""Classification of absolute paths into files and directories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Set

from ..util.log import Log
from .errors import SymlinkCycle, UnknownPathType
from .filesystem import FileSystem

log = Log.create({"service": "resolver.classify"})

ResolutionKind = Literal["file", "directory"]

DEFAULT_MAX_LINK_DEPTH = 40


@dataclass(frozen=True)
class Resolution:
    """Where an input ended up, before it is handed to a handler."""
    kind: ResolutionKind
    path: str
    via: str = "filesystem"


async def classify(path: str, fs: FileSystem, max_depth: int = DEFAULT_MAX_LINK_DEPTH) -> Resolution:
    """Follow symbolic links from ``path`` and classify the final node.

    Raises:
        SymlinkCycle: a link target repeats or the chain exceeds ``max_depth``
        UnknownPathType: the final node is not a regular file or directory
    """
    visited: Set[str] = {path}
    chain: List[str] = []

    while True:
        status = await fs.stat_link(path)

        if status.is_symlink:
            target = await fs.real_path(path)
            chain.append(target)
            log.debug("followed link", {"path": path, "target": target, "hops": len(chain)})
            if target in visited or len(chain) > max_depth:
                raise SymlinkCycle(target, chain)
            visited.add(target)
            path = target
            continue

        if status.is_file:
            return Resolution("file", path)

        if status.is_directory:
            return Resolution("directory", path)

        raise UnknownPathType(path)
