"""Path and package specifier resolution."""

from .errors import (
    HostResolutionFailed,
    InvalidInputType,
    ManifestError,
    ResolvePathFailure,
    ResolverError,
    SymlinkCycle,
    UnknownPathType,
)
from .filesystem import FileSystem, LocalFileSystem, PathStat
from .host import HostResolver, ImportlibResolver, NodeModulesResolver
from .package import PackageContext, PackageManifest
from .resolver import PathResolver
from .self_reference import ExportMapPolicy, MainEntryPolicy

__all__ = [
    "ExportMapPolicy",
    "FileSystem",
    "HostResolutionFailed",
    "HostResolver",
    "ImportlibResolver",
    "InvalidInputType",
    "LocalFileSystem",
    "MainEntryPolicy",
    "ManifestError",
    "NodeModulesResolver",
    "PackageContext",
    "PackageManifest",
    "PathResolver",
    "PathStat",
    "ResolvePathFailure",
    "ResolverError",
    "SymlinkCycle",
    "UnknownPathType",
]
