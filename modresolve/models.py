"""Data models for module resolution.

- FileStat: answer to a single stat probe
- RealPathResult: answer to a canonicalization request
- ResolveModuleIdOptions: one resolution request
- ResolveModuleIdResults: one successful resolution
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from typing import Callable

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

PackageData = dict[str, Any]

# Called as package_filter(pkg, pkg_file, pkg_dir) and returns the manifest to use
PackageFilter = Callable[[PackageData, str, str], PackageData]

# Called as path_filter(pkg, path, relative_path); a non-empty result replaces the path
PathFilter = Callable[[PackageData, str, str], "str | None"]


class _NoPackageFilter:
    """Sentinel type: disables manifest filtering entirely."""

    _instance: _NoPackageFilter | None = None

    def __new__(cls) -> _NoPackageFilter:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_PACKAGE_FILTER"

    def __bool__(self) -> bool:
        return False


NO_PACKAGE_FILTER = _NoPackageFilter()


class FileStat(BaseModel):
    """Result of a stat probe. A missing path has both flags False."""

    is_file: bool = False
    is_directory: bool = False
    is_symbolic_link: bool = False
    size: int = 0
    error: str | None = None


@dataclass(frozen=True)
class RealPathResult:
    """Canonicalized path, or the OSError that prevented canonicalization.

    A FileNotFoundError means the path does not exist; any other error is a
    genuine failure.
    """

    path: str
    error: OSError | None = None


@dataclass(frozen=True)
class ResolveModuleIdOptions:
    """A single module resolution request.

    Attributes:
        module_id: Identifier as written in the source (`./x`, `/abs/x`, `pkg`)
        containing_file: File the identifier appears in; its directory is
            the search origin
        exts: Extension search order; None uses the engine default
        package_filter: Callable applied to each discovered manifest,
            NO_PACKAGE_FILTER to disable filtering, or None for the default
            policy (missing `main` becomes "package.json")
        preserve_symlinks: Skip canonicalization of found paths
        module_directories: Directory names searched for bare identifiers
        paths: Extra directories searched after the module directories
        include_core_modules: Resolve built-in module names to themselves
    """

    module_id: str
    containing_file: str
    exts: tuple[str, ...] | list[str] | None = None
    package_filter: PackageFilter | _NoPackageFilter | None = None
    preserve_symlinks: bool = True
    module_directories: tuple[str, ...] | list[str] | None = None
    paths: tuple[str, ...] | list[str] | None = None
    include_core_modules: bool = True


class ResolveModuleIdResults(BaseModel):
    """Outcome of a successful resolution."""

    model_config = ConfigDict(frozen=True)

    module_id: str = Field(description="Identifier that was requested")
    resolved_path: str = Field(description="Normalized path of the resolved file")
    pkg_data: PackageData = Field(description="Owning package manifest, name and version always set")
    pkg_dir_path: str | None = Field(description="Root directory of the owning package")
