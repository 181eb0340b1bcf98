"""modresolve - resolve module ids to files over real or in-memory filesystems."""

from .errors import FileReadError
from .errors import ModuleIdNotFoundError
from .errors import ModuleResolutionError
from .errors import ResolveError
from .fs import DiskSystem
from .fs import InMemoryFileSystem
from .models import NO_PACKAGE_FILTER
from .models import FileStat
from .models import RealPathResult
from .models import ResolveModuleIdOptions
from .models import ResolveModuleIdResults
from .module_resolution import resolve_module_id
from .module_resolution import resolve_module_id_async

__all__ = [
    "DiskSystem",
    "FileReadError",
    "FileStat",
    "InMemoryFileSystem",
    "ModuleIdNotFoundError",
    "ModuleResolutionError",
    "NO_PACKAGE_FILTER",
    "RealPathResult",
    "ResolveError",
    "ResolveModuleIdOptions",
    "ResolveModuleIdResults",
    "resolve_module_id",
    "resolve_module_id_async",
]
