"""Module id resolution.

Resolves a module id written in a source file to the concrete file it
designates, using the node_modules search algorithm over a pluggable
filesystem.
"""

from .adapter import CustomResolver
from .adapter import create_custom_resolver_async
from .engine import ResolveOpts
from .engine import resolve
from .package_data import normalize_pkg_data
from .resolve_module import default_package_filter
from .resolve_module import resolve_module_id
from .resolve_module import resolve_module_id_async
from .resolve_utils import get_module_id
from .resolve_utils import get_package_dir_path

__all__ = [
    "CustomResolver",
    "ResolveOpts",
    "create_custom_resolver_async",
    "default_package_filter",
    "get_module_id",
    "get_package_dir_path",
    "normalize_pkg_data",
    "resolve",
    "resolve_module_id",
    "resolve_module_id_async",
]
