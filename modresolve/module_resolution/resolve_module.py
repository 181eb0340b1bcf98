"""Single-request module id resolution.

resolve_module_id_async() wires a filesystem pair into the engine through the
callback bridge, applies the package filter policy and shapes the result.
"""

import logging
from typing import Any

from ..errors import ModuleIdNotFoundError
from ..fs.base import CompilerSystem
from ..fs.base import FileSystemCapability
from ..fs.disk import DiskSystem
from ..fs.in_memory import InMemoryFileSystem
from ..models import NO_PACKAGE_FILTER
from ..models import PackageFilter
from ..models import ResolveModuleIdOptions
from ..models import ResolveModuleIdResults
from ..paths import dirname
from ..paths import is_absolute
from ..paths import is_string
from ..paths import normalize_fs_path
from ..paths import normalize_path
from . import engine
from .adapter import create_custom_resolver_async
from .package_data import normalize_pkg_data
from .resolve_utils import get_package_dir_path

logger = logging.getLogger(__name__)

MANIFEST_MAIN_FALLBACK = "package.json"


def default_package_filter(pkg: dict[str, Any], pkg_file: str = "", pkg_dir: str = "") -> dict[str, Any]:
    """Point manifests without a usable `main` at the manifest itself.

    The engine then resolves `package.json` as the package's file instead of
    failing on a missing entry point.
    """
    if not is_string(pkg.get("main")) or pkg["main"] == "":
        pkg["main"] = MANIFEST_MAIN_FALLBACK
    return pkg


def get_package_filter(opts: ResolveModuleIdOptions) -> PackageFilter | None:
    """Effective package filter for a request.

    A caller callable wins, NO_PACKAGE_FILTER disables filtering and None
    selects default_package_filter.
    """
    if opts.package_filter is NO_PACKAGE_FILTER:
        return None
    if opts.package_filter is not None:
        return opts.package_filter
    return default_package_filter


async def resolve_module_id_async(
    sys: CompilerSystem,
    in_memory_fs: FileSystemCapability,
    opts: ResolveModuleIdOptions,
) -> ResolveModuleIdResults:
    """Resolve opts.module_id as seen from opts.containing_file.

    Args:
        sys: System used for canonicalizing paths
        in_memory_fs: Filesystem probed for files, directories and manifests
        opts: The request

    Returns:
        ResolveModuleIdResults for the file the id designates

    Raises:
        ResolveError: The engine could not resolve the id
        ModuleIdNotFoundError: The engine reported success without a path
        OSError: Canonicalization failed for a reason other than a missing path
    """
    bridge = create_custom_resolver_async(sys, in_memory_fs, opts.exts)
    basedir = dirname(normalize_fs_path(opts.containing_file))

    resolver_opts = engine.ResolveOpts.from_bridge(
        bridge,
        basedir=basedir,
        filename=opts.containing_file,
        package_filter=get_package_filter(opts),
        preserve_symlinks=opts.preserve_symlinks,
        module_directory=opts.module_directories,
        paths=opts.paths,
        include_core_modules=opts.include_core_modules,
    )

    logger.debug(f"[resolve] {opts.module_id} from {basedir}")
    resolve_id, pkg_data = await engine.resolve(opts.module_id, resolver_opts)

    if not resolve_id:
        raise ModuleIdNotFoundError(opts.module_id)

    # core modules come back as bare names
    normalized_resolve_id = normalize_path(resolve_id) if is_absolute(resolve_id) else resolve_id
    results = ResolveModuleIdResults(
        module_id=opts.module_id,
        resolved_path=normalized_resolve_id,
        pkg_data=normalize_pkg_data(pkg_data, opts.module_id),
        pkg_dir_path=get_package_dir_path(normalized_resolve_id, opts.module_id, opts.module_directories),
    )
    logger.debug(f"[resolve] {opts.module_id} -> {results.resolved_path} (pkg {results.pkg_dir_path})")
    return results


async def resolve_module_id(
    opts: ResolveModuleIdOptions,
    sys: CompilerSystem | None = None,
    in_memory_fs: FileSystemCapability | None = None,
) -> ResolveModuleIdResults:
    """Resolve against the real disk unless a filesystem pair is supplied."""
    if sys is None:
        sys = DiskSystem()
    if in_memory_fs is None:
        in_memory_fs = InMemoryFileSystem(sys)
    return await resolve_module_id_async(sys, in_memory_fs, opts)
