"""Module resolution engine.

Implements the node_modules search used by the `resolve` ecosystem package
(async flavour). All filesystem access goes through callback-style bridge
methods, each called as `method(path, callback)` and expected to complete
`callback(error, value)` exactly once before returning.

Search order for an id:
1. Path ids (`./x`, `../x`, `/x`, `C:/x`): load as file, then as directory
2. Core module names: returned unchanged
3. Bare ids: `<dir>/node_modules/<id>` for every ancestor of the basedir,
   nearest first, then any extra `paths`

Loading as file tries `x`, then `x + ext` for each extension. Loading as
directory follows `package.json` `main`, then falls back to `index`.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import re
from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from ..errors import CallbackContractError
from ..errors import ModuleResolutionError
from ..errors import ResolveError
from ..models import PackageData
from ..models import PackageFilter
from ..models import PathFilter
from ..paths import dirname
from ..paths import join_paths
from ..paths import normalize_slashes
from ..paths import relative_path
from ..paths import resolve_path
from .core_modules import is_core
from .resolve_utils import DEFAULT_MODULE_DIRECTORIES
from .resolve_utils import PATH_MODULE_ID

logger = logging.getLogger(__name__)

Completion = Callable[..., None]
BridgeMethod = Callable[[str, Completion], Awaitable[Any]]

DEFAULT_EXTENSIONS = (".js",)
PACKAGE_JSON = "package.json"

_DRIVE_ONLY = re.compile(r"^\w:[/\\]*$")
_NODE_MODULES_DIR = re.compile(r"[/\\]node_modules[/\\]*$")


async def call_bridge(method: BridgeMethod, path: str) -> Any:
    """Run a callback-style bridge method and return its value.

    Raises:
        The error the method passed to its callback
        CallbackContractError: The method returned without completing
    """
    future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()

    def complete(err: Any = None, value: Any = None) -> None:
        if future.done():
            logger.warning(f"[engine] callback completed twice for {path}, ignoring")
            return
        if err is None:
            future.set_result(value)
        elif isinstance(err, BaseException):
            future.set_exception(err)
        else:
            future.set_exception(ModuleResolutionError(str(err)))

    await method(path, complete)

    if not future.done():
        future.cancel()
        name = getattr(method, "__name__", repr(method))
        raise CallbackContractError(f"{name} returned without completing its callback for {path}")
    return future.result()


@dataclass
class ResolveOpts:
    """Engine configuration for one resolution.

    The four bridge methods are required except `realpath`, which is only
    called when preserve_symlinks is False.
    """

    is_file: BridgeMethod
    is_directory: BridgeMethod
    read_file: BridgeMethod
    realpath: BridgeMethod | None = None
    basedir: str | None = None
    filename: str | None = None
    extensions: Sequence[str] | None = None
    package_filter: PackageFilter | None = None
    path_filter: PathFilter | None = None
    paths: Sequence[str] | None = None
    module_directory: Sequence[str] | str | None = None
    preserve_symlinks: bool = True
    include_core_modules: bool = True
    package: PackageData | None = None

    @classmethod
    def from_bridge(cls, bridge: Any, **kwargs: Any) -> ResolveOpts:
        """Build options from an object exposing the bridge methods."""
        kwargs.setdefault("extensions", getattr(bridge, "extensions", None))
        return cls(
            is_file=bridge.is_file,
            is_directory=bridge.is_directory,
            read_file=bridge.read_file,
            realpath=getattr(bridge, "realpath", None),
            **kwargs,
        )


async def resolve(module_id: str, opts: ResolveOpts) -> tuple[str | None, PackageData | None]:
    """Resolve module_id relative to opts.basedir.

    Returns:
        Tuple of (resolved path or core module name, owning manifest or None)

    Raises:
        TypeError: module_id is not a string
        ResolveError: Nothing matched, or a manifest `main` is unusable
    """
    if not isinstance(module_id, str):
        raise TypeError(f"Path must be a string. Received {module_id!r}")
    return await _Resolution(module_id, opts).run()


class _Resolution:
    """State for a single engine run."""

    def __init__(self, module_id: str, opts: ResolveOpts):
        self.module_id = module_id
        self.opts = opts
        self.extensions = list(opts.extensions) if opts.extensions is not None else list(DEFAULT_EXTENSIONS)
        self.basedir = normalize_slashes(opts.basedir) if opts.basedir else normalize_slashes(os.getcwd())
        self.parent = opts.filename or self.basedir

        if opts.module_directory is None:
            self.module_directories = list(DEFAULT_MODULE_DIRECTORIES)
        elif isinstance(opts.module_directory, str):
            self.module_directories = [opts.module_directory]
        else:
            self.module_directories = list(opts.module_directory)

    async def run(self) -> tuple[str | None, PackageData | None]:
        x = self.module_id
        start = await self.maybe_realpath(resolve_path(self.basedir))
        logger.debug(f"[engine] {x} from {start}")

        if PATH_MODULE_ID.match(x):
            res = resolve_path(start, x)
            if x in (".", "..") or x.endswith("/"):
                res += "/"

            if x.endswith("/") and res.rstrip("/") == start:
                found, pkg = await self.load_as_directory(res, self.opts.package)
            else:
                found, pkg = await self.load_as_file(res, self.opts.package)
                if not found:
                    found, pkg = await self.load_as_directory(res, self.opts.package)

            if found:
                return await self.maybe_realpath(found), pkg
            raise self.not_found()

        if self.opts.include_core_modules and is_core(x):
            logger.debug(f"[engine] {x} is a core module")
            return x, None

        found, pkg = await self.load_node_modules(x, start)
        if found:
            return await self.maybe_realpath(found), pkg
        raise self.not_found()

    def not_found(self) -> ResolveError:
        return ResolveError(
            f"Cannot find module '{self.module_id}' from '{self.parent}'",
            ResolveError.MODULE_NOT_FOUND,
        )

    async def maybe_realpath(self, path: str) -> str:
        if self.opts.preserve_symlinks is False and self.opts.realpath is not None:
            return await call_bridge(self.opts.realpath, path)
        return path

    async def is_file(self, path: str) -> bool:
        return bool(await call_bridge(self.opts.is_file, path))

    async def is_directory(self, path: str) -> bool:
        return bool(await call_bridge(self.opts.is_directory, path))

    async def read_package(self, pkg_file: str) -> PackageData | None:
        """Read and parse a manifest. Unparseable manifests count as absent."""
        body = await call_bridge(self.opts.read_file, pkg_file)
        try:
            pkg = json.loads(body)
        except (TypeError, ValueError) as e:
            logger.debug(f"[engine] ignoring malformed manifest {pkg_file}: {e}")
            return None
        return pkg if isinstance(pkg, dict) else None

    async def load_pkg(self, directory: str) -> tuple[PackageData | None, str | None]:
        """Find the nearest manifest at or above directory.

        The walk stops at filesystem roots and at `node_modules` directories.
        """
        while True:
            if directory in ("", "/", ".") or _DRIVE_ONLY.match(directory) or _NODE_MODULES_DIR.search(directory):
                return None, None

            parent = dirname(directory)
            try:
                pkg_dir = await self.maybe_realpath(directory)
                pkg_file = join_paths(pkg_dir, PACKAGE_JSON)
                found = await self.is_file(pkg_file)
            except (OSError, ModuleResolutionError) as e:
                logger.debug(f"[engine] skipping {directory}: {e}")
                found = False

            if not found:
                if parent == directory:
                    return None, None
                directory = parent
                continue

            pkg = await self.read_package(pkg_file)
            if pkg is not None and self.opts.package_filter:
                pkg = self.opts.package_filter(pkg, pkg_file, directory)
            return pkg, directory

    async def load_as_file(
        self, x: str, package: PackageData | None = None
    ) -> tuple[str | None, PackageData | None]:
        return await self._load_with_extensions(["", *self.extensions], x, package)

    async def _load_with_extensions(
        self, exts: list[str], x: str, package: PackageData | None
    ) -> tuple[str | None, PackageData | None]:
        pkg = package
        for ext in exts:
            file = x + ext
            pkg_dir = None
            if pkg is None:
                pkg, pkg_dir = await self.load_pkg(dirname(file))

            if pkg_dir and pkg is not None and self.opts.path_filter:
                rfile = relative_path(pkg_dir, file)
                rel = rfile[: len(rfile) - len(ext)] if ext else rfile
                redirected = self.opts.path_filter(pkg, x, rel)
                if redirected:
                    return await self._load_with_extensions(
                        ["", *self.extensions], resolve_path(pkg_dir, redirected), pkg
                    )

            if await self.is_file(file):
                return file, pkg

        return None, pkg

    async def load_as_directory(
        self, x: str, package: PackageData | None = None
    ) -> tuple[str | None, PackageData | None]:
        pkg_dir = await self.maybe_realpath(x)
        pkg_file = join_paths(pkg_dir, PACKAGE_JSON)
        index = join_paths(x, "index")

        if not await self.is_file(pkg_file):
            return await self.load_as_file(index, package)

        pkg = await self.read_package(pkg_file)
        if pkg is not None and self.opts.package_filter:
            pkg = self.opts.package_filter(pkg, pkg_file, x)

        if pkg is None or not pkg.get("main"):
            return await self.load_as_file(index, pkg)

        main = pkg["main"]
        if not isinstance(main, str):
            raise ResolveError(
                f"package \u201c{pkg.get('name')}\u201d `main` must be a string",
                ResolveError.INVALID_PACKAGE_MAIN,
            )
        if main in (".", "./"):
            main = pkg["main"] = "index"

        main_path = resolve_path(x, main)
        found, pkg = await self.load_as_file(main_path, pkg)
        if found:
            return found, pkg
        if pkg is None:
            return await self.load_as_file(index, pkg)

        # `main` pointing back at x would recurse forever
        if main_path.rstrip("/") != resolve_path(x):
            found, pkg = await self.load_as_directory(main_path, pkg)
            if found:
                return found, pkg

        found, pkg = await self.load_as_file(index, pkg)
        if found:
            return found, pkg

        raise ResolveError(
            f"Cannot find module '{main_path}'. Please verify that the package.json has a valid \"main\" entry",
            ResolveError.INCORRECT_PACKAGE_MAIN,
        )

    def node_modules_paths(self, start: str) -> list[str]:
        """Module directories to search from start, nearest first."""
        ancestors = [resolve_path(start)]
        parent = dirname(ancestors[0])
        while parent != ancestors[-1]:
            ancestors.append(parent)
            parent = dirname(parent)

        dirs = [join_paths(ancestor, module_dir) for ancestor in ancestors for module_dir in self.module_directories]
        dirs.extend(resolve_path(p) for p in self.opts.paths or [])
        return dirs

    async def load_node_modules(self, x: str, start: str) -> tuple[str | None, PackageData | None]:
        for module_dir in self.node_modules_paths(start):
            candidate = join_paths(module_dir, x)
            if not await self.is_directory(dirname(candidate)):
                continue

            found, pkg = await self.load_as_file(candidate, self.opts.package)
            if found:
                return found, pkg

            found, pkg = await self.load_as_directory(candidate, self.opts.package)
            if found:
                return found, pkg

        return None, None
