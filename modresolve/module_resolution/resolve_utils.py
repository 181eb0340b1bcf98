"""Pure helpers for reasoning about module ids and package boundaries."""

import re
from collections.abc import Sequence
from dataclasses import dataclass

from ..paths import dirname
from ..paths import is_absolute
from ..paths import normalize_path

DEFAULT_MODULE_DIRECTORIES = ("node_modules",)

# `.`, `..`, `./x`, `../x` and absolute ids. A backslash-relative `.\x` is bare.
PATH_MODULE_ID = re.compile(r"^(?:\.\.?(?:/|$)|/|([A-Za-z]:)?[/\\])")


@dataclass(frozen=True)
class ParsedModuleId:
    """A bare module id split into package and sub-path.

    For `@scope/pkg/lib/x` this is module_id `@scope/pkg`, file_path `lib/x`,
    scope `@scope` and scope_sub_module_id `pkg`.
    """

    module_id: str
    file_path: str
    scope: str | None = None
    scope_sub_module_id: str | None = None


def get_module_id(org_import: str) -> ParsedModuleId:
    if org_import.startswith("~"):
        org_import = org_import[1:]

    parts = org_import.split("/")
    if org_import.startswith("@") and len(parts) > 1:
        return ParsedModuleId(
            module_id="/".join(parts[:2]),
            file_path="/".join(parts[2:]),
            scope=parts[0],
            scope_sub_module_id=parts[1],
        )
    return ParsedModuleId(module_id=parts[0], file_path="/".join(parts[1:]))


def is_path_module_id(module_id: str) -> bool:
    """True for ids the engine treats as paths rather than package names."""
    return PATH_MODULE_ID.match(module_id) is not None


def _module_directory_names(module_directories: Sequence[str] | str | None) -> tuple[str, ...]:
    if module_directories is None:
        return DEFAULT_MODULE_DIRECTORIES
    if isinstance(module_directories, str):
        return (module_directories,)
    return tuple(module_directories)


def find_package_root(
    resolved_path: str,
    module_id: str,
    module_directories: Sequence[str] | str | None = None,
) -> str | None:
    """Walk up a resolved path to the `<module dir>/<pkg>` directory owning it.

    module_directories names the directories packages are installed in,
    `node_modules` by default. Returns None when no segment matches the
    package implied by module_id.
    """
    parts = normalize_path(resolved_path).split("/")
    module_dirs = _module_directory_names(module_directories)
    m = get_module_id(module_id)

    for i in range(len(parts) - 1, 0, -1):
        if parts[i - 1] not in module_dirs:
            continue
        if m.scope:
            if parts[i] == m.scope and i + 1 < len(parts) and parts[i + 1] == m.scope_sub_module_id:
                return "/".join(parts[: i + 2])
        elif parts[i] == m.module_id:
            return "/".join(parts[: i + 1])

    return None


def get_package_dir_path(
    resolved_path: str,
    module_id: str,
    module_directories: Sequence[str] | str | None = None,
) -> str | None:
    """Directory of the package that owns a resolved file.

    Path-style ids own the resolved file's own directory. Bare ids own the
    nearest `node_modules/<pkg>` (or `node_modules/@scope/<pkg>`) directory
    above the file, or the same under any of module_directories, falling back
    to the file's directory when the file sits outside any matching boundary.
    Core modules resolve to a bare name and have no directory.
    """
    resolved_path = normalize_path(resolved_path)
    if not is_absolute(resolved_path):
        return None

    if not is_path_module_id(module_id):
        package_root = find_package_root(resolved_path, module_id, module_directories)
        if package_root is not None:
            return package_root

    return dirname(resolved_path)
