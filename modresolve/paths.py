"""Path and string helpers shared by the resolver and the filesystem layers.

Every path handed between components is in canonical form:
- forward slashes only
- no duplicate separators, no trailing separator (except for a bare root)
- `.` and `..` segments reduced
- relative paths with more than one segment prefixed with `./`
"""

import os
import posixpath
import re
from typing import Any

_DRIVE_ROOT = re.compile(r"^[A-Za-z]:/?")


def is_string(value: Any) -> bool:
    """Return True when value is a str."""
    return isinstance(value, str)


def normalize_slashes(path: str) -> str:
    return path.replace("\\", "/")


def get_root_length(path: str) -> int:
    """Length of the root part of an already slash-normalized path.

    Handles POSIX roots (`/`), drive roots (`C:/`, `C:`) and UNC roots
    (`//server/share/`). Relative paths have a root length of 0.
    """
    if path.startswith("//"):
        server_end = path.find("/", 2)
        if server_end < 0:
            return len(path)
        share_end = path.find("/", server_end + 1)
        return len(path) if share_end < 0 else share_end + 1
    if path.startswith("/"):
        return 1
    match = _DRIVE_ROOT.match(path)
    if match:
        return len(match.group(0))
    return 0


def is_absolute(path: str) -> bool:
    return get_root_length(normalize_slashes(path)) > 0


def _reduce_components(components: list[str], rooted: bool) -> list[str]:
    reduced: list[str] = []
    for component in components:
        if not component or component == ".":
            continue
        if component == "..":
            if reduced and reduced[-1] != "..":
                reduced.pop()
                continue
            if rooted:
                # `..` above a root stays at the root
                continue
        reduced.append(component)
    return reduced


def normalize_path(path: str, relativize: bool = True) -> str:
    """Convert a platform path string into canonical form.

    Args:
        path: Path using either separator style
        relativize: Prefix multi-segment relative paths with `./`. Scoped
            package names (`@scope/pkg`) and paths already starting with
            `.` are left alone.

    Returns:
        Normalized path; an empty path becomes `.`

    Raises:
        TypeError: path is not a string
    """
    if not is_string(path):
        raise TypeError(f"invalid path to normalize: {path!r}")

    path = normalize_slashes(path.strip())
    root_length = get_root_length(path)
    root = path[:root_length]
    components = _reduce_components(path[root_length:].split("/"), rooted=bool(root))

    normalized = root + "/".join(components)
    if normalized == "":
        return "."

    if (
        relativize
        and not root
        and components
        and "/" in path
        and not components[0].startswith(".")
        and not components[0].startswith("@")
    ):
        return "./" + normalized

    return normalized


def normalize_fs_path(path: str) -> str:
    """Normalize a path that is about to hit a filesystem.

    Query strings (`?...`) and NUL bytes are stripped first.
    """
    return normalize_path(path.split("?", 1)[0].replace("\0", ""))


def dirname(path: str) -> str:
    """Containing directory of a normalized path.

    The parent of a root is the root itself; a single relative segment has
    `.` as its parent.
    """
    path = normalize_slashes(path)
    root_length = get_root_length(path)
    if len(path) > root_length and path.endswith("/"):
        path = path.rstrip("/") or "/"
    index = path.rfind("/")
    if index < root_length:
        return path[:root_length] or "."
    return path[:index]


def basename(path: str) -> str:
    path = normalize_slashes(path).rstrip("/")
    return path[path.rfind("/") + 1 :]


def _join_two(left: str, right: str) -> str:
    if not left:
        return right
    if not right:
        return left
    return left.rstrip("/") + "/" + right


def join_paths(*parts: str) -> str:
    """Join path segments and normalize the result without relativizing."""
    joined = ""
    for part in parts:
        joined = _join_two(joined, normalize_slashes(part))
    return normalize_path(joined, relativize=False) if joined else "."


def resolve_path(*parts: str) -> str:
    """Resolve segments right to left into an absolute normalized path.

    The rightmost absolute segment wins; anything left of it is ignored.
    Without any absolute segment the current working directory is used as
    the base.
    """
    resolved = ""
    for part in reversed(parts):
        if not part:
            continue
        part = normalize_slashes(part)
        resolved = _join_two(part, resolved)
        if is_absolute(part):
            break

    if not is_absolute(resolved):
        resolved = _join_two(normalize_slashes(os.getcwd()), resolved)

    return normalize_path(resolved, relativize=False)


def relative_path(from_dir: str, to_path: str) -> str:
    """Relative path from a directory to a path, both absolute."""
    return posixpath.relpath(normalize_slashes(to_path), normalize_slashes(from_dir))
