"""Bridge from the filesystem capability to the engine's callback contract.

Each bridge method awaits the filesystem and then completes the callback it
was handed exactly once, as `callback(None, value)` or `callback(error)`.

Probe semantics differ per method:
- is_file / is_directory: a missing path is False, never an error
- read_file: a missing file IS an error; the engine relies on it
- realpath: a missing path falls back to the normalized input path
"""

import logging
from collections.abc import Sequence

from ..errors import FileReadError
from ..fs.base import CompilerSystem
from ..fs.base import FileSystemCapability
from ..paths import is_string
from ..paths import normalize_fs_path
from .engine import Completion

logger = logging.getLogger(__name__)


class CustomResolver:
    """Callback-style view of a filesystem for the resolution engine."""

    def __init__(
        self,
        sys: CompilerSystem,
        in_memory_fs: FileSystemCapability,
        extensions: Sequence[str] | None = None,
    ):
        self.sys = sys
        self.in_memory_fs = in_memory_fs
        self.extensions = extensions

    async def is_file(self, file_path: str, cb: Completion) -> None:
        fs_file_path = normalize_fs_path(file_path)
        try:
            stat = await self.in_memory_fs.stat(fs_file_path)
        except OSError as e:
            logger.debug(f"[resolve] stat failed for {fs_file_path}: {e}")
            cb(None, False)
            return
        cb(None, bool(stat.is_file))

    async def is_directory(self, dir_path: str, cb: Completion) -> None:
        fs_dir_path = normalize_fs_path(dir_path)
        try:
            stat = await self.in_memory_fs.stat(fs_dir_path)
        except OSError as e:
            logger.debug(f"[resolve] stat failed for {fs_dir_path}: {e}")
            cb(None, False)
            return
        cb(None, bool(stat.is_directory))

    async def read_file(self, p: str, cb: Completion) -> None:
        fs_file_path = normalize_fs_path(p)
        data = await self.in_memory_fs.read_file(fs_file_path)
        if is_string(data):
            cb(None, data)
            return
        cb(FileReadError(p))

    async def realpath(self, p: str, cb: Completion) -> None:
        fs_file_path = normalize_fs_path(p)
        results = await self.sys.realpath(fs_file_path)

        if results.error is not None and not isinstance(results.error, FileNotFoundError):
            cb(results.error)
            return

        if results.error is not None:
            logger.debug(f"[resolve] realpath miss for {fs_file_path}, keeping path")
            cb(None, fs_file_path)
            return

        cb(None, results.path)

    def __repr__(self) -> str:
        return f"CustomResolver(extensions={self.extensions!r})"


def create_custom_resolver_async(
    sys: CompilerSystem,
    in_memory_fs: FileSystemCapability,
    exts: Sequence[str] | None = None,
) -> CustomResolver:
    return CustomResolver(sys, in_memory_fs, exts)
