"""Filesystem capability protocols consumed by the resolver."""

from typing import Protocol

from ..models import FileStat
from ..models import RealPathResult


class FileSystemCapability(Protocol):
    """Stat and read access used while probing candidate paths.

    Implementations must accept normalized paths that do not exist and must
    tolerate concurrent calls from several resolutions.
    """

    async def stat(self, path: str) -> FileStat: ...

    async def read_file(self, path: str) -> str | None: ...


class CompilerSystem(FileSystemCapability, Protocol):
    """Real-system access; the resolver only needs `realpath` from it."""

    async def realpath(self, path: str) -> RealPathResult: ...

    async def write_file(self, path: str, content: str) -> bool: ...

    async def create_dir(self, path: str) -> bool: ...
