"""In-memory overlay filesystem.

Writes land in memory first; reads and stats answer from memory and fall
through to the underlying system on a miss, caching what the system said.
A path removed in memory stays absent even when it exists on disk.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..models import FileStat
from ..paths import dirname
from ..paths import get_root_length
from ..paths import normalize_path
from .base import CompilerSystem

logger = logging.getLogger(__name__)


@dataclass
class FsItem:
    """Cached knowledge about one path."""

    exists: bool | None = None
    is_file: bool | None = None
    is_directory: bool | None = None
    size: int | None = None
    file_text: str | None = None
    queue_write: bool = False


class InMemoryFileSystem:
    """Overlay of in-memory items on top of a CompilerSystem."""

    def __init__(self, sys: CompilerSystem):
        self.sys = sys
        self.items: dict[str, FsItem] = {}

    def get_item(self, path: str) -> FsItem:
        path = normalize_path(path)
        item = self.items.get(path)
        if item is None:
            item = FsItem()
            self.items[path] = item
        return item

    async def access(self, path: str) -> bool:
        stat = await self.stat(path)
        return stat.is_file or stat.is_directory

    async def stat(self, path: str) -> FileStat:
        path = normalize_path(path)
        item = self.get_item(path)

        if item.is_file is None or item.is_directory is None:
            sys_stat = await self.sys.stat(path)
            item.exists = sys_stat.is_file or sys_stat.is_directory
            item.is_file = sys_stat.is_file
            item.is_directory = sys_stat.is_directory
            item.size = sys_stat.size

        return FileStat(
            is_file=bool(item.exists and item.is_file),
            is_directory=bool(item.exists and item.is_directory),
            size=item.size or 0,
        )

    async def read_file(self, path: str) -> str | None:
        path = normalize_path(path)
        item = self.get_item(path)

        if item.exists is False:
            return None
        if isinstance(item.file_text, str):
            return item.file_text

        text = await self.sys.read_file(path)
        if isinstance(text, str):
            item.exists = True
            item.is_file = True
            item.is_directory = False
            item.file_text = text
            item.size = len(text)
        else:
            item.is_file = False
            if not item.is_directory:
                item.exists = False
        return text

    async def write_file(self, path: str, content: str) -> bool:
        """Store content in memory. Returns True when the content changed."""
        path = normalize_path(path)
        item = self.get_item(path)
        changed = item.file_text != content

        item.exists = True
        item.is_file = True
        item.is_directory = False
        item.file_text = content
        item.size = len(content)
        item.queue_write = item.queue_write or changed

        self._mark_parents(path)
        logger.debug(f"[fs] write {path} changed={changed}")
        return changed

    async def remove(self, path: str) -> None:
        """Mark a path, and everything cached beneath it, as absent."""
        path = normalize_path(path)
        prefix = path.rstrip("/") + "/"
        for item_path, item in self.items.items():
            if item_path == path or item_path.startswith(prefix):
                self._mark_absent(item)
        self._mark_absent(self.get_item(path))

    async def flush(self) -> list[str]:
        """Write queued in-memory files to the system. Returns the paths written."""
        written = []
        for path, item in sorted(self.items.items()):
            if item.queue_write and item.exists and isinstance(item.file_text, str):
                await self.sys.write_file(path, item.file_text)
                item.queue_write = False
                written.append(path)
        return written

    def clear_cache(self) -> None:
        self.items.clear()

    def clear_file_cache(self, path: str) -> None:
        path = normalize_path(path)
        item = self.items.get(path)
        if item is not None and not item.queue_write:
            del self.items[path]

    def _mark_parents(self, path: str) -> None:
        parent = dirname(path)
        while True:
            item = self.get_item(parent)
            item.exists = True
            item.is_directory = True
            item.is_file = False
            if len(parent) <= get_root_length(parent) or parent == ".":
                break
            next_parent = dirname(parent)
            if next_parent == parent:
                break
            parent = next_parent

    @staticmethod
    def _mark_absent(item: FsItem) -> None:
        item.exists = False
        item.is_file = False
        item.is_directory = False
        item.file_text = None
        item.size = None
        item.queue_write = False

    def __repr__(self) -> str:
        return f"InMemoryFileSystem({self.sys!r}, items={len(self.items)})"
