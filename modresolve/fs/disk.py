"""Pass-through access to the real disk."""

import logging
import os
from pathlib import Path

from ..models import FileStat
from ..models import RealPathResult
from ..paths import normalize_path

logger = logging.getLogger(__name__)


class DiskSystem:
    """CompilerSystem backed by the local disk.

    Lookups never raise for missing paths: stat reports both flags False,
    read_file returns None and realpath returns the error in its result.
    """

    async def stat(self, path: str) -> FileStat:
        try:
            st = os.stat(path)
        except OSError as e:
            return FileStat(error=e.__class__.__name__)

        p = Path(path)
        return FileStat(
            is_file=p.is_file(),
            is_directory=p.is_dir(),
            is_symbolic_link=p.is_symlink(),
            size=st.st_size,
        )

    async def read_file(self, path: str) -> str | None:
        try:
            return Path(path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"[fs] read miss {path}: {e}")
            return None

    async def realpath(self, path: str) -> RealPathResult:
        try:
            return RealPathResult(path=normalize_path(os.path.realpath(path, strict=True)))
        except OSError as e:
            return RealPathResult(path=path, error=e)

    async def write_file(self, path: str, content: str) -> bool:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        return True

    async def create_dir(self, path: str) -> bool:
        Path(path).mkdir(parents=True, exist_ok=True)
        return True

    def __repr__(self) -> str:
        return "DiskSystem()"
