"""Pytest configuration for modresolve tests."""

import errno
import sys
from pathlib import Path

import pytest

# Allow running the suite from a checkout without installing the package
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from modresolve.models import FileStat  # noqa: E402
from modresolve.models import RealPathResult  # noqa: E402
from modresolve.paths import dirname  # noqa: E402
from modresolve.paths import normalize_path  # noqa: E402


class MemorySystem:
    """CompilerSystem over a dict of files, for tests.

    Directories are implied by file paths. `links` maps a path to its
    canonical target and `realpath_errors` forces realpath failures.
    """

    def __init__(self, files=None, links=None, realpath_errors=None):
        self.files = {normalize_path(p): text for p, text in (files or {}).items()}
        self.links = {normalize_path(k): normalize_path(v) for k, v in (links or {}).items()}
        self.realpath_errors = dict(realpath_errors or {})
        self.dirs = set()
        for path in self.files:
            self._add_parents(path)
        for path in self.links:
            self._add_parents(path)
        self.stat_calls = []
        self.writes = {}

    def _add_parents(self, path):
        parent = dirname(path)
        while parent not in self.dirs:
            self.dirs.add(parent)
            next_parent = dirname(parent)
            if next_parent == parent:
                break
            parent = next_parent

    async def stat(self, path):
        self.stat_calls.append(path)
        path = normalize_path(path)
        target = self.links.get(path, path)
        if target in self.files:
            return FileStat(is_file=True, size=len(self.files[target]))
        if target in self.dirs:
            return FileStat(is_directory=True)
        return FileStat(error="FileNotFoundError")

    async def read_file(self, path):
        path = normalize_path(path)
        return self.files.get(self.links.get(path, path))

    async def realpath(self, path):
        path = normalize_path(path)
        if path in self.realpath_errors:
            return RealPathResult(path=path, error=self.realpath_errors[path])
        if path in self.links:
            return RealPathResult(path=self.links[path])
        if path in self.files or path in self.dirs:
            return RealPathResult(path=path)
        return RealPathResult(path=path, error=FileNotFoundError(errno.ENOENT, "No such file or directory", path))

    async def write_file(self, path, content):
        self.writes[normalize_path(path)] = content
        return True

    async def create_dir(self, path):
        self.dirs.add(normalize_path(path))
        return True


@pytest.fixture
def memory_system():
    """Factory for MemorySystem instances."""
    return MemorySystem
