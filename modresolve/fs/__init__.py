"""Filesystem backends the resolver can probe."""

from .base import CompilerSystem
from .base import FileSystemCapability
from .disk import DiskSystem
from .in_memory import InMemoryFileSystem

__all__ = [
    "CompilerSystem",
    "DiskSystem",
    "FileSystemCapability",
    "InMemoryFileSystem",
]
