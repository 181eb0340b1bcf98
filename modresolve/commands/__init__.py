"""CLI command groups for modresolve."""

from .logs import logs_cmd
from .resolve import resolve_cmd
from .settings import settings

__all__ = ["logs_cmd", "resolve_cmd", "settings"]
