"""Settings manager for resolver settings.yaml files.

Manages three-scope settings system:
- User global (~/.modresolve/settings.yaml)
- Project (.modresolve/settings.yaml)
- Local (.modresolve/settings.local.yaml)

Resolver defaults live under the `resolver:` key:

    resolver:
      extensions: [".ts", ".tsx", ".js"]
      module_directories: ["node_modules"]
      paths: []
      preserve_symlinks: true
      include_core_modules: true
      package_filter: default   # or "none"
"""

import logging
from pathlib import Path
from typing import Any
from typing import Literal

import yaml
from pydantic import BaseModel
from pydantic import Field

from .models import NO_PACKAGE_FILTER
from .models import ResolveModuleIdOptions

logger = logging.getLogger(__name__)

SCOPES = ("user", "project", "local")


class ResolverSettings(BaseModel):
    """Validated `resolver:` section of the merged settings."""

    extensions: list[str] | None = Field(default=None, description="Extension search order")
    module_directories: list[str] | None = Field(default=None, description="Directory names searched for packages")
    paths: list[str] = Field(default_factory=list, description="Extra directories searched last")
    preserve_symlinks: bool = True
    include_core_modules: bool = True
    package_filter: Literal["default", "none"] = "default"

    def to_options(self, module_id: str, containing_file: str, **overrides: Any) -> ResolveModuleIdOptions:
        """Build a request from these settings, with keyword overrides."""
        values: dict[str, Any] = {
            "module_id": module_id,
            "containing_file": containing_file,
            "exts": self.extensions,
            "package_filter": NO_PACKAGE_FILTER if self.package_filter == "none" else None,
            "preserve_symlinks": self.preserve_symlinks,
            "module_directories": self.module_directories,
            "paths": self.paths or None,
            "include_core_modules": self.include_core_modules,
        }
        values.update(overrides)
        return ResolveModuleIdOptions(**values)


class SettingsManager:
    """Manages settings across user/project/local scopes."""

    def __init__(self, settings_dir: Path | None = None, user_dir: Path | None = None):
        """Initialize settings manager with standard paths.

        Args:
            settings_dir: Base directory for project/local settings (for testing).
                          If None, uses .modresolve in current directory.
            user_dir: Base directory for user settings (for testing).
                      If None, uses ~/.modresolve.
        """
        if settings_dir is None:
            settings_dir = Path(".modresolve")
        if user_dir is None:
            user_dir = Path.home() / ".modresolve"

        self.user_settings_file = user_dir / "settings.yaml"
        self.project_settings_file = settings_dir / "settings.yaml"
        self.local_settings_file = settings_dir / "settings.local.yaml"

    def scope_file(self, scope: str) -> Path:
        file_map = {
            "user": self.user_settings_file,
            "project": self.project_settings_file,
            "local": self.local_settings_file,
        }
        if scope not in file_map:
            raise ValueError(f"Unknown settings scope '{scope}', expected one of {', '.join(SCOPES)}")
        return file_map[scope]

    def get_merged_settings(self) -> dict[str, Any]:
        """Get merged settings from all scopes.

        Merge order (later overrides earlier):
        1. User settings
        2. Project settings
        3. Local settings

        Returns:
            Merged settings dictionary
        """
        merged: dict[str, Any] = {}
        for scope in SCOPES:
            settings = self._read_settings(self.scope_file(scope))
            if settings:
                merged = self._deep_merge(merged, settings)
        return merged

    def get_resolver_settings(self) -> ResolverSettings:
        """Validate the merged `resolver:` section.

        Raises:
            pydantic.ValidationError: The section holds values of the wrong type
        """
        section = self.get_merged_settings().get("resolver") or {}
        return ResolverSettings.model_validate(section)

    def set_resolver_value(self, key: str, value: Any, scope: str = "project") -> None:
        """Set one `resolver:` key in a single scope.

        Args:
            key: ResolverSettings field name
            value: New value, validated before writing
            scope: "user", "project", or "local"
        """
        if key not in ResolverSettings.model_fields:
            raise ValueError(f"Unknown resolver setting '{key}'")

        current = self._read_settings(self.scope_file(scope)) or {}
        candidate = self._deep_merge(current.get("resolver") or {}, {key: value})
        ResolverSettings.model_validate(candidate)

        self._update_settings(self.scope_file(scope), {"resolver": {key: value}})
        logger.info(f"Set {scope} resolver.{key} = {value!r}")

    def _read_settings(self, path: Path) -> dict[str, Any] | None:
        """Read settings from YAML file.

        Args:
            path: Path to settings file

        Returns:
            Settings dict or None if file doesn't exist or can't be parsed
        """
        if not path.exists():
            return None

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
                return data if isinstance(data, dict) else {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to read settings from {path}: {e}")
            return None

    def _write_settings(self, path: Path, settings: dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(path, "w") as f:
                yaml.dump(settings, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            logger.error(f"Failed to write settings to {path}: {e}")
            raise

    def _update_settings(self, path: Path, updates: dict[str, Any]) -> None:
        existing = self._read_settings(path) or {}
        merged = self._deep_merge(existing, updates)
        self._write_settings(path, merged)

    def _deep_merge(self, base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries.

        Args:
            base: Base dictionary
            overlay: Overlay dictionary (takes precedence)

        Returns:
            Merged dictionary
        """
        result = base.copy()

        for key, value in overlay.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result
