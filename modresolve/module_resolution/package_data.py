"""Package manifest normalization."""

from typing import Any

from ..paths import is_string

DEFAULT_VERSION = "0.0.0"


def normalize_pkg_data(pkg_data: dict[str, Any] | None, module_id: str) -> dict[str, Any]:
    """Return a copy of a manifest with `name` and `version` always set.

    A missing, non-string or empty `name` becomes the requested module id and
    a missing, non-string or empty `version` becomes "0.0.0". Every other
    field is passed through untouched and the input is never mutated.

    Args:
        pkg_data: Manifest found by the engine, or None
        module_id: Identifier that was being resolved

    Returns:
        Normalized manifest dict
    """
    normalized = dict(pkg_data or {})

    if not is_string(normalized.get("name")) or not normalized["name"]:
        normalized["name"] = module_id

    if not is_string(normalized.get("version")) or not normalized["version"]:
        normalized["version"] = DEFAULT_VERSION

    return normalized
