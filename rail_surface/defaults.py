"""
Default configuration for the rail-surface library.

Single source of truth for every setting the library consumes. Each section
mirrors one of the dataclasses defined in ``rail_surface.core.settings``;
``entities`` and ``database_objects`` hold the entity configuration and the
declared database object descriptors.
"""

from __future__ import annotations

import copy
from typing import Any

LIBRARY_DEFAULTS: dict[str, Any] = {
    "data_source": {
        "database_type": "mssql",
    },
    "rest_settings": {
        "enabled": True,
        "path": "/api",
    },
    "graphql_settings": {
        "enabled": True,
    },
    "permission_settings": {
        "case_insensitive_roles": False,
    },
    "observability_settings": {
        "enable_sentry": False,
    },
    "entities": {},
    "database_objects": {},
}


def merge_settings(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    result = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = merge_settings(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


__all__ = ["LIBRARY_DEFAULTS", "merge_settings"]
