"""
Configuration management for rail-surface.

This module provides a settings proxy that resolves configuration from the
Django ``RAIL_SURFACE`` setting first and the library defaults second.
"""

from typing import Any

from django.conf import settings

from .defaults import LIBRARY_DEFAULTS, merge_settings

SETTINGS_NAME = "RAIL_SURFACE"


class SettingsProxy:
    """
    Proxy for accessing rail-surface settings with hierarchical resolution.

    Settings are resolved in the following order:
    1. Global Django settings (RAIL_SURFACE)
    2. Library defaults (LIBRARY_DEFAULTS)
    """

    def __init__(self) -> None:
        self._cache: dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a setting value with hierarchical resolution and caching.

        Args:
            key: Setting key to retrieve, dot notation for nested sections
            default: Default value if setting is not found

        Returns:
            The setting value from the highest priority source
        """
        if key in self._cache:
            return self._cache[key]

        value = self._get_django_setting(key)
        if value is None:
            value = self._get_nested_value(LIBRARY_DEFAULTS, key)
        if value is None:
            value = default

        self._cache[key] = value
        return value

    def get_section(self, section: str) -> dict[str, Any]:
        """Return a settings section with Django values layered over defaults."""
        defaults = self._get_nested_value(LIBRARY_DEFAULTS, section)
        configured = self._get_django_setting(section)
        return merge_settings(
            defaults if isinstance(defaults, dict) else {},
            configured if isinstance(configured, dict) else {},
        )

    def clear_cache(self) -> None:
        self._cache.clear()

    def _get_django_setting(self, key: str) -> Any:
        return self._get_nested_value(getattr(settings, SETTINGS_NAME, {}), key)

    def _get_nested_value(self, data: dict[str, Any], key: str) -> Any:
        """
        Get nested value from dictionary using dot notation.

        Returns:
            The value or None if not found
        """
        if not isinstance(data, dict):
            return None

        current: Any = data
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return None
            current = current[part]
        return current


def get_settings_proxy() -> SettingsProxy:
    """Return a fresh proxy; Django settings may change between calls in tests."""
    return SettingsProxy()


def get_setting(key: str, default: Any = None) -> Any:
    """
    Get a single setting value.

    Example:
        get_setting("rest_settings.path")  # "/api" unless overridden
    """
    return get_settings_proxy().get(key, default)


def get_section(section: str) -> dict[str, Any]:
    return get_settings_proxy().get_section(section)


__all__ = ["SETTINGS_NAME", "SettingsProxy", "get_section", "get_setting", "get_settings_proxy"]
