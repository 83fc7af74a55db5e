"""
Internal utility functions for settings loading.
"""

from typing import Any

from ...config_proxy import get_section


def _section_kwargs(cls: type, section: str) -> dict[str, Any]:
    """Defaults merged with Django settings, limited to the dataclass fields."""
    merged = get_section(section)
    valid_fields = set(cls.__dataclass_fields__.keys())
    return {k: v for k, v in merged.items() if k in valid_fields}
