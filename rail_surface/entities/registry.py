"""
Read-only registry of configured entities.
"""

from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Iterable, Optional

from ..core.exceptions import ConfigurationError
from .types import Entity


class RuntimeEntities(Mapping):
    """
    Immutable entity name -> Entity mapping.

    Built once per configuration snapshot. A reload builds a new instance
    instead of patching this one.
    """

    def __init__(self, entities: Iterable[Entity] = ()):
        by_name: dict[str, Entity] = {}
        by_path: dict[str, str] = {}
        for entity in entities:
            if entity.name in by_name:
                raise ConfigurationError(f"Entity '{entity.name}' is defined more than once.")
            by_name[entity.name] = entity
            if not entity.rest.enabled:
                continue
            path = entity.rest_path
            if path in by_path:
                raise ConfigurationError(
                    f"REST path '{path}' is used by both '{by_path[path]}' and '{entity.name}'."
                )
            by_path[path] = entity.name
        self._entities = MappingProxyType(by_name)
        self._paths = MappingProxyType(by_path)

    def __getitem__(self, name: str) -> Entity:
        return self._entities[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entities)

    def __len__(self) -> int:
        return len(self._entities)

    def __repr__(self) -> str:
        return f"RuntimeEntities({list(self._entities)!r})"

    def get_entity_name_from_path(self, entity_path: str) -> Optional[str]:
        """Return the entity exposed under a REST path segment, if any."""
        return self._paths.get(entity_path)
