"""
Copy-on-reload configuration snapshots.

A snapshot bundles the entity registry, the permission map and the database
object descriptors of one configuration load. Snapshots are never mutated:
a reload builds a complete new snapshot and publishes it in one reference
swap, so a synthesis pass or request that already took the current snapshot
never observes a half-updated role grant.
"""

import logging
import threading
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping, Optional

from ..entities.loader import load_database_objects, load_runtime_entities
from ..entities.registry import RuntimeEntities
from ..entities.types import DatabaseObject, DatabaseType
from .authorization import AuthorizationResolver, EntityPermissionMap, build_permission_map

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SurfaceSnapshot:
    """One fully-built configuration snapshot."""

    database_type: DatabaseType
    entities: RuntimeEntities
    permission_map: EntityPermissionMap
    database_objects: Mapping[str, DatabaseObject] = field(
        default_factory=lambda: MappingProxyType({})
    )
    version: int = 0

    @property
    def authorization_resolver(self) -> AuthorizationResolver:
        return AuthorizationResolver(self.permission_map)


def build_snapshot(
    database_type: DatabaseType,
    entities_config: Optional[Mapping[str, Any]],
    database_objects_config: Optional[Mapping[str, Any]] = None,
    case_insensitive_roles: bool = False,
    version: int = 0,
) -> SurfaceSnapshot:
    """Load entities, permissions and descriptors into a new snapshot."""
    entities = load_runtime_entities(entities_config)
    database_objects = load_database_objects(database_objects_config, entities)
    return SurfaceSnapshot(
        database_type=database_type,
        entities=entities,
        permission_map=build_permission_map(entities, case_insensitive=case_insensitive_roles),
        database_objects=MappingProxyType(dict(database_objects)),
        version=version,
    )


class SnapshotStore:
    """Holds the live snapshot and replaces it atomically on reload."""

    def __init__(self, snapshot: Optional[SurfaceSnapshot] = None):
        self._lock = threading.Lock()
        self._snapshot = snapshot

    def current(self) -> Optional[SurfaceSnapshot]:
        return self._snapshot

    def publish(self, snapshot: SurfaceSnapshot) -> SurfaceSnapshot:
        """Publish a new snapshot, stamping it with the next version."""
        with self._lock:
            previous = self._snapshot
            next_version = (previous.version + 1) if previous is not None else 1
            stamped = replace(snapshot, version=next_version)
            self._snapshot = stamped
        logger.info(
            "Published configuration snapshot v%d (%d entities)",
            stamped.version,
            len(stamped.entities),
        )
        return stamped
