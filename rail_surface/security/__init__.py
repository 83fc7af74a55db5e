"""
Authorization package.

Exports:
    - EntityPermissionMap / build_permission_map: the permission index
    - get_roles_for_operation: roles authorized for an (entity, operation)
    - AuthorizationResolver: request-time role checks
    - SurfaceSnapshot / SnapshotStore / build_snapshot: copy-on-reload snapshots
"""

from .authorization import (
    AuthorizationResolver,
    EntityPermissionMap,
    build_permission_map,
    get_roles_for_operation,
)
from .snapshot import SnapshotStore, SurfaceSnapshot, build_snapshot

__all__ = [
    "AuthorizationResolver",
    "EntityPermissionMap",
    "build_permission_map",
    "get_roles_for_operation",
    "SnapshotStore",
    "SurfaceSnapshot",
    "build_snapshot",
]
