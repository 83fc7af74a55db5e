"""
Surface bootstrap from Django settings.

Builds configuration snapshots from ``RAIL_SURFACE``, publishes them to the
process-wide SnapshotStore and runs synthesis passes against them. A failed
build never replaces the published snapshot.
"""

import logging
from typing import Optional, Union

from graphql.language import ast

from ..graphql.converter import build_base_document
from ..graphql.schema import SchemaSynthesizer, SynthesizedSchema
from ..observability import capture_initialization_error
from ..rest.routing import RestRouter
from ..security.snapshot import SnapshotStore, SurfaceSnapshot, build_snapshot
from .exceptions import ConfigurationError, SurfaceError
from .settings import RuntimeSettings

logger = logging.getLogger(__name__)

snapshot_store = SnapshotStore()


def load_snapshot(runtime_settings: Optional[RuntimeSettings] = None) -> SurfaceSnapshot:
    """Build an unpublished snapshot from settings."""
    runtime_settings = runtime_settings or RuntimeSettings.from_settings()
    return build_snapshot(
        runtime_settings.data_source.dialect,
        runtime_settings.entities,
        runtime_settings.database_objects,
        case_insensitive_roles=runtime_settings.permissions.case_insensitive_roles,
    )


def reload_surface(
    runtime_settings: Optional[RuntimeSettings] = None,
    store: Optional[SnapshotStore] = None,
) -> SurfaceSnapshot:
    """
    Build a snapshot from settings and publish it.

    Raises:
        SurfaceError: The configuration is invalid; the previous snapshot
            stays published.
    """
    runtime_settings = runtime_settings or RuntimeSettings.from_settings()
    store = store or snapshot_store
    try:
        snapshot = load_snapshot(runtime_settings)
    except SurfaceError as exc:
        logger.error("Failed to load rail-surface configuration: %s", exc)
        capture_initialization_error(exc, runtime_settings.observability.enable_sentry)
        raise
    return store.publish(snapshot)


def synthesize_surface(
    base_schema: Optional[Union[str, ast.DocumentNode]] = None,
    snapshot: Optional[SurfaceSnapshot] = None,
    runtime_settings: Optional[RuntimeSettings] = None,
) -> SynthesizedSchema:
    """
    Run one synthesis pass.

    Without ``base_schema`` the base document is built from the snapshot's
    database object descriptors.

    Raises:
        ConfigurationError: The GraphQL surface is disabled.
        InitializationError: Synthesis could not complete.
    """
    runtime_settings = runtime_settings or RuntimeSettings.from_settings()
    if not runtime_settings.graphql.enabled:
        raise ConfigurationError("The GraphQL surface is disabled (graphql_settings.enabled).")
    try:
        snapshot = snapshot or load_snapshot(runtime_settings)
        if base_schema is None:
            base_schema = build_base_document(
                snapshot.entities, snapshot.database_objects, snapshot.database_type
            )
        return SchemaSynthesizer.from_snapshot(snapshot).synthesize(base_schema)
    except SurfaceError as exc:
        logger.error("Schema synthesis failed: %s", exc)
        capture_initialization_error(
            exc,
            runtime_settings.observability.enable_sentry,
            {"snapshot_version": snapshot.version if snapshot is not None else None},
        )
        raise


def get_rest_router(
    snapshot: Optional[SurfaceSnapshot] = None,
    runtime_settings: Optional[RuntimeSettings] = None,
) -> RestRouter:
    """
    RestRouter for ``snapshot`` (the published one by default).

    Raises:
        ConfigurationError: The REST surface is disabled.
    """
    runtime_settings = runtime_settings or RuntimeSettings.from_settings()
    if not runtime_settings.rest.enabled:
        raise ConfigurationError("The REST surface is disabled (rest_settings.enabled).")
    snapshot = snapshot or snapshot_store.current()
    if snapshot is None:
        snapshot = reload_surface(runtime_settings)
    return RestRouter.from_snapshot(snapshot, runtime_settings.rest.path)
