"""
Django app configuration for the rail-surface library.

On startup the configured entities and permissions are loaded into the
process-wide snapshot store so request handlers can take a consistent
snapshot without rebuilding it.
"""

import logging

from django.apps import AppConfig as BaseAppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class AppConfig(BaseAppConfig):
    """Django app configuration for rail-surface."""

    name = "rail_surface"
    verbose_name = "Rail Surface"
    label = "rail_surface"

    def ready(self):
        """Publish the initial configuration snapshot."""
        from .core.exceptions import SurfaceError
        from .core.surface import reload_surface

        try:
            snapshot = reload_surface()
            logger.info("rail-surface initialized with %d entities", len(snapshot.entities))
        except SurfaceError as e:
            logger.error(f"Error initializing rail-surface: {e}")
            # Production keeps serving without a snapshot; routes fail until a valid reload.
            if getattr(settings, "DEBUG", False):
                raise
