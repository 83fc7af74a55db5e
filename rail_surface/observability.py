"""
Optional Sentry capture of surface initialization failures.

Active only when ``observability_settings.enable_sentry`` is set and the
Sentry SDK has been initialized by the hosting project.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import sentry_sdk

from .core.exceptions import SurfaceError

logger = logging.getLogger(__name__)


def capture_initialization_error(
    error: BaseException,
    enabled: bool,
    context: Optional[dict[str, Any]] = None,
) -> None:
    """Send ``error`` to Sentry, tagged with its sub-status code."""
    if not enabled:
        return
    with sentry_sdk.new_scope() as scope:
        scope.set_tag("rail_surface.stage", "initialization")
        if isinstance(error, SurfaceError):
            scope.set_tag("rail_surface.sub_status", error.sub_status_code.value)
        for key, value in (context or {}).items():
            scope.set_extra(key, value)
        event_id = sentry_sdk.capture_exception(error)
    logger.debug("Captured initialization error in Sentry (event %s)", event_id)
