"""
Unit tests for settings resolution and the surface bootstrap.
"""

import types
from contextlib import contextmanager

import pytest

from rail_surface.config_proxy import SettingsProxy, get_setting
from rail_surface.core.exceptions import ConfigurationError, InitializationError
from rail_surface.core.settings import DataSourceSettings, RestSettings, RuntimeSettings
from rail_surface.core.surface import get_rest_router, reload_surface, synthesize_surface
from rail_surface.entities import DatabaseType
from rail_surface.security import SnapshotStore

pytestmark = pytest.mark.unit


def test_library_defaults_apply_when_not_configured(settings):
    settings.RAIL_SURFACE = {}

    assert get_setting("rest_settings.path") == "/api"
    assert get_setting("graphql_settings.enabled") is True
    assert get_setting("permission_settings.case_insensitive_roles") is False
    assert get_setting("missing.key", "fallback") == "fallback"


def test_django_settings_override_defaults(settings):
    settings.RAIL_SURFACE = {"rest_settings": {"path": "/rest-api"}}

    runtime_settings = RuntimeSettings.from_settings()

    assert runtime_settings.rest.path == "/rest-api"
    assert runtime_settings.rest.enabled is True
    assert runtime_settings.graphql.enabled is True


def test_proxy_caches_lookups(settings):
    settings.RAIL_SURFACE = {"data_source": {"database_type": "postgresql"}}
    proxy = SettingsProxy()

    assert proxy.get("data_source.database_type") == "postgresql"
    settings.RAIL_SURFACE = {"data_source": {"database_type": "mysql"}}
    assert proxy.get("data_source.database_type") == "postgresql"

    proxy.clear_cache()
    assert proxy.get("data_source.database_type") == "mysql"


def test_rest_path_must_start_with_separator():
    with pytest.raises(ConfigurationError):
        RestSettings(path="rest-api")


def test_database_type_is_validated():
    assert DataSourceSettings(database_type="CosmosDB_NoSQL").dialect is DatabaseType.COSMOSDB_NOSQL

    with pytest.raises(ConfigurationError):
        DataSourceSettings(database_type="oracle").dialect


def test_reload_surface_publishes_configured_snapshot(settings):
    store = SnapshotStore()

    snapshot = reload_surface(store=store)

    assert store.current() is snapshot
    assert set(snapshot.entities) == {"Book", "Author", "GetBooks"}
    assert snapshot.database_type is DatabaseType.MSSQL


def test_rest_router_uses_configured_prefix(settings):
    router = get_rest_router(reload_surface(store=SnapshotStore()))

    assert router.dispatch("/rest-api/books/id/1", "GET", "anonymous").entity_name == "Book"


def test_synthesis_errors_are_captured_when_sentry_enabled(settings, monkeypatch):
    settings.RAIL_SURFACE = {
        "observability_settings": {"enable_sentry": True},
        "entities": {
            "GetBooks": {
                "source": {"object": "dbo.get_books", "type": "stored-procedure"},
                "permissions": [{"role": "anonymous", "actions": ["execute"]}],
            }
        },
    }
    captured = []
    tags = {}

    @contextmanager
    def _new_scope():
        yield types.SimpleNamespace(
            set_tag=lambda key, value: tags.__setitem__(key, value),
            set_extra=lambda key, value: None,
        )

    fake_sdk = types.SimpleNamespace(
        new_scope=_new_scope,
        capture_exception=lambda exc: captured.append(exc) or "event-1",
    )
    monkeypatch.setattr("rail_surface.observability.sentry_sdk", fake_sdk)

    with pytest.raises(InitializationError):
        synthesize_surface()

    assert len(captured) == 1
    assert tags["rail_surface.sub_status"] == "ErrorInInitialization"


def test_synthesis_errors_are_not_captured_by_default(settings, monkeypatch):
    settings.RAIL_SURFACE = {
        "entities": {
            "GetBooks": {
                "source": {"object": "dbo.get_books", "type": "stored-procedure"},
                "permissions": [{"role": "anonymous", "actions": ["execute"]}],
            }
        },
    }
    captured = []
    monkeypatch.setattr(
        "rail_surface.observability.sentry_sdk",
        types.SimpleNamespace(capture_exception=captured.append),
    )

    with pytest.raises(InitializationError):
        synthesize_surface()

    assert captured == []


def test_disabled_rest_surface_has_no_router(settings):
    settings.RAIL_SURFACE = {"rest_settings": {"enabled": False}}

    with pytest.raises(ConfigurationError, match="rest_settings.enabled"):
        get_rest_router(reload_surface(store=SnapshotStore()))


def test_disabled_graphql_surface_refuses_synthesis(settings):
    settings.RAIL_SURFACE = {"graphql_settings": {"enabled": False}}

    with pytest.raises(ConfigurationError, match="graphql_settings.enabled"):
        synthesize_surface()
