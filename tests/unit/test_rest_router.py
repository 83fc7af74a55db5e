"""
Unit tests for REST entity lookup, verb mapping and authorization.
"""

from http import HTTPStatus

import pytest

from rail_surface.core.exceptions import (
    AuthorizationError,
    EntityNotFoundError,
    MethodNotAllowedError,
    RouteError,
    SubStatusCode,
)
from rail_surface.entities import DatabaseType, EntityActionOperation
from rail_surface.rest import RestRequest, RestRouter
from rail_surface.security import build_snapshot

pytestmark = pytest.mark.unit

Op = EntityActionOperation


@pytest.fixture
def router():
    snapshot = build_snapshot(
        DatabaseType.MSSQL,
        {
            "Book": {
                "source": "dbo.books",
                "rest": {"path": "/books"},
                "permissions": [
                    {"role": "anonymous", "actions": ["read"]},
                    {"role": "editor", "actions": ["*"]},
                ],
            },
            "GetBooks": {
                "source": {"object": "dbo.get_books", "type": "stored-procedure"},
                "permissions": [{"role": "editor", "actions": ["execute"]}],
            },
            "Report": {
                "source": {"object": "dbo.report", "type": "stored-procedure"},
                "rest": {"methods": ["get", "post"]},
                "permissions": [{"role": "anonymous", "actions": ["execute"]}],
            },
            "Secret": {"source": "dbo.secret", "rest": False},
        },
    )
    return RestRouter.from_snapshot(snapshot, "/rest-api")


def test_dispatch_resolves_and_authorizes(router):
    request = router.dispatch("/rest-api/books/id/1", "GET", "anonymous")

    assert request == RestRequest("Book", "id/1", Op.READ)


@pytest.mark.parametrize(
    "method,operation",
    [
        ("GET", Op.READ),
        ("post", Op.CREATE),
        ("PUT", Op.UPDATE),
        ("PATCH", Op.UPDATE),
        ("DELETE", Op.DELETE),
    ],
)
def test_table_verbs(router, method, operation):
    entity, _ = router.resolve("/rest-api/books")

    assert router.operation_for(entity, method) is operation


def test_unsupported_verb_is_rejected(router):
    entity, _ = router.resolve("/rest-api/books")

    with pytest.raises(MethodNotAllowedError) as excinfo:
        router.operation_for(entity, "TRACE")

    assert excinfo.value.status_code == HTTPStatus.METHOD_NOT_ALLOWED


def test_stored_procedures_execute_on_configured_verbs(router):
    get_books, _ = router.resolve("/rest-api/GetBooks")
    report, _ = router.resolve("/rest-api/Report")

    assert router.operation_for(get_books, "POST") is Op.EXECUTE
    with pytest.raises(MethodNotAllowedError):
        router.operation_for(get_books, "GET")
    assert router.operation_for(report, "GET") is Op.EXECUTE


def test_unknown_entity_path(router):
    with pytest.raises(EntityNotFoundError) as excinfo:
        router.resolve("/rest-api/Book/id/1")

    assert excinfo.value.message == "Invalid Entity path: Book."
    assert excinfo.value.status_code == HTTPStatus.NOT_FOUND
    assert excinfo.value.sub_status_code is SubStatusCode.ENTITY_NOT_FOUND


def test_rest_disabled_entity_is_not_routable(router):
    with pytest.raises(EntityNotFoundError):
        router.resolve("/rest-api/Secret")


def test_route_errors_propagate(router):
    with pytest.raises(RouteError):
        router.dispatch("/graphql/books", "GET", "anonymous")


def test_unauthorized_role_is_forbidden(router):
    with pytest.raises(AuthorizationError) as excinfo:
        router.dispatch("/rest-api/books", "POST", "anonymous")

    assert excinfo.value.status_code == HTTPStatus.FORBIDDEN
    assert excinfo.value.sub_status_code is SubStatusCode.AUTHORIZATION_CHECK_FAILED


def test_missing_role_is_forbidden(router):
    with pytest.raises(AuthorizationError):
        router.dispatch("/rest-api/books", "GET", None)


def test_wildcard_role_can_do_everything(router):
    for method in ("GET", "POST", "PUT", "PATCH", "DELETE"):
        assert router.dispatch("/rest-api/books/id/2", method, "editor").entity_name == "Book"
