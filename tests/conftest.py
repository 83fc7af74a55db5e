"""
Shared fixtures: a small bookstore configuration and its base schema.
"""

import pytest

from rail_surface.entities import load_database_objects, load_runtime_entities
from rail_surface.graphql import parse_base_schema
from rail_surface.security import build_permission_map

BOOKSTORE_SCHEMA = """
type Book @model(name: "Book") {
  id: Int! @primaryKey(databaseType: "mssql") @autoGenerated
  title: String!
  publishedOn: Date
  price: Float! @defaultValue(value: "0")
  publisher: Publisher
}

type Publisher @model(name: "Publisher") {
  id: Int! @primaryKey(databaseType: "mssql")
  name: String!
}

type GetBooks @model(name: "GetBooks") {
  id: Int!
  title: String!
}
"""

BOOKSTORE_ENTITIES = {
    "Book": {
        "source": {"object": "dbo.books", "type": "table"},
        "permissions": [
            {"role": "anonymous", "actions": ["read"]},
            {"role": "authenticated", "actions": ["create", "read"]},
            {"role": "editor", "actions": ["update"]},
            {"role": "admin", "actions": ["delete"]},
        ],
    },
    "Publisher": {
        "source": {"object": "dbo.publishers", "type": "table"},
        "permissions": [{"role": "anonymous", "actions": ["read"]}],
    },
    "GetBooks": {
        "source": {
            "object": "dbo.get_books",
            "type": "stored-procedure",
            "parameters": {"limit": "10"},
        },
        "permissions": [
            {"role": "authenticated", "actions": ["execute"]},
            {"role": "admin", "actions": ["*"]},
        ],
    },
}

BOOKSTORE_DATABASE_OBJECTS = {
    "GetBooks": {
        "parameters": [
            {"name": "limit", "type": "int"},
            {"name": "genre", "type": "nvarchar"},
        ],
        "result_columns": [
            {"name": "id", "type": "int"},
            {"name": "title", "type": "nvarchar"},
        ],
    },
}


@pytest.fixture
def base_document():
    return parse_base_schema(BOOKSTORE_SCHEMA)


@pytest.fixture
def entities():
    return load_runtime_entities(BOOKSTORE_ENTITIES)


@pytest.fixture
def permission_map(entities):
    return build_permission_map(entities)


@pytest.fixture
def database_objects(entities):
    return load_database_objects(BOOKSTORE_DATABASE_OBJECTS, entities)


@pytest.fixture
def bookstore_config():
    """Raw entity and database object configuration, plus the base schema SDL."""
    return {
        "schema": BOOKSTORE_SCHEMA,
        "entities": BOOKSTORE_ENTITIES,
        "database_objects": BOOKSTORE_DATABASE_OBJECTS,
    }
