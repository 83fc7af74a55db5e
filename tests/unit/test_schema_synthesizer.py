"""
Unit tests for schema assembly and the base schema converter.
"""

import pytest
from graphql import print_ast

from rail_surface.core.exceptions import InitializationError
from rail_surface.entities import DatabaseType, load_database_objects, load_runtime_entities
from rail_surface.graphql import SchemaSynthesizer, build_base_document
from rail_surface.graphql.directives import get_authorized_roles
from rail_surface.security import build_snapshot

pytestmark = pytest.mark.unit


@pytest.fixture
def synthesized(bookstore_config, entities, permission_map, database_objects):
    synthesizer = SchemaSynthesizer(DatabaseType.MSSQL, entities, permission_map, database_objects)
    return synthesizer.synthesize(bookstore_config["schema"])


def test_synthesize_builds_both_root_types(synthesized):
    assert "createBook" in synthesized.mutation.field_names
    assert "books" in synthesized.query.field_names


def test_assembled_sdl_declares_directives_and_scalars(synthesized):
    sdl = synthesized.print_schema_sdl()

    assert "directive @authorize(roles: [String!]) on OBJECT | FIELD_DEFINITION" in sdl
    assert "scalar Date" in sdl
    assert "scalar Int" not in sdl
    assert "type Mutation" in sdl
    assert "type Query" in sdl
    assert "input CreateBookInput" in sdl


def test_assembled_document_builds_a_valid_schema(synthesized):
    schema = synthesized.build_schema()

    assert set(schema.mutation_type.fields) == {
        "createBook",
        "updateBook",
        "deleteBook",
        "executeGetBooks",
    }
    assert "book_by_pk" in schema.query_type.fields


def test_synthesizer_from_snapshot(bookstore_config):
    snapshot = build_snapshot(
        DatabaseType.MSSQL, bookstore_config["entities"], bookstore_config["database_objects"]
    )

    result = SchemaSynthesizer.from_snapshot(snapshot).synthesize(bookstore_config["schema"])

    assert result.mutation.get_field("deleteBook").roles == {"admin"}


def test_converter_builds_model_types():
    entities = load_runtime_entities(
        {
            "Book": {"source": "dbo.books"},
            "GetBooks": {"source": {"object": "dbo.get_books", "type": "stored-procedure"}},
        }
    )
    database_objects = load_database_objects(
        {
            "Book": {
                "columns": [
                    {"name": "id", "type": "int", "auto_generated": True},
                    {"name": "title", "type": "nvarchar"},
                    {"name": "rating", "type": "decimal", "nullable": True, "default": 0},
                ],
                "primary_keys": ["id"],
            },
            "GetBooks": {"result_columns": [{"name": "title", "type": "nvarchar"}]},
        },
        entities,
    )

    document = build_base_document(entities, database_objects, DatabaseType.MSSQL)
    printed = print_ast(document)

    assert 'type Book @model(name: "Book")' in printed
    assert 'id: Int! @primaryKey(databaseType: "mssql") @autoGenerated' in printed
    assert "title: String!" in printed
    assert 'rating: Decimal @defaultValue(value: "0")' in printed
    assert 'type GetBooks @model(name: "GetBooks")' in printed


def test_converter_adds_document_id_for_document_store():
    entities = load_runtime_entities({"Planet": {"source": "planets"}})
    database_objects = load_database_objects(
        {"Planet": {"columns": [{"name": "name", "type": "str"}]}}, entities
    )

    document = build_base_document(entities, database_objects, DatabaseType.COSMOSDB_NOSQL)
    printed = print_ast(document)

    assert 'id: ID! @primaryKey(databaseType: "cosmosdb_nosql")' in printed


def test_converter_requires_table_descriptors():
    entities = load_runtime_entities({"Book": {"source": "dbo.books"}})

    with pytest.raises(InitializationError, match="dbo.books"):
        build_base_document(entities, {}, DatabaseType.MSSQL)


def test_converted_schema_round_trips_through_synthesis():
    entities = load_runtime_entities(
        {
            "Book": {
                "source": "dbo.books",
                "permissions": [{"role": "admin", "actions": ["*"]}],
            }
        }
    )
    database_objects = load_database_objects(
        {
            "Book": {
                "columns": [
                    {"name": "id", "type": "int", "auto_generated": True},
                    {"name": "title", "type": "nvarchar"},
                ],
                "primary_keys": ["id"],
            }
        },
        entities,
    )
    snapshot = build_snapshot(
        DatabaseType.POSTGRESQL,
        {
            "Book": {
                "source": "dbo.books",
                "permissions": [{"role": "admin", "actions": ["*"]}],
            }
        },
    )
    document = build_base_document(entities, database_objects, DatabaseType.POSTGRESQL)

    result = SchemaSynthesizer.from_snapshot(snapshot).synthesize(document)

    update = result.mutation.get_field("updateBook").definition
    assert get_authorized_roles(update) == {"admin"}
    assert [argument.name.value for argument in update.arguments] == ["id", "item"]
    assert result.build_schema().query_type is not None


def test_read_only_columns_are_kept_out_of_inputs():
    configured = {
        "Book": {
            "source": "dbo.books",
            "permissions": [{"role": "admin", "actions": ["create", "update"]}],
        }
    }
    entities = load_runtime_entities(configured)
    database_objects = load_database_objects(
        {
            "Book": {
                "columns": [
                    {"name": "id", "type": "int", "auto_generated": True},
                    {"name": "title", "type": "nvarchar"},
                    {"name": "computed", "type": "nvarchar", "read_only": True},
                ],
                "primary_keys": ["id"],
            }
        },
        entities,
    )
    document = build_base_document(entities, database_objects, DatabaseType.MSSQL)

    assert "computed: String! @autoGenerated" in print_ast(document)

    result = SchemaSynthesizer.from_snapshot(
        build_snapshot(DatabaseType.MSSQL, configured)
    ).synthesize(document)

    for input_name in ("CreateBookInput", "UpdateBookInput"):
        fields = {field.name.value for field in result.mutation.types[input_name].fields}
        assert fields == {"title"}
