"""
Unit tests for Mutation type synthesis.
"""

import pytest
from graphql import print_ast

from rail_surface.core.exceptions import InitializationError, SubStatusCode
from rail_surface.entities import (
    DatabaseType,
    EntityActionOperation,
    load_database_objects,
    load_runtime_entities,
)
from rail_surface.graphql import MutationBuilder, classify_mutation_operation, parse_base_schema
from rail_surface.graphql.directives import get_authorized_roles
from rail_surface.graphql.mutations import build_create_mutation
from rail_surface.graphql.fields import input_object_type
from rail_surface.security import build_permission_map

pytestmark = pytest.mark.unit


def _args(field):
    return [(argument.name.value, print_ast(argument.type)) for argument in field.arguments]


def _input_fields(input_type):
    return {field.name.value: print_ast(field.type) for field in input_type.fields}


@pytest.fixture
def mutation(base_document, entities, permission_map, database_objects):
    builder = MutationBuilder(DatabaseType.MSSQL, entities, permission_map, database_objects)
    return builder.build(base_document)


def test_only_authorized_operations_are_emitted(mutation):
    assert mutation.field_names == {"createBook", "updateBook", "deleteBook", "executeGetBooks"}


def test_each_field_carries_its_own_roles(mutation):
    expected = {
        "createBook": {"authenticated"},
        "updateBook": {"editor"},
        "deleteBook": {"admin"},
        "executeGetBooks": {"authenticated", "admin"},
    }
    for name, roles in expected.items():
        synthesized = mutation.get_field(name)
        assert synthesized.roles == roles
        assert get_authorized_roles(synthesized.definition) == roles


def test_authorize_directive_lists_roles_sorted(mutation):
    printed = print_ast(mutation.get_field("executeGetBooks").definition)

    assert '@authorize(roles: ["admin", "authenticated"])' in printed


def test_case_insensitive_roles_keep_configured_spelling(
    bookstore_config, base_document, database_objects
):
    configured = dict(
        bookstore_config["entities"],
        Book={
            "source": "dbo.books",
            "permissions": [{"role": "Admin", "actions": ["delete"]}],
        },
    )
    entities = load_runtime_entities(configured)
    permission_map = build_permission_map(entities, case_insensitive=True)

    fragment = MutationBuilder(DatabaseType.MSSQL, entities, permission_map, database_objects).build(
        base_document
    )

    printed = print_ast(fragment.get_field("deleteBook").definition)
    assert '@authorize(roles: ["Admin"])' in printed


def test_entity_without_mutating_grants_gets_no_fields(mutation):
    assert not [field for field in mutation.fields if field.entity_name == "Publisher"]
    assert not [name for name in mutation.types if "Publisher" in name]


def test_no_permission_map_emits_no_mutation_type(base_document, entities, database_objects):
    fragment = MutationBuilder(DatabaseType.MSSQL, entities, None, database_objects).build(
        base_document
    )

    assert fragment.is_empty
    assert fragment.root_type is None
    assert dict(fragment.types) == {}
    assert fragment.to_document().definitions == ()


def test_synthesis_is_repeatable(base_document, entities, permission_map, database_objects):
    builder = MutationBuilder(DatabaseType.MSSQL, entities, permission_map, database_objects)

    first = builder.build(base_document)
    second = builder.build(base_document)

    assert first.field_names == second.field_names
    assert set(first.types) == set(second.types)
    assert print_ast(first.to_document()) == print_ast(second.to_document())


def test_stored_procedure_yields_exactly_one_field(mutation):
    fields = [field for field in mutation.fields if field.entity_name == "GetBooks"]

    assert len(fields) == 1
    assert fields[0].operation is EntityActionOperation.EXECUTE


def test_stored_procedure_field_shape(mutation):
    definition = mutation.get_field("executeGetBooks").definition

    assert print_ast(definition.type) == "[GetBooks!]!"
    assert _args(definition) == [("limit", "Int"), ("genre", "String!")]
    assert print_ast(definition.arguments[0].default_value) == "10"


def test_stored_procedure_without_descriptor_fails_synthesis(base_document, entities, permission_map):
    builder = MutationBuilder(DatabaseType.MSSQL, entities, permission_map, database_objects={})

    with pytest.raises(InitializationError) as excinfo:
        builder.build(base_document)

    assert int(excinfo.value.status_code) == 503
    assert excinfo.value.sub_status_code is SubStatusCode.ERROR_IN_INITIALIZATION
    assert "GetBooks" in str(excinfo.value)


def test_stored_procedure_configured_as_query_is_not_a_mutation(base_document, database_objects):
    entities = load_runtime_entities(
        {
            "GetBooks": {
                "source": {"object": "dbo.get_books", "type": "stored-procedure"},
                "graphql": {"operation": "query"},
                "permissions": [{"role": "anonymous", "actions": ["execute"]}],
            },
            "Book": {"source": "dbo.books"},
            "Publisher": {"source": "dbo.publishers"},
        }
    )

    fragment = MutationBuilder(
        DatabaseType.MSSQL, entities, build_permission_map(entities), database_objects
    ).build(base_document)

    assert fragment.is_empty


def test_sql_create_input(mutation):
    create_input = mutation.types["CreateBookInput"]

    # id is generated by the database, publisher is a relationship
    assert _input_fields(create_input) == {
        "title": "String!",
        "publishedOn": "Date",
        "price": "Float",
    }
    assert _args(mutation.get_field("createBook").definition) == [("item", "CreateBookInput!")]


def test_sql_update_takes_keys_and_optional_fields(mutation):
    definition = mutation.get_field("updateBook").definition

    assert _args(definition) == [("id", "Int!"), ("item", "UpdateBookInput!")]
    assert _input_fields(mutation.types["UpdateBookInput"]) == {
        "title": "String",
        "publishedOn": "Date",
        "price": "Float",
    }
    assert print_ast(definition.type) == "Book"


def test_sql_delete_takes_keys(mutation):
    assert _args(mutation.get_field("deleteBook").definition) == [("id", "Int!")]


def test_document_store_arguments(base_document, entities, permission_map, database_objects):
    fragment = MutationBuilder(
        DatabaseType.COSMOSDB_NOSQL, entities, permission_map, database_objects
    ).build(base_document)

    key_args = [("id", "ID!"), ("_partitionKeyValue", "String!")]
    assert _args(fragment.get_field("deleteBook").definition) == key_args
    assert _args(fragment.get_field("updateBook").definition) == key_args + [
        ("item", "UpdateBookInput!")
    ]
    # replace semantics keep the declared nullability
    assert _input_fields(fragment.types["UpdateBookInput"]) == {
        "title": "String!",
        "publishedOn": "Date",
        "price": "Float!",
    }


def test_empty_input_type_is_not_emitted():
    document = parse_base_schema(
        """
        type Counter @model(name: "Counter") {
          id: Int! @primaryKey(databaseType: "mssql") @autoGenerated
        }
        """
    )
    entities = load_runtime_entities(
        {
            "Counter": {
                "source": "dbo.counters",
                "permissions": [{"role": "admin", "actions": ["create", "update"]}],
            }
        }
    )

    fragment = MutationBuilder(DatabaseType.MSSQL, entities, build_permission_map(entities)).build(
        document
    )

    assert fragment.get_field("createCounter").definition.arguments == ()
    assert _args(fragment.get_field("updateCounter").definition) == [("id", "Int!")]
    assert dict(fragment.types) == {}


def test_update_without_primary_key_fails():
    document = parse_base_schema('type Log @model(name: "Log") { message: String! }')
    entities = load_runtime_entities(
        {"Log": {"source": "dbo.logs", "permissions": [{"role": "admin", "actions": ["update"]}]}}
    )

    with pytest.raises(InitializationError, match="no primary key"):
        MutationBuilder(DatabaseType.MSSQL, entities, build_permission_map(entities)).build(document)


def test_object_type_without_entity_metadata_fails(base_document, permission_map, database_objects):
    entities = load_runtime_entities({"Book": {"source": "dbo.books"}})

    with pytest.raises(InitializationError, match="Publisher"):
        MutationBuilder(DatabaseType.MSSQL, entities, permission_map, database_objects).build(
            base_document
        )


def test_graphql_disabled_entities_are_skipped(base_document, database_objects):
    entities = load_runtime_entities(
        {
            "Book": {
                "source": "dbo.books",
                "graphql": False,
                "permissions": [{"role": "admin", "actions": ["*"]}],
            },
            "Publisher": {"source": "dbo.publishers"},
            "GetBooks": {"source": {"object": "dbo.get_books", "type": "stored-procedure"}},
        }
    )

    fragment = MutationBuilder(
        DatabaseType.MSSQL, entities, build_permission_map(entities), database_objects
    ).build(base_document)

    assert fragment.is_empty


def test_input_types_are_reused_by_name(base_document, entities):
    book = next(d for d in base_document.definitions if d.name.value == "Book")
    existing = input_object_type("CreateBookInput", [], "prebuilt")
    inputs = {"CreateBookInput": existing}

    build_create_mutation(book, base_document, DatabaseType.MSSQL, entities["Book"], {"a"}, inputs)

    assert inputs["CreateBookInput"] is existing


def test_database_objects_for_unrelated_entities_do_not_matter(base_document, entities, permission_map):
    database_objects = load_database_objects(
        {
            "GetBooks": {"parameters": [], "result_columns": []},
            "Unrelated": {"type": "table", "columns": []},
        },
        entities,
    )

    fragment = MutationBuilder(DatabaseType.MSSQL, entities, permission_map, database_objects).build(
        base_document
    )

    assert fragment.get_field("executeGetBooks").definition.arguments == ()


@pytest.mark.parametrize(
    "name,expected",
    [
        ("executeGetBooks", EntityActionOperation.EXECUTE),
        ("createBook", EntityActionOperation.CREATE),
        ("CreateBookInput", EntityActionOperation.CREATE),
        ("updateBook", EntityActionOperation.UPDATE_GRAPHQL),
        ("UpdateBookInput", EntityActionOperation.UPDATE_GRAPHQL),
        ("deleteBook", EntityActionOperation.DELETE),
        ("removeBook", EntityActionOperation.DELETE),
    ],
)
def test_classify_mutation_operation(name, expected):
    assert classify_mutation_operation(name) is expected
