"""
Integration tests for the export_surface management command.
"""

from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

pytestmark = pytest.mark.integration


def test_export_prints_authorized_surface():
    out = StringIO()

    call_command("export_surface", stdout=out)
    output = out.getvalue()

    assert "type Mutation" in output
    assert "createBook" in output
    assert "executeGetBooks" in output
    assert "createAuthor" in output
    assert "updateAuthor" in output
    # nobody was granted delete or read on Author
    assert "deleteAuthor" not in output
    assert "authors" not in output
    assert "input CreateAuthorInput" in output
    assert "limit: Int = 10" in output


def test_export_writes_to_file(tmp_path):
    target = tmp_path / "surface.graphql"
    out = StringIO()

    call_command("export_surface", out=str(target), stdout=out)

    assert "Schema written to" in out.getvalue()
    assert "type Query" in target.read_text(encoding="utf-8")


def test_export_uses_supplied_base_schema(tmp_path):
    schema_file = tmp_path / "base.graphql"
    schema_file.write_text(
        """
        type Book @model(name: "Book") {
          id: Int! @primaryKey(databaseType: "mssql")
          title: String!
        }
        """,
        encoding="utf-8",
    )
    out = StringIO()

    call_command("export_surface", schema=str(schema_file), stdout=out)
    output = out.getvalue()

    assert "book_by_pk" in output
    assert "deleteBook" in output
    assert "Author" not in output


def test_missing_base_schema_file_is_a_command_error(tmp_path):
    with pytest.raises(CommandError, match="not found"):
        call_command("export_surface", schema=str(tmp_path / "missing.graphql"))


def test_initialization_errors_become_command_errors(settings):
    settings.RAIL_SURFACE = {
        "entities": {
            "GetBooks": {
                "source": {"object": "dbo.get_books", "type": "stored-procedure"},
                "permissions": [{"role": "anonymous", "actions": ["execute"]}],
            }
        }
    }

    with pytest.raises(CommandError, match="ErrorInInitialization"):
        call_command("export_surface", stdout=StringIO())


def test_malformed_base_schema_is_a_command_error(tmp_path):
    schema_file = tmp_path / "broken.graphql"
    schema_file.write_text("type {{{ broken", encoding="utf-8")

    with pytest.raises(CommandError, match="Invalid base schema"):
        call_command("export_surface", schema=str(schema_file), stdout=StringIO())


def test_disabled_graphql_surface_is_a_command_error(settings):
    settings.RAIL_SURFACE = {"graphql_settings": {"enabled": False}}

    with pytest.raises(CommandError, match="ConfigValidationError"):
        call_command("export_surface", stdout=StringIO())
