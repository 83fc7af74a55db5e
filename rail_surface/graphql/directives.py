"""
Directives carried by base and synthesized schema types.

- ``@model(name: String)`` marks an object type as entity-backed.
- ``@primaryKey(databaseType: String)`` marks a key field.
- ``@autoGenerated`` marks a field the database populates.
- ``@defaultValue(value: String)`` marks a field with a database default.
- ``@authorize(roles: [String!])`` restricts a synthesized field to roles.
"""

from typing import Any, Iterable, Optional

from graphql.language import ast
from graphql.utilities import value_from_ast_untyped

MODEL_DIRECTIVE = "model"
MODEL_NAME_ARGUMENT = "name"
PRIMARY_KEY_DIRECTIVE = "primaryKey"
AUTO_GENERATED_DIRECTIVE = "autoGenerated"
DEFAULT_VALUE_DIRECTIVE = "defaultValue"
AUTHORIZE_DIRECTIVE = "authorize"
AUTHORIZE_ROLES_ARGUMENT = "roles"

DIRECTIVE_DEFINITIONS_SDL = """
directive @model(name: String) on OBJECT
directive @primaryKey(databaseType: String) on FIELD_DEFINITION
directive @autoGenerated on FIELD_DEFINITION
directive @defaultValue(value: String) on FIELD_DEFINITION
directive @authorize(roles: [String!]) on OBJECT | FIELD_DEFINITION
"""


def find_directive(node: Any, name: str) -> Optional[ast.DirectiveNode]:
    for directive in getattr(node, "directives", None) or ():
        if directive.name.value == name:
            return directive
    return None


def has_directive(node: Any, name: str) -> bool:
    return find_directive(node, name) is not None


def get_directive_argument(directive: Optional[ast.DirectiveNode], name: str) -> Any:
    if directive is None:
        return None
    for argument in directive.arguments or ():
        if argument.name.value == name:
            return value_from_ast_untyped(argument.value)
    return None


def build_authorize_directive(roles: Iterable[str]) -> ast.DirectiveNode:
    """Create ``@authorize(roles: [...])`` with the roles in sorted order."""
    values = tuple(ast.StringValueNode(value=role) for role in sorted(roles))
    return ast.DirectiveNode(
        name=ast.NameNode(value=AUTHORIZE_DIRECTIVE),
        arguments=(
            ast.ArgumentNode(
                name=ast.NameNode(value=AUTHORIZE_ROLES_ARGUMENT),
                value=ast.ListValueNode(values=values),
            ),
        ),
    )


def build_directive(directive_name: str, **arguments: str) -> ast.DirectiveNode:
    return ast.DirectiveNode(
        name=ast.NameNode(value=directive_name),
        arguments=tuple(
            ast.ArgumentNode(
                name=ast.NameNode(value=argument_name),
                value=ast.StringValueNode(value=str(value)),
            )
            for argument_name, value in arguments.items()
        ),
    )


def get_authorized_roles(node: Any) -> Optional[frozenset[str]]:
    """Return the roles of a node's ``@authorize`` directive, if present."""
    directive = find_directive(node, AUTHORIZE_DIRECTIVE)
    if directive is None:
        return None
    roles = get_directive_argument(directive, AUTHORIZE_ROLES_ARGUMENT) or []
    return frozenset(roles)
