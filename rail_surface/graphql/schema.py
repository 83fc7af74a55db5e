"""
Schema synthesis entry point.

SchemaSynthesizer runs the Query and Mutation builders over one configuration
snapshot and assembles the result into a complete schema document:
- directive declarations for ``@model``, ``@primaryKey`` and friends
- scalar declarations for the non-builtin scalars the document references
- the base object types
- the synthesized root types and the types they reference
"""

import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Union

from graphql import GraphQLSchema, build_ast_schema, parse, print_ast
from graphql.language import ast

from ..entities.types import DatabaseObject, DatabaseType, Entity
from ..security.authorization import EntityPermissionMap
from ..security.snapshot import SurfaceSnapshot
from .directives import DIRECTIVE_DEFINITIONS_SDL
from .fragments import SchemaFragment
from .mutations import MutationBuilder
from .queries import QueryBuilder
from .scalars import scalar_definitions

logger = logging.getLogger(__name__)


def parse_base_schema(source: Union[str, ast.DocumentNode]) -> ast.DocumentNode:
    """Parse a base schema given as SDL; documents are returned unchanged."""
    if isinstance(source, ast.DocumentNode):
        return source
    return parse(source, no_location=True)


def _referenced_type_names(document: ast.DocumentNode) -> set[str]:
    names: set[str] = set()

    def _collect(type_node: ast.TypeNode) -> None:
        while not isinstance(type_node, ast.NamedTypeNode):
            type_node = type_node.type
        names.add(type_node.name.value)

    for definition in document.definitions:
        for field in getattr(definition, "fields", None) or ():
            _collect(field.type)
            for argument in getattr(field, "arguments", None) or ():
                _collect(argument.type)
    return names


def _defined_type_names(document: ast.DocumentNode) -> set[str]:
    return {
        definition.name.value
        for definition in document.definitions
        if isinstance(definition, ast.TypeDefinitionNode)
    }


@dataclass(frozen=True)
class SynthesizedSchema:
    """Immutable result of one synthesis pass."""

    base: ast.DocumentNode
    query: SchemaFragment
    mutation: SchemaFragment

    def assemble(self) -> ast.DocumentNode:
        """Merge declarations, base types and both fragments into one document."""
        directives = parse(DIRECTIVE_DEFINITIONS_SDL, no_location=True).definitions
        directive_names = {definition.name.value for definition in directives}

        body: list[ast.DefinitionNode] = [
            definition
            for definition in self.base.definitions
            if not (
                isinstance(definition, ast.DirectiveDefinitionNode)
                and definition.name.value in directive_names
            )
        ]
        for fragment in (self.query, self.mutation):
            body.extend(fragment.to_document().definitions)

        body_document = ast.DocumentNode(definitions=tuple(body))
        missing = _referenced_type_names(body_document) - _defined_type_names(body_document)
        return ast.DocumentNode(
            definitions=tuple(directives) + tuple(scalar_definitions(missing)) + tuple(body)
        )

    def print_schema_sdl(self) -> str:
        return print_ast(self.assemble())

    def build_schema(self) -> GraphQLSchema:
        """Build an executable-shape GraphQLSchema; requires a Query type."""
        return build_ast_schema(self.assemble())


class SchemaSynthesizer:
    """
    Runs one synthesis pass over immutable inputs.

    Example:
        synthesizer = SchemaSynthesizer.from_snapshot(store.current())
        result = synthesizer.synthesize(base_document)
        sdl = result.print_schema_sdl()
    """

    def __init__(
        self,
        database_type: DatabaseType,
        entities: Mapping[str, Entity],
        permission_map: Optional[EntityPermissionMap] = None,
        database_objects: Optional[Mapping[str, DatabaseObject]] = None,
    ):
        self.database_type = database_type
        self.entities = entities
        self.permission_map = permission_map
        self.database_objects = database_objects

    @classmethod
    def from_snapshot(cls, snapshot: SurfaceSnapshot) -> "SchemaSynthesizer":
        return cls(
            snapshot.database_type,
            snapshot.entities,
            snapshot.permission_map,
            snapshot.database_objects,
        )

    def synthesize(self, root: Union[str, ast.DocumentNode]) -> SynthesizedSchema:
        """
        Build the Query and Mutation fragments for ``root``.

        Raises:
            InitializationError: The base schema and entity metadata disagree,
                or a stored procedure has no descriptor.
        """
        document = parse_base_schema(root)
        args = (self.database_type, self.entities, self.permission_map, self.database_objects)
        mutation = MutationBuilder(*args).build(document)
        query = QueryBuilder(*args).build(document)
        logger.debug(
            "Synthesis pass produced %d query and %d mutation fields",
            len(query.fields),
            len(mutation.fields),
        )
        return SynthesizedSchema(base=document, query=query, mutation=mutation)
