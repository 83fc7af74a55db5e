"""
Immutable output of a builder run.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from graphql.language import ast

from ..entities.types import EntityActionOperation


@dataclass(frozen=True)
class SynthesizedField:
    """One generated root field and the roles it is restricted to."""

    name: str
    entity_name: str
    operation: EntityActionOperation
    roles: frozenset[str]
    definition: ast.FieldDefinitionNode


@dataclass(frozen=True)
class SchemaFragment:
    """
    Zero-or-one root type plus the supporting type definitions it references.

    ``types`` is keyed by type name; a type referenced by several fields is
    present once.
    """

    root_type: Optional[ast.ObjectTypeDefinitionNode] = None
    fields: tuple[SynthesizedField, ...] = ()
    types: Mapping[str, ast.TypeDefinitionNode] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @property
    def is_empty(self) -> bool:
        return self.root_type is None

    @property
    def field_names(self) -> frozenset[str]:
        return frozenset(synthesized.name for synthesized in self.fields)

    def get_field(self, name: str) -> Optional[SynthesizedField]:
        for synthesized in self.fields:
            if synthesized.name == name:
                return synthesized
        return None

    def to_document(self) -> ast.DocumentNode:
        definitions: list[ast.DefinitionNode] = []
        if self.root_type is not None:
            definitions.append(self.root_type)
            definitions.extend(self.types.values())
        return ast.DocumentNode(definitions=tuple(definitions))


def build_fragment(
    root_name: str,
    fields: list[SynthesizedField],
    types: dict[str, ast.TypeDefinitionNode],
) -> SchemaFragment:
    """
    Wrap accumulated fields into a fragment.

    No fields means no root type and no supporting types: a root operation
    type without fields is not a valid declaration.
    """
    if not fields:
        return SchemaFragment()
    root_type = ast.ObjectTypeDefinitionNode(
        name=ast.NameNode(value=root_name),
        description=None,
        interfaces=(),
        directives=(),
        fields=tuple(synthesized.definition for synthesized in fields),
    )
    return SchemaFragment(
        root_type=root_type,
        fields=tuple(fields),
        types=MappingProxyType(dict(types)),
    )
