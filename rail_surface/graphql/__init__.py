"""
GraphQL surface synthesis.

Exports:
    - SchemaSynthesizer / SynthesizedSchema: one synthesis pass and its result
    - MutationBuilder / QueryBuilder: root type builders
    - classify_mutation_operation: operation of a mutation field or input name
    - build_base_document: base schema from database object descriptors
"""

from .converter import build_base_document
from .fragments import SchemaFragment, SynthesizedField
from .mutations import MutationBuilder, classify_mutation_operation
from .queries import QueryBuilder
from .schema import SchemaSynthesizer, SynthesizedSchema, parse_base_schema

__all__ = [
    "MutationBuilder",
    "QueryBuilder",
    "SchemaFragment",
    "SchemaSynthesizer",
    "SynthesizedField",
    "SynthesizedSchema",
    "build_base_document",
    "classify_mutation_operation",
    "parse_base_schema",
]
