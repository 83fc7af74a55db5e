"""
Mutation synthesis package.
"""

from .builder import (
    MUTATION_OPERATION_RULES,
    MUTATION_TYPE_NAME,
    MutationBuilder,
    classify_mutation_operation,
)
from .create import build_create_input, build_create_mutation
from .delete import build_delete_mutation
from .update import build_update_input, build_update_mutation

__all__ = [
    "MUTATION_OPERATION_RULES",
    "MUTATION_TYPE_NAME",
    "MutationBuilder",
    "classify_mutation_operation",
    "build_create_input",
    "build_create_mutation",
    "build_delete_mutation",
    "build_update_input",
    "build_update_mutation",
]
