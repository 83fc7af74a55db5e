"""
Rail Surface - authorization-aware API surface synthesis.

Derives GraphQL Query/Mutation fields and REST route resolution from entity
metadata, database object descriptors and role/action permissions, exposing
only the operations at least one configured role may perform.
"""

__version__ = "0.1.0"
