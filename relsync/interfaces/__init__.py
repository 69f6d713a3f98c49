"""Collaborator interfaces the reconciler depends on."""

from relsync.interfaces.store import (
    Consistency,
    RelationshipFilter,
    RelationshipStore,
    StoreError,
)

__all__ = [
    "Consistency",
    "RelationshipFilter",
    "RelationshipStore",
    "StoreError",
]
