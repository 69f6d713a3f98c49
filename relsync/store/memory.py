"""RelationshipStore kept in process memory."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator

from relsync.interfaces.store import Consistency, RelationshipFilter
from relsync.relationship.models import RelationshipTriple

logger = logging.getLogger(__name__)


class InMemoryStore:
    """Single-process store with the same touch/filtered-delete semantics as SpiceDB.

    Every read sees every completed write, so all consistency levels behave
    as fully consistent.
    """

    def __init__(self, relationships: list[RelationshipTriple] | None = None) -> None:
        self._relationships: dict[str, RelationshipTriple] = {}
        for rel in relationships or []:
            self._relationships[str(rel)] = rel

    def __len__(self) -> int:
        return len(self._relationships)

    def __contains__(self, triple: object) -> bool:
        return isinstance(triple, RelationshipTriple) and str(triple) in self._relationships

    def snapshot(self) -> list[RelationshipTriple]:
        return list(self._relationships.values())

    # -- RelationshipStore protocol -----------------------------------------

    async def write_relationships(self, upserts: list[RelationshipTriple]) -> None:
        for rel in upserts:
            self._relationships[str(rel)] = rel

    async def read_relationships(
        self,
        relationship_filter: RelationshipFilter,
        consistency: Consistency = Consistency.fully_consistent,
    ) -> AsyncGenerator[RelationshipTriple, None]:
        # Copy first so deletes during iteration don't break the walk
        for rel in list(self._relationships.values()):
            if relationship_filter.matches(rel):
                yield rel

    async def delete_relationships(self, relationship_filter: RelationshipFilter) -> None:
        doomed = [key for key, rel in self._relationships.items() if relationship_filter.matches(rel)]
        for key in doomed:
            del self._relationships[key]
        logger.debug("deleted %d relationship(s)", len(doomed))
