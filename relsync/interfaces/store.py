"""Relationship store interface and models."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from enum import Enum
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from relsync.relationship.models import RelationshipTriple


class Consistency(str, Enum):
    """Read consistency requirements understood by stores."""

    fully_consistent = "fully_consistent"


class RelationshipFilter(BaseModel):
    """Exact-match selector for relationships.

    Every field must match. An empty ``subject_relation`` selects only the
    direct subject, never a subject set.
    """

    model_config = ConfigDict(frozen=True)

    resource_type: str
    resource_id: str
    relation: str
    subject_type: str
    subject_id: str
    subject_relation: str = ""

    def matches(self, triple: RelationshipTriple) -> bool:
        return (
            triple.resource.object_type == self.resource_type
            and triple.resource.object_id == self.resource_id
            and triple.relation == self.relation
            and triple.subject.object_type == self.subject_type
            and triple.subject.object_id == self.subject_id
            and triple.subject.optional_relation == self.subject_relation
        )


class StoreError(Exception):
    """Wraps backend-specific failures with the operation that raised them."""

    CANCELLED_CODES = frozenset({"CANCELLED", "DEADLINE_EXCEEDED"})

    def __init__(self, operation: str, message: str, code: str | None = None) -> None:
        self.operation = operation
        self.message = message
        self.code = code
        super().__init__(message)

    @property
    def cancelled(self) -> bool:
        return self.code in self.CANCELLED_CODES


@runtime_checkable
class RelationshipStore(Protocol):
    """Remote authorization store holding relationships (e.g. SpiceDB)."""

    async def write_relationships(self, upserts: list[RelationshipTriple]) -> None: ...

    def read_relationships(
        self,
        relationship_filter: RelationshipFilter,
        consistency: Consistency = Consistency.fully_consistent,
    ) -> AsyncGenerator[RelationshipTriple, None]: ...

    async def delete_relationships(self, relationship_filter: RelationshipFilter) -> None: ...
