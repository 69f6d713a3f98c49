"""Filter construction shared by existence checks and deletes."""

from __future__ import annotations

from relsync.interfaces.store import RelationshipFilter
from relsync.relationship.models import RelationshipTriple


def build_filter(triple: RelationshipTriple) -> RelationshipFilter:
    """Build the exact-match filter for *triple*.

    Every field is populated, so the filter selects the one logical
    relationship or nothing.
    """
    return RelationshipFilter(
        resource_type=triple.resource.object_type,
        resource_id=triple.resource.object_id,
        relation=triple.relation,
        subject_type=triple.subject.object_type,
        subject_id=triple.subject.object_id,
        subject_relation=triple.subject.optional_relation,
    )
