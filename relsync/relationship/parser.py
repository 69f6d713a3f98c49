"""Parse and serialize the ``object#relation@subject`` text encoding."""

from __future__ import annotations

import re

from relsync.relationship.models import (
    ObjectReference,
    ParseError,
    RelationshipTriple,
    SubjectReference,
)

# Identifier grammar matches SpiceDB's relationship strings.
_TYPE = r"(?:[a-z][a-z0-9_]{1,61}[a-z0-9]/)*[a-z][a-z0-9_]{1,62}[a-z0-9]"
_ID = r"[a-zA-Z0-9/_|\-=+]{1,1024}"
_RELATION = r"[a-z][a-z0-9_]{1,62}[a-z0-9]"

_RELATIONSHIP_RE = re.compile(
    rf"(?P<resource_type>{_TYPE}):(?P<resource_id>{_ID})"
    rf"#(?P<relation>{_RELATION})"
    rf"@(?P<subject_type>{_TYPE}):(?P<subject_id>{_ID}|\*)"
    rf"(?:#(?P<subject_relation>{_RELATION}|\.\.\.))?"
)

ELLIPSIS = "..."


def parse(text: str) -> RelationshipTriple:
    """Parse a relationship string into a triple.

    Format: resource_type:resource_id#relation@subject_type:subject_id[#subject_relation]

    Raises:
        ParseError: if any delimiter or component is missing or malformed.
    """
    if not isinstance(text, str):
        raise ParseError(repr(text))

    match = _RELATIONSHIP_RE.fullmatch(text.strip())
    if match is None:
        raise ParseError(text)

    subject_relation = match.group("subject_relation") or ""
    if subject_relation == ELLIPSIS:
        subject_relation = ""

    return RelationshipTriple(
        resource=ObjectReference(
            object_type=match.group("resource_type"),
            object_id=match.group("resource_id"),
        ),
        relation=match.group("relation"),
        subject=SubjectReference(
            object_type=match.group("subject_type"),
            object_id=match.group("subject_id"),
            optional_relation=subject_relation,
        ),
    )


def serialize(triple: RelationshipTriple) -> str:
    """Inverse of :func:`parse`."""
    return str(triple)


def is_valid(text: str) -> bool:
    try:
        parse(text)
    except ParseError:
        return False
    return True
