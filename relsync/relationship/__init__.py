"""Relationship triples and their text encoding."""

from relsync.relationship.models import (
    ObjectReference,
    ParseError,
    ParseErrorKind,
    RelationshipTriple,
    SubjectReference,
)
from relsync.relationship.parser import is_valid, parse, serialize

__all__ = [
    "ObjectReference",
    "ParseError",
    "ParseErrorKind",
    "RelationshipTriple",
    "SubjectReference",
    "is_valid",
    "parse",
    "serialize",
]
