"""Relationship triple models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

from relsync.exceptions import ReconcileError


class ParseErrorKind(str, Enum):
    """Reasons a relationship string can be rejected."""

    invalid_format = "invalid_format"


class ParseError(ReconcileError, ValueError):
    """Raised when text does not decompose into a relationship triple."""

    def __init__(self, text: str, kind: ParseErrorKind = ParseErrorKind.invalid_format) -> None:
        self.text = text
        self.kind = kind
        super().__init__(f"invalid relationship string: {text}")


class ObjectReference(BaseModel):
    """A typed object, e.g. ``document:doc1``."""

    model_config = ConfigDict(frozen=True)

    object_type: str
    object_id: str

    @field_validator("object_type", "object_id")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("cannot be empty or whitespace")
        return v

    def __str__(self) -> str:
        return f"{self.object_type}:{self.object_id}"


class SubjectReference(BaseModel):
    """The subject side of a relationship.

    An empty ``optional_relation`` is a direct reference to the object; a
    non-empty one refers to the subject set (e.g. ``group:eng#member``).
    """

    model_config = ConfigDict(frozen=True)

    object_type: str
    object_id: str
    optional_relation: str = ""

    @field_validator("object_type", "object_id")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("cannot be empty or whitespace")
        return v

    @property
    def object(self) -> ObjectReference:
        return ObjectReference(object_type=self.object_type, object_id=self.object_id)

    def __str__(self) -> str:
        if self.optional_relation:
            return f"{self.object_type}:{self.object_id}#{self.optional_relation}"
        return f"{self.object_type}:{self.object_id}"


class RelationshipTriple(BaseModel):
    """resource#relation@subject, the unit a reconciler manages."""

    model_config = ConfigDict(frozen=True)

    resource: ObjectReference
    relation: str
    subject: SubjectReference

    @field_validator("relation")
    @classmethod
    def validate_relation(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("relation cannot be empty or whitespace")
        return v

    def __str__(self) -> str:
        return f"{self.resource}#{self.relation}@{self.subject}"
