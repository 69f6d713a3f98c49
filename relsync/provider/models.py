"""Request/response models exchanged with the host."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field

from relsync.provider.diagnostics import Diagnostics


class RelationshipModel(BaseModel):
    """Recorded state of one managed relationship."""

    model_config = ConfigDict(frozen=True)

    relationship: str = Field(min_length=1)


class AttributeSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str = "string"
    description: str = ""
    required: bool = False
    requires_replace: bool = False


class ResourceSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str
    attributes: dict[str, AttributeSchema]


class CreateRequest(BaseModel):
    plan: RelationshipModel


class ReadRequest(BaseModel):
    state: RelationshipModel


class UpdateRequest(BaseModel):
    state: RelationshipModel
    plan: RelationshipModel


class DeleteRequest(BaseModel):
    state: RelationshipModel


class ImportStateRequest(BaseModel):
    id: str


@dataclass
class ResourceResponse:
    """New state to record (``None`` removes the instance) plus diagnostics."""

    state: RelationshipModel | None = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
