"""Host adapter: maps an IaC host's resource lifecycle onto the reconciler."""

from relsync.provider.diagnostics import Diagnostic, Diagnostics, Severity
from relsync.provider.models import (
    CreateRequest,
    DeleteRequest,
    ImportStateRequest,
    ReadRequest,
    RelationshipModel,
    ResourceResponse,
    ResourceSchema,
    UpdateRequest,
)
from relsync.provider.provider import RelsyncProvider
from relsync.provider.resource import RelationshipResource

__all__ = [
    "CreateRequest",
    "DeleteRequest",
    "Diagnostic",
    "Diagnostics",
    "ImportStateRequest",
    "ReadRequest",
    "RelationshipModel",
    "RelationshipResource",
    "RelsyncProvider",
    "ResourceResponse",
    "ResourceSchema",
    "Severity",
    "UpdateRequest",
]
