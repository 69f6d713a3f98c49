"""relsync - declarative reconciliation of SpiceDB relationships."""

from relsync.config import RelsyncConfig, load_config
from relsync.interfaces import Consistency, RelationshipFilter, RelationshipStore, StoreError
from relsync.reconciler import (
    OperationCancelledError,
    PartialApplyError,
    PlanAction,
    ReconcileError,
    RelationshipReconciler,
    RemoteDeleteError,
    RemoteReadError,
    RemoteWriteError,
    ResourceState,
)
from relsync.relationship import ParseError, RelationshipTriple, parse, serialize

__version__ = "0.1.0"

__all__ = [
    "Consistency",
    "OperationCancelledError",
    "ParseError",
    "PartialApplyError",
    "PlanAction",
    "ReconcileError",
    "RelationshipFilter",
    "RelationshipReconciler",
    "RelationshipStore",
    "RelationshipTriple",
    "RelsyncConfig",
    "RemoteDeleteError",
    "RemoteReadError",
    "RemoteWriteError",
    "ResourceState",
    "StoreError",
    "load_config",
    "parse",
    "serialize",
]
