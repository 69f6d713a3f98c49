"""Declarative reconciliation of relationships against a remote store."""

from relsync.reconciler.errors import (
    InvalidTransitionError,
    OperationCancelledError,
    PartialApplyError,
    ReconcileError,
    RemoteDeleteError,
    RemoteError,
    RemoteReadError,
    RemoteWriteError,
    ReplacementRequiredError,
)
from relsync.reconciler.filters import build_filter
from relsync.reconciler.plan import Plan, PlanAction, ensure_unchanged, make_plan
from relsync.reconciler.reconciler import RelationshipReconciler
from relsync.reconciler.state import Operation, ResourceState, transition

__all__ = [
    "InvalidTransitionError",
    "Operation",
    "OperationCancelledError",
    "PartialApplyError",
    "Plan",
    "PlanAction",
    "ReconcileError",
    "RelationshipReconciler",
    "RemoteDeleteError",
    "RemoteError",
    "RemoteReadError",
    "RemoteWriteError",
    "ReplacementRequiredError",
    "ResourceState",
    "build_filter",
    "ensure_unchanged",
    "make_plan",
    "transition",
]
