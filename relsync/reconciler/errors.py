"""Reconciler error taxonomy."""

from __future__ import annotations

from relsync.exceptions import ReconcileError
from relsync.relationship.models import ParseError


class RemoteError(ReconcileError):
    """The backend rejected or failed an RPC.

    ``str(err)`` is the backend message, unmodified, so hosts can show it as is.
    """

    operation = "remote"

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code
        super().__init__(message)


class RemoteWriteError(RemoteError):
    operation = "write"


class RemoteReadError(RemoteError):
    operation = "read"


class RemoteDeleteError(RemoteError):
    operation = "delete"


class OperationCancelledError(ReconcileError):
    """The caller's deadline passed or the RPC was cancelled mid-flight."""

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        self.detail = detail
        msg = f"{operation} cancelled"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class ReplacementRequiredError(ReconcileError):
    """An in-place change to a managed relationship was requested."""

    def __init__(self, prior: str, planned: str) -> None:
        self.prior = prior
        self.planned = planned
        super().__init__(
            f"relationship {prior!r} cannot be updated in place to {planned!r}; "
            "it must be replaced"
        )


class PartialApplyError(ReconcileError):
    """A replace deleted the prior relationship but could not create the new one.

    The relationship is now absent remotely; ``deleted`` is what was removed
    and the create failure is chained as ``__cause__``.
    """

    def __init__(self, deleted: str, desired: str, detail: str) -> None:
        self.deleted = deleted
        self.desired = desired
        super().__init__(
            f"deleted {deleted!r} but creating {desired!r} failed: {detail}; "
            "the relationship is now absent"
        )


class InvalidTransitionError(ReconcileError):
    """A lifecycle operation is not allowed from the current state."""

    def __init__(self, state: str, operation: str) -> None:
        self.state = state
        self.operation = operation
        super().__init__(f"cannot {operation} a relationship in state {state!r}")


__all__ = [
    "InvalidTransitionError",
    "OperationCancelledError",
    "ParseError",
    "PartialApplyError",
    "ReconcileError",
    "RemoteDeleteError",
    "RemoteError",
    "RemoteReadError",
    "RemoteWriteError",
    "ReplacementRequiredError",
]
