"""Lifecycle state machine for one managed relationship."""

from __future__ import annotations

from enum import Enum

from relsync.reconciler.errors import InvalidTransitionError


class ResourceState(str, Enum):
    """Whether the relationship exists in the remote store."""

    absent = "absent"
    present = "present"


class Operation(str, Enum):
    create = "create"
    read = "read"
    update = "update"
    delete = "delete"
    import_ = "import"


# (state, operation) -> possible next states. Read may observe drift.
# Update only ever keeps the state: there is no in-place mutation.
_TRANSITIONS: dict[tuple[ResourceState, Operation], frozenset[ResourceState]] = {
    (ResourceState.absent, Operation.create): frozenset({ResourceState.present}),
    (ResourceState.absent, Operation.import_): frozenset({ResourceState.present}),
    (ResourceState.present, Operation.read): frozenset({ResourceState.present, ResourceState.absent}),
    (ResourceState.present, Operation.update): frozenset({ResourceState.present}),
    (ResourceState.present, Operation.delete): frozenset({ResourceState.absent}),
}


def allowed_states(state: ResourceState, operation: Operation) -> frozenset[ResourceState]:
    """Return the states *operation* can lead to from *state*.

    Raises:
        InvalidTransitionError: if the operation is not allowed from *state*.
    """
    targets = _TRANSITIONS.get((state, operation))
    if targets is None:
        raise InvalidTransitionError(state.value, operation.value)
    return targets


def transition(
    state: ResourceState, operation: Operation, observed: ResourceState | None = None
) -> ResourceState:
    """Apply *operation* to *state*.

    ``observed`` is required only where the outcome depends on the remote
    store (Read).
    """
    targets = allowed_states(state, operation)
    if len(targets) == 1:
        (target,) = targets
        return target
    if observed is None or observed not in targets:
        raise InvalidTransitionError(state.value, operation.value)
    return observed
