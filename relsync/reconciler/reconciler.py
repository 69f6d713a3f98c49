"""Drive one relationship through create/read/update/delete against a store."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import aclosing, asynccontextmanager

from relsync.interfaces.store import Consistency, RelationshipStore, StoreError
from relsync.reconciler.errors import (
    OperationCancelledError,
    PartialApplyError,
    ReconcileError,
    RemoteDeleteError,
    RemoteError,
    RemoteReadError,
    RemoteWriteError,
)
from relsync.reconciler.filters import build_filter
from relsync.reconciler.plan import Plan, PlanAction, ensure_unchanged, make_plan
from relsync.reconciler.state import Operation, ResourceState, transition
from relsync.relationship.models import RelationshipTriple
from relsync.relationship.parser import parse

logger = logging.getLogger(__name__)


def _coerce(value: RelationshipTriple | str) -> RelationshipTriple:
    if isinstance(value, RelationshipTriple):
        return value
    return parse(value)


class RelationshipReconciler:
    """Idempotent lifecycle operations for a single relationship.

    The store handle is injected and only ever read from, so one reconciler
    can serve any number of managed instances. Each operation issues a
    single RPC; nothing is retried here.

    Example:
        reconciler = RelationshipReconciler(store, timeout=10)
        await reconciler.create("document:doc1#viewer@user:alice")
        state = await reconciler.read("document:doc1#viewer@user:alice")
    """

    def __init__(self, store: RelationshipStore, *, timeout: float | None = None) -> None:
        self._store = store
        self._timeout = timeout

    @property
    def store(self) -> RelationshipStore:
        return self._store

    # -- Helpers -----------------------------------------------------------

    @asynccontextmanager
    async def _guard(
        self,
        operation: Operation,
        error_cls: type[RemoteError],
        timeout: float | None,
    ) -> AsyncIterator[None]:
        """Apply the deadline and translate store failures for *operation*."""
        limit = timeout if timeout is not None else self._timeout
        try:
            async with asyncio.timeout(limit):
                yield
        except TimeoutError as e:
            logger.warning("%s exceeded deadline of %ss", operation.value, limit)
            raise OperationCancelledError(operation.value, f"deadline of {limit}s exceeded") from e
        except StoreError as e:
            if e.cancelled:
                raise OperationCancelledError(operation.value, e.message) from e
            logger.warning("%s failed: %s", operation.value, e.message)
            raise error_cls(e.message, e.code) from e

    async def _has_relationship(self, triple: RelationshipTriple) -> bool:
        stream = self._store.read_relationships(
            build_filter(triple), Consistency.fully_consistent
        )
        # The stream is closed on every path out of this block.
        async with aclosing(stream):
            async for _ in stream:
                return True
        return False

    # -- Lifecycle ---------------------------------------------------------

    async def create(
        self, triple: RelationshipTriple | str, *, timeout: float | None = None
    ) -> RelationshipTriple:
        """Touch the relationship: create it if absent, keep it if present.

        Raises:
            ParseError: if *triple* is text that does not parse.
            RemoteWriteError: if the store rejects the write.
            OperationCancelledError: on deadline expiry or RPC cancellation.
        """
        rel = _coerce(triple)
        async with self._guard(Operation.create, RemoteWriteError, timeout):
            await self._store.write_relationships([rel])
        logger.debug("Created relationship %s", rel)
        return rel

    async def read(
        self, triple: RelationshipTriple | str, *, timeout: float | None = None
    ) -> ResourceState:
        """Check whether the relationship exists, with a fully consistent read.

        Returns ``ResourceState.absent`` when it does not; that is drift the
        host should record, not an error.
        """
        rel = _coerce(triple)
        async with self._guard(Operation.read, RemoteReadError, timeout):
            found = await self._has_relationship(rel)

        observed = ResourceState.present if found else ResourceState.absent
        state = transition(ResourceState.present, Operation.read, observed)
        if state is ResourceState.absent:
            logger.info("Relationship %s no longer exists remotely", rel)
        else:
            logger.debug("Read relationship %s", rel)
        return state

    async def update(
        self, prior: RelationshipTriple | str, planned: RelationshipTriple | str
    ) -> RelationshipTriple:
        """No-op: relationships are replaced, never changed in place.

        Raises:
            ReplacementRequiredError: if *planned* differs from *prior*.
        """
        rel = ensure_unchanged(prior, planned)
        transition(ResourceState.present, Operation.update)
        return rel

    async def delete(
        self, triple: RelationshipTriple | str, *, timeout: float | None = None
    ) -> None:
        """Delete the relationship. Deleting an absent relationship succeeds."""
        rel = _coerce(triple)
        async with self._guard(Operation.delete, RemoteDeleteError, timeout):
            await self._store.delete_relationships(build_filter(rel))
        logger.debug("Deleted relationship %s", rel)

    def import_state(self, identifier: str) -> RelationshipTriple:
        """Adopt an existing relationship by its text form, without writing."""
        rel = parse(identifier)
        transition(ResourceState.absent, Operation.import_)
        logger.debug("Imported relationship %s", rel)
        return rel

    # -- Planning ----------------------------------------------------------

    def plan(
        self,
        prior: RelationshipTriple | str | None,
        desired: RelationshipTriple | str | None,
    ) -> Plan:
        return make_plan(prior, desired)

    async def apply(self, plan: Plan, *, timeout: float | None = None) -> ResourceState:
        """Carry out *plan* and return the resulting state.

        A replace is a delete followed by a create, two separate RPCs. If the
        create fails after the delete went through, PartialApplyError is
        raised: the prior relationship is gone and nothing replaced it.
        """
        if plan.action is PlanAction.noop:
            return ResourceState.present if plan.desired is not None else ResourceState.absent

        if plan.action in (PlanAction.delete, PlanAction.replace):
            await self.delete(plan.prior, timeout=timeout)
            if plan.action is PlanAction.delete:
                return transition(ResourceState.present, Operation.delete)

        if plan.action is PlanAction.replace:
            try:
                await self.create(plan.desired, timeout=timeout)
            except ReconcileError as e:
                logger.warning("Replace of %s left it absent: %s", plan.prior, e)
                raise PartialApplyError(str(plan.prior), str(plan.desired), str(e)) from e
        else:
            await self.create(plan.desired, timeout=timeout)
        return transition(ResourceState.absent, Operation.create)
