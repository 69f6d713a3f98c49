"""Shared test fixtures for relsync."""

import asyncio

import pytest

from relsync.config.models import RelsyncConfig
from relsync.interfaces.store import Consistency, RelationshipFilter, StoreError
from relsync.reconciler import RelationshipReconciler
from relsync.relationship import parse
from relsync.store.memory import InMemoryStore


class TrackingStore(InMemoryStore):
    """InMemoryStore that records stream lifecycles and can inject failures."""

    def __init__(self, relationships=None, *, repeat: int = 1) -> None:
        super().__init__(relationships)
        self.repeat = repeat
        self.opened = 0
        self.closed = 0
        self.yielded = 0
        self.filters: list[RelationshipFilter] = []
        self.consistencies: list[Consistency] = []
        self.writes = 0
        self.write_error: StoreError | None = None
        self.read_error: StoreError | None = None
        self.delete_error: StoreError | None = None
        self.read_delay = 0.0
        self.read_started = asyncio.Event()

    async def write_relationships(self, upserts):
        if self.write_error is not None:
            raise self.write_error
        self.writes += 1
        await super().write_relationships(upserts)

    async def read_relationships(self, relationship_filter, consistency=Consistency.fully_consistent):
        self.opened += 1
        self.filters.append(relationship_filter)
        self.consistencies.append(consistency)
        self.read_started.set()
        try:
            if self.read_delay:
                await asyncio.sleep(self.read_delay)
            if self.read_error is not None:
                raise self.read_error
            for rel in self.snapshot():
                if relationship_filter.matches(rel):
                    for _ in range(self.repeat):
                        self.yielded += 1
                        yield rel
        finally:
            self.closed += 1

    async def delete_relationships(self, relationship_filter):
        if self.delete_error is not None:
            raise self.delete_error
        await super().delete_relationships(relationship_filter)


@pytest.fixture
def alice_viewer():
    return parse("document:doc1#viewer@user:alice")


@pytest.fixture
def eng_members_viewer():
    return parse("document:doc1#viewer@group:eng#member")


@pytest.fixture
def store():
    return TrackingStore()


@pytest.fixture
def reconciler(store):
    return RelationshipReconciler(store)


@pytest.fixture
def sample_config():
    return RelsyncConfig()


@pytest.fixture
def make_store():
    """Factory for TrackingStore instances with custom contents."""
    return TrackingStore
