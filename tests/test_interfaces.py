"""Tests for the store interface and the in-memory backend."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from relsync.interfaces import Consistency, RelationshipFilter, RelationshipStore, StoreError
from relsync.reconciler import build_filter
from relsync.relationship import parse
from relsync.store.memory import InMemoryStore


class TestStoreError:
    @pytest.mark.parametrize("code", ["CANCELLED", "DEADLINE_EXCEEDED"])
    def test_cancelled_codes(self, code):
        assert StoreError("read", "stopped", code).cancelled

    @pytest.mark.parametrize("code", ["UNAVAILABLE", "INVALID_ARGUMENT", None])
    def test_other_codes(self, code):
        assert not StoreError("read", "failed", code).cancelled

    def test_message_is_str(self):
        err = StoreError("write", "object definition `document` not found")
        assert str(err) == "object definition `document` not found"
        assert err.operation == "write"


class TestRelationshipFilter:
    def test_frozen(self, alice_viewer):
        f = build_filter(alice_viewer)
        with pytest.raises(ValidationError):
            f.relation = "editor"

    def test_default_subject_relation_is_direct(self):
        f = RelationshipFilter(
            resource_type="document",
            resource_id="doc1",
            relation="viewer",
            subject_type="user",
            subject_id="alice",
        )
        assert f.matches(parse("document:doc1#viewer@user:alice"))
        assert not f.matches(parse("document:doc1#viewer@user:alice#member"))


class TestInMemoryStore:
    def test_conforms_to_protocol(self):
        assert isinstance(InMemoryStore(), RelationshipStore)

    @pytest.mark.asyncio
    async def test_touch_write(self, alice_viewer):
        store = InMemoryStore()
        await store.write_relationships([alice_viewer, alice_viewer])
        assert len(store) == 1
        assert alice_viewer in store
        assert "document:doc1#viewer@user:alice" not in store

    @pytest.mark.asyncio
    async def test_filtered_read(self, alice_viewer, eng_members_viewer):
        store = InMemoryStore([alice_viewer, eng_members_viewer])
        found = [
            rel
            async for rel in store.read_relationships(
                build_filter(eng_members_viewer), Consistency.fully_consistent
            )
        ]
        assert found == [eng_members_viewer]

    @pytest.mark.asyncio
    async def test_delete_during_iteration(self, alice_viewer):
        store = InMemoryStore([alice_viewer])
        async for rel in store.read_relationships(build_filter(alice_viewer)):
            await store.delete_relationships(build_filter(rel))
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_snapshot_is_a_copy(self, alice_viewer):
        store = InMemoryStore([alice_viewer])
        snap = store.snapshot()
        snap.clear()
        assert len(store) == 1
