"""Tests for SpiceDBStore with a mocked authzed client."""

from __future__ import annotations

import asyncio
from contextlib import aclosing
from unittest.mock import AsyncMock, MagicMock, patch

import grpc
import pytest
from authzed.api.v1.core_pb2 import (
    ObjectReference as PbObjectReference,
    Relationship,
    RelationshipUpdate,
    SubjectReference as PbSubjectReference,
)
from authzed.api.v1.permission_service_pb2 import ReadRelationshipsResponse

from relsync.interfaces.store import RelationshipStore, StoreError
from relsync.reconciler import build_filter
from relsync.relationship import parse
from relsync.store.spicedb import SpiceDBStore


def _rpc_error(code: grpc.StatusCode, details: str) -> grpc.aio.AioRpcError:
    return grpc.aio.AioRpcError(
        code, grpc.aio.Metadata(), grpc.aio.Metadata(), details=details
    )


def _response(text: str) -> ReadRelationshipsResponse:
    rel = parse(text)
    return ReadRelationshipsResponse(
        relationship=Relationship(
            resource=PbObjectReference(
                object_type=rel.resource.object_type,
                object_id=rel.resource.object_id,
            ),
            relation=rel.relation,
            subject=PbSubjectReference(
                object=PbObjectReference(
                    object_type=rel.subject.object_type,
                    object_id=rel.subject.object_id,
                ),
                optional_relation=rel.subject.optional_relation,
            ),
        )
    )


class FakeStreamCall:
    """Stand-in for a grpc.aio unary-stream call."""

    def __init__(self, responses=(), error: Exception | None = None) -> None:
        self._responses = list(responses)
        self._error = error
        self.consumed = 0
        self.cancelled = False

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for response in self._responses:
            self.consumed += 1
            yield response
        if self._error is not None:
            raise self._error

    def cancel(self) -> bool:
        self.cancelled = True
        return True


@pytest.fixture
def client():
    mock = MagicMock()
    mock.WriteRelationships = AsyncMock()
    mock.DeleteRelationships = AsyncMock()
    mock.ReadRelationships = MagicMock(return_value=FakeStreamCall())
    return mock


@pytest.fixture
def spicedb(client):
    return SpiceDBStore(lambda: client, timeout=5.0)


def test_conforms_to_protocol(spicedb):
    assert isinstance(spicedb, RelationshipStore)


# -- Write -------------------------------------------------------------------


class TestWrite:
    @pytest.mark.asyncio
    async def test_touch_request(self, spicedb, client, eng_members_viewer):
        await spicedb.write_relationships([eng_members_viewer])

        request = client.WriteRelationships.call_args.args[0]
        assert client.WriteRelationships.call_args.kwargs["timeout"] == 5.0
        assert len(request.updates) == 1
        update = request.updates[0]
        assert update.operation == RelationshipUpdate.OPERATION_TOUCH
        rel = update.relationship
        assert rel.resource.object_type == "document"
        assert rel.resource.object_id == "doc1"
        assert rel.relation == "viewer"
        assert rel.subject.object.object_type == "group"
        assert rel.subject.object.object_id == "eng"
        assert rel.subject.optional_relation == "member"

    @pytest.mark.asyncio
    async def test_error_wrapped(self, spicedb, client, alice_viewer):
        client.WriteRelationships.side_effect = _rpc_error(
            grpc.StatusCode.FAILED_PRECONDITION, "object definition `document` not found"
        )
        with pytest.raises(StoreError) as exc_info:
            await spicedb.write_relationships([alice_viewer])
        err = exc_info.value
        assert err.operation == "write"
        assert err.message == "object definition `document` not found"
        assert err.code == "FAILED_PRECONDITION"
        assert not err.cancelled

    @pytest.mark.asyncio
    async def test_deadline_is_cancellation(self, spicedb, client, alice_viewer):
        client.WriteRelationships.side_effect = _rpc_error(
            grpc.StatusCode.DEADLINE_EXCEEDED, "Deadline Exceeded"
        )
        with pytest.raises(StoreError) as exc_info:
            await spicedb.write_relationships([alice_viewer])
        assert exc_info.value.cancelled


# -- Read --------------------------------------------------------------------


class TestRead:
    @pytest.mark.asyncio
    async def test_request_mapping(self, spicedb, client, alice_viewer):
        async for _ in spicedb.read_relationships(build_filter(alice_viewer)):
            pass

        request = client.ReadRelationships.call_args.args[0]
        assert request.consistency.fully_consistent is True
        f = request.relationship_filter
        assert f.resource_type == "document"
        assert f.optional_resource_id == "doc1"
        assert f.optional_relation == "viewer"
        sf = f.optional_subject_filter
        assert sf.subject_type == "user"
        assert sf.optional_subject_id == "alice"
        assert sf.HasField("optional_relation")
        assert sf.optional_relation.relation == ""

    @pytest.mark.asyncio
    async def test_subject_relation_filtered(self, spicedb, client, eng_members_viewer):
        async for _ in spicedb.read_relationships(build_filter(eng_members_viewer)):
            pass
        request = client.ReadRelationships.call_args.args[0]
        assert request.relationship_filter.optional_subject_filter.optional_relation.relation == "member"

    @pytest.mark.asyncio
    async def test_results_converted(self, spicedb, client, alice_viewer):
        call = FakeStreamCall([_response("document:doc1#viewer@user:alice")])
        client.ReadRelationships.return_value = call

        results = [rel async for rel in spicedb.read_relationships(build_filter(alice_viewer))]

        assert results == [alice_viewer]
        assert call.cancelled

    @pytest.mark.asyncio
    async def test_early_close_cancels_call(self, spicedb, client, alice_viewer):
        call = FakeStreamCall([_response("document:doc1#viewer@user:alice")] * 3)
        client.ReadRelationships.return_value = call

        stream = spicedb.read_relationships(build_filter(alice_viewer))
        async with aclosing(stream):
            async for _ in stream:
                break

        assert call.consumed == 1
        assert call.cancelled

    @pytest.mark.asyncio
    async def test_error_wrapped(self, spicedb, client, alice_viewer):
        call = FakeStreamCall(error=_rpc_error(grpc.StatusCode.UNAVAILABLE, "connection refused"))
        client.ReadRelationships.return_value = call

        with pytest.raises(StoreError) as exc_info:
            async for _ in spicedb.read_relationships(build_filter(alice_viewer)):
                pass

        assert exc_info.value.operation == "read"
        assert exc_info.value.code == "UNAVAILABLE"
        assert exc_info.value.message == "connection refused"
        assert call.cancelled


# -- Delete ------------------------------------------------------------------


class TestDelete:
    @pytest.mark.asyncio
    async def test_filtered_delete(self, spicedb, client, alice_viewer):
        await spicedb.delete_relationships(build_filter(alice_viewer))

        request = client.DeleteRelationships.call_args.args[0]
        f = request.relationship_filter
        assert f.resource_type == "document"
        assert f.optional_resource_id == "doc1"
        assert f.optional_subject_filter.optional_subject_id == "alice"
        assert f.optional_subject_filter.optional_relation.relation == ""

    @pytest.mark.asyncio
    async def test_error_wrapped(self, spicedb, client, alice_viewer):
        client.DeleteRelationships.side_effect = _rpc_error(
            grpc.StatusCode.PERMISSION_DENIED, "permission denied"
        )
        with pytest.raises(StoreError) as exc_info:
            await spicedb.delete_relationships(build_filter(alice_viewer))
        assert exc_info.value.operation == "delete"
        assert exc_info.value.code == "PERMISSION_DENIED"


# -- Connect -----------------------------------------------------------------


class TestConnect:
    @pytest.mark.asyncio
    async def test_tls(self):
        with (
            patch("relsync.store.spicedb.AsyncClient") as mock_client,
            patch("relsync.store.spicedb.bearer_token_credentials") as mock_creds,
        ):
            store = SpiceDBStore.connect("spicedb:443", "tok", ca_cert=b"pem", timeout=3.0)
            mock_creds.assert_called_once_with("tok", b"pem")
            mock_client.assert_not_called()

            assert store.client is mock_client.return_value
            mock_client.assert_called_once_with("spicedb:443", mock_creds.return_value)

    @pytest.mark.asyncio
    async def test_insecure(self):
        with (
            patch("relsync.store.spicedb.AsyncClient") as mock_client,
            patch("relsync.store.spicedb.insecure_bearer_token_credentials") as mock_creds,
        ):
            store = SpiceDBStore.connect("localhost:50051", "tok", insecure=True)
            assert store.client is mock_client.return_value

        mock_creds.assert_called_once_with("tok")
        mock_client.assert_called_once_with("localhost:50051", mock_creds.return_value)


class TestClientPerLoop:
    def test_client_built_on_first_use(self):
        factory = MagicMock()
        SpiceDBStore(factory)
        factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_reused_within_a_loop(self):
        factory = MagicMock(side_effect=lambda: MagicMock())
        store = SpiceDBStore(factory)
        assert store.client is store.client
        assert factory.call_count == 1

    def test_new_client_for_each_loop(self):
        factory = MagicMock(side_effect=lambda: MagicMock())
        store = SpiceDBStore(factory)

        async def current_client():
            return store.client

        first = asyncio.run(current_client())
        second = asyncio.run(current_client())

        assert first is not second
        assert factory.call_count == 2
