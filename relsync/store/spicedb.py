"""RelationshipStore implementation backed by SpiceDB."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator, Callable
from functools import partial

import grpc
from authzed.api.v1 import AsyncClient
from authzed.api.v1.core_pb2 import (
    ObjectReference as PbObjectReference,
    Relationship,
    RelationshipUpdate,
    SubjectReference as PbSubjectReference,
)
from authzed.api.v1.permission_service_pb2 import (
    Consistency as PbConsistency,
    DeleteRelationshipsRequest,
    ReadRelationshipsRequest,
    RelationshipFilter as PbRelationshipFilter,
    SubjectFilter,
    WriteRelationshipsRequest,
)
from grpcutil import bearer_token_credentials, insecure_bearer_token_credentials

from relsync.interfaces.store import Consistency, RelationshipFilter, StoreError
from relsync.relationship.models import ObjectReference, RelationshipTriple, SubjectReference

logger = logging.getLogger(__name__)


class SpiceDBStore:
    """SpiceDB store that conforms to the RelationshipStore protocol.

    Writes are TOUCH updates, reads stream ``ReadRelationships`` and deletes
    use ``DeleteRelationships`` with an exact filter. gRPC failures are
    wrapped in StoreError carrying the server's message and status code.
    """

    def __init__(
        self, client_factory: Callable[[], AsyncClient], timeout: float | None = None
    ) -> None:
        self._client_factory = client_factory
        self._timeout = timeout
        self._client: AsyncClient | None = None
        self._client_loop: asyncio.AbstractEventLoop | None = None

    @property
    def client(self) -> AsyncClient:
        """The authzed client for the running event loop, created on first use.

        grpc.aio channels belong to the loop that created them, so a call made
        from a different loop gets a new client.
        """
        loop = asyncio.get_running_loop()
        if self._client is None or self._client_loop is not loop:
            self._client = self._client_factory()
            self._client_loop = loop
            logger.debug("Opened SpiceDB client")
        return self._client

    @classmethod
    def connect(
        cls,
        endpoint: str,
        token: str,
        *,
        insecure: bool = False,
        ca_cert: bytes | None = None,
        timeout: float | None = None,
    ) -> SpiceDBStore:
        """Prepare a store for *endpoint* authenticated with a preshared key.

        No channel is opened here; the client is built on the first RPC.
        """
        if insecure:
            credentials = insecure_bearer_token_credentials(token)
        else:
            credentials = bearer_token_credentials(token, ca_cert)
        return cls(partial(AsyncClient, endpoint, credentials), timeout=timeout)

    # -- proto conversion -----------------------------------------------------

    @staticmethod
    def _to_proto(triple: RelationshipTriple) -> Relationship:
        return Relationship(
            resource=PbObjectReference(
                object_type=triple.resource.object_type,
                object_id=triple.resource.object_id,
            ),
            relation=triple.relation,
            subject=PbSubjectReference(
                object=PbObjectReference(
                    object_type=triple.subject.object_type,
                    object_id=triple.subject.object_id,
                ),
                optional_relation=triple.subject.optional_relation,
            ),
        )

    @staticmethod
    def _from_proto(rel: Relationship) -> RelationshipTriple:
        return RelationshipTriple(
            resource=ObjectReference(
                object_type=rel.resource.object_type,
                object_id=rel.resource.object_id,
            ),
            relation=rel.relation,
            subject=SubjectReference(
                object_type=rel.subject.object.object_type,
                object_id=rel.subject.object.object_id,
                optional_relation=rel.subject.optional_relation,
            ),
        )

    @staticmethod
    def _filter_to_proto(relationship_filter: RelationshipFilter) -> PbRelationshipFilter:
        # An empty relation filter matches only the ellipsis, i.e. a direct subject.
        return PbRelationshipFilter(
            resource_type=relationship_filter.resource_type,
            optional_resource_id=relationship_filter.resource_id,
            optional_relation=relationship_filter.relation,
            optional_subject_filter=SubjectFilter(
                subject_type=relationship_filter.subject_type,
                optional_subject_id=relationship_filter.subject_id,
                optional_relation=SubjectFilter.RelationFilter(
                    relation=relationship_filter.subject_relation,
                ),
            ),
        )

    @staticmethod
    def _consistency_to_proto(consistency: Consistency) -> PbConsistency:
        # Enum values are the names of the Consistency oneof fields.
        return PbConsistency(**{consistency.value: True})

    @staticmethod
    def _wrap(operation: str, err: grpc.RpcError) -> StoreError:
        code = err.code() if callable(getattr(err, "code", None)) else None
        details = err.details() if callable(getattr(err, "details", None)) else None
        return StoreError(
            operation,
            details or str(err),
            code.name if code is not None else None,
        )

    # -- RelationshipStore protocol -------------------------------------------

    async def write_relationships(self, upserts: list[RelationshipTriple]) -> None:
        request = WriteRelationshipsRequest(
            updates=[
                RelationshipUpdate(
                    operation=RelationshipUpdate.OPERATION_TOUCH,
                    relationship=self._to_proto(rel),
                )
                for rel in upserts
            ]
        )
        try:
            await self.client.WriteRelationships(request, timeout=self._timeout)
        except grpc.RpcError as e:
            raise self._wrap("write", e) from e

    async def read_relationships(
        self,
        relationship_filter: RelationshipFilter,
        consistency: Consistency = Consistency.fully_consistent,
    ) -> AsyncGenerator[RelationshipTriple, None]:
        request = ReadRelationshipsRequest(
            consistency=self._consistency_to_proto(consistency),
            relationship_filter=self._filter_to_proto(relationship_filter),
        )
        call = self.client.ReadRelationships(request, timeout=self._timeout)
        try:
            async for response in call:
                yield self._from_proto(response.relationship)
        except grpc.RpcError as e:
            raise self._wrap("read", e) from e
        finally:
            # No-op once the stream has completed; releases it otherwise.
            call.cancel()

    async def delete_relationships(self, relationship_filter: RelationshipFilter) -> None:
        request = DeleteRelationshipsRequest(
            relationship_filter=self._filter_to_proto(relationship_filter),
        )
        try:
            await self.client.DeleteRelationships(request, timeout=self._timeout)
        except grpc.RpcError as e:
            raise self._wrap("delete", e) from e
