"""The ``<provider>_relationship`` managed resource."""

from __future__ import annotations

import logging

from relsync.provider.diagnostics import Diagnostics
from relsync.provider.models import (
    AttributeSchema,
    CreateRequest,
    DeleteRequest,
    ImportStateRequest,
    ReadRequest,
    RelationshipModel,
    ResourceResponse,
    ResourceSchema,
    UpdateRequest,
)
from relsync.reconciler import (
    OperationCancelledError,
    RelationshipReconciler,
    RemoteDeleteError,
    RemoteReadError,
    RemoteWriteError,
    ReplacementRequiredError,
    ResourceState,
    ensure_unchanged,
)
from relsync.relationship import ParseError, RelationshipTriple, parse

logger = logging.getLogger(__name__)


class RelationshipResource:
    """Maps host lifecycle calls onto a RelationshipReconciler.

    Failures never touch recorded state: a failed create records nothing,
    a failed read or delete keeps the prior state.
    """

    TYPE_SUFFIX = "_relationship"

    def __init__(self) -> None:
        self._reconciler: RelationshipReconciler | None = None

    @property
    def configured(self) -> bool:
        return self._reconciler is not None

    def metadata(self, provider_type_name: str) -> str:
        return provider_type_name + self.TYPE_SUFFIX

    def schema(self) -> ResourceSchema:
        return ResourceSchema(
            description="A single SpiceDB relationship.",
            attributes={
                "relationship": AttributeSchema(
                    description="A SpiceDB relationship in object#relation@subject format.",
                    required=True,
                    requires_replace=True,
                ),
            },
        )

    def configure(self, provider_data: object) -> Diagnostics:
        diagnostics = Diagnostics()
        # The host may call this before the provider itself is configured.
        if provider_data is None:
            return diagnostics

        if not isinstance(provider_data, RelationshipReconciler):
            diagnostics.add_error(
                "Unexpected Resource Configure Type",
                f"Expected RelationshipReconciler, got: {type(provider_data).__name__}. "
                "Please report this issue to the provider developers.",
            )
            return diagnostics

        self._reconciler = provider_data
        return diagnostics

    def _require_reconciler(self, diagnostics: Diagnostics) -> RelationshipReconciler | None:
        if self._reconciler is None:
            diagnostics.add_error(
                "Unconfigured Store",
                "The provider has not been configured with a SpiceDB connection.",
            )
        return self._reconciler

    @staticmethod
    def _parse(text: str, diagnostics: Diagnostics) -> RelationshipTriple | None:
        try:
            return parse(text)
        except ParseError as e:
            diagnostics.add_error("Invalid Relationship", f"Unable to parse relationship: {e}")
            return None

    # -- Lifecycle ---------------------------------------------------------

    async def create(self, req: CreateRequest) -> ResourceResponse:
        resp = ResourceResponse()
        reconciler = self._require_reconciler(resp.diagnostics)
        rel = self._parse(req.plan.relationship, resp.diagnostics)
        if reconciler is None or rel is None:
            return resp

        try:
            await reconciler.create(rel)
        except RemoteWriteError as e:
            resp.diagnostics.add_error(
                "SpiceDB Client Error", f"Unable to create relationships, got error: {e}"
            )
            return resp
        except OperationCancelledError as e:
            resp.diagnostics.add_error("Operation Cancelled", str(e))
            return resp

        resp.state = req.plan
        return resp

    async def read(self, req: ReadRequest) -> ResourceResponse:
        resp = ResourceResponse(state=req.state)
        reconciler = self._require_reconciler(resp.diagnostics)
        rel = self._parse(req.state.relationship, resp.diagnostics)
        if reconciler is None or rel is None:
            return resp

        try:
            state = await reconciler.read(rel)
        except RemoteReadError as e:
            resp.diagnostics.add_error(
                "Unable to get relationship information", f"Unable to get relationship: {e}"
            )
            return resp
        except OperationCancelledError as e:
            resp.diagnostics.add_error("Operation Cancelled", str(e))
            return resp

        if state is ResourceState.absent:
            resp.state = None
        return resp

    async def update(self, req: UpdateRequest) -> ResourceResponse:
        """No I/O: checks that the plan keeps the same relationship."""
        resp = ResourceResponse(state=req.state)
        try:
            ensure_unchanged(req.state.relationship, req.plan.relationship)
        except ParseError as e:
            resp.diagnostics.add_error("Invalid Relationship", f"Unable to parse relationship: {e}")
        except ReplacementRequiredError as e:
            resp.diagnostics.add_error("Relationship Requires Replacement", str(e))
        return resp

    async def delete(self, req: DeleteRequest) -> ResourceResponse:
        resp = ResourceResponse(state=req.state)
        reconciler = self._require_reconciler(resp.diagnostics)
        rel = self._parse(req.state.relationship, resp.diagnostics)
        if reconciler is None or rel is None:
            return resp

        try:
            await reconciler.delete(rel)
        except RemoteDeleteError as e:
            resp.diagnostics.add_error(
                "SpiceDB Client Error", f"Unable to delete relationship, got error: {e}"
            )
            return resp
        except OperationCancelledError as e:
            resp.diagnostics.add_error("Operation Cancelled", str(e))
            return resp

        resp.state = None
        return resp

    def import_state(self, req: ImportStateRequest) -> ResourceResponse:
        """Take the import id as the full relationship; nothing is written."""
        resp = ResourceResponse()
        reconciler = self._require_reconciler(resp.diagnostics)
        if reconciler is None:
            return resp

        try:
            rel = reconciler.import_state(req.id)
        except ParseError as e:
            resp.diagnostics.add_error("Invalid Relationship", f"Unable to parse relationship: {e}")
            return resp

        resp.state = RelationshipModel(relationship=req.id.strip())
        logger.debug("Imported %s", rel)
        return resp
