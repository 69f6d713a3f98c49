"""Provider entry point: configuration and resource registry."""

from __future__ import annotations

import logging

from relsync.config.models import RelsyncConfig
from relsync.interfaces.store import RelationshipStore
from relsync.log import configure_logging
from relsync.plugins.loader import PluginNotFoundError
from relsync.provider.diagnostics import Diagnostics
from relsync.provider.resource import RelationshipResource
from relsync.reconciler import RelationshipReconciler
from relsync.store.factory import create_store

logger = logging.getLogger(__name__)


class RelsyncProvider:
    """Builds the shared store handle once and hands it to every resource.

    The reconciler passed to resources holds the only reference to the
    store; nothing is kept at module level.
    """

    TYPE_NAME = "spicedb"

    def __init__(self, version: str = "dev") -> None:
        self.version = version
        self._reconciler: RelationshipReconciler | None = None

    @property
    def provider_data(self) -> RelationshipReconciler | None:
        return self._reconciler

    def metadata(self) -> dict[str, str]:
        return {"type_name": self.TYPE_NAME, "version": self.version}

    def configure(
        self,
        config: RelsyncConfig | None = None,
        store: RelationshipStore | None = None,
        *,
        setup_logging: bool = False,
    ) -> Diagnostics:
        """Create the store from *config* (or adopt *store*) and the reconciler."""
        config = config or RelsyncConfig()
        diagnostics = Diagnostics()
        if setup_logging:
            configure_logging(config)

        if store is None:
            try:
                store = create_store(config)
            except (ValueError, PluginNotFoundError) as e:
                diagnostics.add_error("Unable to Create SpiceDB Client", str(e))
                return diagnostics
            if config.plugins.store == "spicedb" and config.spicedb.insecure:
                diagnostics.add_warning(
                    "Insecure SpiceDB Connection",
                    f"Connecting to {config.spicedb.endpoint} without TLS; "
                    "use only for local development.",
                )

        self._reconciler = RelationshipReconciler(
            store, timeout=config.reconciler.operation_timeout
        )
        logger.debug("Configured provider with %s", type(store).__name__)
        return diagnostics

    def resources(self) -> dict[str, type[RelationshipResource]]:
        resource = RelationshipResource
        return {resource().metadata(self.TYPE_NAME): resource}

    def new_resource(self, type_name: str) -> tuple[RelationshipResource, Diagnostics]:
        """Instantiate the resource registered as *type_name* and configure it."""
        diagnostics = Diagnostics()
        resource_cls = self.resources().get(type_name)
        if resource_cls is None:
            diagnostics.add_error("Unknown Resource Type", f"No resource named {type_name!r}")
            return RelationshipResource(), diagnostics

        resource = resource_cls()
        diagnostics.extend(resource.configure(self._reconciler))
        return resource, diagnostics
