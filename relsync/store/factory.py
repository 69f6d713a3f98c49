"""Build the configured RelationshipStore."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from relsync.config.models import RelsyncConfig, SpiceDBConfig
from relsync.interfaces.store import RelationshipStore
from relsync.plugins.loader import PluginLoader

logger = logging.getLogger(__name__)


def _read_ca_cert(config: SpiceDBConfig) -> bytes | None:
    if not config.ca_cert_path:
        return None
    path = Path(config.ca_cert_path).expanduser()
    try:
        return path.read_bytes()
    except OSError as e:
        raise ValueError(f"Unable to read CA certificate {path}: {e}") from e


def create_spicedb_store(config: SpiceDBConfig) -> RelationshipStore:
    """Connect to SpiceDB using the token from ``config.token_env``."""
    from relsync.store.spicedb import SpiceDBStore

    token = os.environ.get(config.token_env)
    if not token:
        raise ValueError(
            f"Missing SpiceDB token: set environment variable {config.token_env!r}"
        )
    if config.insecure:
        logger.warning("Connecting to %s without TLS", config.endpoint)
    return SpiceDBStore.connect(
        config.endpoint,
        token,
        insecure=config.insecure,
        ca_cert=_read_ca_cert(config),
        timeout=config.timeout,
    )


def create_store(config: RelsyncConfig, loader: PluginLoader | None = None) -> RelationshipStore:
    """Create the store backend named by ``config.plugins.store``.

    Built-in SpiceDB is configured from ``config.spicedb``. Other backends
    are built with ``from_config(config)`` when they define it, otherwise
    with no arguments.
    """
    loader = loader or PluginLoader(config)
    name = config.plugins.store
    if name == "spicedb":
        return create_spicedb_store(config.spicedb)

    store_cls = loader.load_store(name)
    factory = getattr(store_cls, "from_config", None)
    store = factory(config) if callable(factory) else store_cls()
    logger.debug("Using %s store", name)
    return store
