"""Relationship store backends (SpiceDB, in-memory).

Uses PEP 562 lazy imports so the gRPC client is only loaded when accessed.
"""

__all__ = ["InMemoryStore", "SpiceDBStore", "create_spicedb_store", "create_store"]


def __getattr__(name: str):
    import importlib

    # Lazy-load submodules (needed for unittest.mock.patch resolution)
    _submodules = {"spicedb", "memory", "factory"}
    if name in _submodules:
        return importlib.import_module(f".{name}", __name__)

    _attr_map = {
        "SpiceDBStore": ".spicedb",
        "InMemoryStore": ".memory",
        "create_spicedb_store": ".factory",
        "create_store": ".factory",
    }
    if name in _attr_map:
        mod = importlib.import_module(_attr_map[name], __name__)
        return getattr(mod, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
