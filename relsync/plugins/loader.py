"""Dynamic store backend discovery and loading via entry points."""

from __future__ import annotations

import importlib.metadata
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from relsync.config.models import RelsyncConfig


class PluginNotFoundError(Exception):
    """Raised when a requested plugin cannot be found."""

    def __init__(
        self, plugin_type: str, name: str | None = None, available: list[str] | None = None
    ):
        self.plugin_type = plugin_type
        self.name = name
        self.available = available or []
        msg = f"No {plugin_type} plugin found"
        if name:
            msg += f" with name '{name}'"
        if self.available:
            msg += f" (available: {', '.join(self.available)})"
        super().__init__(msg)


class PluginLoader:
    """Discovers and loads plugins via entry points or built-in defaults."""

    # Entry point group names
    GROUPS = {
        "store": "relsync.plugins.store",
    }

    # Built-in backends (lazy import paths)
    BUILTINS = {
        "store": {
            "spicedb": ("relsync.store.spicedb", "SpiceDBStore"),
            "memory": ("relsync.store.memory", "InMemoryStore"),
        },
    }

    def __init__(self, config: RelsyncConfig):
        self._config = config

    def discover(self) -> dict[str, list[str]]:
        """Scan entry_points for registered plugins. Returns {type: [name, ...]}."""
        result: dict[str, list[str]] = {}
        for plugin_type, group in self.GROUPS.items():
            eps = importlib.metadata.entry_points(group=group)
            result[plugin_type] = [ep.name for ep in eps]
        return result

    def available(self, plugin_type: str) -> list[str]:
        """Built-in names followed by any registered entry point names."""
        names = list(self.BUILTINS.get(plugin_type, {}))
        for name in self.discover().get(plugin_type, []):
            if name not in names:
                names.append(name)
        return names

    def _resolve_name(self, plugin_type: str, name: str | None) -> str | None:
        """Resolve plugin name: explicit arg > config > None."""
        if name is not None:
            return name
        return getattr(self._config.plugins, plugin_type, None)

    def _load_from_entry_point(self, plugin_type: str, name: str) -> object | None:
        """Try to load a specific named entry point."""
        group = self.GROUPS[plugin_type]
        eps = importlib.metadata.entry_points(group=group)
        for ep in eps:
            if ep.name == name:
                return ep.load()
        return None

    def _load_builtin(self, plugin_type: str, name: str) -> object | None:
        """Import a built-in backend by name."""
        target = self.BUILTINS.get(plugin_type, {}).get(name)
        if target is None:
            return None
        module_path, class_name = target
        module = __import__(module_path, fromlist=[class_name])
        return getattr(module, class_name)

    def _load_plugin(self, plugin_type: str, name: str | None) -> object:
        """Fallback chain: entry points > built-ins. Unknown names raise."""
        resolved = self._resolve_name(plugin_type, name)
        if resolved is None:
            raise PluginNotFoundError(plugin_type)

        result = self._load_from_entry_point(plugin_type, resolved)
        if result is not None:
            return result
        result = self._load_builtin(plugin_type, resolved)
        if result is not None:
            return result
        raise PluginNotFoundError(plugin_type, resolved, self.available(plugin_type))

    def load_store(self, name: str | None = None) -> type:
        """Return the store class selected by *name* or ``plugins.store``."""
        return self._load_plugin("store", name)
