"""Dynamic plugin discovery and loading."""

from relsync.plugins.loader import PluginLoader, PluginNotFoundError

__all__ = ["PluginLoader", "PluginNotFoundError"]
