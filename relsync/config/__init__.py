from .loader import DEFAULT_CONFIG_TEMPLATE, load_config
from .models import (
    PluginsConfig,
    ReconcilerConfig,
    RelsyncConfig,
    SpiceDBConfig,
)

__all__ = [
    "DEFAULT_CONFIG_TEMPLATE",
    "PluginsConfig",
    "ReconcilerConfig",
    "RelsyncConfig",
    "SpiceDBConfig",
    "load_config",
]
