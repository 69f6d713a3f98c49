"""YAML config loading with env var expansion."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import RelsyncConfig

# Only these variables may be interpolated into config values.
_ALLOWED_ENV_VARS = frozenset({
    "SPICEDB_ENDPOINT",
    "SPICEDB_TOKEN_ENV",
    "SPICEDB_CA_CERT",
    "RELSYNC_STORE",
    "RELSYNC_LOG_LEVEL",
})


def load_config(cli_path: str | None = None) -> RelsyncConfig:
    """Load config with resolution order: CLI > project-local > user-global > defaults."""
    config_paths = [
        Path(cli_path) if cli_path else None,
        Path("./relsync.yaml"),
        Path.home() / ".relsync" / "config.yaml",
    ]

    for path in config_paths:
        if path and path.exists():
            try:
                with open(path) as f:
                    raw = yaml.safe_load(f)
                if raw is None:
                    continue
                raw = _expand_env_vars(raw)
                return RelsyncConfig(**raw)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e
            except ValidationError as e:
                raise ValueError(f"Invalid config in {path}: {e}") from e

    return RelsyncConfig()


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings.

    References to variables outside the allowlist are left untouched.
    """
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", _substitute, obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


def _substitute(match: re.Match) -> str:
    name = match.group(1)
    if name not in _ALLOWED_ENV_VARS:
        return match.group(0)
    return os.environ.get(name, "")


# Default YAML template written by hosts that bootstrap a project
DEFAULT_CONFIG_TEMPLATE = """\
# relsync.yaml

# SpiceDB connection
spicedb:
  endpoint: "localhost:50051"
  token_env: "SPICEDB_TOKEN"     # env var holding the preshared key
  insecure: false                # plaintext, local development only
  # ca_cert_path: "/etc/ssl/spicedb-ca.pem"
  timeout: 30                    # seconds per RPC

# Reconciler
reconciler:
  operation_timeout: null        # seconds per lifecycle operation

# Store backend
plugins:
  store: "spicedb"               # spicedb | memory | <entry point name>

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
