from pydantic import BaseModel, Field
from typing import Literal


class SpiceDBConfig(BaseModel):
    endpoint: str = Field(default="localhost:50051", min_length=1)
    token_env: str = "SPICEDB_TOKEN"
    insecure: bool = False
    ca_cert_path: str | None = None
    timeout: float = Field(default=30.0, gt=0)


class ReconcilerConfig(BaseModel):
    operation_timeout: float | None = Field(default=None, gt=0)


class PluginsConfig(BaseModel):
    store: str = "spicedb"


class RelsyncConfig(BaseModel):
    spicedb: SpiceDBConfig = Field(default_factory=SpiceDBConfig)
    reconciler: ReconcilerConfig = Field(default_factory=ReconcilerConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
