"""Runtime configuration snapshot and loading utilities."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from yaml import safe_load

LOGGER = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a configuration file has an unexpected structure."""


class DataSourceRef(BaseModel):
    """Entry of the data source name to id table."""

    id: int = Field(..., description="Numeric id of the data source")
    uid: str | None = None
    type: str | None = Field(None, description="Plugin type, e.g. 'prometheus'")


class DataSourceSettings(BaseModel):
    """Identity of the data source a client talks on behalf of."""

    id: int
    name: str = ""
    uid: str | None = None
    type: str | None = None


class RuntimeConfig(BaseModel):
    """Read-only view of the organisation and its data sources."""

    model_config = ConfigDict(frozen=True)

    org_id: int = Field(1, ge=1)
    default_datasource: str | None = Field(
        None, description="Name that the 'default' reference points at"
    )
    datasources: dict[str, DataSourceRef] = Field(default_factory=dict)


def load_config(path: Path) -> RuntimeConfig:
    """Load ``datasources.yaml`` located at ``path`` or inside it."""

    config_path = path / "datasources.yaml" if path.is_dir() else path
    try:
        raw = safe_load(config_path.read_text()) or {}
    except FileNotFoundError:
        LOGGER.debug("Config file not found: %s, using defaults", config_path)
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError("datasources.yaml must contain a mapping")
    if "DSQUERY_ORG_ID" in os.environ:
        raw["org_id"] = int(os.environ["DSQUERY_ORG_ID"])
    return RuntimeConfig.model_validate(raw)


def config_from_env() -> RuntimeConfig:
    """Return the configuration referenced by ``DSQUERY_CONFIG``."""

    path = os.environ.get("DSQUERY_CONFIG", "datasources.yaml")
    return load_config(Path(path))


__all__ = [
    "ConfigError",
    "DataSourceRef",
    "DataSourceSettings",
    "RuntimeConfig",
    "config_from_env",
    "load_config",
]
