"""Health check contracts."""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field


class HealthStatus(str, Enum):
    """Current health status of a data source plugin."""

    UNKNOWN = "UNKNOWN"
    OK = "OK"
    ERROR = "ERROR"


class HealthCheckResult(BaseModel):
    """Payload returned by the plugin health endpoint."""

    status: HealthStatus = HealthStatus.UNKNOWN
    message: str = ""
    details: dict[str, Any] | None = Field(
        None, description="Plugin specific diagnostic details"
    )


class TestDataSourceResult(BaseModel):
    """Summary shown after testing a data source."""

    status: Literal["success", "fail"]
    message: str


__all__ = ["HealthCheckResult", "HealthStatus", "TestDataSourceResult"]
