"""Query request contracts shared by the builder and the dispatcher."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class QueryTarget(BaseModel):
    """A single query descriptor.

    Fields other than the ones declared here belong to the data source plugin
    and are carried through untouched.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    ref_id: str | None = Field(None, alias="refId")
    datasource: str | None = Field(
        None, description="Backend reference: name, 'default' or '__expr__'"
    )
    hide: bool | None = None

    def to_wire(self) -> dict[str, Any]:
        """Return a fresh JSON-compatible dict for this target."""

        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class TimeRange(BaseModel):
    """Absolute time range with the raw expressions it came from."""

    model_config = ConfigDict(populate_by_name=True)

    from_: datetime = Field(..., alias="from")
    to: datetime
    raw: dict[str, Any] | None = None

    def from_ms(self) -> int:
        return int(self.from_.timestamp() * 1000)

    def to_ms(self) -> int:
        return int(self.to.timestamp() * 1000)


class DataQueryRequest(BaseModel):
    """A batch of targets sharing one range and interval."""

    model_config = ConfigDict(populate_by_name=True)

    targets: list[QueryTarget] = Field(default_factory=list)
    range: TimeRange | None = None
    interval: str | None = None
    interval_ms: int | None = Field(None, alias="intervalMs")
    max_data_points: int | None = Field(None, alias="maxDataPoints")
    request_id: str | None = Field(None, alias="requestId")
    scoped_vars: dict[str, Any] = Field(default_factory=dict, alias="scopedVars")
    timezone: str | None = None
    start_time: int | None = Field(None, alias="startTime")


class QueryPayload(BaseModel):
    """Body of ``POST /api/ds/query``."""

    model_config = ConfigDict(populate_by_name=True)

    queries: list[dict[str, Any]]
    range: dict[str, Any] | None = None
    from_: str | None = Field(None, alias="from")
    to: str | None = None

    def to_wire(self) -> dict[str, Any]:
        body: dict[str, Any] = {"queries": [dict(q) for q in self.queries]}
        if self.range is not None:
            body["range"] = self.range
            body["from"] = self.from_
            body["to"] = self.to
        return body


__all__ = ["DataQueryRequest", "QueryPayload", "QueryTarget", "TimeRange"]
