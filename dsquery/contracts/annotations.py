"""Annotation request and event contracts."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .query import TimeRange


class AnnotationSpec(BaseModel):
    """Annotation definition stored on a dashboard."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    enable: bool = False
    name: str | None = None
    datasource: str | None = None
    target: dict[str, Any] | None = Field(
        None, description="Inline query used when no preparation hook applies"
    )


class DashboardRef(BaseModel):
    """The parts of the owning dashboard an annotation query needs."""

    model_config = ConfigDict(extra="allow")

    timezone: str | None = None


class AnnotationQueryRequest(BaseModel):
    """One annotation to resolve for a dashboard time range."""

    model_config = ConfigDict(populate_by_name=True)

    annotation: AnnotationSpec
    dashboard: DashboardRef = Field(default_factory=DashboardRef)
    range: TimeRange | None = None
    interval: str | None = None
    interval_ms: int | None = Field(None, alias="intervalMs")


class AnnotationEvent(BaseModel):
    """A point or region rendered on a panel."""

    model_config = ConfigDict(populate_by_name=True)

    time: int | None = None
    time_end: int | None = Field(None, alias="timeEnd")
    title: str | None = None
    text: str | None = None
    tags: list[str] = Field(default_factory=list)
    id: str | None = None
    color: str | None = None
    dashboard_id: int | None = Field(None, alias="dashboardId")
    panel_id: int | None = Field(None, alias="panelId")
    login: str | None = None
    source: dict[str, Any] | None = None


class AnnotationFrameResult(BaseModel):
    """Events extracted from a single frame."""

    events: list[AnnotationEvent] = Field(default_factory=list)


__all__ = [
    "AnnotationEvent",
    "AnnotationFrameResult",
    "AnnotationQueryRequest",
    "AnnotationSpec",
    "DashboardRef",
]
