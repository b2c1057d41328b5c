"""Pydantic contracts for query requests, results and health checks."""

from .annotations import (
    AnnotationEvent,
    AnnotationFrameResult,
    AnnotationQueryRequest,
    AnnotationSpec,
    DashboardRef,
)
from .health import HealthCheckResult, HealthStatus, TestDataSourceResult
from .query import DataQueryRequest, QueryPayload, QueryTarget, TimeRange
from .result import (
    DataFrame,
    DataQueryError,
    DataQueryResponse,
    FrameField,
    LoadingState,
)

__all__ = [
    "AnnotationEvent",
    "AnnotationFrameResult",
    "AnnotationQueryRequest",
    "AnnotationSpec",
    "DashboardRef",
    "DataFrame",
    "DataQueryError",
    "DataQueryRequest",
    "DataQueryResponse",
    "FrameField",
    "HealthCheckResult",
    "HealthStatus",
    "LoadingState",
    "QueryPayload",
    "QueryTarget",
    "TestDataSourceResult",
    "TimeRange",
]
