"""Run dashboard annotations through the generic query pipeline."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from .contracts import (
    AnnotationEvent,
    AnnotationFrameResult,
    AnnotationQueryRequest,
    DataFrame,
    DataQueryRequest,
    DataQueryResponse,
    QueryTarget,
)
from .hooks import AnnotationQuery, QueryHooks
from .resolver import UnknownBackendError

LOGGER = logging.getLogger(__name__)

DEFAULT_INTERVAL = "1m"
DEFAULT_INTERVAL_MS = 60_000

Dispatch = Callable[[DataQueryRequest], Awaitable[DataQueryResponse]]


def _to_ms(value: Any) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        return int(parsed.timestamp() * 1000)
    return None


def _to_tags(value: Any) -> list[str]:
    if isinstance(value, str):
        return [t.strip() for t in value.split(",") if t.strip()]
    if isinstance(value, list):
        return [str(t) for t in value]
    return []


def _optional_str(value: Any) -> str | None:
    return None if value is None else str(value)


def annotations_from_frame(frame: DataFrame) -> AnnotationFrameResult:
    """Read annotation events from the fields of ``frame``.

    The ``time`` field, or the first field of type ``time``, marks each
    event; rows without a usable time are skipped.
    """

    time_field = frame.field("time")
    if time_field is None:
        time_field = next((f for f in frame.fields if f.type == "time"), None)
    if time_field is None:
        return AnnotationFrameResult()
    end_field = frame.field("timeEnd") or frame.field("endTime")

    def column(name: str) -> list[Any]:
        found = frame.field(name)
        return found.values if found is not None else []

    def cell(values: list[Any], idx: int) -> Any:
        return values[idx] if idx < len(values) else None

    columns = {
        name: column(name)
        for name in (
            "title",
            "text",
            "tags",
            "id",
            "color",
            "dashboardId",
            "panelId",
            "login",
        )
    }
    events: list[AnnotationEvent] = []
    for idx, raw_time in enumerate(time_field.values):
        event_time = _to_ms(raw_time)
        if event_time is None:
            continue
        events.append(
            AnnotationEvent(
                time=event_time,
                timeEnd=_to_ms(cell(end_field.values, idx)) if end_field else None,
                title=_optional_str(cell(columns["title"], idx)),
                text=_optional_str(cell(columns["text"], idx)),
                tags=_to_tags(cell(columns["tags"], idx)),
                id=_optional_str(cell(columns["id"], idx)),
                color=_optional_str(cell(columns["color"], idx)),
                dashboardId=cell(columns["dashboardId"], idx),
                panelId=cell(columns["panelId"], idx),
                login=_optional_str(cell(columns["login"], idx)),
            )
        )
    return AnnotationFrameResult(events=events)


def _prepare(
    request: AnnotationQueryRequest, hooks: QueryHooks | None
) -> AnnotationQuery | None:
    if hooks is not None and hooks.prepare_annotation_query is not None:
        prepared = hooks.prepare_annotation_query(request)
        if prepared is not None:
            return prepared
    if request.annotation.target:
        return AnnotationQuery(QueryTarget.model_validate(request.annotation.target))
    return None


async def translate_and_run(
    request: AnnotationQueryRequest,
    dispatch: Dispatch,
    hooks: QueryHooks | None = None,
) -> list[AnnotationEvent]:
    """Return the events of one annotation, or ``[]`` when there are none.

    Disabled annotations and annotations without a query never reach
    ``dispatch``. Failed queries are logged and yield no events.
    """

    if not request.annotation.enable:
        return []
    prepared = _prepare(request, hooks)
    if prepared is None:
        return []

    start_time = int(time.time() * 1000)
    query_request = DataQueryRequest(
        targets=[prepared.query],
        range=request.range,
        interval=request.interval or DEFAULT_INTERVAL,
        intervalMs=request.interval_ms or DEFAULT_INTERVAL_MS,
        requestId=f"anno-{start_time}",
        startTime=start_time,
        scopedVars={},
        timezone=request.dashboard.timezone,
    )
    try:
        rsp = await dispatch(query_request)
    except UnknownBackendError as err:
        LOGGER.warning("Annotation %s skipped: %s", request.annotation.name, err)
        return []

    if not rsp.ok:
        LOGGER.warning(
            "Annotation query %s failed: %s",
            request.annotation.name,
            rsp.error.message if rsp.error else "unknown error",
        )
        return []
    if not rsp.data:
        return []
    if prepared.processor is not None:
        return prepared.processor(rsp)
    try:
        return annotations_from_frame(rsp.data[0]).events
    except ValidationError as err:
        LOGGER.warning(
            "Annotation %s has unusable events: %s", request.annotation.name, err
        )
        return []


__all__ = [
    "DEFAULT_INTERVAL",
    "DEFAULT_INTERVAL_MS",
    "annotations_from_frame",
    "translate_and_run",
]
