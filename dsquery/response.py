"""Decode query replies and transport failures into one result shape."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from .contracts import (
    DataFrame,
    DataQueryError,
    DataQueryResponse,
    FrameField,
    LoadingState,
)
from .transport import FetchResponse, TransportError

LOGGER = logging.getLogger(__name__)


def _unwrap(res: Any) -> tuple[int | None, Any]:
    """Return ``(status, body)`` for any accepted input."""

    if isinstance(res, (FetchResponse, TransportError)):
        return res.status, res.data
    if isinstance(res, BaseException):
        return None, None
    if isinstance(res, Mapping):
        if "results" in res:
            return None, res
        return res.get("status"), res.get("data")
    return None, None


def _series_frame(series: Mapping[str, Any]) -> DataFrame:
    if "fields" in series:
        frame = DataFrame.model_validate(series)
    else:
        points = series.get("datapoints") or []
        frame = DataFrame(
            name=series.get("target") or series.get("name"),
            fields=[
                FrameField(
                    name="Time", type="time", values=[p[1] for p in points]
                ),
                FrameField(
                    name="Value",
                    type="number",
                    values=[p[0] for p in points],
                    labels=series.get("tags"),
                ),
            ],
        )
    return frame


def _table_frame(table: Mapping[str, Any]) -> DataFrame:
    columns = table.get("columns") or []
    rows = table.get("rows") or []
    fields = []
    for idx, column in enumerate(columns):
        name = column.get("text") if isinstance(column, Mapping) else str(column)
        values = [row[idx] for row in rows]
        fields.append(FrameField(name=name or f"Field {idx + 1}", values=values))
    return DataFrame(name=table.get("name"), fields=fields)


def _json_frame(frame: Mapping[str, Any]) -> DataFrame:
    schema = frame.get("schema") or {}
    values = (frame.get("data") or {}).get("values") or []
    fields = []
    for idx, field_schema in enumerate(schema.get("fields") or []):
        fields.append(
            FrameField(
                name=field_schema.get("name") or f"Field {idx + 1}",
                type=field_schema.get("type") or "other",
                values=list(values[idx]) if idx < len(values) else [],
                config=field_schema.get("config") or {},
                labels=field_schema.get("labels"),
            )
        )
    return DataFrame(
        name=schema.get("name"),
        refId=schema.get("refId"),
        fields=fields,
        meta=schema.get("meta"),
    )


def _frames(ref_id: str, result: Mapping[str, Any]) -> list[DataFrame]:
    frames: list[DataFrame] = []
    frames.extend(_series_frame(s) for s in result.get("series") or [])
    frames.extend(_table_frame(t) for t in result.get("tables") or [])
    frames.extend(_json_frame(f) for f in result.get("frames") or [])
    for frame in frames:
        if not frame.ref_id:
            frame.ref_id = ref_id
    return frames


def to_data_query_error(err: Any) -> DataQueryError:
    """Describe a failed call as a :class:`DataQueryError`."""

    status, data = _unwrap(err)
    status_text = getattr(err, "status_text", None)
    if isinstance(err, Mapping):
        status_text = err.get("statusText")
    message = None
    if isinstance(data, Mapping):
        message = data.get("message") or data.get("error")
    if not message and isinstance(err, BaseException):
        message = str(err)
    if not message:
        message = status_text or "Query error"
    return DataQueryError(
        message=str(message),
        status=status,
        statusText=status_text,
        data=data,
    )


def to_data_query_response(res: Any) -> DataQueryResponse:
    """Return a :class:`DataQueryResponse` for a reply or a failure.

    ``res`` may be a :class:`FetchResponse`, any exception raised while
    fetching, or a plain mapping. Per-query errors reported by the backend
    and malformed frames mark the response as failed; this function does not
    raise.
    """

    status, body = _unwrap(res)
    rsp = DataQueryResponse()
    results = body.get("results") if isinstance(body, Mapping) else None
    if isinstance(results, Mapping):
        for ref_id, result in results.items():
            if not isinstance(result, Mapping):
                continue
            if result.get("error") and rsp.error is None:
                rsp.error = DataQueryError(refId=ref_id, message=str(result["error"]))
                rsp.state = LoadingState.ERROR
            try:
                rsp.data.extend(_frames(ref_id, result))
            except (ValidationError, AttributeError, TypeError, LookupError) as exc:
                LOGGER.warning("Invalid frame in result %s: %s", ref_id, exc)
                if rsp.error is None:
                    rsp.error = DataQueryError(
                        refId=ref_id, message=f"invalid frame: {exc}"
                    )
                rsp.state = LoadingState.ERROR

    if isinstance(res, BaseException) or (status is not None and status != 200):
        rsp.state = LoadingState.ERROR
        if rsp.error is None:
            rsp.error = to_data_query_error(res)
    return rsp


__all__ = ["to_data_query_error", "to_data_query_response"]
