"""Normalized query results."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class LoadingState(str, Enum):
    """Outcome discriminant of a :class:`DataQueryResponse`."""

    DONE = "Done"
    ERROR = "Error"


class FrameField(BaseModel):
    """One column of a :class:`DataFrame`."""

    name: str
    type: str = "other"
    values: list[Any] = Field(default_factory=list)
    config: dict[str, Any] = Field(default_factory=dict)
    labels: dict[str, str] | None = None


class DataFrame(BaseModel):
    """Columnar result returned for one query."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    ref_id: str | None = Field(None, alias="refId")
    fields: list[FrameField] = Field(default_factory=list)
    meta: dict[str, Any] | None = None

    @property
    def length(self) -> int:
        return len(self.fields[0].values) if self.fields else 0

    def field(self, name: str) -> FrameField | None:
        for item in self.fields:
            if item.name == name:
                return item
        return None


class DataQueryError(BaseModel):
    """Error description attached to a failed response."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    ref_id: str | None = Field(None, alias="refId")
    status: int | None = None
    status_text: str | None = Field(None, alias="statusText")
    data: Any = None


class DataQueryResponse(BaseModel):
    """Single result shape for both successful and failed queries."""

    model_config = ConfigDict(populate_by_name=True)

    state: LoadingState = LoadingState.DONE
    data: list[DataFrame] = Field(default_factory=list)
    error: DataQueryError | None = None

    @property
    def ok(self) -> bool:
        return self.state is LoadingState.DONE


__all__ = [
    "DataFrame",
    "DataQueryError",
    "DataQueryResponse",
    "FrameField",
    "LoadingState",
]
