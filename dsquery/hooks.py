"""Capabilities a data source plugin can inject into the client."""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from .contracts import (
    AnnotationEvent,
    AnnotationQueryRequest,
    DataQueryResponse,
    QueryTarget,
)

AnnotationProcessor = Callable[[DataQueryResponse], list[AnnotationEvent]]

_VARIABLE = re.compile(r"\$(\w+)|\$\{(\w+)(?::\w+)?\}|\[\[(\w+)\]\]")
_KEEP_AS_IS = ("refId", "datasource")


@dataclass(slots=True, frozen=True)
class AnnotationQuery:
    """Standard query model for an annotation, with an optional processor."""

    query: QueryTarget
    processor: AnnotationProcessor | None = None


@dataclass(slots=True)
class QueryHooks:
    """Optional overrides consulted while building and running queries.

    ``filter_query`` returns ``False`` to skip a target.
    ``apply_template_variables`` returns the wire form of a target after
    substitution. ``prepare_annotation_query`` finds the query that serves an
    annotation, or ``None`` when there is nothing to run.
    """

    filter_query: Callable[[QueryTarget], bool] | None = None
    apply_template_variables: (
        Callable[[QueryTarget, Mapping[str, Any]], Mapping[str, Any]] | None
    ) = None
    prepare_annotation_query: (
        Callable[[AnnotationQueryRequest], AnnotationQuery | None] | None
    ) = None

    def substitute(
        self, query: QueryTarget, scoped_vars: Mapping[str, Any]
    ) -> dict[str, Any]:
        if self.apply_template_variables is None:
            return query.to_wire()
        return dict(self.apply_template_variables(query, scoped_vars))


def _variable_value(entry: Any) -> str | None:
    if isinstance(entry, Mapping):
        value = entry.get("value", entry.get("text"))
    else:
        value = entry
    if value is None:
        return None
    if isinstance(value, list):
        return ",".join(str(v) for v in value)
    return str(value)


def interpolate(value: Any, scoped_vars: Mapping[str, Any]) -> Any:
    """Replace ``$var``, ``${var}`` and ``[[var]]`` inside ``value``."""

    if isinstance(value, str):

        def _sub(match: re.Match[str]) -> str:
            name = next(g for g in match.groups() if g)
            replacement = _variable_value(scoped_vars.get(name))
            return match.group(0) if replacement is None else replacement

        return _VARIABLE.sub(_sub, value)
    if isinstance(value, dict):
        return {k: interpolate(v, scoped_vars) for k, v in value.items()}
    if isinstance(value, list):
        return [interpolate(item, scoped_vars) for item in value]
    return value


def template_variable_hooks(**overrides: Any) -> QueryHooks:
    """Return hooks that interpolate scoped variables into every string field."""

    def _apply(query: QueryTarget, scoped_vars: Mapping[str, Any]) -> dict[str, Any]:
        wire = query.to_wire()
        return {
            key: value if key in _KEEP_AS_IS else interpolate(value, scoped_vars)
            for key, value in wire.items()
        }

    return QueryHooks(apply_template_variables=_apply, **overrides)


__all__ = [
    "AnnotationProcessor",
    "AnnotationQuery",
    "QueryHooks",
    "interpolate",
    "template_variable_hooks",
]
