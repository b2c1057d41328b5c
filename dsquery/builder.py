"""Build the outbound body for a batch of queries."""

from __future__ import annotations

import logging
from typing import Any

from .config import RuntimeConfig
from .contracts import DataQueryRequest, QueryPayload
from .hooks import QueryHooks
from .resolver import is_expression, resolve_datasource_id

LOGGER = logging.getLogger(__name__)


def build_query_payload(
    request: DataQueryRequest,
    self_id: int,
    config: RuntimeConfig,
    hooks: QueryHooks | None = None,
) -> QueryPayload | None:
    """Return the body for ``request`` or ``None`` when nothing is left to run.

    Raises :class:`~dsquery.resolver.UnknownBackendError` before anything is
    sent when a target references a data source missing from ``config``.
    """

    hooks = hooks or QueryHooks()
    targets = request.targets
    if hooks.filter_query is not None:
        targets = [q for q in targets if hooks.filter_query(q)]

    queries: list[dict[str, Any]] = []
    for target in targets:
        if is_expression(target.datasource):
            queries.append(
                {**target.to_wire(), "datasourceId": self_id, "orgId": config.org_id}
            )
            continue
        datasource_id = resolve_datasource_id(target.datasource, self_id, config)
        queries.append(
            {
                **hooks.substitute(target, request.scoped_vars),
                "datasourceId": datasource_id,
                "intervalMs": request.interval_ms,
                "maxDataPoints": request.max_data_points,
                "orgId": config.org_id,
            }
        )

    if not queries:
        LOGGER.debug("No queries left for request %s", request.request_id)
        return None

    payload = QueryPayload(queries=queries)
    if request.range is not None:
        payload.range = request.range.model_dump(by_alias=True, mode="json")
        payload.from_ = str(request.range.from_ms())
        payload.to = str(request.range.to_ms())
    return payload


__all__ = ["build_query_payload"]
