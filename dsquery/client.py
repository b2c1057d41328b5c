"""Client for data sources whose queries run on the dashboard backend."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from .annotations import translate_and_run
from .builder import build_query_payload
from .config import DataSourceSettings, RuntimeConfig
from .contracts import (
    AnnotationEvent,
    AnnotationQueryRequest,
    DataQueryRequest,
    DataQueryResponse,
    HealthCheckResult,
    HealthStatus,
    QueryPayload,
    TestDataSourceResult,
)
from .hooks import QueryHooks
from .redact import redact
from .response import to_data_query_response
from .transport import FetchRequest, Transport, TransportError, create_transport

LOGGER = logging.getLogger(__name__)

QUERY_URL = "/api/ds/query"


class DataSourceWithBackend:
    """Query, annotation, resource and health calls for one data source.

    The client keeps no state between calls besides the objects it was
    constructed with, so concurrent calls are independent.
    """

    def __init__(
        self,
        settings: DataSourceSettings,
        config: RuntimeConfig,
        *,
        transport: Transport | None = None,
        hooks: QueryHooks | None = None,
    ) -> None:
        self.settings = settings
        self.config = config
        self.transport = transport or create_transport()
        self.hooks = hooks or QueryHooks()

    @property
    def id(self) -> int:
        return self.settings.id

    def build(self, request: DataQueryRequest) -> QueryPayload | None:
        """Return the outbound body for ``request``; ``None`` if nothing to run."""

        return build_query_payload(request, self.id, self.config, self.hooks)

    async def dispatch(
        self, payload: QueryPayload, request_id: str | None = None
    ) -> DataQueryResponse:
        """Send ``payload`` once and normalize whatever comes back."""

        body = payload.to_wire()
        LOGGER.debug("Dispatching %s: %s", request_id, redact(body))
        try:
            rsp = await self.transport.fetch(
                FetchRequest(
                    method="POST", url=QUERY_URL, data=body, request_id=request_id
                )
            )
        except Exception as err:
            LOGGER.warning("Query %s failed: %s", request_id, err)
            return to_data_query_response(err)
        return to_data_query_response(rsp)

    async def query(self, request: DataQueryRequest) -> DataQueryResponse:
        """Build and dispatch ``request``.

        Raises :class:`~dsquery.resolver.UnknownBackendError` before any call
        when a target cannot be resolved.
        """

        payload = self.build(request)
        if payload is None:
            return DataQueryResponse(data=[])
        return await self.dispatch(payload, request.request_id)

    async def annotation_query(
        self, request: AnnotationQueryRequest
    ) -> list[AnnotationEvent]:
        return await translate_and_run(request, self.query, self.hooks)

    async def get_resource(
        self, path: str, params: dict[str, Any] | None = None
    ) -> Any:
        """Make a GET request to the data source resource path."""

        return await self.transport.get(
            f"/api/datasources/{self.id}/resources/{path}", params
        )

    async def post_resource(
        self, path: str, body: dict[str, Any] | None = None
    ) -> Any:
        """Send a POST request to the data source resource path."""

        return await self.transport.post(
            f"/api/datasources/{self.id}/resources/{path}", {**(body or {})}
        )

    async def check_health(self) -> HealthCheckResult:
        """Run the data source health check."""

        try:
            reply = await self.transport.request(
                "GET", f"/api/datasources/{self.id}/health", show_error_alert=False
            )
        except TransportError as err:
            return _health_from(err.data, str(err))
        return _health_from(reply, "invalid health check reply")

    async def test_health(self) -> TestDataSourceResult:
        res = await self.check_health()
        status = "success" if res.status is HealthStatus.OK else "fail"
        return TestDataSourceResult(status=status, message=res.message)


def _health_from(payload: Any, fallback: str) -> HealthCheckResult:
    try:
        return HealthCheckResult.model_validate(payload)
    except ValidationError:
        LOGGER.debug("Unusable health payload: %r", payload)
        return HealthCheckResult(status=HealthStatus.ERROR, message=fallback)


__all__ = ["QUERY_URL", "DataSourceWithBackend"]
