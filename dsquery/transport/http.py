"""Transport over the dashboard HTTP API using ``requests``."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any

import requests

from ..redact import redact
from .base import FetchRequest, FetchResponse, Transport, TransportError

LOGGER = logging.getLogger(__name__)


class RequestsTransport(Transport):
    """Issue calls against ``base_url`` on a worker thread."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        token: str | None = None,
        org_id: int | None = None,
        timeout: float | None = None,
    ) -> None:
        base_url = base_url or os.getenv("DSQUERY_URL")
        if not base_url:
            raise RuntimeError("DSQUERY_URL is not set")
        self.base_url = base_url.rstrip("/")
        self.token = token or os.getenv("DSQUERY_TOKEN")
        self.org_id = org_id
        self.timeout = timeout or float(os.getenv("DSQUERY_TIMEOUT", "30"))

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if self.org_id is not None:
            headers["X-Grafana-Org-Id"] = str(self.org_id)
        return headers

    def _send(self, request: FetchRequest, show_error_alert: bool) -> FetchResponse:
        url = f"{self.base_url}{request.url}"
        LOGGER.debug(
            "%s %s request_id=%s body=%s",
            request.method,
            url,
            request.request_id,
            redact(request.data),
        )
        level = logging.WARNING if show_error_alert else logging.DEBUG
        try:
            resp = requests.request(
                request.method,
                url,
                headers=self._headers(),
                params=request.params,
                json=request.data,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            LOGGER.log(level, "%s %s failed: %s", request.method, url, exc)
            raise TransportError(str(exc)) from exc

        if resp.ok:
            try:
                data = resp.json() if resp.content else None
            except ValueError as exc:
                LOGGER.log(level, "%s %s returned invalid JSON", request.method, url)
                raise TransportError(
                    f"invalid JSON reply: {exc}",
                    status=resp.status_code,
                    status_text=resp.reason,
                    data={"message": resp.text},
                ) from exc
        else:
            data = _decode_body(resp)
            LOGGER.log(
                level, "%s %s returned %s", request.method, url, resp.status_code
            )
            message = data.get("message") if isinstance(data, dict) else None
            raise TransportError(
                message or f"{resp.status_code} {resp.reason}",
                status=resp.status_code,
                status_text=resp.reason,
                data=data,
            )
        return FetchResponse(
            status=resp.status_code,
            data=data,
            status_text=resp.reason or "",
            headers=dict(resp.headers),
        )

    async def fetch(self, request: FetchRequest) -> FetchResponse:
        return await asyncio.to_thread(self._send, request, True)

    async def get(self, url: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", url, params=params)

    async def post(self, url: str, data: Any = None) -> Any:
        return await self.request("POST", url, data=data)

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        data: Any = None,
        show_error_alert: bool = True,
    ) -> Any:
        fetch = FetchRequest(method=method, url=url, data=data, params=params)
        resp = await asyncio.to_thread(self._send, fetch, show_error_alert)
        return resp.data


def _decode_body(resp: requests.Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return {"message": resp.text}


__all__ = ["RequestsTransport"]
