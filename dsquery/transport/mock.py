"""Deterministic in-memory transport for tests and offline use."""

from __future__ import annotations

from typing import Any

from .base import FetchRequest, FetchResponse, Transport, TransportError

_HEALTH = {"status": "OK", "message": "mock data source is working"}


class MockTransport(Transport):
    """Transport returning canned replies keyed by URL.

    A reply that is a :class:`TransportError` instance is raised instead of
    returned. Unknown health URLs report ``OK``; any other unknown URL returns
    an empty result set. Every call is recorded in ``calls``.
    """

    def __init__(self, replies: dict[str, Any] | None = None) -> None:
        self.replies: dict[str, Any] = dict(replies or {})
        self.calls: list[FetchRequest] = []

    def _reply(self, request: FetchRequest) -> Any:
        self.calls.append(request)
        if request.url in self.replies:
            reply = self.replies[request.url]
        elif request.url.endswith("/health"):
            reply = dict(_HEALTH)
        else:
            reply = {"results": {}}
        if isinstance(reply, TransportError):
            raise reply
        return reply

    async def fetch(self, request: FetchRequest) -> FetchResponse:
        reply = self._reply(request)
        if isinstance(reply, FetchResponse):
            return reply
        return FetchResponse(status=200, data=reply)

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
        call = FetchRequest(method=method, url=url, data=data, params=params)
        reply = self._reply(call)
        return reply.data if isinstance(reply, FetchResponse) else reply


__all__ = ["MockTransport"]
