"""Base protocol for transports talking to the dashboard backend."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


class TransportError(RuntimeError):
    """Raised when an outbound call fails.

    ``status`` is ``None`` for network failures. ``data`` holds the decoded
    error body when the server sent one.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        status_text: str | None = None,
        data: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.status_text = status_text
        self.data = data


@dataclass(slots=True, frozen=True)
class FetchRequest:
    """A single call to issue through :meth:`Transport.fetch`."""

    method: str
    url: str
    data: Any = None
    request_id: str | None = None
    params: dict[str, Any] | None = None


@dataclass(slots=True)
class FetchResponse:
    """Successful reply of :meth:`Transport.fetch`."""

    status: int
    data: Any = None
    status_text: str = "OK"
    headers: dict[str, str] = field(default_factory=dict)


class Transport(Protocol):
    """Interface for the HTTP layer used by the client."""

    async def fetch(self, request: FetchRequest) -> FetchResponse:
        """Issue ``request`` and return the full response."""

    async def get(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """Return the decoded body of ``GET url``."""

    async def post(self, url: str, data: Any = None) -> Any:
        """Return the decoded body of ``POST url``."""

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        data: Any = None,
        show_error_alert: bool = True,
    ) -> Any:
        """Return the decoded body of an arbitrary call."""


__all__ = ["FetchRequest", "FetchResponse", "Transport", "TransportError"]
