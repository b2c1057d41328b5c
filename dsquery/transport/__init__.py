"""Transport implementations and factory."""

from __future__ import annotations

import os

from .base import FetchRequest, FetchResponse, Transport, TransportError
from .http import RequestsTransport
from .mock import MockTransport


def create_transport(backend: str | None = None, **kwargs: object) -> Transport:
    """Return a ``Transport`` based on ``backend`` or environment."""

    if backend is None:
        backend = "HTTP" if os.getenv("DSQUERY_URL") else "MOCK"
    backend = backend.upper()
    if backend == "HTTP":
        return RequestsTransport(**kwargs)  # type: ignore[arg-type]
    return MockTransport()


__all__ = [
    "FetchRequest",
    "FetchResponse",
    "MockTransport",
    "RequestsTransport",
    "Transport",
    "TransportError",
    "create_transport",
]
