"""Scrub credentials from payloads before they reach the logs."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

DEFAULT_SECRET_KEYS = {
    "token",
    "access_token",
    "password",
    "api_key",
    "apiKey",
    "authorization",
    "basicAuthPassword",
    "secureJsonData",
}

TOKEN_PATTERNS = [
    re.compile(r"(?i)bearer\s+[A-Za-z0-9._~+/=-]+"),
    re.compile(r"glsa_[A-Za-z0-9_]{16,}"),
]


def _redact_str(value: str) -> str:
    for pattern in TOKEN_PATTERNS:
        value = pattern.sub("[redacted]", value)
    return value


def redact(data: Any, secret_keys: Iterable[str] = ()) -> Any:
    """Return a copy of ``data`` with secret values replaced."""

    secrets = DEFAULT_SECRET_KEYS.union(secret_keys)
    if isinstance(data, dict):
        return {
            key: "[redacted]" if key in secrets else redact(value, secrets)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [redact(item, secrets) for item in data]
    if isinstance(data, str):
        return _redact_str(data)
    return data


__all__ = ["redact"]
