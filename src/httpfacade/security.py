"""Credential and header helpers."""

from __future__ import annotations

import base64
from typing import Mapping


SENSITIVE_HEADERS = {
    "authorization",
    "proxy-authorization",
    "cookie",
    "set-cookie",
    "x-api-key",
}


def sanitize_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Return headers with sensitive values redacted for logging."""
    redacted: dict[str, str] = {}
    for key, value in headers.items():
        if key.lower() in SENSITIVE_HEADERS:
            redacted[key] = "[REDACTED]"
        else:
            redacted[key] = value
    return redacted


def basic_auth_header(username: object, password: object) -> str:
    """Build a `Basic` authorization header value from a username/password pair."""
    token = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
    return f"Basic {token}"


def has_header(headers: Mapping[str, object], name: str) -> bool:
    name = name.lower()
    return any(str(key).lower() == name for key in headers)


def set_header(headers: dict[str, object], name: str, value: object) -> None:
    """Set `name` in place, dropping any differently-cased duplicate first."""
    lowered = name.lower()
    for key in [key for key in headers if str(key).lower() == lowered]:
        del headers[key]
    headers[lowered] = value
