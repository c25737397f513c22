"""Outgoing request value handed to handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


@dataclass(frozen=True)
class Request:
    method: str
    uri: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None

    @classmethod
    def from_options(cls, method: str, uri: str, options: Mapping[str, Any]) -> "Request":
        """Build a request from merged options; only `headers` and `body` are read."""
        headers = {str(key): str(value) for key, value in (options.get("headers") or {}).items()}
        return cls(
            method=method.upper(),
            uri=uri,
            headers=headers,
            body=options.get("body") or None,
        )

    def header(self, name: str, default: str | None = None) -> str | None:
        name = name.lower()
        for key, value in self.headers.items():
            if key.lower() == name:
                return value
        return default
