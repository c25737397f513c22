"""Exceptions raised by httpfacade."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from .request import Request


class HttpFacadeError(Exception):
    """Base exception for all httpfacade failures."""

    def __init__(
        self,
        message: str,
        *,
        request: Request | None = None,
        response: httpx.Response | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.request = request
        self.response = response
        self.cause = cause

    @property
    def status_code(self) -> int | None:
        if self.response is None:
            return None
        return self.response.status_code

    def __str__(self) -> str:  # pragma: no cover - simple formatting
        if self.status_code is None:
            return str(self.args[0])
        return f"{self.status_code}: {self.args[0]}"


class ConfigError(HttpFacadeError, ValueError):
    """Raised when an option value cannot be interpreted, e.g. a bad proxy URL."""


class TypeValidationError(HttpFacadeError, TypeError):
    """Raised when an option has the wrong shape or type."""


class ResponseError(HttpFacadeError):
    """Raised for a completed exchange whose status is outside the known classes."""

    def __init__(self, request: Request, response: httpx.Response, message: str | None = None) -> None:
        if message is None:
            reason = response.reason_phrase or "unexpected status"
            message = f"{reason} for {request.method} {request.uri}"
        super().__init__(message, request=request, response=response)


class ClientError(ResponseError):
    """Raised for HTTP 4xx responses."""


class ServerError(ResponseError):
    """Raised for HTTP 5xx responses."""


class TransportError(HttpFacadeError):
    """Raised by handlers when no response could be obtained."""


class NetworkError(TransportError):
    """Raised for transport-level failures like DNS and TCP errors."""


class RequestTimeoutError(TransportError):
    """Raised when a request exceeds the configured timeout."""
