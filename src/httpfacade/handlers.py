"""Transport handlers that perform the actual HTTP exchange."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol, runtime_checkable

import httpx

from .exceptions import NetworkError, RequestTimeoutError
from .models import ProxyDescriptor
from .request import Request
from .security import sanitize_headers


_LOGGER = logging.getLogger(__name__)


@runtime_checkable
class Handler(Protocol):
    """Anything that can turn a request into a response.

    Handlers receive the merged options and must honor, or knowingly ignore,
    `timeout`, `connect_timeout`, `ssl_verify`, `allow_redirects`, `debug` and
    `proxy`.
    """

    def fire(self, request: Request, options: Mapping[str, Any]) -> httpx.Response:
        ...


def _build_timeout(options: Mapping[str, Any]) -> httpx.Timeout:
    # 0 means "no limit", as with cURL.
    timeout = options.get("timeout") or None
    connect_timeout = options.get("connect_timeout") or None
    return httpx.Timeout(timeout, connect=connect_timeout)


def _proxy_url(options: Mapping[str, Any]) -> str | None:
    proxy = options.get("proxy")
    if not proxy:
        return None
    return ProxyDescriptor.model_validate(proxy).url


def _is_file_field(value: Any) -> bool:
    return isinstance(value, (bytes, bytearray, tuple)) or hasattr(value, "read")


def _text_parts(fields: Mapping[str, Any]) -> list[tuple[str, tuple[None, str | bytes]]]:
    parts: list[tuple[str, tuple[None, str | bytes]]] = []
    for key, value in fields.items():
        values = value if isinstance(value, list) else [value]
        for item in values:
            parts.append((key, (None, item if isinstance(item, (str, bytes)) else str(item))))
    return parts


def _content_kwargs(request: Request) -> tuple[dict[str, str], dict[str, Any]]:
    headers = dict(request.headers)
    body = request.body
    if body is None:
        return headers, {}
    if isinstance(body, Mapping):
        content_type = request.header("content-type", "") or ""
        if content_type.lower().startswith("multipart/form-data"):
            # httpx writes its own content-type carrying the boundary.
            headers = {key: value for key, value in headers.items() if key.lower() != "content-type"}
            data = {key: value for key, value in body.items() if not _is_file_field(value)}
            files = {key: value for key, value in body.items() if _is_file_field(value)}
            if not files:
                # Without a file part httpx would fall back to urlencoding.
                return headers, {"files": _text_parts(data)}
            return headers, {"data": data or None, "files": files}
        return headers, {"data": dict(body)}
    return headers, {"content": body}


class HttpxHandler:
    """Default handler backed by httpx.

    With an injected `httpx_client` every request goes through that client and
    `ssl_verify` and `proxy` are left to its configuration. Otherwise a client
    is built for each call from the merged options.
    """

    def __init__(self, httpx_client: httpx.Client | None = None) -> None:
        self._httpx = httpx_client

    def __enter__(self) -> "HttpxHandler":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._httpx is not None:
            self._httpx.close()

    def _client_kwargs(self, options: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "verify": bool(options.get("ssl_verify", True)),
            "proxy": _proxy_url(options),
            "trust_env": False,
        }

    def fire(self, request: Request, options: Mapping[str, Any]) -> httpx.Response:
        headers, content = _content_kwargs(request)
        request_kwargs = {
            "headers": headers,
            "timeout": _build_timeout(options),
            "follow_redirects": bool(options.get("allow_redirects", True)),
            **content,
        }
        debug = bool(options.get("debug"))
        if debug:
            _LOGGER.debug("> %s %s headers=%s", request.method, request.uri, sanitize_headers(headers))

        try:
            if self._httpx is not None:
                response = self._httpx.request(request.method, request.uri, **request_kwargs)
            else:
                with httpx.Client(**self._client_kwargs(options)) as client:
                    response = client.request(request.method, request.uri, **request_kwargs)
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError("Request timed out", request=request, cause=exc) from exc
        except httpx.TransportError as exc:
            raise NetworkError("Network error", request=request, cause=exc) from exc

        if debug:
            _LOGGER.debug(
                "< %s %s headers=%s",
                response.status_code,
                response.reason_phrase,
                sanitize_headers(response.headers),
            )
        return response
