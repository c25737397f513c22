"""Synchronous client that merges options and classifies responses."""

from __future__ import annotations

import logging
import time
from types import MappingProxyType
from typing import Any, Mapping

import httpx

from .exceptions import ClientError, ResponseError, ServerError
from .handlers import Handler, HttpxHandler
from .request import Request
from .request_options import DEFAULT_OPTIONS, merge_options, merge_recursive


_LOGGER = logging.getLogger(__name__)


def _raise_for_status(request: Request, response: httpx.Response) -> None:
    status = response.status_code
    if status < 400:
        return
    if status < 500:
        raise ClientError(request, response)
    if status < 600:
        raise ServerError(request, response)
    raise ResponseError(request, response)


class Client:
    """HTTP client facade.

    `options` are deep-merged over `defaults` once, at construction. Each call
    then merges its own options over that baseline without changing it. The
    client is itself a handler, so clients can be stacked.

    Swapping the handler while other threads are inside `request` is not
    guarded; those calls may use either handler.
    """

    def __init__(
        self,
        options: Mapping[str, Any] | None = None,
        *,
        defaults: Mapping[str, Any] = DEFAULT_OPTIONS,
        handler: Handler | None = None,
    ) -> None:
        self._options = MappingProxyType(merge_recursive(defaults, options or {}))
        self._handler: Handler = handler if handler is not None else HttpxHandler()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        close = getattr(self._handler, "close", None)
        if callable(close):
            close()

    @property
    def options(self) -> Mapping[str, Any]:
        return self._options

    @property
    def handler(self) -> Handler:
        return self._handler

    @handler.setter
    def handler(self, handler: Handler) -> None:
        self._handler = handler

    def get_handler(self) -> Handler:
        return self._handler

    def set_handler(self, handler: Handler) -> None:
        self._handler = handler

    def merge_options(self, options: Mapping[str, Any] | None = None) -> dict[str, Any]:
        return merge_options(self._options, options)

    def request(self, method: str, uri: str, options: Mapping[str, Any] | None = None) -> httpx.Response:
        merged = self.merge_options(options)
        request = Request.from_options(method, uri, merged)
        response = self.fire(request, merged)
        _LOGGER.debug("%s %s -> %s", request.method, request.uri, response.status_code)

        if merged.get("http_errors", True):
            _raise_for_status(request, response)
        return response

    def get(self, uri: str, options: Mapping[str, Any] | None = None) -> httpx.Response:
        return self.request("GET", uri, options)

    def post(self, uri: str, options: Mapping[str, Any] | None = None) -> httpx.Response:
        return self.request("POST", uri, options)

    def fire(self, request: Request, options: Mapping[str, Any]) -> httpx.Response:
        delay = options.get("delay") or 0
        if delay > 0:
            _LOGGER.debug("Delaying %s %s by %dus", request.method, request.uri, delay)
            time.sleep(delay / 1_000_000)
        return self._handler.fire(request, options)
