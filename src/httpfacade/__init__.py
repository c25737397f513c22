"""Small HTTP client facade with pluggable transports."""

from .client import Client
from .exceptions import (
    ClientError,
    ConfigError,
    HttpFacadeError,
    NetworkError,
    RequestTimeoutError,
    ResponseError,
    ServerError,
    TransportError,
    TypeValidationError,
)
from .handlers import Handler, HttpxHandler
from .models import ProxyDescriptor
from .request import Request
from .request_options import DEFAULT_OPTIONS, RequestOptions, merge_options

__all__ = [
    "Client",
    "ClientError",
    "ConfigError",
    "DEFAULT_OPTIONS",
    "Handler",
    "HttpFacadeError",
    "HttpxHandler",
    "NetworkError",
    "ProxyDescriptor",
    "Request",
    "RequestOptions",
    "RequestTimeoutError",
    "ResponseError",
    "ServerError",
    "TransportError",
    "TypeValidationError",
    "merge_options",
]
