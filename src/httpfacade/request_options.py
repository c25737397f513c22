"""Request options: defaults, typing, and per-call merging."""

from __future__ import annotations

import json
from types import MappingProxyType
from typing import Any, Mapping, TypedDict
from urllib.parse import urlencode, urlsplit

from pydantic import ValidationError

from .exceptions import ConfigError, TypeValidationError
from .models import ProxyDescriptor
from .security import basic_auth_header, has_header, set_header


JSON_CONTENT_TYPE = "application/json; charset=UTF-8"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=UTF-8"
MULTIPART_CONTENT_TYPE = "multipart/form-data; charset=UTF-8"


class RequestOptions(TypedDict, total=False):
    allow_redirects: bool
    connect_timeout: float
    debug: bool
    delay: int
    http_errors: bool
    ssl_verify: bool
    timeout: float
    auth: str | Mapping[str, str] | tuple[str, str]
    json: Any
    form_params: Mapping[str, Any]
    multipart: Any
    body: str | bytes
    headers: Mapping[str, str]
    proxy: str | Mapping[str, Any]


DEFAULT_OPTIONS: Mapping[str, Any] = MappingProxyType(
    {
        "allow_redirects": True,
        "connect_timeout": 0,
        "debug": False,
        "delay": 0,
        "http_errors": True,
        "ssl_verify": True,
        "timeout": 0,
    }
)


def merge_recursive(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge `override` onto `base`; nested mappings merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_recursive(current, value)
        else:
            merged[key] = value
    return merged


def merge_options(defaults: Mapping[str, Any], options: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Merge per-call `options` over `defaults` and derive auth, body and proxy.

    Top-level keys in `options` replace the default entirely. Neither input is
    mutated.
    """
    merged = dict(defaults)
    if options:
        merged.update(options)
    headers: dict[str, Any] = dict(merged.get("headers") or {})

    auth = merged.get("auth")
    if auth and not has_header(headers, "authorization"):
        headers["authorization"] = _authorization(auth)

    if merged.get("json"):
        set_header(headers, "content-type", JSON_CONTENT_TYPE)
        if not merged.get("body"):
            merged["body"] = json.dumps(merged["json"], ensure_ascii=False, separators=(",", ":"))
    if merged.get("form_params"):
        set_header(headers, "content-type", FORM_CONTENT_TYPE)
        if not merged.get("body"):
            merged["body"] = urlencode(merged["form_params"], doseq=True)
    if merged.get("multipart"):
        set_header(headers, "content-type", MULTIPART_CONTENT_TYPE)
        if not merged.get("body"):
            merged["body"] = merged["multipart"]

    if headers or "headers" in merged:
        merged["headers"] = headers

    if merged.get("proxy") is not None:
        merged["proxy"] = normalize_proxy(merged["proxy"])

    return merged


def _authorization(auth: Any) -> str:
    if isinstance(auth, Mapping):
        return basic_auth_header(auth.get("username", ""), auth.get("password", ""))
    if isinstance(auth, tuple) and len(auth) == 2:
        return basic_auth_header(*auth)
    return str(auth)


def normalize_proxy(proxy: Any) -> dict[str, Any]:
    """Return the `{type, hostname, port}` descriptor for a proxy URL or mapping."""
    if isinstance(proxy, str):
        proxy = parse_proxy_url(proxy)
    if not isinstance(proxy, Mapping):
        raise TypeValidationError("proxy must be an array or a URL string")
    try:
        descriptor = ProxyDescriptor.model_validate(dict(proxy))
    except ValidationError as exc:
        field = exc.errors()[0]["loc"][0]
        raise TypeValidationError(f"proxy {field} is invalid", cause=exc) from exc
    return descriptor.model_dump()


def parse_proxy_url(url: str) -> dict[str, Any]:
    # urlsplit reads "host:port" as scheme "host"; force the netloc form.
    target = url if "://" in url else f"//{url}"
    try:
        parts = urlsplit(target)
        hostname = parts.hostname
        port = parts.port
    except ValueError as exc:
        raise ConfigError("cannot parse proxy", cause=exc) from exc
    if not hostname:
        raise ConfigError("host is not present in proxy url")
    if port is None:
        raise ConfigError("port is not present in proxy url")
    return {"type": parts.scheme or "http", "hostname": _netloc_host(parts.netloc), "port": port}


def _netloc_host(netloc: str) -> str:
    # SplitResult.hostname lower-cases; keep the host as written.
    hostinfo = netloc.rpartition("@")[2]
    if hostinfo.startswith("["):
        return hostinfo[1 : hostinfo.index("]")]
    return hostinfo.partition(":")[0]
