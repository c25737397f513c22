from __future__ import annotations

import base64
import json
from urllib.parse import parse_qs

import pytest

from httpfacade.exceptions import ConfigError, TypeValidationError
from httpfacade.request_options import (
    DEFAULT_OPTIONS,
    FORM_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    MULTIPART_CONTENT_TYPE,
    merge_options,
    merge_recursive,
)


def test_call_options_replace_top_level_defaults() -> None:
    defaults = {"timeout": 5, "headers": {"accept": "text/html", "x-trace": "1"}}
    merged = merge_options(defaults, {"headers": {"accept": "application/json"}})

    assert merged["timeout"] == 5
    assert merged["headers"] == {"accept": "application/json"}


def test_merge_does_not_mutate_defaults() -> None:
    defaults = {"headers": {"accept": "text/html"}}
    merge_options(defaults, {"auth": "Bearer abc", "json": {"a": 1}})

    assert defaults == {"headers": {"accept": "text/html"}}


def test_merge_recursive_merges_nested_mappings() -> None:
    merged = merge_recursive(DEFAULT_OPTIONS, {"timeout": 3, "headers": {"a": "1"}})
    merged = merge_recursive(merged, {"headers": {"b": "2"}})

    assert merged["timeout"] == 3
    assert merged["allow_redirects"] is True
    assert merged["headers"] == {"a": "1", "b": "2"}


def test_basic_auth_from_username_and_password() -> None:
    merged = merge_options(DEFAULT_OPTIONS, {"auth": {"username": "u", "password": "p"}})

    expected = "Basic " + base64.b64encode(b"u:p").decode()
    assert merged["headers"]["authorization"] == expected


def test_basic_auth_from_tuple() -> None:
    merged = merge_options(DEFAULT_OPTIONS, {"auth": ("user", "secret")})

    assert merged["headers"]["authorization"] == "Basic dXNlcjpzZWNyZXQ="


def test_literal_auth_is_used_as_header_value() -> None:
    merged = merge_options(DEFAULT_OPTIONS, {"auth": "Bearer token"})

    assert merged["headers"]["authorization"] == "Bearer token"


def test_existing_authorization_header_wins_over_auth() -> None:
    merged = merge_options(
        DEFAULT_OPTIONS,
        {"auth": {"username": "u", "password": "p"}, "headers": {"Authorization": "Token x"}},
    )

    assert merged["headers"] == {"Authorization": "Token x"}


def test_json_body_and_content_type() -> None:
    merged = merge_options(DEFAULT_OPTIONS, {"json": {"a": 1, "name": "Zoë"}})

    assert merged["headers"]["content-type"] == JSON_CONTENT_TYPE
    assert merged["body"] == '{"a":1,"name":"Zoë"}'
    assert json.loads(merged["body"]) == {"a": 1, "name": "Zoë"}


def test_json_keeps_preset_body() -> None:
    merged = merge_options(DEFAULT_OPTIONS, {"json": {"a": 1}, "body": "raw"})

    assert merged["body"] == "raw"
    assert merged["headers"]["content-type"] == JSON_CONTENT_TYPE


def test_form_params_body_and_content_type() -> None:
    merged = merge_options(DEFAULT_OPTIONS, {"form_params": {"a": "1", "b": "2"}})

    assert merged["headers"]["content-type"] == FORM_CONTENT_TYPE
    assert merged["body"] == "a=1&b=2"


def test_form_params_with_list_values() -> None:
    merged = merge_options(DEFAULT_OPTIONS, {"form_params": {"tag": ["x", "y"]}})

    assert parse_qs(merged["body"]) == {"tag": ["x", "y"]}


def test_multipart_is_passed_through() -> None:
    fields = {"name": "report", "file": b"data"}
    merged = merge_options(DEFAULT_OPTIONS, {"multipart": fields})

    assert merged["headers"]["content-type"] == MULTIPART_CONTENT_TYPE
    assert merged["body"] is fields


def test_json_wins_body_and_form_wins_content_type() -> None:
    merged = merge_options(DEFAULT_OPTIONS, {"json": {"a": 1}, "form_params": {"b": "2"}})

    assert merged["body"] == '{"a":1}'
    assert merged["headers"]["content-type"] == FORM_CONTENT_TYPE


def test_content_type_replaces_other_casing() -> None:
    merged = merge_options(DEFAULT_OPTIONS, {"json": [1], "headers": {"Content-Type": "text/plain"}})

    assert merged["headers"] == {"content-type": JSON_CONTENT_TYPE}


def test_proxy_url_is_parsed() -> None:
    merged = merge_options(DEFAULT_OPTIONS, {"proxy": "socks5://host.example:1080"})

    assert merged["proxy"] == {"type": "socks5", "hostname": "host.example", "port": 1080}


def test_proxy_url_without_scheme_defaults_to_http() -> None:
    merged = merge_options(DEFAULT_OPTIONS, {"proxy": "proxy.local:3128"})

    assert merged["proxy"] == {"type": "http", "hostname": "proxy.local", "port": 3128}


def test_proxy_url_without_port_fails() -> None:
    with pytest.raises(ConfigError, match="port is not present in proxy url"):
        merge_options(DEFAULT_OPTIONS, {"proxy": "http://host.example"})


def test_proxy_url_without_host_fails() -> None:
    with pytest.raises(ConfigError, match="host is not present in proxy url"):
        merge_options(DEFAULT_OPTIONS, {"proxy": "http://:8080"})


def test_unparseable_proxy_url_fails() -> None:
    with pytest.raises(ConfigError, match="cannot parse proxy"):
        merge_options(DEFAULT_OPTIONS, {"proxy": "http://host.example:99999"})


def test_proxy_url_with_unknown_scheme_fails_type_check() -> None:
    with pytest.raises(TypeValidationError, match="proxy type is invalid"):
        merge_options(DEFAULT_OPTIONS, {"proxy": "ftp://host.example:21"})


def test_proxy_mapping_is_validated() -> None:
    merged = merge_options(DEFAULT_OPTIONS, {"proxy": {"type": "https", "hostname": "h", "port": "8443"}})

    assert merged["proxy"] == {"type": "https", "hostname": "h", "port": 8443}


@pytest.mark.parametrize(
    ("proxy", "message"),
    [
        ({"type": "ftp", "hostname": "h", "port": 80}, "proxy type is invalid"),
        ({"hostname": "h", "port": 80}, "proxy type is invalid"),
        ({"type": "http", "hostname": 10, "port": 80}, "proxy hostname is invalid"),
        ({"type": "http", "hostname": "h", "port": 70000}, "proxy port is invalid"),
        ({"type": "http", "hostname": "h", "port": -1}, "proxy port is invalid"),
        ({"type": "http", "hostname": "h", "port": "abc"}, "proxy port is invalid"),
        ({"type": "http", "hostname": "h", "port": True}, "proxy port is invalid"),
        ({"type": "http", "hostname": "h"}, "proxy port is invalid"),
    ],
)
def test_invalid_proxy_mapping(proxy: dict, message: str) -> None:
    with pytest.raises(TypeValidationError, match=message):
        merge_options(DEFAULT_OPTIONS, {"proxy": proxy})


def test_proxy_of_wrong_type_fails() -> None:
    with pytest.raises(TypeValidationError, match="proxy must be an array"):
        merge_options(DEFAULT_OPTIONS, {"proxy": 8080})


def test_type_validation_error_is_a_type_error() -> None:
    with pytest.raises(TypeError):
        merge_options(DEFAULT_OPTIONS, {"proxy": ["http", "h", 80]})


def test_proxy_url_keeps_host_case() -> None:
    merged = merge_options(DEFAULT_OPTIONS, {"proxy": "http://user:pw@Proxy.Example:8080"})

    assert merged["proxy"] == {"type": "http", "hostname": "Proxy.Example", "port": 8080}


def test_proxy_url_with_ipv6_host() -> None:
    merged = merge_options(DEFAULT_OPTIONS, {"proxy": "socks4://[::1]:1080"})

    assert merged["proxy"] == {"type": "socks4", "hostname": "::1", "port": 1080}
