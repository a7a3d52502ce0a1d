from __future__ import annotations

import ipaddress

import pytest

from connroute.core.errors import InvalidRouteArgumentError
from connroute.core.hosts import HttpHost, parse_host, parse_local_address


def test_http_host_normalizes_and_renders() -> None:
    host = HttpHost("Proxy.Example.COM", 3128)
    assert host.hostname == "proxy.example.com"
    assert str(host) == "http://proxy.example.com:3128"
    assert str(HttpHost("example.com")) == "http://example.com"
    assert host == HttpHost("proxy.example.com", 3128, "HTTP")


def test_http_host_rejects_empty_name_and_bad_port() -> None:
    with pytest.raises(InvalidRouteArgumentError):
        HttpHost("  ")
    with pytest.raises(InvalidRouteArgumentError):
        HttpHost("example.com", 70000)


def test_parse_host_variants() -> None:
    assert parse_host("proxy1:8080") == HttpHost("proxy1", 8080)
    assert parse_host("https://example.com:443") == HttpHost("example.com", 443, "https")
    assert parse_host("example.com") == HttpHost("example.com")


@pytest.mark.parametrize("raw", ["", "http://", "example.com:notaport", "http://example.com/path"])
def test_parse_host_rejects_malformed(raw: str) -> None:
    with pytest.raises(InvalidRouteArgumentError):
        parse_host(raw)


def test_parse_local_address() -> None:
    assert parse_local_address(None) is None
    assert parse_local_address(" ") is None
    assert parse_local_address("::1") == ipaddress.ip_address("::1")
    with pytest.raises(InvalidRouteArgumentError):
        parse_local_address("localhost")


def test_ipv6_hosts_render_with_brackets() -> None:
    host = parse_host("[::1]:8080")
    assert host == HttpHost("::1", 8080)
    assert str(host) == "http://[::1]:8080"
    assert parse_host(str(host)) == host
    assert HttpHost("[::1]") == HttpHost("::1")
    # "::1:8080" is a distinct IPv6 address, not ::1 on port 8080.
    assert str(HttpHost("::1:8080")) == "http://[::1:8080]"
    assert str(HttpHost("::1:8080")) != str(HttpHost("::1", 8080))


def test_colon_in_non_ipv6_host_name_is_rejected() -> None:
    with pytest.raises(InvalidRouteArgumentError):
        HttpHost("proxy:8080")
