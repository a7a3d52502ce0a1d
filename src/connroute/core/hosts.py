"""Host and local address values used as route hops.

The route core only compares, hashes and prints these; it never resolves or
connects to them.
"""

from __future__ import annotations

from dataclasses import dataclass
import ipaddress
from typing import Union
from urllib.parse import urlparse

from connroute.core.errors import InvalidRouteArgumentError

Address = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

DEFAULT_SCHEME = "http"
NO_PORT = -1


@dataclass(frozen=True, slots=True)
class HttpHost:
    hostname: str
    port: int = NO_PORT
    scheme: str = DEFAULT_SCHEME

    def __post_init__(self) -> None:
        hostname = (self.hostname or "").strip().lower()
        if hostname.startswith("[") and hostname.endswith("]"):
            hostname = hostname[1:-1]
        if not hostname:
            raise InvalidRouteArgumentError(
                "Host name may not be empty",
                user_message="A host name is required.",
            )
        if not isinstance(self.port, int) or isinstance(self.port, bool) or self.port < NO_PORT or self.port > 65535:
            raise InvalidRouteArgumentError(
                f"Invalid port: {self.port!r}",
                user_message=f"Invalid port for {hostname}: {self.port!r}",
            )
        if ":" in hostname:
            try:
                ipaddress.IPv6Address(hostname)
            except ValueError as exc:
                raise InvalidRouteArgumentError(
                    f"Invalid host name: {hostname!r}",
                    user_message=f"Invalid host name: {hostname}",
                ) from exc
        object.__setattr__(self, "hostname", hostname)
        object.__setattr__(self, "scheme", (self.scheme or DEFAULT_SCHEME).strip().lower())

    def host_string(self) -> str:
        # IPv6 literals need brackets to keep the port separable.
        name = f"[{self.hostname}]" if ":" in self.hostname else self.hostname
        if self.port == NO_PORT:
            return name
        return f"{name}:{self.port}"

    def __str__(self) -> str:
        return f"{self.scheme}://{self.host_string()}"


def parse_host(raw: str) -> HttpHost:
    """Parse ``host``, ``host:port`` or ``scheme://host[:port]``."""
    raw = (raw or "").strip()
    if not raw:
        raise InvalidRouteArgumentError("Empty host", user_message="A host is required.")

    parsed = urlparse(raw if "://" in raw else f"{DEFAULT_SCHEME}://{raw}")
    try:
        port = parsed.port
    except ValueError as exc:
        raise InvalidRouteArgumentError(
            f"Invalid port in host {raw!r}",
            user_message=f"Invalid port in host: {raw}",
        ) from exc

    if not parsed.hostname or parsed.path not in {"", "/"} or parsed.username:
        raise InvalidRouteArgumentError(
            f"Malformed host: {raw!r}",
            user_message=f"Malformed host: {raw}",
        )

    return HttpHost(
        parsed.hostname,
        NO_PORT if port is None else port,
        parsed.scheme or DEFAULT_SCHEME,
    )


def parse_local_address(raw: str | None) -> Address | None:
    raw = (raw or "").strip()
    if not raw:
        return None
    try:
        return ipaddress.ip_address(raw)
    except ValueError as exc:
        raise InvalidRouteArgumentError(
            f"Invalid local address: {raw!r}",
            user_message=f"Local address must be an IP address: {raw}",
        ) from exc
