"""Immutable description of a connection route.

A route names the target, an optional local bind address, the ordered proxy
chain from client to target, and whether the connection should be tunnelled
end-to-end through the proxies, have a protocol layered on top, and be
considered secure. The three flags are declarations: nothing here derives them
from the target's scheme.
"""

from __future__ import annotations

from dataclasses import dataclass

from connroute.core.errors import InvalidRouteArgumentError
from connroute.core.hosts import Address, HttpHost


@dataclass(frozen=True, slots=True)
class RouteDescriptor:
    target: HttpHost
    local_address: Address | None = None
    proxy_chain: tuple[HttpHost, ...] = ()
    tunnelled: bool = False
    layered: bool = False
    secure: bool = False

    def __post_init__(self) -> None:
        if self.target is None:
            raise InvalidRouteArgumentError(
                "Target host may not be None",
                user_message="A route needs a target host.",
            )
        chain = tuple(self.proxy_chain or ())
        if any(proxy is None for proxy in chain):
            raise InvalidRouteArgumentError(
                "Proxy chain may not contain None",
                user_message="A proxy chain entry is missing.",
            )
        object.__setattr__(self, "proxy_chain", chain)

    @classmethod
    def direct(
        cls,
        target: HttpHost,
        local_address: Address | None = None,
        secure: bool = False,
    ) -> RouteDescriptor:
        return cls(target, local_address, secure=secure)

    @classmethod
    def via_proxy(
        cls,
        target: HttpHost,
        local_address: Address | None,
        proxy: HttpHost,
        secure: bool,
    ) -> RouteDescriptor:
        """Route through a single proxy.

        A secure route through a proxy has to be tunnelled to the target and
        have TLS layered over the tunnel; an insecure one is neither.
        """
        if proxy is None:
            raise InvalidRouteArgumentError(
                "Proxy host may not be None",
                user_message="A proxy route needs a proxy host.",
            )
        return cls(target, local_address, (proxy,), tunnelled=secure, layered=secure, secure=secure)

    @property
    def hop_count(self) -> int:
        return len(self.proxy_chain) + 1

    @property
    def proxy_host(self) -> HttpHost | None:
        """The first proxy, i.e. the host the client connects to."""
        return self.proxy_chain[0] if self.proxy_chain else None

    def is_proxied(self) -> bool:
        return bool(self.proxy_chain)

    def hop_target(self, index: int) -> HttpHost:
        if index < 0 or index >= self.hop_count:
            raise InvalidRouteArgumentError(
                f"Hop index {index} out of range for {self.hop_count} hop(s)",
            )
        if index < len(self.proxy_chain):
            return self.proxy_chain[index]
        return self.target

    def __str__(self) -> str:
        parts = []
        if self.local_address is not None:
            parts.append(f"{self.local_address}->")
        flags = ("t" if self.tunnelled else "") + ("l" if self.layered else "") + ("s" if self.secure else "")
        parts.append(f"{{{flags}}}")
        for proxy in self.proxy_chain:
            parts.append(f"->{proxy}")
        parts.append(f"->{self.target}")
        return "RouteDescriptor[" + "".join(parts) + "]"
