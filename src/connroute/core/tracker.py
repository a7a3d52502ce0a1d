"""Track the progress of establishing a route.

A tracker starts unconnected for one target/local address pair and records
each connect, tunnel and layer event reported by whoever performs the actual
I/O. It never performs I/O itself. ``to_route()`` snapshots the progress into
a ``RouteDescriptor`` that the director can compare with the desired route.

One tracker belongs to one connection attempt: it cannot be reset, and it is
not safe to mutate from several threads.
"""

from __future__ import annotations

from enum import Enum
import logging
from typing import Final

from connroute.core.errors import InvalidRouteArgumentError, RouteStateError
from connroute.core.hosts import Address, HttpHost
from connroute.core.route import RouteDescriptor

logger = logging.getLogger(__name__)


class _Phase(Enum):
    UNCONNECTED = "unconnected"
    CONNECTED = "connected"
    PROXIED = "proxied"


# Phase each transition requires; checked in one place by RouteTracker._require.
_REQUIRED_PHASE: Final[dict[str, _Phase]] = {
    "connect_target": _Phase.UNCONNECTED,
    "connect_proxy": _Phase.UNCONNECTED,
    "tunnel_proxy": _Phase.PROXIED,
    "tunnel_target": _Phase.PROXIED,
    "layer_protocol": _Phase.CONNECTED,
}


def _require_host(value: HttpHost | None, what: str) -> HttpHost:
    if value is None:
        raise InvalidRouteArgumentError(
            f"{what} may not be None",
            user_message=f"A {what.lower()} is required.",
        )
    return value


class RouteTracker:
    __slots__ = (
        "_target",
        "_local_address",
        "_hops",
        "_connected",
        "_tunnelled",
        "_layered",
        "_secure",
    )

    def __init__(self, target: HttpHost, local_address: Address | None = None) -> None:
        self._target = _require_host(target, "Target host")
        self._local_address = local_address
        self._hops: list[HttpHost] = []
        self._connected = False
        self._tunnelled = False
        self._layered = False
        self._secure = False

    @classmethod
    def for_route(cls, route: RouteDescriptor) -> RouteTracker:
        """Start tracking toward ``route``; only its target and local address are used."""
        if route is None:
            raise InvalidRouteArgumentError(
                "Route may not be None",
                user_message="A route is required.",
            )
        return cls(route.target, route.local_address)

    def _require(self, transition: str) -> None:
        phase = _REQUIRED_PHASE[transition]
        if phase is _Phase.UNCONNECTED:
            if self._connected:
                raise RouteStateError(f"{transition}: already connected")
            return
        if not self._connected:
            raise RouteStateError(f"{transition}: not connected")
        if phase is _Phase.PROXIED and len(self._hops) < 2:
            raise RouteStateError(f"{transition}: no proxy hop")

    def _open(self, hops: list[HttpHost], secure: bool) -> None:
        self._hops = hops
        self._connected = True
        self._tunnelled = False
        self._layered = False
        self._secure = secure

    # -- transitions ---------------------------------------------------

    def connect_target(self, secure: bool) -> None:
        """Record a direct connection to the target."""
        self._require("connect_target")
        self._open([self._target], secure)
        logger.debug("Connected to target: %s", self)

    def connect_proxy(self, proxy: HttpHost, secure: bool) -> None:
        """Record a connection to the first proxy."""
        proxy = _require_host(proxy, "Proxy host")
        self._require("connect_proxy")
        self._open([proxy, self._target], secure)
        logger.debug("Connected to proxy: %s", self)

    def tunnel_proxy(self, proxy: HttpHost, secure: bool) -> None:
        """Record a tunnel through the proxies so far to one more proxy.

        This extends the proxy chain but is not an end-to-end tunnel, so the
        tunnelled flag is left alone.
        """
        proxy = _require_host(proxy, "Proxy host")
        self._require("tunnel_proxy")
        self._hops.insert(len(self._hops) - 1, proxy)
        self._secure = secure
        logger.debug("Tunnelled to proxy: %s", self)

    def tunnel_target(self, secure: bool) -> None:
        """Record a tunnel through the proxy chain to the target."""
        self._require("tunnel_target")
        self._tunnelled = True
        self._secure = secure
        logger.debug("Tunnelled to target: %s", self)

    def layer_protocol(self, secure: bool) -> None:
        """Record a protocol (usually TLS) layered over the connection."""
        self._require("layer_protocol")
        self._layered = True
        self._secure = secure
        logger.debug("Layered protocol: %s", self)

    # -- queries -------------------------------------------------------

    @property
    def target_host(self) -> HttpHost:
        return self._target

    @property
    def local_address(self) -> Address | None:
        return self._local_address

    @property
    def hop_count(self) -> int:
        return len(self._hops)

    @property
    def proxy_host(self) -> HttpHost | None:
        """The proxy directly in front of the target, if any."""
        if len(self._hops) < 2:
            return None
        return self._hops[-2]

    def hop_target(self, index: int) -> HttpHost:
        if index < 0 or index >= len(self._hops):
            raise InvalidRouteArgumentError(
                f"Hop index {index} out of range for {len(self._hops)} hop(s)",
            )
        return self._hops[index]

    def is_connected(self) -> bool:
        return self._connected

    def is_tunnelled(self) -> bool:
        return self._tunnelled

    def is_layered(self) -> bool:
        return self._layered

    def is_secure(self) -> bool:
        return self._secure

    def to_route(self) -> RouteDescriptor | None:
        if not self._connected:
            return None
        return RouteDescriptor(
            self._hops[-1],
            self._local_address,
            tuple(self._hops[:-1]),
            tunnelled=self._tunnelled,
            layered=self._layered,
            secure=self._secure,
        )

    def clone(self) -> RouteTracker:
        other = RouteTracker(self._target, self._local_address)
        other._hops = list(self._hops)
        other._connected = self._connected
        other._tunnelled = self._tunnelled
        other._layered = self._layered
        other._secure = self._secure
        return other

    __copy__ = clone

    def __deepcopy__(self, memo: dict) -> RouteTracker:
        # Hosts and addresses are immutable, so copying the hop list suffices.
        return self.clone()

    def _key(self) -> tuple:
        return (
            self._target,
            self._local_address,
            tuple(self._hops),
            self._connected,
            self._tunnelled,
            self._layered,
            self._secure,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RouteTracker):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        # Proxy hops are XOR-combined, so reordering the chain keeps the hash.
        value = hash((
            self._target,
            self._local_address,
            len(self._hops),
            self._connected,
            self._tunnelled,
            self._layered,
            self._secure,
        ))
        for proxy in self._hops[:-1]:
            value ^= hash(proxy)
        return value

    def __str__(self) -> str:
        parts = ["RouteTracker["]
        if self._local_address is not None:
            parts.append(f"{self._local_address}->")
        parts.append("{")
        if self._connected:
            parts.append("c")
        if self._tunnelled:
            parts.append("t")
        if self._layered:
            parts.append("l")
        if self._secure:
            parts.append("s")
        parts.append("}->")
        if self._hops:
            parts.append("->".join(str(hop) for hop in self._hops))
        else:
            parts.append(f"({self._target})")
        parts.append("]")
        return "".join(parts)

    def __repr__(self) -> str:
        return f"<{self}>"
