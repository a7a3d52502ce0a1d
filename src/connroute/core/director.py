"""Decide the next step toward a desired route.

``next_step`` compares the desired route with a snapshot of the progress made
so far (``RouteTracker.to_route()``, ``None`` while unconnected) and returns
the one step that moves the connection closer. It keeps no state and performs
no I/O; the caller carries out each step, reports it to the tracker and asks
again until it gets ``RouteStep.COMPLETE``.
"""

from __future__ import annotations

from enum import Enum

from connroute.core.errors import InvalidRouteArgumentError, RouteUnreachableError
from connroute.core.hosts import HttpHost
from connroute.core.route import RouteDescriptor


class RouteStep(Enum):
    CONNECT_TARGET = "connect_target"
    CONNECT_PROXY = "connect_proxy"
    TUNNEL_TARGET = "tunnel_target"
    TUNNEL_PROXY = "tunnel_proxy"
    LAYER_PROTOCOL = "layer_protocol"
    COMPLETE = "complete"


def next_step(desired: RouteDescriptor, current: RouteDescriptor | None) -> RouteStep:
    """Return the next step, or raise ``RouteUnreachableError``.

    The error means ``current`` has diverged from ``desired`` (for example it
    is tunnelled while the desired route is not). It signals a bug in the
    driving loop and must not be retried.
    """
    if desired is None:
        raise InvalidRouteArgumentError(
            "Desired route may not be None",
            user_message="A route is required.",
        )

    if current is None:
        return RouteStep.CONNECT_PROXY if desired.proxy_chain else RouteStep.CONNECT_TARGET

    if len(current.proxy_chain) < len(desired.proxy_chain):
        return RouteStep.TUNNEL_PROXY

    if desired.proxy_chain and desired.tunnelled and not current.tunnelled:
        return RouteStep.TUNNEL_TARGET

    if desired.layered and not current.layered:
        return RouteStep.LAYER_PROTOCOL

    if current == desired:
        return RouteStep.COMPLETE

    raise RouteUnreachableError(
        f"Cannot reach {desired} from {current}",
        desired=desired,
        current=current,
    )


def next_proxy(desired: RouteDescriptor, current: RouteDescriptor) -> HttpHost:
    """The proxy a ``TUNNEL_PROXY`` step has to reach."""
    index = len(current.proxy_chain)
    if index >= len(desired.proxy_chain):
        raise InvalidRouteArgumentError(
            f"No proxy left to tunnel to: {current} already has {index} proxy hop(s)",
        )
    return desired.proxy_chain[index]
