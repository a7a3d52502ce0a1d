"""Human-friendly descriptions of routes and planned steps."""

from __future__ import annotations

from connroute.core.director import RouteStep
from connroute.core.establish import PlannedStep
from connroute.core.route import RouteDescriptor


def describe_route(route: RouteDescriptor) -> str:
    hops = " -> ".join(str(route.hop_target(i)) for i in range(route.hop_count))
    flags = [name for name, on in (
        ("tunnelled", route.tunnelled),
        ("layered", route.layered),
        ("secure", route.secure),
    ) if on]
    origin = str(route.local_address) if route.local_address is not None else "client"
    return f"{origin} -> {hops} [{', '.join(flags) or 'plain'}]"


def describe_step(planned: PlannedStep) -> str:
    step, hop = planned.step, planned.hop
    if step is RouteStep.CONNECT_TARGET:
        return f"connect directly to {hop}"
    if step is RouteStep.CONNECT_PROXY:
        return f"connect to proxy {hop}"
    if step is RouteStep.TUNNEL_PROXY:
        return f"tunnel to proxy {hop}"
    if step is RouteStep.TUNNEL_TARGET:
        return f"tunnel to target {hop}"
    if step is RouteStep.LAYER_PROTOCOL:
        return "layer protocol over the connection"
    return "route complete"


def format_plan(steps: list[PlannedStep]) -> list[str]:
    width = len(str(len(steps)))
    return [f"{index:>{width}}. {describe_step(planned)}" for index, planned in enumerate(steps, start=1)]
