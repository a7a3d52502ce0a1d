"""Drive a tracker to a desired route.

``establish_route`` is the loop every connection attempt runs: ask the
director for the next step, let a ``RouteConnector`` perform it, record the
outcome in the tracker, repeat until complete. Errors raised by the connector
are not retried here.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Protocol

from connroute.core.director import RouteStep, next_proxy, next_step
from connroute.core.errors import InvalidRouteArgumentError
from connroute.core.hosts import HttpHost
from connroute.core.route import RouteDescriptor
from connroute.core.tracker import RouteTracker

logger = logging.getLogger(__name__)


class RouteConnector(Protocol):
    """Performs the I/O for each step and returns whether the result is secure."""

    def connect_target(self, route: RouteDescriptor) -> bool: ...

    def connect_proxy(self, route: RouteDescriptor, proxy: HttpHost) -> bool: ...

    def tunnel_proxy(self, route: RouteDescriptor, proxy: HttpHost) -> bool: ...

    def tunnel_target(self, route: RouteDescriptor) -> bool: ...

    def layer_protocol(self, route: RouteDescriptor) -> bool: ...


@dataclass(frozen=True, slots=True)
class PlannedStep:
    step: RouteStep
    hop: HttpHost | None


def establish_route(
    desired: RouteDescriptor,
    connector: RouteConnector,
    *,
    tracker: RouteTracker | None = None,
) -> RouteTracker:
    if desired is None:
        raise InvalidRouteArgumentError("Desired route may not be None", user_message="A route is required.")

    if tracker is None:
        tracker = RouteTracker.for_route(desired)
    elif tracker.target_host != desired.target:
        raise InvalidRouteArgumentError(
            f"Tracker target {tracker.target_host} does not match route target {desired.target}",
            user_message="The tracker belongs to a different target.",
        )
    elif tracker.local_address != desired.local_address:
        raise InvalidRouteArgumentError(
            f"Tracker local address {tracker.local_address} does not match route local address {desired.local_address}",
            user_message="The tracker binds to a different local address.",
        )

    while True:
        current = tracker.to_route()
        step = next_step(desired, current)
        logger.debug("Next step %s for %s", step.name, tracker)

        if step is RouteStep.COMPLETE:
            break
        if step is RouteStep.CONNECT_TARGET:
            tracker.connect_target(connector.connect_target(desired))
        elif step is RouteStep.CONNECT_PROXY:
            proxy = desired.proxy_chain[0]
            tracker.connect_proxy(proxy, connector.connect_proxy(desired, proxy))
        elif step is RouteStep.TUNNEL_PROXY:
            proxy = next_proxy(desired, current)
            tracker.tunnel_proxy(proxy, connector.tunnel_proxy(desired, proxy))
        elif step is RouteStep.TUNNEL_TARGET:
            tracker.tunnel_target(connector.tunnel_target(desired))
        elif step is RouteStep.LAYER_PROTOCOL:
            tracker.layer_protocol(connector.layer_protocol(desired))

    logger.info("Route established: %s", tracker)
    return tracker


class DryRunConnector:
    """Connector that performs no I/O and records what it was asked to do.

    Every step reports the desired route's security flag, so the resulting
    tracker always matches the desired route.
    """

    def __init__(self) -> None:
        self.steps: list[PlannedStep] = []

    def _record(self, step: RouteStep, hop: HttpHost | None, route: RouteDescriptor) -> bool:
        self.steps.append(PlannedStep(step, hop))
        return route.secure

    def connect_target(self, route: RouteDescriptor) -> bool:
        return self._record(RouteStep.CONNECT_TARGET, route.target, route)

    def connect_proxy(self, route: RouteDescriptor, proxy: HttpHost) -> bool:
        return self._record(RouteStep.CONNECT_PROXY, proxy, route)

    def tunnel_proxy(self, route: RouteDescriptor, proxy: HttpHost) -> bool:
        return self._record(RouteStep.TUNNEL_PROXY, proxy, route)

    def tunnel_target(self, route: RouteDescriptor) -> bool:
        return self._record(RouteStep.TUNNEL_TARGET, route.target, route)

    def layer_protocol(self, route: RouteDescriptor) -> bool:
        return self._record(RouteStep.LAYER_PROTOCOL, None, route)


def plan_route(desired: RouteDescriptor) -> list[PlannedStep]:
    """The steps needed to establish ``desired``, ending with COMPLETE."""
    connector = DryRunConnector()
    establish_route(desired, connector)
    return [*connector.steps, PlannedStep(RouteStep.COMPLETE, None)]
