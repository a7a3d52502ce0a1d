"""Plan and track multi-hop HTTP connection routes."""

from connroute.core.director import RouteStep, next_step
from connroute.core.hosts import HttpHost
from connroute.core.route import RouteDescriptor
from connroute.core.tracker import RouteTracker

__all__ = [
    "HttpHost",
    "RouteDescriptor",
    "RouteStep",
    "RouteTracker",
    "next_step",
]
