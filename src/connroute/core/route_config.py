"""Read and write route definitions as JSON.

A definition file holds either a single route object or a named set::

    {"routes": {"corp": {"target": "https://example.com:443",
                         "proxies": ["proxy1:8080"],
                         "tunnelled": true, "layered": true, "secure": true}}}
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Final

from connroute.core.errors import InvalidRouteArgumentError, RouteConfigError
from connroute.core.hosts import parse_host, parse_local_address
from connroute.core.route import RouteDescriptor
from connroute.core.storage import load_json

DEFAULT_ROUTE_NAME: Final[str] = "default"
_FLAGS: Final[tuple[str, ...]] = ("tunnelled", "layered", "secure")


def _parse_flag(data: dict[str, Any], key: str, name: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise RouteConfigError(
            f"Route {name!r}: {key} must be a boolean, got {value!r}",
            user_message=f"Route '{name}': '{key}' must be true or false.",
        )
    return value


def parse_route(data: dict[str, Any], *, name: str = DEFAULT_ROUTE_NAME) -> RouteDescriptor:
    if not isinstance(data, dict):
        raise RouteConfigError(
            f"Route {name!r} must be an object, got {type(data).__name__}",
            user_message=f"Route '{name}' must be a JSON object.",
        )

    target_raw = data.get("target")
    if not isinstance(target_raw, str) or not target_raw.strip():
        raise RouteConfigError(
            f"Route {name!r} has no target",
            user_message=f"Route '{name}' needs a \"target\" host.",
        )

    proxies_raw = data.get("proxies")
    if proxies_raw is None:
        proxies_raw = []
    if not isinstance(proxies_raw, list) or not all(isinstance(p, str) for p in proxies_raw):
        raise RouteConfigError(
            f"Route {name!r}: proxies must be a list of strings",
            user_message=f"Route '{name}': \"proxies\" must be a list of hosts.",
        )

    local_raw = data.get("local_address")
    if local_raw is not None and not isinstance(local_raw, str):
        raise RouteConfigError(
            f"Route {name!r}: local_address must be a string",
            user_message=f"Route '{name}': \"local_address\" must be an IP address string.",
        )

    flags = {key: _parse_flag(data, key, name) for key in _FLAGS}

    try:
        return RouteDescriptor(
            parse_host(target_raw),
            parse_local_address(local_raw),
            tuple(parse_host(p) for p in proxies_raw),
            **flags,
        )
    except InvalidRouteArgumentError as exc:
        raise RouteConfigError(
            f"Route {name!r}: {exc}",
            user_message=f"Route '{name}': {exc.user_message}",
        ) from exc


def route_to_dict(route: RouteDescriptor) -> dict[str, Any]:
    data: dict[str, Any] = {
        "target": str(route.target),
        "proxies": [str(proxy) for proxy in route.proxy_chain],
        "tunnelled": route.tunnelled,
        "layered": route.layered,
        "secure": route.secure,
    }
    if route.local_address is not None:
        data["local_address"] = str(route.local_address)
    return data


def load_routes(path: Path) -> dict[str, RouteDescriptor]:
    data = load_json(path, None)
    if data is None:
        raise RouteConfigError(
            f"Route file not found: {path}",
            user_message=f"No route file at {path}.",
        )
    if not isinstance(data, dict):
        raise RouteConfigError(
            f"Route file {path} must contain an object",
            user_message=f"{path} must contain a JSON object.",
        )

    if "routes" not in data:
        return {DEFAULT_ROUTE_NAME: parse_route(data)}

    routes = data["routes"]
    if not isinstance(routes, dict) or not routes:
        raise RouteConfigError(
            f"Route file {path}: 'routes' must be a non-empty object",
            user_message=f"{path}: \"routes\" must map names to routes.",
        )
    return {str(name): parse_route(value, name=str(name)) for name, value in routes.items()}
