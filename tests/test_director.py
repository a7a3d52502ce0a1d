from __future__ import annotations

import pytest

from connroute.core.director import RouteStep, next_proxy, next_step
from connroute.core.errors import InvalidRouteArgumentError, RouteUnreachableError
from connroute.core.route import RouteDescriptor
from tests.constants import LOCAL41, PROXY1, PROXY2, PROXY3, TARGET1, TARGET2


def test_unconnected_direct_route_connects_target() -> None:
    assert next_step(RouteDescriptor.direct(TARGET1), None) is RouteStep.CONNECT_TARGET


def test_unconnected_proxied_route_connects_proxy() -> None:
    desired = RouteDescriptor(TARGET1, None, (PROXY1, PROXY2))
    assert next_step(desired, None) is RouteStep.CONNECT_PROXY


def test_missing_desired_route() -> None:
    with pytest.raises(InvalidRouteArgumentError):
        next_step(None, None)  # type: ignore[arg-type]


def test_short_chain_tunnels_to_next_proxy() -> None:
    desired = RouteDescriptor(TARGET1, LOCAL41, (PROXY1, PROXY2, PROXY3), True, True, True)
    current = RouteDescriptor(TARGET1, LOCAL41, (PROXY1,))
    assert next_step(desired, current) is RouteStep.TUNNEL_PROXY
    assert next_proxy(desired, current) == PROXY2

    current = RouteDescriptor(TARGET1, LOCAL41, (PROXY1, PROXY2))
    assert next_step(desired, current) is RouteStep.TUNNEL_PROXY
    assert next_proxy(desired, current) == PROXY3


def test_next_proxy_without_missing_hop() -> None:
    desired = RouteDescriptor(TARGET1, None, (PROXY1,))
    with pytest.raises(InvalidRouteArgumentError):
        next_proxy(desired, desired)


def test_full_chain_then_tunnel_then_layer() -> None:
    desired = RouteDescriptor(TARGET2, None, (PROXY1, PROXY2), True, True, True)
    chain = RouteDescriptor(TARGET2, None, (PROXY1, PROXY2))
    assert next_step(desired, chain) is RouteStep.TUNNEL_TARGET

    tunnelled = RouteDescriptor(TARGET2, None, (PROXY1, PROXY2), True, False, False)
    assert next_step(desired, tunnelled) is RouteStep.LAYER_PROTOCOL

    layered = RouteDescriptor(TARGET2, None, (PROXY1, PROXY2), True, True, True)
    assert next_step(desired, layered) is RouteStep.COMPLETE


def test_direct_layering() -> None:
    desired = RouteDescriptor(TARGET2, None, (), False, True, True)
    current = RouteDescriptor(TARGET2, None, (), False, False, False)
    assert next_step(desired, current) is RouteStep.LAYER_PROTOCOL


def test_tunnel_flag_on_direct_route_is_not_planned() -> None:
    # Only proxied routes can be tunnelled; the flag alone never asks for a tunnel.
    desired = RouteDescriptor(TARGET1, None, (), True, False, False)
    current = RouteDescriptor(TARGET1, None, (), False, False, False)
    with pytest.raises(RouteUnreachableError):
        next_step(desired, current)


@pytest.mark.parametrize(
    "current",
    [
        # tunnelled although the desired route is not
        RouteDescriptor(TARGET1, None, (PROXY1,), True, False, False),
        # layered although the desired route is not
        RouteDescriptor(TARGET1, None, (PROXY1,), False, True, False),
        # wrong security outcome
        RouteDescriptor(TARGET1, None, (PROXY1,), False, False, True),
        # one proxy too many
        RouteDescriptor(TARGET1, None, (PROXY1, PROXY2), False, False, False),
        # different proxy
        RouteDescriptor(TARGET1, None, (PROXY2,), False, False, False),
        # different target
        RouteDescriptor(TARGET2, None, (PROXY1,), False, False, False),
    ],
)
def test_inconsistent_state_is_unreachable(current: RouteDescriptor) -> None:
    desired = RouteDescriptor(TARGET1, None, (PROXY1,), False, False, False)
    with pytest.raises(RouteUnreachableError) as excinfo:
        next_step(desired, current)
    assert excinfo.value.desired == desired
    assert excinfo.value.current == current


def test_director_is_pure() -> None:
    desired = RouteDescriptor(TARGET1, LOCAL41, (PROXY1,), True, True, True)
    current = RouteDescriptor(TARGET1, LOCAL41, (PROXY1,))
    assert [next_step(desired, current) for _ in range(3)] == [RouteStep.TUNNEL_TARGET] * 3
    assert current == RouteDescriptor(TARGET1, LOCAL41, (PROXY1,))
