"""Command line entry point."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import Sequence

from connroute.core.errors import AppError, RouteConfigError
from connroute.core.establish import plan_route
from connroute.core.humanize import describe_route, format_plan
from connroute.core.logging_setup import setup_logging
from connroute.core.route_config import load_routes, route_to_dict
from connroute.core.storage import ensure_dirs, get_config_dir, get_logs_dir, save_json

logger = logging.getLogger(__name__)

ROUTES_FILE = "routes.json"
LOG_FILE = "connroute.log"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="connroute", description="Plan multi-hop connection routes.")
    parser.add_argument("--log-level", default="WARNING", help="logging level (default: WARNING)")
    sub = parser.add_subparsers(dest="command", required=True)

    plan = sub.add_parser("plan", help="print the steps needed to establish a route")
    plan.add_argument("route_file", nargs="?", type=Path, help=f"route definitions (default: <config dir>/{ROUTES_FILE})")
    plan.add_argument("--name", help="route to plan when the file defines several")
    plan.add_argument("--output", type=Path, help="also write the plan as JSON to this path")
    return parser


def _cmd_plan(args: argparse.Namespace) -> int:
    path: Path = args.route_file or get_config_dir() / ROUTES_FILE
    routes = load_routes(path)

    if args.name is not None:
        if args.name not in routes:
            raise RouteConfigError(
                f"Route {args.name!r} not defined in {path}",
                user_message=f"No route named '{args.name}' in {path}. Known: {', '.join(sorted(routes))}",
            )
        selected = {args.name: routes[args.name]}
    else:
        selected = routes

    report = {}
    for name, route in selected.items():
        steps = plan_route(route)
        print(f"{name}: {describe_route(route)}")
        for line in format_plan(steps):
            print(f"  {line}")
        report[name] = {
            "route": route_to_dict(route),
            "steps": [
                {"step": planned.step.value, "hop": str(planned.hop) if planned.hop is not None else None}
                for planned in steps
            ],
        }

    if args.output is not None:
        save_json(args.output, report)
        logger.info("Wrote plan to %s", args.output)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    ensure_dirs()
    setup_logging(args.log_level, log_file=get_logs_dir() / LOG_FILE)
    try:
        return _cmd_plan(args)
    except AppError as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {exc.user_message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
