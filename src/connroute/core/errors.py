"""Error types.

Every error carries a technical message (for logs) and a shorter
``user_message`` suitable for showing on the command line.
"""

from __future__ import annotations


class AppError(Exception):
    def __init__(self, message: str, *, user_message: str | None = None) -> None:
        super().__init__(message)
        self.user_message = user_message or message


class RouteError(AppError):
    pass


class InvalidRouteArgumentError(RouteError, ValueError):
    """A required argument is missing or a hop index is out of range."""


class RouteStateError(RouteError, RuntimeError):
    """A tracker transition was attempted in a phase that forbids it."""


class RouteUnreachableError(RouteError):
    """The tracked route can no longer progress toward the desired one."""

    def __init__(self, message: str, *, desired: object, current: object) -> None:
        super().__init__(
            message,
            user_message="The connection route cannot be completed from its current state.",
        )
        self.desired = desired
        self.current = current


class RouteConfigError(AppError):
    pass


class StorageError(AppError):
    pass
