"""
Exception hierarchy for canaryroute.

Reconciler errors are loud: they propagate to the caller, which is expected
to re-invoke on its own schedule. ``NotificationError`` is quiet: the webhook
raises it internally and logs it at its public boundary.
"""

from __future__ import annotations

from typing import Optional


class CanaryRouteError(Exception):
    """Base class for all canaryroute errors."""


class MappingNotFoundError(CanaryRouteError):
    """A mapping does not exist in the remote store."""

    def __init__(self, name: str, namespace: Optional[str] = None):
        self.name = name
        self.namespace = namespace
        location = f"{namespace}/{name}" if namespace else name
        super().__init__(f"Ambassador mapping {location!r} not found")


class MappingConfigError(CanaryRouteError):
    """The base mapping is not a valid template for a canary clone."""


class StoreError(CanaryRouteError):
    """The remote store rejected or failed an operation."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class NotificationError(CanaryRouteError):
    """A weight-change notification could not be built or delivered."""
