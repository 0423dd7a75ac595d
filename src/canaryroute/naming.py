"""
Canary mapping naming policy.

Kubernetes object names are limited to 253 characters; the base name is
truncated before the suffix is appended so the result always fits.
"""

from __future__ import annotations

MAX_RESOURCE_NAME_LENGTH = 253
CANARY_SUFFIX = "-canary"

_MAX_BASE_LENGTH = MAX_RESOURCE_NAME_LENGTH - len(CANARY_SUFFIX)


def build_canary_mapping_name(name: str) -> str:
    """Return the canary mapping name derived from a base mapping name."""
    if len(name) > _MAX_BASE_LENGTH:
        name = name[:_MAX_BASE_LENGTH]
    return f"{name}{CANARY_SUFFIX}"
