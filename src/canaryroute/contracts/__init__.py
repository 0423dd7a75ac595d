"""
Shared contracts for canaryroute.

Centralizes the identifiers other components rely on:
- Traffic routing type and event reasons (operator-visible events)
- Rollout annotation keys and webhook header names
- Timeout constants for the Kubernetes API and webhook delivery

Example:
    from canaryroute.contracts import EventReason, EventType

    recorder.event(rollout, EventType.WARNING, EventReason.CANARY_MAPPING_UPDATE_ERROR, msg)
"""

from canaryroute.contracts.types import (
    ANNOTATION_ROLLOUT_ID,
    ANNOTATION_TARGET_URL,
    TRAFFIC_ROUTING_TYPE,
    WEBHOOK_SECRET_ENV_VAR,
    WEBHOOK_SIGNATURE_HEADER,
    WEBHOOK_TIMESTAMP_HEADER,
    EventReason,
    EventType,
)

__all__ = [
    "ANNOTATION_ROLLOUT_ID",
    "ANNOTATION_TARGET_URL",
    "TRAFFIC_ROUTING_TYPE",
    "WEBHOOK_SECRET_ENV_VAR",
    "WEBHOOK_SIGNATURE_HEADER",
    "WEBHOOK_TIMESTAMP_HEADER",
    "EventReason",
    "EventType",
]
