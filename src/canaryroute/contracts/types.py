"""
Core identifiers for Ambassador traffic routing.

Event reasons are stable strings: operators filter on them with
``kubectl get events --field-selector reason=...``.
"""

from __future__ import annotations

from enum import Enum

# Traffic routing type reported by the reconciler
TRAFFIC_ROUTING_TYPE = "Ambassador"

# Webhook notification
WEBHOOK_SECRET_ENV_VAR = "AMBASSADOR_WEBHOOK_SECRET"
WEBHOOK_SIGNATURE_HEADER = "X-Rollout-Signature"
WEBHOOK_TIMESTAMP_HEADER = "X-Rollout-Timestamp"

# Rollout annotations read by the webhook
ANNOTATION_TARGET_URL = "getambassador.io/webhookUrl"
ANNOTATION_ROLLOUT_ID = "getambassador.io/rolloutId"


class EventType(str, Enum):
    """Kubernetes event types."""
    NORMAL = "Normal"
    WARNING = "Warning"


class EventReason(str, Enum):
    """Reasons attached to operator-visible rollout events."""
    AMBASSADOR_MAPPING_NOT_FOUND = "AmbassadorMappingNotFound"
    AMBASSADOR_MAPPING_CONFIG_ERROR = "AmbassadorMappingConfigError"
    CANARY_MAPPING_CLEANUP_ERROR = "CanaryMappingCleanupError"
    CANARY_MAPPING_CREATION_ERROR = "CanaryMappingCreationError"
    CANARY_MAPPING_UPDATE_ERROR = "CanaryMappingUpdateError"
    CANARY_MAPPING_WEIGHT_UPDATE = "CanaryMappingWeightUpdate"

# Ambassador Mapping CRD coordinates
AMBASSADOR_GROUP = "getambassador.io"
AMBASSADOR_VERSION = "v2"
AMBASSADOR_PLURAL = "mappings"
AMBASSADOR_KIND = "Mapping"
AMBASSADOR_API_VERSION = f"{AMBASSADOR_GROUP}/{AMBASSADOR_VERSION}"
