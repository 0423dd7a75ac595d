"""
Typed models for canaryroute.

- Mapping: Ambassador Mapping resource (base and canary)
- RolloutContext: caller-supplied rollout settings
- WeightChangeEvent: payload of a weight-change notification
"""

from canaryroute.models.events import WeightChangeEvent
from canaryroute.models.mapping import (
    Mapping,
    MappingMetadata,
    MappingSpec,
    build_canary_mapping,
    get_mapping_weight,
    set_mapping_weight,
)
from canaryroute.models.rollout import RolloutContext

__all__ = [
    "Mapping",
    "MappingMetadata",
    "MappingSpec",
    "RolloutContext",
    "WeightChangeEvent",
    "build_canary_mapping",
    "get_mapping_weight",
    "set_mapping_weight",
]
