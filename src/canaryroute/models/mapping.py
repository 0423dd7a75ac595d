"""
Ambassador Mapping model and weight codec.

A Mapping arrives from the API server as a nested dict. The model keeps the
fields the canary logic touches typed and preserves everything else verbatim
(``extra="allow"``) so a clone of the base mapping carries all of its routing
options (headers, timeouts, cors, ...).

The weight is read leniently: an absent, null or mistyped value reads as 0,
which lets callers use ``get_mapping_weight`` as a precondition check.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from canaryroute.contracts.types import AMBASSADOR_API_VERSION, AMBASSADOR_KIND
from canaryroute.naming import build_canary_mapping_name

_WIRE_DUMP: Dict[str, Any] = {"by_alias": True, "exclude_unset": True, "mode": "json"}


class MappingMetadata(BaseModel):
    """Object metadata; unknown keys (managedFields, ownerReferences, ...) are kept."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    namespace: Optional[str] = None
    labels: Optional[Dict[str, str]] = None
    annotations: Optional[Dict[str, str]] = None
    resource_version: Optional[str] = Field(default=None, alias="resourceVersion")
    uid: Optional[str] = None


class MappingSpec(BaseModel):
    """Routing spec of a Mapping."""

    model_config = ConfigDict(extra="allow")

    host: Optional[str] = None
    prefix: Optional[str] = None
    rewrite: Optional[str] = None
    service: Optional[str] = None
    weight: Optional[int] = None

    @field_validator("weight", mode="before")
    @classmethod
    def drop_malformed_weight(cls, v: Any) -> Optional[int]:
        """Only integers count as a weight; bools, floats and strings read as unset."""
        if isinstance(v, bool) or not isinstance(v, int):
            return None
        return v


class Mapping(BaseModel):
    """An Ambassador ``getambassador.io/v2`` Mapping."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    api_version: str = Field(default=AMBASSADOR_API_VERSION, alias="apiVersion")
    kind: str = AMBASSADOR_KIND
    metadata: MappingMetadata
    spec: MappingSpec = Field(default_factory=MappingSpec)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> Optional[str]:
        return self.metadata.namespace

    @classmethod
    def from_dict(cls, obj: Dict[str, Any]) -> "Mapping":
        """Create from the API server representation."""
        return cls.model_validate(obj)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the API server representation.

        Only fields that were read or assigned are written back, so explicit
        nulls from the server survive a round-trip while typed defaults never
        appear. Type and object sections are always present.
        """
        data = {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": self.metadata.model_dump(**_WIRE_DUMP),
            "spec": self.spec.model_dump(**_WIRE_DUMP),
        }
        for key, value in self.model_dump(**_WIRE_DUMP).items():
            data.setdefault(key, value)
        return data


def get_mapping_weight(mapping: Mapping) -> int:
    """Return the mapping weight, or 0 when absent or malformed."""
    weight = mapping.spec.weight
    if isinstance(weight, bool) or not isinstance(weight, int):
        return 0
    return weight


def set_mapping_weight(mapping: Mapping, weight: int) -> None:
    """Write the mapping weight in place. Range is the caller's concern."""
    mapping.spec.weight = weight


def build_canary_mapping(base: Mapping, canary_service: str, desired_weight: int) -> Mapping:
    """
    Clone a base mapping into its canary counterpart.

    Metadata is rebuilt from scratch (only name and namespace survive) so the
    clone does not inherit uid, resourceVersion, labels or owner references.
    The base mapping is left untouched.
    """
    canary = base.model_copy(deep=True)
    canary.metadata = MappingMetadata(
        name=build_canary_mapping_name(base.name),
        namespace=base.namespace,
    )
    canary.spec.service = canary_service
    set_mapping_weight(canary, desired_weight)
    return canary
