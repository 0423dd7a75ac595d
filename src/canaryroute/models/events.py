"""Weight-change notification payload."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class WeightChangeEvent(BaseModel):
    """
    Body of a weight-change webhook.

    Field order is part of the wire format: receivers verify the signature
    over the exact serialized bytes.
    """

    model_config = ConfigDict(frozen=True)

    rollout_id: str
    desired_weight: int
    verified_at: str

    def to_payload(self) -> bytes:
        """Compact JSON body, e.g. ``{"rollout_id":"r1","desired_weight":20,...}``."""
        return self.model_dump_json().encode("utf-8")
