"""Rollout settings supplied by the owning rollout controller."""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, Field


class RolloutContext(BaseModel):
    """
    The slice of a Rollout that Ambassador traffic routing needs.

    ``annotations`` is ``None`` when the rollout carries no annotation map at
    all, which the webhook treats differently from an empty map lookup.
    """

    name: str = Field(..., min_length=1, description="Rollout name")
    namespace: str = Field(default="default", description="Rollout namespace")
    uid: Optional[str] = Field(default=None, description="Rollout UID, used for events")
    mapping: str = Field(..., min_length=1, description="Base Ambassador mapping name")
    canary_service: str = Field(..., min_length=1, description="Service receiving canary traffic")
    stable_service: Optional[str] = Field(default=None, description="Service receiving stable traffic")
    annotations: Optional[Dict[str, str]] = None
