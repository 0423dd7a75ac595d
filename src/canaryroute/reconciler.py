"""
Ambassador canary mapping reconciler.

Converges the canary Mapping of a rollout to a desired weight. The canary
mapping is either absent or present:

    absent,  weight == 0  -> nothing to do
    absent,  weight  > 0  -> clone the base mapping and create the canary
    present, weight == 0  -> delete the canary (rollout finished or aborted)
    present, weight  > 0  -> update the canary weight

Each call issues at most one mutating store call and never retries; failures
propagate to the caller, which re-invokes on its own schedule. Calls for the
same rollout must not run concurrently.
"""

from __future__ import annotations

from typing import Optional

from canaryroute.contracts.types import TRAFFIC_ROUTING_TYPE, EventReason, EventType
from canaryroute.errors import MappingConfigError, MappingNotFoundError
from canaryroute.events import EventRecorder, LoggingEventRecorder
from canaryroute.logger import RolloutLogger
from canaryroute.models.mapping import (
    Mapping,
    build_canary_mapping,
    get_mapping_weight,
    set_mapping_weight,
)
from canaryroute.models.rollout import RolloutContext
from canaryroute.naming import build_canary_mapping_name
from canaryroute.storage.base import MappingClient
from canaryroute.tracing import add_span_event, tracer


class AmbassadorReconciler:
    """
    Traffic routing reconciler for Ambassador.

    The canary mapping is created dynamically by cloning the base mapping
    named in the rollout. If the canary mapping already exists only its
    weight is changed.

    Example:
        reconciler = AmbassadorReconciler(rollout, client, recorder)
        reconciler.set_weight(30)
        assert reconciler.verify_weight(30)
    """

    def __init__(
        self,
        rollout: RolloutContext,
        client: MappingClient,
        recorder: Optional[EventRecorder] = None,
        log: Optional[RolloutLogger] = None,
    ):
        self.rollout = rollout
        self.client = client
        self.recorder = recorder or LoggingEventRecorder()
        self.log = log or RolloutLogger.for_rollout(rollout)

    def type(self) -> str:
        """Traffic routing type identifier."""
        return TRAFFIC_ROUTING_TYPE

    def set_weight(self, desired_weight: int) -> None:
        """
        Configure the canary mapping with the given weight.

        Raises:
            MappingNotFoundError: base mapping missing while a canary is needed
            MappingConfigError: base mapping declares its own weight
            StoreError: any other store failure, unmodified
        """
        self._send_normal_event(
            EventReason.CANARY_MAPPING_WEIGHT_UPDATE,
            f"Updating canary mapping weight to {desired_weight}",
        )
        base_mapping_name = self.rollout.mapping
        canary_mapping_name = build_canary_mapping_name(base_mapping_name)

        with tracer.start_as_current_span(
            "ambassador.set_weight",
            attributes={
                "rollout.name": self.rollout.name,
                "rollout.namespace": self.rollout.namespace,
                "canary.mapping": canary_mapping_name,
                "canary.desired_weight": desired_weight,
            },
        ):
            try:
                canary_mapping = self.client.get(canary_mapping_name)
            except MappingNotFoundError:
                self._create_canary_mapping(base_mapping_name, desired_weight)
                return
            self._update_canary_mapping(canary_mapping, desired_weight)

    def verify_weight(self, desired_weight: int) -> bool:
        """Ambassador exposes no convergence signal beyond a successful write."""
        return True

    def _update_canary_mapping(self, canary_mapping: Mapping, desired_weight: int) -> None:
        if desired_weight == 0:
            # Rollout concluded: the canary mapping must go away
            self._delete_canary_mapping(canary_mapping)
            return

        set_mapping_weight(canary_mapping, desired_weight)
        try:
            self.client.update(canary_mapping)
        except Exception as e:
            self._send_warning_event(
                EventReason.CANARY_MAPPING_UPDATE_ERROR,
                f"Error updating canary mapping {canary_mapping.name!r}: {e}",
            )
            raise
        add_span_event("canary_mapping.updated", {"mapping": canary_mapping.name})
        self.log.info(
            "Updated canary mapping weight",
            mapping=canary_mapping.name,
            desired_weight=desired_weight,
        )

    def _delete_canary_mapping(self, canary_mapping: Mapping) -> None:
        try:
            self.client.delete(canary_mapping.name)
        except Exception as e:
            self._send_warning_event(
                EventReason.CANARY_MAPPING_CLEANUP_ERROR,
                f"Error deleting canary mapping {canary_mapping.name!r}: {e}",
            )
            raise
        add_span_event("canary_mapping.deleted", {"mapping": canary_mapping.name})
        self.log.info("Deleted canary mapping", mapping=canary_mapping.name)

    def _create_canary_mapping(self, base_mapping_name: str, desired_weight: int) -> None:
        if desired_weight == 0:
            return

        try:
            base_mapping = self.client.get(base_mapping_name)
        except MappingNotFoundError:
            self._send_warning_event(
                EventReason.AMBASSADOR_MAPPING_NOT_FOUND,
                f"Ambassador mapping {base_mapping_name!r} not found",
            )
            raise

        if get_mapping_weight(base_mapping) != 0:
            msg = f"Ambassador mapping {base_mapping_name!r} can not define weight"
            self._send_warning_event(EventReason.AMBASSADOR_MAPPING_CONFIG_ERROR, msg)
            raise MappingConfigError(msg)

        canary_mapping = build_canary_mapping(
            base_mapping, self.rollout.canary_service, desired_weight
        )
        try:
            self.client.create(canary_mapping)
        except Exception as e:
            self._send_warning_event(
                EventReason.CANARY_MAPPING_CREATION_ERROR,
                f"Error creating canary mapping: {e}",
            )
            raise
        add_span_event("canary_mapping.created", {"mapping": canary_mapping.name})
        self.log.info(
            "Created canary mapping",
            mapping=canary_mapping.name,
            base_mapping=base_mapping_name,
            desired_weight=desired_weight,
        )

    def _send_normal_event(self, reason: EventReason, msg: str) -> None:
        self._send_event(EventType.NORMAL, reason, msg)

    def _send_warning_event(self, reason: EventReason, msg: str) -> None:
        self._send_event(EventType.WARNING, reason, msg)

    def _send_event(self, event_type: EventType, reason: EventReason, msg: str) -> None:
        self.recorder.event(self.rollout, event_type, reason, msg)
