"""
Operator-visible rollout events.

The reconciler reports what it does through an injected ``EventRecorder``
rather than a process-wide sink. Recorders:
- LoggingEventRecorder: structured log line per event (default)
- KubernetesEventRecorder: core/v1 Event attached to the Rollout
- FakeEventRecorder: keeps events in memory for assertions
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, List, Optional, Protocol, runtime_checkable

from canaryroute.contracts.types import EventReason, EventType
from canaryroute.logger import RolloutLogger
from canaryroute.models.rollout import RolloutContext

logger = logging.getLogger(__name__)


@runtime_checkable
class EventRecorder(Protocol):
    """Sink for operator-visible events about a rollout."""

    def event(
        self,
        rollout: RolloutContext,
        event_type: EventType,
        reason: EventReason,
        message: str,
    ) -> None:
        ...


@dataclass(frozen=True)
class RecordedEvent:
    event_type: EventType
    reason: EventReason
    message: str
    rollout: str


class FakeEventRecorder:
    """Recorder that keeps every event, for tests."""

    def __init__(self) -> None:
        self.events: List[RecordedEvent] = []

    def event(self, rollout, event_type, reason, message) -> None:
        self.events.append(RecordedEvent(
            event_type=EventType(event_type),
            reason=EventReason(reason),
            message=message,
            rollout=rollout.name,
        ))

    def reasons(self) -> List[EventReason]:
        return [e.reason for e in self.events]


class LoggingEventRecorder:
    """Recorder that writes each event as a structured log line."""

    def event(self, rollout, event_type, reason, message) -> None:
        log = RolloutLogger.for_rollout(rollout)
        fields = {"event_type": EventType(event_type).value, "reason": EventReason(reason).value}
        if EventType(event_type) == EventType.WARNING:
            log.warning(message, **fields)
        else:
            log.info(message, **fields)


class KubernetesEventRecorder:
    """Recorder that creates core/v1 Events involving the Rollout object."""

    def __init__(self, core_api: Optional[Any] = None, component: str = "canaryroute"):
        if core_api is None:
            from kubernetes import client, config

            try:
                config.load_incluster_config()
            except config.ConfigException:
                config.load_kube_config()
            core_api = client.CoreV1Api()
        self.core_api = core_api
        self.component = component

    def _build_event(self, rollout, event_type, reason, message):
        from kubernetes import client

        now = datetime.now(timezone.utc)
        return client.CoreV1Event(
            metadata=client.V1ObjectMeta(
                name=f"{rollout.name}.{uuid.uuid4().hex[:16]}",
                namespace=rollout.namespace,
            ),
            involved_object=client.V1ObjectReference(
                api_version="argoproj.io/v1alpha1",
                kind="Rollout",
                name=rollout.name,
                namespace=rollout.namespace,
                uid=rollout.uid,
            ),
            type=EventType(event_type).value,
            reason=EventReason(reason).value,
            message=message,
            source=client.V1EventSource(component=self.component),
            first_timestamp=now,
            last_timestamp=now,
            count=1,
        )

    def event(self, rollout, event_type, reason, message) -> None:
        body = self._build_event(rollout, event_type, reason, message)
        try:
            self.core_api.create_namespaced_event(namespace=rollout.namespace, body=body)
        except Exception as e:
            # Event delivery never fails reconciliation
            logger.warning(f"Failed to record event {reason} for rollout {rollout.name}: {e}")
