"""
Tests for rollout event recorders.
"""

import json
import logging
from io import StringIO
from unittest.mock import MagicMock

import pytest

from canaryroute.contracts.types import EventReason, EventType
from canaryroute.events import (
    EventRecorder,
    FakeEventRecorder,
    KubernetesEventRecorder,
    LoggingEventRecorder,
)


@pytest.fixture
def captured_logs():
    output = StringIO()
    rollout_logger = logging.getLogger("canaryroute.rollouts")
    original = list(rollout_logger.handlers)
    rollout_logger.handlers.clear()
    handler = logging.StreamHandler(output)
    handler.setFormatter(logging.Formatter("%(message)s"))
    rollout_logger.addHandler(handler)
    yield output
    rollout_logger.handlers[:] = original


def test_recorders_satisfy_protocol():
    assert isinstance(FakeEventRecorder(), EventRecorder)
    assert isinstance(LoggingEventRecorder(), EventRecorder)
    assert isinstance(KubernetesEventRecorder(core_api=MagicMock()), EventRecorder)


class TestFakeEventRecorder:

    def test_keeps_events_in_order(self, rollout):
        recorder = FakeEventRecorder()
        recorder.event(rollout, EventType.NORMAL, EventReason.CANARY_MAPPING_WEIGHT_UPDATE, "a")
        recorder.event(rollout, "Warning", "CanaryMappingUpdateError", "b")

        assert recorder.reasons() == [
            EventReason.CANARY_MAPPING_WEIGHT_UPDATE,
            EventReason.CANARY_MAPPING_UPDATE_ERROR,
        ]
        assert recorder.events[1].event_type == EventType.WARNING
        assert recorder.events[1].rollout == "rollout"


class TestLoggingEventRecorder:

    def test_warning_event_logged_as_warning(self, rollout, captured_logs):
        LoggingEventRecorder().event(
            rollout,
            EventType.WARNING,
            EventReason.AMBASSADOR_MAPPING_NOT_FOUND,
            "Ambassador mapping 'myapp-mapping' not found",
        )

        log = json.loads(captured_logs.getvalue().strip().splitlines()[-1])
        assert log["level"] == "warning"
        assert log["reason"] == "AmbassadorMappingNotFound"
        assert log["event_type"] == "Warning"
        assert log["rollout"] == "rollout"
        assert log["namespace"] == "default"

    def test_normal_event_logged_as_info(self, rollout, captured_logs):
        LoggingEventRecorder().event(
            rollout,
            EventType.NORMAL,
            EventReason.CANARY_MAPPING_WEIGHT_UPDATE,
            "Updating canary mapping weight to 5",
        )

        log = json.loads(captured_logs.getvalue().strip().splitlines()[-1])
        assert log["level"] == "info"
        assert log["msg"] == "Updating canary mapping weight to 5"


class TestKubernetesEventRecorder:

    def test_creates_event_for_rollout(self, rollout):
        core_api = MagicMock()
        rollout = rollout.model_copy(update={"uid": "abc-123"})

        KubernetesEventRecorder(core_api=core_api).event(
            rollout,
            EventType.WARNING,
            EventReason.CANARY_MAPPING_CLEANUP_ERROR,
            "Error deleting canary mapping",
        )

        kwargs = core_api.create_namespaced_event.call_args.kwargs
        body = kwargs["body"]
        assert kwargs["namespace"] == "default"
        assert body.type == "Warning"
        assert body.reason == "CanaryMappingCleanupError"
        assert body.involved_object.kind == "Rollout"
        assert body.involved_object.name == "rollout"
        assert body.involved_object.uid == "abc-123"
        assert body.metadata.name.startswith("rollout.")
        assert body.source.component == "canaryroute"

    def test_api_failure_does_not_raise(self, rollout):
        core_api = MagicMock()
        core_api.create_namespaced_event.side_effect = RuntimeError("api down")

        KubernetesEventRecorder(core_api=core_api).event(
            rollout, EventType.NORMAL, EventReason.CANARY_MAPPING_WEIGHT_UPDATE, "msg"
        )
