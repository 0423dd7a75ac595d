"""
Pytest configuration and fixtures for canaryroute tests.
"""

from __future__ import annotations

import os
from typing import Generator, List, Optional, Union

import pytest
import yaml

from canaryroute.config import reset_config
from canaryroute.errors import MappingNotFoundError
from canaryroute.events import FakeEventRecorder
from canaryroute.models.mapping import Mapping
from canaryroute.models.rollout import RolloutContext


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch) -> Generator[None, None, None]:
    """Strip canaryroute settings from the environment and reset config."""
    for key in list(os.environ):
        if key.startswith("CANARYROUTE_") or key == "AMBASSADOR_WEBHOOK_SECRET":
            monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


# ============================================================================
# Mapping Manifests
# ============================================================================

BASE_MAPPING = """
apiVersion: getambassador.io/v2
kind:  Mapping
metadata:
  name: myapp-mapping
  namespace: default
  uid: 0d4c4bd4-7a5e-4b63-9a27-2b3f0d1e6a11
  resourceVersion: "4242"
  labels:
    app: myapp
spec:
  host: somedomain.com
  prefix: /myapp/
  rewrite: /myapp/
  service: myapp:8080
  timeout_ms: 4000
"""

BASE_MAPPING_WITH_WEIGHT = """
apiVersion: getambassador.io/v2
kind:  Mapping
metadata:
  name: myapp-mapping
  namespace: default
spec:
  host: somedomain.com
  prefix: /myapp/
  rewrite: /myapp/
  service: myapp:8080
  weight: 20
"""

CANARY_MAPPING = """
apiVersion: getambassador.io/v2
kind:  Mapping
metadata:
  name: myapp-mapping-canary
  namespace: default
  resourceVersion: "4243"
spec:
  host: somedomain.com
  prefix: /myapp/
  rewrite: /myapp/
  service: canary-service
  weight: 13
"""


def to_mapping(manifest: str) -> Mapping:
    """Parse a YAML manifest into a Mapping."""
    return Mapping.from_dict(yaml.safe_load(manifest))


@pytest.fixture
def base_mapping() -> Mapping:
    return to_mapping(BASE_MAPPING)


@pytest.fixture
def base_mapping_with_weight() -> Mapping:
    return to_mapping(BASE_MAPPING_WITH_WEIGHT)


@pytest.fixture
def canary_mapping() -> Mapping:
    return to_mapping(CANARY_MAPPING)


# ============================================================================
# Store and Recorder Fakes
# ============================================================================


class FakeMappingClient:
    """
    Mapping client that records every call.

    ``get_returns`` is consumed in call order; the last entry repeats. An
    empty list means every get is a miss.
    """

    def __init__(self, namespace: str = "default"):
        self.namespace = namespace
        self.get_invocations: List[str] = []
        self.get_returns: List[Union[Mapping, Exception]] = []
        self.create_invocations: List[Mapping] = []
        self.create_error: Optional[Exception] = None
        self.update_invocations: List[Mapping] = []
        self.update_error: Optional[Exception] = None
        self.delete_invocations: List[str] = []
        self.delete_error: Optional[Exception] = None

    def get(self, name: str) -> Mapping:
        self.get_invocations.append(name)
        if not self.get_returns:
            raise MappingNotFoundError(name, self.namespace)
        ret = self.get_returns[min(len(self.get_invocations), len(self.get_returns)) - 1]
        if isinstance(ret, Exception):
            raise ret
        return ret

    def create(self, mapping: Mapping) -> Mapping:
        self.create_invocations.append(mapping)
        if self.create_error:
            raise self.create_error
        return mapping

    def update(self, mapping: Mapping) -> Mapping:
        self.update_invocations.append(mapping)
        if self.update_error:
            raise self.update_error
        return mapping

    def delete(self, name: str) -> None:
        self.delete_invocations.append(name)
        if self.delete_error:
            raise self.delete_error


@pytest.fixture
def fake_client() -> FakeMappingClient:
    return FakeMappingClient()


@pytest.fixture
def recorder() -> FakeEventRecorder:
    return FakeEventRecorder()


# ============================================================================
# Rollout Fixtures
# ============================================================================


@pytest.fixture
def rollout() -> RolloutContext:
    return RolloutContext(
        name="rollout",
        namespace="default",
        stable_service="main-service",
        canary_service="canary-service",
        mapping="myapp-mapping",
        annotations={
            "getambassador.io/webhookUrl": "https://hooks.example.com/rollouts",
            "getambassador.io/rolloutId": "rollout-1234",
        },
    )
