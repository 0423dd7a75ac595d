"""
Mapping client protocol and factory.

Defines the interface that all mapping store backends must implement.
Backends signal a missing object with ``MappingNotFoundError`` and any other
failure with ``StoreError``; they never retry.
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from typing import Any, Callable, Dict, NamedTuple, Optional, Protocol, Type, runtime_checkable

from canaryroute.contracts.types import AMBASSADOR_GROUP, AMBASSADOR_PLURAL, AMBASSADOR_VERSION
from canaryroute.models.mapping import Mapping

logger = logging.getLogger(__name__)


class ClientType(str, Enum):
    """Available mapping store backends."""
    KUBERNETES = "kubernetes"
    MEMORY = "memory"


class GroupVersionResource(NamedTuple):
    group: str
    version: str
    resource: str


def get_ambassador_gvr() -> GroupVersionResource:
    """Coordinates of the Ambassador Mapping CRD."""
    return GroupVersionResource(
        group=AMBASSADOR_GROUP,
        version=AMBASSADOR_VERSION,
        resource=AMBASSADOR_PLURAL,
    )


@runtime_checkable
class MappingClient(Protocol):
    """
    Protocol defining the mapping store interface.

    A client is bound to a single namespace.
    """

    namespace: str

    def get(self, name: str) -> Mapping:
        """Fetch a mapping by name. Raises MappingNotFoundError if absent."""
        ...

    def create(self, mapping: Mapping) -> Mapping:
        """Create a mapping and return the stored object."""
        ...

    def update(self, mapping: Mapping) -> Mapping:
        """Replace an existing mapping and return the stored object."""
        ...

    def delete(self, name: str) -> None:
        """Delete a mapping by name."""
        ...


# Mapping client registry
_CLIENTS: Dict[ClientType, Type[Any]] = {}


def register_client(client_type: ClientType) -> Callable[[Type[Any]], Type[Any]]:
    """Decorator to register a mapping client backend."""
    def decorator(cls: Type[Any]) -> Type[Any]:
        _CLIENTS[client_type] = cls
        return cls
    return decorator


def get_mapping_client(
    client_type: Optional[ClientType] = None,
    namespace: str = "default",
    **kwargs: Any,
) -> MappingClient:
    """
    Get a mapping client instance.

    Auto-detects the appropriate backend if not specified:
    - Uses Kubernetes if running in-cluster or a kubeconfig is available
    - Falls back to the in-memory store otherwise

    Args:
        client_type: Explicit backend to use
        namespace: Namespace the client is bound to
        **kwargs: Additional backend-specific options

    Returns:
        Mapping client instance
    """
    # Import backends to register them
    from canaryroute.storage import kubernetes, memory  # noqa: F401

    if client_type is None:
        client_type = detect_client_type()
    client_type = ClientType(client_type)

    if client_type not in _CLIENTS:
        raise ValueError(f"Unknown mapping client type: {client_type}")

    return _CLIENTS[client_type](namespace=namespace, **kwargs)


def detect_client_type() -> ClientType:
    """Auto-detect the appropriate backend."""
    if os.path.exists("/var/run/secrets/kubernetes.io/serviceaccount"):
        logger.info("Detected in-cluster Kubernetes environment")
        return ClientType.KUBERNETES

    if os.environ.get("KUBECONFIG"):
        logger.info("Detected KUBECONFIG environment variable")
        return ClientType.KUBERNETES

    if os.path.exists(os.path.expanduser("~/.kube/config")):
        logger.info("Detected local kubeconfig file")
        return ClientType.KUBERNETES

    logger.info("No Kubernetes detected, using in-memory mapping store")
    return ClientType.MEMORY
