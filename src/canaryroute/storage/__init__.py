"""
Mapping store clients for canaryroute.

The reconciler only needs four namespaced operations against Ambassador
Mappings (get, create, update, delete). Backends:
- Kubernetes (CustomObjectsApi against the getambassador.io CRD)
- Memory (local runs and tests)

Example:
    from canaryroute.storage import get_mapping_client, ClientType

    # Auto-detect backend
    client = get_mapping_client(namespace="default")

    # Explicitly use the in-memory store
    client = get_mapping_client(ClientType.MEMORY, namespace="default")
"""

from canaryroute.storage.base import (
    ClientType,
    GroupVersionResource,
    MappingClient,
    detect_client_type,
    get_ambassador_gvr,
    get_mapping_client,
    register_client,
)
from canaryroute.storage.memory import MemoryMappingClient

__all__ = [
    "ClientType",
    "GroupVersionResource",
    "MappingClient",
    "MemoryMappingClient",
    "detect_client_type",
    "get_ambassador_gvr",
    "get_mapping_client",
    "register_client",
]
