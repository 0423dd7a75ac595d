"""
Kubernetes CRD-based mapping client.

Talks to the Ambassador ``getambassador.io/v2`` Mapping CRD through the
official client's CustomObjectsApi.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException

from canaryroute.contracts.timeouts import K8S_API_REQUEST_TIMEOUT
from canaryroute.errors import MappingNotFoundError, StoreError
from canaryroute.models.mapping import Mapping
from canaryroute.storage.base import ClientType, get_ambassador_gvr, register_client

logger = logging.getLogger(__name__)


@register_client(ClientType.KUBERNETES)
class KubernetesMappingClient:
    """
    Mapping client backed by the Kubernetes API server.

    Bound to one namespace, like a namespaced dynamic resource interface.
    A 404 from the API server becomes ``MappingNotFoundError``; every other
    ``ApiException`` becomes ``StoreError`` chained to the original.
    """

    def __init__(
        self,
        namespace: str = "default",
        kubeconfig: Optional[str] = None,
        custom_api: Optional[Any] = None,
    ):
        self.namespace = namespace
        self.gvr = get_ambassador_gvr()

        if custom_api is None:
            # Initialize K8s client
            if kubeconfig:
                config.load_kube_config(config_file=kubeconfig)
            else:
                try:
                    config.load_incluster_config()
                except config.ConfigException:
                    config.load_kube_config()
            custom_api = client.CustomObjectsApi()

        self.custom_api = custom_api
        logger.debug(f"KubernetesMappingClient initialized for namespace {namespace}")

    def _coordinates(self) -> Dict[str, str]:
        return {
            "group": self.gvr.group,
            "version": self.gvr.version,
            "namespace": self.namespace,
            "plural": self.gvr.resource,
        }

    def _translate(self, e: ApiException, action: str, name: str) -> Exception:
        if e.status == 404:
            return MappingNotFoundError(name, self.namespace)
        return StoreError(
            f"failed to {action} mapping {self.namespace}/{name}: {e.status} {e.reason}",
            status=e.status,
        )

    def get(self, name: str) -> Mapping:
        try:
            obj = self.custom_api.get_namespaced_custom_object(
                name=name,
                _request_timeout=K8S_API_REQUEST_TIMEOUT,
                **self._coordinates(),
            )
        except ApiException as e:
            raise self._translate(e, "get", name) from e
        return Mapping.from_dict(obj)

    def create(self, mapping: Mapping) -> Mapping:
        try:
            obj = self.custom_api.create_namespaced_custom_object(
                body=mapping.to_dict(),
                _request_timeout=K8S_API_REQUEST_TIMEOUT,
                **self._coordinates(),
            )
        except ApiException as e:
            raise self._translate(e, "create", mapping.name) from e
        logger.debug(f"Created mapping {self.namespace}/{mapping.name}")
        return Mapping.from_dict(obj)

    def update(self, mapping: Mapping) -> Mapping:
        try:
            obj = self.custom_api.replace_namespaced_custom_object(
                name=mapping.name,
                body=mapping.to_dict(),
                _request_timeout=K8S_API_REQUEST_TIMEOUT,
                **self._coordinates(),
            )
        except ApiException as e:
            raise self._translate(e, "update", mapping.name) from e
        logger.debug(f"Updated mapping {self.namespace}/{mapping.name}")
        return Mapping.from_dict(obj)

    def delete(self, name: str) -> None:
        try:
            self.custom_api.delete_namespaced_custom_object(
                name=name,
                _request_timeout=K8S_API_REQUEST_TIMEOUT,
                **self._coordinates(),
            )
        except ApiException as e:
            raise self._translate(e, "delete", name) from e
        logger.debug(f"Deleted mapping {self.namespace}/{name}")
