#!/usr/bin/env python3
"""
KUBEDISPATCH SCOPE BINDER
-------------------------
Combines a resolved ResourceType with a namespace into a BoundResource,
the handle every later stage operates on. Handles are local values,
built per operation and passed explicitly; nothing here is shared.

Author: KubeDispatch Team
Date: 2026-10-18
"""

import logging
from typing import Any, Dict, List, Optional

from kubedispatch.core.errors import InvalidManifest, InvalidNamespace
from kubedispatch.core.models import ResourceObject, ResourceType

logger = logging.getLogger("kubedispatch.scope")


class BoundResource:
    """
    A resource collection restricted to one scope.

    Thin adapter over the kubernetes.dynamic Resource API. Client
    exceptions (ApiException) propagate untouched; interpreting them is
    the dispatcher's job.
    """

    def __init__(self, resource_type: ResourceType, namespace: Optional[str] = None):
        self.resource_type = resource_type
        self.namespace = namespace

    @property
    def api(self) -> Any:
        return self.resource_type.api

    def create(self, obj: ResourceObject) -> ResourceObject:
        response = self.api.create(body=obj.to_dict(), namespace=self.namespace)
        return _to_object(response)

    def get(self, name: str) -> ResourceObject:
        self._require_name(name, "get")
        response = self.api.get(name=name, namespace=self.namespace)
        return _to_object(response)

    def update(self, obj: ResourceObject) -> ResourceObject:
        self._require_name(obj.name, "update")
        response = self.api.replace(body=obj.to_dict(), name=obj.name, namespace=self.namespace)
        return _to_object(response)

    def delete(self, name: str) -> ResourceObject:
        self._require_name(name, "delete")
        response = self.api.delete(name=name, namespace=self.namespace)
        return _to_object(response)

    def list(self, label_selector: Optional[str] = None) -> List[ResourceObject]:
        response = self.api.get(namespace=self.namespace, label_selector=label_selector)
        content = _as_dict(response)
        return [ResourceObject(item) for item in content.get("items") or []]

    def _require_name(self, name: str, action: str):
        # The dynamic client turns an empty name into a collection request
        if not name:
            raise InvalidManifest(f"A name is required to {action} {self.resource_type.plural}")

    def describe(self) -> str:
        plural = self.resource_type.plural
        return f"{self.namespace}/{plural}" if self.namespace else plural

    def __repr__(self) -> str:
        return f"BoundResource({self.resource_type.group_version} {self.describe()})"


def _as_dict(response: Any) -> Dict[str, Any]:
    if response is None:
        return {}
    if isinstance(response, dict):
        return response
    # kubernetes.dynamic ResourceInstance
    return response.to_dict()


def _to_object(response: Any) -> ResourceObject:
    return ResourceObject(_as_dict(response))


class ScopeBinder:

    def bind(self, resource_type: ResourceType, namespace: Optional[str]) -> BoundResource:
        if not resource_type.namespaced:
            # Cluster-wide resources have no namespace concept
            if namespace:
                logger.debug("Ignoring namespace '%s' for cluster-scoped %s", namespace, resource_type.plural)
            return BoundResource(resource_type, None)

        if not namespace or not namespace.strip():
            raise InvalidNamespace(
                f"Resource type '{resource_type.plural}' is namespaced but no namespace was given"
            )
        return BoundResource(resource_type, namespace.strip())
