#!/usr/bin/env python3
"""
KUBEDISPATCH TYPE RESOLVER - The Cartographer
---------------------------------------------
Maps a kind+apiVersion pair onto the cluster's type catalog: plural
resource name, group/version and scope. Answers are memoized for the
lifetime of the resolver, so each distinct pair costs at most one
discovery round-trip.

Known limitation: entries are never invalidated. A CRD installed after
the first miss for its kind is only seen after clear() or a restart.

Author: KubeDispatch Team
Date: 2026-10-18
"""

import logging
import threading
from typing import Any, Dict, Tuple

from kubernetes.dynamic.exceptions import ResourceNotFoundError, ResourceNotUniqueError

from kubedispatch.core.errors import CLUSTER_ERRORS, BackingStoreError, UnknownResourceType
from kubedispatch.core.models import ResourceType, Scope

logger = logging.getLogger("kubedispatch.types")


class TypeResolver:
    """
    Process-wide catalog of resolved resource types.

    `registry` is the discovery capability: anything exposing
    get(api_version=..., kind=...) that returns an object with `name`
    (plural), `group_version`, `kind` and `namespaced` attributes.
    In production that is DynamicClient.resources.
    """

    def __init__(self, registry: Any):
        self.registry = registry
        self._cache: Dict[Tuple[str, str], ResourceType] = {}
        self._lock = threading.Lock()
        self.lookups = 0

    def resolve(self, api_version: str, kind: str) -> ResourceType:
        key = (api_version, kind)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        # Serialize misses so concurrent callers share one discovery query
        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                return cached
            resource_type = self._discover(api_version, kind)
            self._cache[key] = resource_type
            return resource_type

    def _discover(self, api_version: str, kind: str) -> ResourceType:
        self.lookups += 1
        logger.debug("Discovery lookup for %s %s", api_version, kind)
        try:
            api = self.registry.get(api_version=api_version, kind=kind)
        except ResourceNotFoundError as e:
            raise UnknownResourceType(api_version, kind) from e
        except ResourceNotUniqueError as e:
            raise BackingStoreError(f"Discovery of {kind} in {api_version} matched more than one resource type") from e
        except CLUSTER_ERRORS as e:
            raise BackingStoreError.from_api_exception(e, f"Discovery of {kind} in {api_version}") from e

        scope = Scope.NAMESPACED if api.namespaced else Scope.CLUSTER
        resource_type = ResourceType(
            kind=getattr(api, "kind", None) or kind,
            plural=api.name,
            group_version=getattr(api, "group_version", None) or api_version,
            scope=scope,
            api=api,
        )
        logger.info("Resolved %s %s -> %s (%s)", api_version, kind, resource_type.plural, scope.value)
        return resource_type

    def __len__(self) -> int:
        return len(self._cache)

    def clear(self):
        with self._lock:
            self._cache.clear()
