#!/usr/bin/env python3
"""
KUBEDISPATCH CLUSTER CLIENTS
----------------------------
Builds the Kubernetes clients the engine and registration store consume:
in-cluster service account first, kubeconfig as the fallback.

Author: KubeDispatch Team
Date: 2026-10-18
"""

import logging
from dataclasses import dataclass
from typing import Any

from kubernetes import client, config, dynamic
from kubernetes.config.config_exception import ConfigException

from kubedispatch.core.config import AgentSettings
from kubedispatch.core.errors import ConfigError

logger = logging.getLogger("kubedispatch.cluster")


@dataclass
class ClusterClients:
    dynamic: Any        # kubernetes.dynamic.DynamicClient
    core_v1: Any        # kubernetes.client.CoreV1Api

    @property
    def registry(self) -> Any:
        """The discovery capability used by the TypeResolver."""
        return self.dynamic.resources


def load_cluster_config(settings: AgentSettings) -> client.ApiClient:
    if settings.in_cluster is not False:
        try:
            config.load_incluster_config()
            logger.info("Using in-cluster configuration")
            return client.ApiClient()
        except ConfigException as e:
            if settings.in_cluster:
                raise ConfigError(f"In-cluster configuration unavailable: {e}") from e
            logger.debug("In-cluster configuration unavailable, falling back to kubeconfig")

    try:
        return config.new_client_from_config(
            config_file=settings.kubeconfig,
            context=settings.context,
        )
    except (ConfigException, FileNotFoundError) as e:
        raise ConfigError(f"Unable to load kubeconfig: {e}") from e


def build_clients(settings: AgentSettings) -> ClusterClients:
    api_client = load_cluster_config(settings)
    return ClusterClients(
        dynamic=dynamic.DynamicClient(api_client),
        core_v1=client.CoreV1Api(api_client),
    )
