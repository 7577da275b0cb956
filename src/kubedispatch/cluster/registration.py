#!/usr/bin/env python3
"""
KUBEDISPATCH REGISTRATION RECORD
--------------------------------
The agent registers with its parent system exactly once. Proof of that
handshake is a ConfigMap in the agent namespace:

    is_cluster_confirmed: "true"
    cluster_key: <key>
    cluster_id: <id>

The record is create-if-absent only; there is no update path.

Author: KubeDispatch Team
Date: 2026-10-18
"""

import logging
from typing import Any, Optional, Tuple

from kubernetes import client

from kubedispatch.core.config import DEFAULT_REGISTRATION_CONFIG
from kubedispatch.core.errors import CLUSTER_ERRORS, BackingStoreError, RegistrationExists
from kubedispatch.core.models import RegistrationRecord

logger = logging.getLogger("kubedispatch.registration")

CONFIRMED_KEY = "is_cluster_confirmed"
CLUSTER_KEY = "cluster_key"
CLUSTER_ID = "cluster_id"


class RegistrationStore:

    def __init__(self, core_v1: Any, namespace: str, config_name: str = DEFAULT_REGISTRATION_CONFIG):
        self.core_v1 = core_v1
        self.namespace = namespace
        self.config_name = config_name

    def read(self) -> Optional[RegistrationRecord]:
        """Returns the stored record, or None when it was never created."""
        try:
            config_map = self.core_v1.read_namespaced_config_map(self.config_name, self.namespace)
        except CLUSTER_ERRORS as e:
            if getattr(e, "status", None) == 404:
                return None
            raise BackingStoreError.from_api_exception(
                e, f"Reading {self.namespace}/{self.config_name}"
            ) from e

        data = getattr(config_map, "data", None) or {}
        return RegistrationRecord(
            confirmed=data.get(CONFIRMED_KEY) == "true",
            cluster_key=data.get(CLUSTER_KEY, ""),
            cluster_id=data.get(CLUSTER_ID, ""),
        )

    def is_cluster_confirmed(self) -> Tuple[bool, str]:
        record = self.read()
        if record is None or not record.confirmed:
            return False, ""
        return True, record.cluster_key

    def register(self, cluster_key: str, cluster_id: str) -> RegistrationRecord:
        record = RegistrationRecord(confirmed=True, cluster_key=cluster_key, cluster_id=cluster_id)
        body = client.V1ConfigMap(
            api_version="v1",
            kind="ConfigMap",
            metadata=client.V1ObjectMeta(name=self.config_name),
            data={
                CONFIRMED_KEY: "true",
                CLUSTER_KEY: cluster_key,
                CLUSTER_ID: cluster_id,
            },
        )

        try:
            self.core_v1.create_namespaced_config_map(self.namespace, body)
        except CLUSTER_ERRORS as e:
            target = f"{self.namespace}/{self.config_name}"
            if getattr(e, "status", None) == 409:
                raise RegistrationExists(
                    f"Registration record {target} already exists", status=409, reason=getattr(e, "reason", None)
                ) from e
            raise BackingStoreError.from_api_exception(e, f"Creating {target}") from e

        logger.info("Registration record %s/%s created", self.namespace, self.config_name)
        return record
