#!/usr/bin/env python3
"""
KUBEDISPATCH ERRORS
-------------------
Every failure the engine reports is a KubeDispatchError. Benign outcomes
("already exists" on create, "not found" on get/update/delete) never raise.

Author: KubeDispatch Team
Date: 2026-10-18
"""

from typing import Optional

from kubernetes.client.exceptions import ApiException
from urllib3.exceptions import HTTPError

# What the kubernetes client raises when a request fails: API status
# responses and transport failures (connection refused, retries exhausted)
CLUSTER_ERRORS = (ApiException, HTTPError)


class KubeDispatchError(Exception):
    """Base class for all engine failures."""


class DecodeError(KubeDispatchError):
    """The manifest is malformed or cannot be mapped to a generic object."""


class UnknownResourceType(KubeDispatchError):
    """The kind+version is not present in the cluster's type catalog."""

    def __init__(self, api_version: str, kind: str):
        self.api_version = api_version
        self.kind = kind
        super().__init__(f"No resource type found for kind '{kind}' in '{api_version}'")


class InvalidManifest(KubeDispatchError):
    """The manifest decodes but cannot address a live object (e.g. no name)."""


class InvalidNamespace(KubeDispatchError):
    """A namespaced type was bound without a namespace."""


class TargetNotFound(KubeDispatchError):
    """No live instance matches a label-addressed object."""


class UnsupportedVerb(KubeDispatchError):
    pass


class ConfigError(KubeDispatchError):
    pass


class BackingStoreError(KubeDispatchError):
    """
    Any failure reported by the cluster (permissions, validation, network).
    The original client exception is kept as __cause__.
    """

    def __init__(self, message: str, status: Optional[int] = None, reason: Optional[str] = None):
        self.status = status
        self.reason = reason
        super().__init__(message)

    @classmethod
    def from_api_exception(cls, exc: Exception, action: str) -> "BackingStoreError":
        status = getattr(exc, "status", None)
        reason = getattr(exc, "reason", None)
        if status is None:
            return cls(f"{action} failed: {exc}")
        return cls(f"{action} failed ({status} {reason})", status=status, reason=reason)


class RegistrationExists(BackingStoreError):
    """The registration record is already present; it is never overwritten."""
