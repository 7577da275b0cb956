#!/usr/bin/env python3
"""
KUBEDISPATCH CORE MODELS
------------------------
Defines the fundamental data structures used across the KubeDispatch engine.
A manifest travels through the engine as a ResourceObject; the cluster's
answer about what that manifest *is* travels as a ResourceType.

Author: KubeDispatch Team
Date: 2026-10-18
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from kubedispatch.core.errors import UnsupportedVerb


class Scope(Enum):
    """Whether a resource type is partitioned by namespace or global."""
    NAMESPACED = "Namespaced"
    CLUSTER = "Cluster"


class Verb(Enum):
    """The closed set of operations the dispatcher understands."""
    CREATE = "create"
    UPDATE = "update"
    GET = "get"
    DELETE = "delete"

    @classmethod
    def parse(cls, value: Any) -> "Verb":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnsupportedVerb(f"Invalid request type '{value}'") from None


class Outcome(Enum):
    APPLIED = "applied"   # The verb changed or read live state
    NOOP = "noop"         # Target state was already reached


class ResourceObject:
    """
    A schema-less Kubernetes object.

    Only the identity fields are interpreted (kind, apiVersion, metadata.name,
    metadata.namespace, metadata.labels, metadata.resourceVersion). Everything
    else (spec, status, data) is carried through untouched.
    """

    def __init__(self, content: Optional[Dict[str, Any]] = None):
        self._content: Dict[str, Any] = content if content is not None else {}

    @classmethod
    def empty(cls) -> "ResourceObject":
        return cls({})

    def _metadata(self, create: bool = False) -> Dict[str, Any]:
        metadata = self._content.get("metadata")
        if not isinstance(metadata, dict):
            metadata = {}
            if create:
                self._content["metadata"] = metadata
        return metadata

    @property
    def kind(self) -> str:
        return self._content.get("kind") or ""

    @property
    def api_version(self) -> str:
        return self._content.get("apiVersion") or ""

    @property
    def name(self) -> str:
        return self._metadata().get("name") or ""

    @name.setter
    def name(self, value: str):
        self._metadata(create=True)["name"] = value

    @property
    def namespace(self) -> str:
        return self._metadata().get("namespace") or ""

    @property
    def labels(self) -> Dict[str, str]:
        labels = self._metadata().get("labels")
        return dict(labels) if isinstance(labels, dict) else {}

    @property
    def resource_version(self) -> str:
        return self._metadata().get("resourceVersion") or ""

    @resource_version.setter
    def resource_version(self, value: str):
        self._metadata(create=True)["resourceVersion"] = value

    def group_version_kind(self) -> Tuple[str, str]:
        return self.api_version, self.kind

    def is_empty(self) -> bool:
        return not self._content

    def to_dict(self) -> Dict[str, Any]:
        return self._content

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ResourceObject):
            return NotImplemented
        return self._content == other._content

    def __repr__(self) -> str:
        if self.is_empty():
            return "ResourceObject(<empty>)"
        return f"ResourceObject({self.api_version}/{self.kind} {self.name!r})"


@dataclass(frozen=True)
class ResourceType:
    """
    The resolved descriptor for a kind+version pair.

    `api` is the client-side handle for the collection (a
    kubernetes.dynamic Resource in production). It is opaque to the engine
    and excluded from equality so descriptors compare by identity fields.
    """
    kind: str
    plural: str
    group_version: str
    scope: Scope
    api: Any = field(default=None, compare=False, repr=False)

    @property
    def namespaced(self) -> bool:
        return self.scope is Scope.NAMESPACED


@dataclass
class OperationResult:
    """What a single perform_operation call produced."""
    verb: Verb
    outcome: Outcome
    object: Optional[ResourceObject] = None

    @property
    def applied(self) -> bool:
        return self.outcome is Outcome.APPLIED

    @property
    def noop(self) -> bool:
        return self.outcome is Outcome.NOOP


@dataclass(frozen=True)
class RegistrationRecord:
    """One-time registration handshake state persisted in the cluster."""
    confirmed: bool
    cluster_key: str = ""
    cluster_id: str = ""
