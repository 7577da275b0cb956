#!/usr/bin/env python3
"""
KUBEDISPATCH OPERATION DISPATCHER
---------------------------------
Executes a verb against a bound handle with existence-aware semantics:

    create  "already exists"  -> no-op
    update  "not found"       -> no-op (resourceVersion copied from live object)
    get     "not found"       -> no-op
    delete  "not found"       -> no-op

Every other cluster error surfaces once as BackingStoreError.

Author: KubeDispatch Team
Date: 2026-10-18
"""

import json
import logging
from typing import Callable, Dict, Optional

from kubedispatch.core.errors import CLUSTER_ERRORS, BackingStoreError, InvalidManifest
from kubedispatch.core.models import OperationResult, Outcome, ResourceObject, Verb
from kubedispatch.resolve.scope import BoundResource

logger = logging.getLogger("kubedispatch.dispatcher")


def _status_reason(exc: Exception) -> Optional[str]:
    """Extracts the Status.reason field from the API response body."""
    body = getattr(exc, "body", None)
    if not body:
        return None
    try:
        status = json.loads(body)
    except (TypeError, ValueError):
        return None
    return status.get("reason") if isinstance(status, dict) else None


def is_not_found(exc: Exception) -> bool:
    return getattr(exc, "status", None) == 404


def is_already_exists(exc: Exception) -> bool:
    if getattr(exc, "status", None) != 409:
        return False
    # 409 is also used for write conflicts; only AlreadyExists is benign
    reason = _status_reason(exc)
    return reason is None or reason == "AlreadyExists"


class OperationDispatcher:

    def __init__(self):
        self._handlers: Dict[Verb, Callable[[ResourceObject, BoundResource], OperationResult]] = {
            Verb.CREATE: self._create,
            Verb.UPDATE: self._update,
            Verb.GET: self._get,
            Verb.DELETE: self._delete,
        }

    def dispatch(self, verb: Verb, obj: ResourceObject, handle: BoundResource) -> OperationResult:
        verb = Verb.parse(verb)
        # An empty name addresses the whole collection on the dynamic client
        if verb is not Verb.CREATE and not obj.name:
            raise InvalidManifest(f"{obj.kind} manifest has no metadata.name to {verb.value}")
        return self._handlers[verb](obj, handle)

    def _create(self, obj: ResourceObject, handle: BoundResource) -> OperationResult:
        try:
            created = handle.create(obj)
        except CLUSTER_ERRORS as e:
            if is_already_exists(e):
                logger.info("%s '%s' already exists in %s", obj.kind, obj.name, handle.describe())
                return OperationResult(Verb.CREATE, Outcome.NOOP)
            raise self._backing_store_error(e, Verb.CREATE, obj, handle) from e

        logger.info("Resource successfully created: %s '%s'", obj.kind, created.name or obj.name)
        return OperationResult(Verb.CREATE, Outcome.APPLIED, created)

    def _update(self, obj: ResourceObject, handle: BoundResource) -> OperationResult:
        try:
            live = handle.get(obj.name)
        except CLUSTER_ERRORS as e:
            if is_not_found(e):
                logger.info("%s '%s' not found in %s, nothing to update", obj.kind, obj.name, handle.describe())
                return OperationResult(Verb.UPDATE, Outcome.NOOP)
            raise self._backing_store_error(e, Verb.GET, obj, handle) from e

        # The store rejects writes whose resourceVersion is stale
        obj.resource_version = live.resource_version

        try:
            updated = handle.update(obj)
        except CLUSTER_ERRORS as e:
            raise self._backing_store_error(e, Verb.UPDATE, obj, handle) from e

        logger.info("Resource successfully updated: %s '%s'", obj.kind, obj.name)
        return OperationResult(Verb.UPDATE, Outcome.APPLIED, updated)

    def _get(self, obj: ResourceObject, handle: BoundResource) -> OperationResult:
        try:
            found = handle.get(obj.name)
        except CLUSTER_ERRORS as e:
            if is_not_found(e):
                logger.info("%s '%s' not found in %s", obj.kind, obj.name, handle.describe())
                return OperationResult(Verb.GET, Outcome.NOOP)
            raise self._backing_store_error(e, Verb.GET, obj, handle) from e

        logger.info("Resource successfully retrieved: %s '%s'", obj.kind, obj.name)
        return OperationResult(Verb.GET, Outcome.APPLIED, found)

    def _delete(self, obj: ResourceObject, handle: BoundResource) -> OperationResult:
        try:
            handle.delete(obj.name)
        except CLUSTER_ERRORS as e:
            if is_not_found(e):
                logger.info("%s '%s' not found in %s, nothing to delete", obj.kind, obj.name, handle.describe())
                return OperationResult(Verb.DELETE, Outcome.NOOP)
            raise self._backing_store_error(e, Verb.DELETE, obj, handle) from e

        logger.info("Resource successfully deleted: %s '%s'", obj.kind, obj.name)
        return OperationResult(Verb.DELETE, Outcome.APPLIED, ResourceObject.empty())

    def _backing_store_error(self, exc: Exception, verb: Verb, obj: ResourceObject,
                             handle: BoundResource) -> BackingStoreError:
        action = f"{verb.value} {obj.kind} '{obj.name}' in {handle.describe()}"
        logger.error("%s failed: %s", action, exc)
        return BackingStoreError.from_api_exception(exc, action)
