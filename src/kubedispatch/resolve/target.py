#!/usr/bin/env python3
"""
KUBEDISPATCH TARGET RESOLVER
----------------------------
Workflow runs get a generated name from the orchestrator, so the caller
only knows the run's logical id, carried in the `workflow_id` label.
Before dispatch, the object's name is rewritten to the live instance
that carries that label.

Author: KubeDispatch Team
Date: 2026-10-18
"""

import logging

from kubedispatch.core.errors import CLUSTER_ERRORS, BackingStoreError, TargetNotFound
from kubedispatch.core.models import ResourceObject
from kubedispatch.resolve.scope import BoundResource

logger = logging.getLogger("kubedispatch.target")

LABEL_ADDRESSED_KINDS = frozenset({"Workflow", "CronWorkflow"})
WORKFLOW_ID_LABEL = "workflow_id"


class TargetResolver:

    def __init__(self, kinds=LABEL_ADDRESSED_KINDS, label: str = WORKFLOW_ID_LABEL):
        self.kinds = frozenset(kinds)
        self.label = label

    def applies_to(self, obj: ResourceObject) -> bool:
        return obj.kind in self.kinds

    def retarget(self, handle: BoundResource, obj: ResourceObject) -> ResourceObject:
        """Rewrites obj.name in place for label-addressed kinds."""
        if not self.applies_to(obj):
            return obj

        workflow_id = obj.labels.get(self.label)
        if not workflow_id:
            raise TargetNotFound(f"{obj.kind} manifest has no '{self.label}' label")

        selector = f"{self.label}={workflow_id}"
        try:
            matches = handle.list(label_selector=selector)
        except CLUSTER_ERRORS as e:
            raise BackingStoreError.from_api_exception(e, f"Listing {handle.describe()} by {selector}") from e

        if not matches:
            raise TargetNotFound(f"No {obj.kind} found in {handle.describe()} with label {selector}")

        # One live run per workflow id is expected; listing order decides otherwise
        if len(matches) > 1:
            logger.warning(
                "%d %s instances match %s, using '%s'",
                len(matches), obj.kind, selector, matches[0].name,
            )

        obj.name = matches[0].name
        logger.info("Resolved %s %s to instance '%s'", obj.kind, selector, obj.name)
        return obj
