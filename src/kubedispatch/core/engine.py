#!/usr/bin/env python3
"""
KUBEDISPATCH ENGINE - The Orchestrator
--------------------------------------
The OperationEngine drives a manifest through the five stages of a
dynamic resource operation:

    decode -> resolve type -> bind scope -> retarget (workflow runs) -> dispatch

One call is one synchronous sequence. The only state shared between
calls is the TypeResolver's catalog; every handle and object is local.

Author: KubeDispatch Team
Date: 2026-10-18
"""

import logging
from typing import Any, Optional, Union

from kubedispatch.core.models import OperationResult, Verb
from kubedispatch.dispatch.dispatcher import OperationDispatcher
from kubedispatch.manifest.decoder import ManifestDecoder
from kubedispatch.resolve.scope import ScopeBinder
from kubedispatch.resolve.target import TargetResolver
from kubedispatch.resolve.types import TypeResolver

logger = logging.getLogger("kubedispatch.engine")


class OperationEngine:
    """
    Principal orchestrator for schema-less cluster operations.

    Args:
        registry: discovery capability handed to the TypeResolver
            (DynamicClient.resources in production).
        type_resolver: an existing resolver to share its catalog across
            engines; built from `registry` when omitted.
    """

    def __init__(self, registry: Any = None, type_resolver: Optional[TypeResolver] = None):
        if type_resolver is None:
            if registry is None:
                raise ValueError("OperationEngine needs a registry or a type_resolver")
            type_resolver = TypeResolver(registry)

        self.types = type_resolver
        self.decoder = ManifestDecoder()
        self.binder = ScopeBinder()
        self.targets = TargetResolver()
        self.dispatcher = OperationDispatcher()

    def perform_operation(self, manifest: Union[str, bytes], verb: Union[Verb, str],
                          namespace: str, fmt: str = "json") -> OperationResult:
        """
        Applies `verb` to the resource described by `manifest`.

        Raises a KubeDispatchError subclass on failure; benign outcomes
        ("already exists", "not found") come back as a NOOP result.
        """
        # Reject unknown verbs before any cluster round-trip
        verb = Verb.parse(verb)

        obj = self.decoder.decode(manifest, fmt=fmt)
        resource_type = self.types.resolve(obj.api_version, obj.kind)
        handle = self.binder.bind(resource_type, namespace)
        self.targets.retarget(handle, obj)

        logger.debug("Dispatching %s %s '%s' to %r", verb.value, obj.kind, obj.name, handle)
        return self.dispatcher.dispatch(verb, obj, handle)
