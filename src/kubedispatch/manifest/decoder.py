#!/usr/bin/env python3
"""
KUBEDISPATCH DECODER - The Intake Desk
--------------------------------------
Turns a raw manifest document into a ResourceObject. JSON is the wire
format the agent receives; YAML is accepted for manifests read from disk.

Author: KubeDispatch Team
Date: 2026-10-18
"""

import json
import logging
from typing import Any

from ruamel.yaml import YAML, YAMLError

from kubedispatch.core.errors import DecodeError
from kubedispatch.core.models import ResourceObject

logger = logging.getLogger("kubedispatch.decoder")

SUPPORTED_FORMATS = ("json", "yaml")


class ManifestDecoder:
    """
    Stateless: a single instance can be shared by concurrent callers,
    every call returns a fresh object.
    """

    def __init__(self):
        self.yaml = YAML(typ='safe')

    def decode(self, text: Any, fmt: str = "json") -> ResourceObject:
        fmt = (fmt or "json").lower()
        if fmt not in SUPPORTED_FORMATS:
            raise DecodeError(f"Unsupported manifest format '{fmt}'")

        if isinstance(text, bytes):
            try:
                text = text.decode('utf-8-sig')
            except UnicodeDecodeError as e:
                raise DecodeError(f"Manifest is not valid UTF-8: {e}") from e

        if not isinstance(text, str) or not text.strip():
            raise DecodeError("Manifest is empty")

        document = self._load_json(text) if fmt == "json" else self._load_yaml(text)
        return self._to_object(document)

    def _load_json(self, text: str) -> Any:
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise DecodeError(f"Invalid JSON manifest (line {e.lineno}, column {e.colno}): {e.msg}") from e

    def _load_yaml(self, text: str) -> Any:
        try:
            docs = [d for d in self.yaml.load_all(text) if d is not None]
        except YAMLError as e:
            raise DecodeError(f"Invalid YAML manifest: {e}") from e
        if len(docs) != 1:
            raise DecodeError(f"Expected exactly one document, found {len(docs)}")
        return docs[0]

    def _to_object(self, document: Any) -> ResourceObject:
        if not isinstance(document, dict):
            raise DecodeError(
                f"Manifest must be an object at the top level, got {type(document).__name__}"
            )

        # Identity is mandatory: without it the type catalog cannot be consulted
        for field in ("apiVersion", "kind"):
            value = document.get(field)
            if not isinstance(value, str) or not value.strip():
                raise DecodeError(f"Object '{field}' is missing in manifest")

        obj = ResourceObject(document)
        logger.debug("Decoded %s/%s %r", obj.api_version, obj.kind, obj.name)
        return obj
