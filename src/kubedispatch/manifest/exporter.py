#!/usr/bin/env python3
"""
KUBEDISPATCH EXPORTER - Canonical Rendering
-------------------------------------------
Renders objects returned by the cluster as YAML or JSON, with the
conventional Kubernetes key order at the top level.

Author: KubeDispatch Team
Date: 2026-10-18
"""

import io
import json
from typing import Any, Dict, Optional

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from kubedispatch.core.models import ResourceObject


class ManifestExporter:

    def __init__(self):
        self.yaml = YAML(typ='rt')
        # Standard K8s: 2 spaces, sequences indented 4 (offset 2)
        self.yaml.indent(mapping=2, sequence=4, offset=2)
        self.yaml.width = 4096
        self.preferred_order = ["apiVersion", "kind", "metadata", "spec", "data", "status"]

    def _get_sorted_map(self, data: Any) -> Any:
        """
        Recursively orders keys; known top-level keys first, the rest keep
        their original relative position.
        """
        if isinstance(data, list):
            return [self._get_sorted_map(item) for item in data]
        if not isinstance(data, dict):
            return data

        keys = list(data.keys())

        def sort_logic(key):
            if key in self.preferred_order:
                return self.preferred_order.index(key)
            return len(self.preferred_order) + keys.index(key)

        sorted_map = CommentedMap()
        for key in sorted(keys, key=sort_logic):
            sorted_map[key] = self._get_sorted_map(data[key])
        return sorted_map

    def export(self, obj: Optional[ResourceObject], fmt: str = "yaml") -> str:
        content: Dict[str, Any] = obj.to_dict() if obj is not None else {}
        if fmt == "json":
            return json.dumps(content, indent=2) + "\n"

        if not content:
            return ""
        stream = io.StringIO()
        self.yaml.dump(self._get_sorted_map(content), stream)
        return stream.getvalue()
