"""
Shared fixtures: an in-memory stand-in for the cluster. FakeApi mimics the
kubernetes.dynamic Resource surface (create/get/replace/delete, list via
get without a name) and raises real ApiException instances.
"""

import copy
import json
import os
import sys

import pytest
from kubernetes.client.exceptions import ApiException
from kubernetes.dynamic.exceptions import ResourceNotFoundError
from urllib3.exceptions import MaxRetryError

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))


def api_error(status, reason, status_reason=None):
    exc = ApiException(status=status, reason=reason)
    if status_reason:
        exc.body = json.dumps({"kind": "Status", "reason": status_reason, "code": status})
    return exc


def transport_error(url="/api/v1"):
    """What the client raises when the API server cannot be reached."""
    return MaxRetryError(None, url, reason="Connection refused")


class FakeApi:
    def __init__(self, kind, plural, group_version, namespaced):
        self.kind = kind
        self.name = plural
        self.group_version = group_version
        self.namespaced = namespaced
        self.objects = {}
        self.calls = []
        self.version = 0
        self.fail_with = {}   # method name -> exception

    def _check(self, method):
        self.calls.append(method)
        if method in self.fail_with:
            raise self.fail_with[method]

    def create(self, body=None, namespace=None):
        self._check("create")
        name = body["metadata"]["name"]
        if (namespace, name) in self.objects:
            raise api_error(409, "Conflict", "AlreadyExists")
        self.version += 1
        stored = copy.deepcopy(body)
        stored["metadata"]["resourceVersion"] = str(self.version)
        if namespace:
            stored["metadata"]["namespace"] = namespace
        self.objects[(namespace, name)] = stored
        return copy.deepcopy(stored)

    def get(self, name=None, namespace=None, label_selector=None):
        # Like the dynamic client, an empty name means the collection
        if not name:
            self._check("list")
            items = [o for (ns, _), o in self.objects.items() if ns == namespace]
            if label_selector:
                key, _, value = label_selector.partition("=")
                items = [o for o in items if o["metadata"].get("labels", {}).get(key) == value]
            return {"items": copy.deepcopy(items)}

        self._check("get")
        if (namespace, name) not in self.objects:
            raise api_error(404, "Not Found", "NotFound")
        return copy.deepcopy(self.objects[(namespace, name)])

    def replace(self, body=None, name=None, namespace=None):
        self._check("replace")
        if not name:
            raise ValueError(f"name is required to replace {self.group_version}.{self.kind}")
        current = self.objects.get((namespace, name))
        if current is None:
            raise api_error(404, "Not Found", "NotFound")
        if body["metadata"].get("resourceVersion") != current["metadata"]["resourceVersion"]:
            raise api_error(409, "Conflict", "Conflict")
        self.version += 1
        stored = copy.deepcopy(body)
        stored["metadata"]["resourceVersion"] = str(self.version)
        self.objects[(namespace, name)] = stored
        return copy.deepcopy(stored)

    def delete(self, name=None, namespace=None):
        self._check("delete")
        if not name:
            raise ValueError("At least one of name|label_selector|field_selector is required")
        if (namespace, name) not in self.objects:
            raise api_error(404, "Not Found", "NotFound")
        del self.objects[(namespace, name)]
        return {"kind": "Status", "status": "Success"}

    def seed(self, namespace, body):
        self.version += 1
        stored = copy.deepcopy(body)
        stored.setdefault("metadata", {})["resourceVersion"] = str(self.version)
        self.objects[(namespace, stored["metadata"]["name"])] = stored


class FakeRegistry:
    """Stands in for DynamicClient.resources."""

    def __init__(self, *apis):
        self.apis = {(a.group_version, a.kind): a for a in apis}
        self.queries = 0

    def get(self, api_version=None, kind=None):
        self.queries += 1
        try:
            return self.apis[(api_version, kind)]
        except KeyError:
            raise ResourceNotFoundError(f"No matches found for {{'api_version': '{api_version}', 'kind': '{kind}'}}")


@pytest.fixture
def configmaps():
    return FakeApi("ConfigMap", "configmaps", "v1", namespaced=True)


@pytest.fixture
def namespaces():
    return FakeApi("Namespace", "namespaces", "v1", namespaced=False)


@pytest.fixture
def workflows():
    return FakeApi("Workflow", "workflows", "argoproj.io/v1alpha1", namespaced=True)


@pytest.fixture
def cron_workflows():
    return FakeApi("CronWorkflow", "cronworkflows", "argoproj.io/v1alpha1", namespaced=True)


@pytest.fixture
def registry(configmaps, namespaces, workflows, cron_workflows):
    return FakeRegistry(configmaps, namespaces, workflows, cron_workflows)


@pytest.fixture
def config_map_manifest():
    return json.dumps({
        "apiVersion": "v1",
        "kind": "ConfigMap",
        "metadata": {"name": "cfg1"},
        "data": {"mode": "chaos"},
    })
