import logging

import pytest

from conftest import api_error, transport_error
from kubedispatch.core.errors import BackingStoreError, TargetNotFound
from kubedispatch.core.models import ResourceObject, ResourceType, Scope
from kubedispatch.resolve.scope import BoundResource
from kubedispatch.resolve.target import TargetResolver


def _handle(api, namespace="litmus"):
    resource_type = ResourceType(api.kind, api.name, api.group_version, Scope.NAMESPACED, api=api)
    return BoundResource(resource_type, namespace)


def _workflow(kind="Workflow", labels=None, name="placeholder"):
    return ResourceObject({
        "apiVersion": "argoproj.io/v1alpha1",
        "kind": kind,
        "metadata": {"name": name, "labels": labels if labels is not None else {"workflow_id": "wf-42"}},
    })


def _live(name, workflow_id):
    return {"apiVersion": "argoproj.io/v1alpha1", "kind": "Workflow",
            "metadata": {"name": name, "labels": {"workflow_id": workflow_id}}}


def test_rewrites_name_from_label_match(workflows):
    workflows.seed("litmus", _live("wf-42-x7k2p", "wf-42"))
    workflows.seed("litmus", _live("wf-99-abcde", "wf-99"))

    obj = TargetResolver().retarget(_handle(workflows), _workflow())

    assert obj.name == "wf-42-x7k2p"


def test_cron_workflows_are_label_addressed(cron_workflows):
    cron_workflows.seed("litmus", _live("nightly-1", "cron-1"))
    obj = TargetResolver().retarget(_handle(cron_workflows), _workflow("CronWorkflow", {"workflow_id": "cron-1"}))
    assert obj.name == "nightly-1"


def test_other_kinds_are_untouched(configmaps):
    obj = ResourceObject({"apiVersion": "v1", "kind": "ConfigMap", "metadata": {"name": "cfg"}})
    TargetResolver().retarget(_handle(configmaps), obj)

    assert obj.name == "cfg"
    assert configmaps.calls == []


def test_empty_match_raises_target_not_found(workflows):
    workflows.seed("litmus", _live("other", "wf-1"))
    with pytest.raises(TargetNotFound):
        TargetResolver().retarget(_handle(workflows), _workflow())


def test_matches_are_scoped_to_the_handle_namespace(workflows):
    workflows.seed("elsewhere", _live("wf-42-x7k2p", "wf-42"))
    with pytest.raises(TargetNotFound):
        TargetResolver().retarget(_handle(workflows, "litmus"), _workflow())


def test_missing_workflow_id_label(workflows):
    with pytest.raises(TargetNotFound):
        TargetResolver().retarget(_handle(workflows), _workflow(labels={}))
    assert workflows.calls == []


def test_list_failure_is_not_an_empty_match(workflows):
    workflows.fail_with["list"] = api_error(403, "Forbidden")

    with pytest.raises(BackingStoreError) as info:
        TargetResolver().retarget(_handle(workflows), _workflow())

    assert not isinstance(info.value, TargetNotFound)
    assert info.value.status == 403


def test_multiple_matches_take_first_and_warn(workflows, caplog):
    workflows.seed("litmus", _live("wf-42-first", "wf-42"))
    workflows.seed("litmus", _live("wf-42-second", "wf-42"))

    with caplog.at_level(logging.WARNING, logger="kubedispatch.target"):
        obj = TargetResolver().retarget(_handle(workflows), _workflow())

    assert obj.name == "wf-42-first"
    assert "2 Workflow instances match" in caplog.text


def test_unreachable_cluster_during_list(workflows):
    workflows.fail_with["list"] = transport_error()

    with pytest.raises(BackingStoreError) as info:
        TargetResolver().retarget(_handle(workflows), _workflow())

    assert not isinstance(info.value, TargetNotFound)
    assert info.value.status is None
