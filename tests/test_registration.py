import pytest

from conftest import api_error, transport_error
from kubedispatch.cluster.registration import RegistrationStore
from kubedispatch.core.errors import BackingStoreError, RegistrationExists
from kubedispatch.core.models import RegistrationRecord


class FakeCoreV1:
    """In-memory ConfigMaps keyed by (namespace, name)."""

    def __init__(self):
        self.config_maps = {}
        self.read_error = None
        self.create_error = None

    def read_namespaced_config_map(self, name, namespace):
        if self.read_error is not None:
            raise self.read_error
        if (namespace, name) not in self.config_maps:
            raise api_error(404, "Not Found")
        return self.config_maps[(namespace, name)]

    def create_namespaced_config_map(self, namespace, body):
        if self.create_error is not None:
            raise self.create_error
        key = (namespace, body.metadata.name)
        if key in self.config_maps:
            raise api_error(409, "Conflict", "AlreadyExists")
        self.config_maps[key] = body
        return body


@pytest.fixture
def core_v1():
    return FakeCoreV1()


@pytest.fixture
def store(core_v1):
    return RegistrationStore(core_v1, "litmus")


def test_confirmed_record(store):
    store.register("abc", "123")
    assert store.is_cluster_confirmed() == (True, "abc")
    assert store.read() == RegistrationRecord(True, "abc", "123")


def test_absent_record(store):
    assert store.is_cluster_confirmed() == (False, "")
    assert store.read() is None


def test_unconfirmed_record(store, core_v1):
    class Stored:
        data = {"is_cluster_confirmed": "false", "cluster_key": "abc"}

    core_v1.config_maps[("litmus", store.config_name)] = Stored()
    assert store.is_cluster_confirmed() == (False, "")


def test_read_errors_surface(store, core_v1):
    core_v1.read_error = api_error(403, "Forbidden")
    with pytest.raises(BackingStoreError) as info:
        store.is_cluster_confirmed()
    assert info.value.status == 403


def test_register_writes_expected_config_map(store, core_v1):
    record = store.register("key-1", "cid-1")

    body = core_v1.config_maps[("litmus", "litmus-portal-config")]
    assert record.confirmed
    assert body.kind == "ConfigMap"
    assert body.data == {"is_cluster_confirmed": "true", "cluster_key": "key-1", "cluster_id": "cid-1"}


def test_register_is_at_most_once(store):
    store.register("abc", "123")
    with pytest.raises(RegistrationExists):
        store.register("other", "456")
    assert store.is_cluster_confirmed() == (True, "abc")


def test_register_failure(store, core_v1):
    core_v1.create_error = api_error(500, "Internal Server Error")
    with pytest.raises(BackingStoreError) as info:
        store.register("abc", "123")
    assert not isinstance(info.value, RegistrationExists)


def test_custom_record_name(core_v1):
    store = RegistrationStore(core_v1, "agents", config_name="agent-registration")
    store.register("k", "c")
    assert ("agents", "agent-registration") in core_v1.config_maps


def test_unreachable_cluster_on_read_and_register(store, core_v1):
    core_v1.read_error = transport_error()
    core_v1.create_error = transport_error()

    with pytest.raises(BackingStoreError):
        store.is_cluster_confirmed()
    with pytest.raises(BackingStoreError) as info:
        store.register("abc", "123")
    assert not isinstance(info.value, RegistrationExists)
