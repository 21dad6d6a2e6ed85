import pytest

from shardbridge.cfg import PropertiesSettings
from shardbridge.enum import HealthStatus
from shardbridge.errors import (
    ClusterHealthError,
    ConfigurationError,
    NotFoundError,
    StoreTransportError,
)
from shardbridge.planning import PartitionPlanner
from testing.unit.fakes import FakeStore


def _docs(count):
    return [{"n": i} for i in range(count)]


def test_local_policy_pins_first_started_copy(store, settings):
    descriptors = PartitionPlanner(settings, client=store).plan()

    # ordered by shard, whatever order the store reports
    assert [(d.index, d.shard_id) for d in descriptors] == [("logs", 0), ("logs", 1)]

    first = descriptors[0]
    assert first.resource == "logs"
    assert first.hosts == ("10.0.0.1", "10.0.0.2")
    assert not first.is_sliced

    overlay = first.overlay()
    assert overlay.nodes == ["10.0.0.1"]
    assert overlay.port == 9200
    assert overlay.nodes_wan_only is False
    assert overlay.nodes_discovery is False
    assert overlay.internal_shard_preference == "_shards:0|_local"
    assert overlay.internal_version == "2.11.0"


def test_cluster_info_recorded_in_settings(store, settings):
    PartitionPlanner(settings, client=store).plan()

    assert settings.internal_version == "2.11.0"
    assert settings.cluster_name == "test-cluster"
    assert settings.cluster_uuid == "uuid-1"


def test_primary_policy_reads_primary_only(store, settings):
    settings.set_property("opensearch.read.shard.preference", "primary")
    descriptors = PartitionPlanner(settings, client=store).plan()

    assert [d.hosts for d in descriptors] == [("10.0.0.1",), ("10.0.0.2",)]
    assert descriptors[1].overlay().internal_shard_preference == "_shards:1|_only_nodes:node-1"


def test_any_policy_does_not_pin(store, settings):
    settings.set_property("opensearch.read.shard.preference", "any")
    descriptors = PartitionPlanner(settings, client=store).plan()

    overlay = descriptors[1].overlay()
    assert descriptors[1].hosts == ("10.0.0.2", "10.0.0.3")
    assert overlay.get_property("opensearch.nodes") is None
    assert overlay.internal_shard_preference == "_shards:1"


def test_shard_ids_cover_the_layout_exactly_once():
    store = FakeStore().add_index("events", _docs(20), shards=5, replicas=2)
    settings = PropertiesSettings({"opensearch.resource.read": "events"})

    shard_ids = [d.shard_id for d in PartitionPlanner(settings, client=store).plan()]

    assert shard_ids == [0, 1, 2, 3, 4]


def test_large_shards_are_sliced(store, settings):
    # each shard holds 5 documents
    settings.set_max_docs_per_partition(2)
    descriptors = PartitionPlanner(settings, client=store).plan()

    assert len(descriptors) == 6
    assert [(d.shard_id, d.slice_id, d.slice_max) for d in descriptors[:3]] == [
        (0, 0, 3),
        (0, 1, 3),
        (0, 2, 3),
    ]
    assert descriptors[2].overlay().internal_slice == {"id": 2, "max": 3}


def test_small_shards_are_not_sliced(store, settings):
    settings.set_max_docs_per_partition(5)
    descriptors = PartitionPlanner(settings, client=store).plan()

    assert len(descriptors) == 2
    assert all(not d.is_sliced for d in descriptors)
    assert descriptors[0].overlay().internal_slice is None


def test_missing_resource(store):
    settings = PropertiesSettings({"opensearch.resource": "missing"})
    with pytest.raises(NotFoundError, match="Resource 'missing' not found"):
        PartitionPlanner(settings, client=store).plan()

    settings.set_property("opensearch.index.read.missing.as.empty", "true")
    assert PartitionPlanner(settings, client=store).plan() == []


def test_missing_read_resource_is_a_configuration_error(store):
    with pytest.raises(ConfigurationError, match="No read resource configured"):
        PartitionPlanner(PropertiesSettings(), client=store).plan()


def test_red_resource_rejected_by_default():
    store = FakeStore(health=HealthStatus.Red).add_index("logs", _docs(4), unassigned=(1,))
    settings = PropertiesSettings({"opensearch.resource": "logs"})

    with pytest.raises(ClusterHealthError, match="health is 'red'"):
        PartitionPlanner(settings, client=store).plan()


def test_red_resource_allowed_skips_unassigned_shards(caplog):
    store = FakeStore(health=HealthStatus.Red).add_index("logs", _docs(4), unassigned=(1,))
    settings = PropertiesSettings(
        {"opensearch.resource": "logs", "opensearch.index.read.allow.red.status": "true"}
    )

    descriptors = PartitionPlanner(settings, client=store).plan()

    assert [d.shard_id for d in descriptors] == [0]
    assert "Skipping shard 'logs[1]'" in caplog.text


def test_health_threshold_is_configurable(store, settings):
    store.health_status = HealthStatus.Yellow
    assert len(PartitionPlanner(settings, client=store).plan()) == 2

    settings.set_property("opensearch.index.read.health.threshold", "green")
    with pytest.raises(ClusterHealthError, match="below the required 'green'"):
        PartitionPlanner(settings, client=store).plan()


def test_wan_only_does_not_pin_nodes(store, settings):
    settings.set_property("opensearch.nodes.wan.only", "true")
    descriptors = PartitionPlanner(settings, client=store).plan()

    assert descriptors[0].hosts == ()
    assert descriptors[0].overlay().get_property("opensearch.nodes") is None
    assert descriptors[0].overlay().internal_shard_preference == "_shards:0|_local"


def test_unreachable_store_raises_transport_error(settings):
    settings.set_nodes("127.0.0.1:1")

    with pytest.raises(StoreTransportError, match="'connect' failed"):
        PartitionPlanner(settings).plan()
