import logging

import pytest

import shardbridge.cfg.settings as settings_module
from shardbridge.cfg import FilteredSettings, PropertiesSettings, SettingsView
from shardbridge.enum import (
    AuthenticationMethod,
    FieldPresenceValidation,
    HealthStatus,
    ShardPreference,
    WriteOperation,
)
from shardbridge.errors import ConfigurationError


def test_documented_defaults():
    settings = PropertiesSettings()

    assert settings.nodes == ["localhost"]
    assert settings.port == 9200
    assert settings.shard_preference == ShardPreference.Local
    assert settings.index_read_health_threshold == HealthStatus.Yellow
    assert settings.scroll_keepalive == 300.0
    assert settings.scroll_size == 1000
    assert settings.scroll_limit == -1
    assert settings.batch_size_bytes == 1024 * 1024
    assert settings.batch_size_entries == 1000
    assert settings.batch_write_retry_count == 3
    assert settings.batch_write_retry_limit == 50
    assert settings.batch_write_retry_wait == 10.0
    assert settings.write_operation == WriteOperation.Index
    assert settings.heartbeat_lead == 15.0
    assert settings.index_auto_create is True
    assert settings.read_field_empty_as_null is True
    assert settings.max_docs_per_partition is None


def test_blank_values_count_as_unset():
    settings = PropertiesSettings({"opensearch.port": "  ", "opensearch.resource": ""})
    assert settings.port == 9200
    assert settings.resource is None


def test_resource_read_and_write_fall_back_to_resource():
    settings = PropertiesSettings({"opensearch.resource": "logs"})
    assert settings.resource_read == "logs"
    assert settings.resource_write == "logs"

    settings.set_resource_write("archive")
    assert settings.resource_read == "logs"
    assert settings.resource_write == "archive"


def test_discovery_follows_wan_only_unless_set():
    settings = PropertiesSettings()
    assert settings.nodes_discovery is True
    assert settings.nodes_resolve_hostnames is True

    settings.set_property("opensearch.nodes.wan.only", "true")
    assert settings.nodes_discovery is False
    assert settings.nodes_resolve_hostnames is False

    # an explicit value always wins over the derived default
    settings.set_property("opensearch.nodes.discovery", "true")
    assert settings.nodes_discovery is True


def test_data_only_derived_from_node_roles():
    assert PropertiesSettings().nodes_data_only is True

    for key in (
        "opensearch.nodes.wan.only",
        "opensearch.nodes.client.only",
        "opensearch.nodes.ingest.only",
    ):
        assert PropertiesSettings({key: "true"}).nodes_data_only is False

    explicit = PropertiesSettings(
        {"opensearch.nodes.client.only": "true", "opensearch.nodes.data.only": "yes"}
    )
    assert explicit.nodes_data_only is True


def test_view_writes_are_visible_everywhere():
    base = PropertiesSettings({"opensearch.resource": "logs"})
    view = base.settings_view("opensearch")
    other = SettingsView(base, "opensearch.")

    view.set_property("scroll.size", "42")

    assert base.scroll_size == 42
    assert other.get_property("scroll.size") == "42"
    assert view.as_dict() == {"resource": "logs", "scroll.size": "42"}


def test_filtered_settings_hide_prefix_but_forward_writes():
    base = PropertiesSettings(
        {"opensearch.resource": "logs", "opensearch.internal.version": "2.11.0"}
    )
    filtered = FilteredSettings(base, "opensearch.internal.")

    assert filtered.internal_version is None
    assert filtered.resource == "logs"
    assert "opensearch.internal.version" not in filtered.as_dict()

    filtered.set_property("opensearch.internal.cluster.name", "c1")
    assert base.cluster_name == "c1"
    assert filtered.cluster_name is None


def test_copy_is_independent():
    base = PropertiesSettings({"opensearch.resource": "logs"})
    snapshot = base.copy()
    snapshot.set_resource_read("other")
    base.set_property("opensearch.scroll.size", "5")

    assert base.resource_read == "logs"
    assert snapshot.resource_read == "other"
    assert snapshot.scroll_size == 1000


def test_merge_is_right_biased():
    base = PropertiesSettings({"opensearch.nodes": "a", "opensearch.port": "9200"})
    base.merge({"opensearch.nodes": "b", "opensearch.port": None})

    assert base.nodes == ["b"]
    assert base.port == 9200


def test_save_load_restores_the_same_settings():
    original = PropertiesSettings(
        {"opensearch.resource": "logs", "opensearch.query": '{"match": {"a": "b,c"}}'}
    )
    restored = PropertiesSettings().load(original.save())
    assert restored.as_dict() == original.as_dict()


def test_load_rejects_malformed_blob():
    with pytest.raises(ConfigurationError, match="Malformed settings blob"):
        PropertiesSettings().load("{not json")
    with pytest.raises(ConfigurationError, match="must hold an object"):
        PropertiesSettings().load("[1, 2]")


def test_legacy_key_preferred_with_single_warning(caplog):
    settings_module._warned_legacy_keys.clear()
    settings = PropertiesSettings(
        {
            "opensearch.field.read.empty.as.null": "no",
            "opensearch.read.field.empty.as.null": "yes",
        }
    )

    with caplog.at_level(logging.WARNING, logger="shardbridge"):
        assert settings.read_field_empty_as_null is False
        assert settings.read_field_empty_as_null is False

    warnings = [r for r in caplog.records if "deprecated" in r.getMessage()]
    assert len(warnings) == 1
    assert "opensearch.field.read.empty.as.null" in warnings[0].getMessage()


def test_new_key_used_when_legacy_unset():
    settings = PropertiesSettings({"opensearch.read.field.validate.presence": "strict"})
    assert settings.read_field_presence_validation == FieldPresenceValidation.Strict


def test_invalid_values_raise_configuration_error():
    with pytest.raises(ConfigurationError, match="must be an integer"):
        _ = PropertiesSettings({"opensearch.port": "http"}).port
    with pytest.raises(ConfigurationError, match="Unknown shard preference"):
        _ = PropertiesSettings({"opensearch.read.shard.preference": "closest"}).shard_preference
    with pytest.raises(ConfigurationError, match="must be positive"):
        _ = PropertiesSettings(
            {"opensearch.input.max.docs.per.partition": "0"}
        ).max_docs_per_partition
    # configuration errors are also value errors
    with pytest.raises(ValueError):
        _ = PropertiesSettings({"opensearch.write.operation": "merge"}).write_operation


def test_authentication_method_resolution():
    assert PropertiesSettings().security_authentication_method is None
    assert (
        PropertiesSettings({"opensearch.net.http.auth.user": "alice"}).security_authentication_method
        == AuthenticationMethod.Basic
    )
    assert (
        PropertiesSettings({"opensearch.security.authentication": "NONE"}).security_authentication_method
        == AuthenticationMethod.Nothing
    )
    with pytest.raises(ConfigurationError, match="Could not determine auth mode"):
        _ = PropertiesSettings(
            {"opensearch.security.authentication": "kerberos"}
        ).security_authentication_method


def test_internal_version_marker():
    settings = PropertiesSettings()
    with pytest.raises(ConfigurationError, match="not present in configuration"):
        settings.internal_version_or_raise()

    settings.set_internal_cluster_info("c1", "2.11.0", "uuid-1")
    assert settings.internal_version_or_raise() == "2.11.0"
    assert settings.cluster_uuid == "uuid-1"


def test_opaque_id_is_cleaned():
    settings = PropertiesSettings().set_opaque_id("job\n42\t")
    assert settings.opaque_id == "job42"
