"""
Settings Module.

This module defines the layered key/value configuration shared by every
component of the SDK.

A `Settings` object is passed **by reference** into each component
constructor. Three composition forms exist, all backed by the same mutable
store:

* [`PropertiesSettings`][shardbridge.cfg.PropertiesSettings]: the base mapping
  (host-level configuration).
* [`SettingsView`][shardbridge.cfg.SettingsView]: a scoped view, where every key
  is transparently qualified with a prefix.
* [`FilteredSettings`][shardbridge.cfg.FilteredSettings]: a view hiding every
  key that starts with a prefix.

Views are lightweight wrappers: a write through any of them is immediately
visible through the base and through every other view. Use `copy()` when an
independent snapshot is wanted (e.g. a reader applying a partition overlay).

Note: Thread Safety
    Settings are not synchronized. Mutating settings while a reader or writer
    built from them is streaming is undefined behavior.
"""

from abc import ABC, abstractmethod
import json
import threading
from typing import Dict, List, Mapping, Optional, Set

from . import options as opts
from .units import parse_bool, parse_byte_size, parse_time_value
from ..enum import (
    AuthenticationMethod,
    BulkRetryPolicy,
    FieldPresenceValidation,
    HealthStatus,
    ShardPreference,
    WriteOperation,
)
from ..errors import ConfigurationError
from ..logging_config import get_logger

# Set the hierarchical logger
logger = get_logger(__name__)

_warned_legacy_keys: Set[str] = set()
"""Legacy keys a deprecation warning was already emitted for (process wide)."""
_warned_legacy_lock = threading.Lock()


def _warn_legacy_once(legacy_key: str, new_key: str) -> None:
    with _warned_legacy_lock:
        if legacy_key in _warned_legacy_keys:
            return
        _warned_legacy_keys.add(legacy_key)
    logger.warning(f"[{legacy_key}] property has been deprecated - use [{new_key}] instead")


def _has_text(value: Optional[str]) -> bool:
    return value is not None and bool(value.strip())


def _clean_header_value(value: str) -> str:
    # headers only carry visible ascii
    return "".join(ch for ch in value if 31 < ord(ch) < 127)


class Settings(ABC):
    """
    Abstract layered configuration with typed accessors.

    Subclasses only implement raw access (`get_property`, `set_property`,
    `as_dict`); every typed accessor is defined here and therefore works the
    same way on the base mapping and on its views.

    Lookup order of every accessor: legacy key if one exists and is set (with a
    one-time deprecation warning per key), then the key itself, then the
    documented default. An empty or blank value counts as unset.
    """

    # --- Raw access ---
    @abstractmethod
    def get_property(self, name: str) -> Optional[str]:
        pass

    @abstractmethod
    def set_property(self, name: str, value: str) -> None:
        pass

    @abstractmethod
    def as_dict(self) -> Dict[str, str]:
        """Returns a detached `dict` holding every visible key."""
        pass

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Returns the value of `name`, or `default` when unset or blank."""
        value = self.get_property(name)
        if not _has_text(value):
            return default
        return value

    def _get_legacy(
        self, legacy_name: str, name: str, default: Optional[str]
    ) -> Optional[str]:
        # a set legacy key still wins over its replacement
        legacy = self.get_property(legacy_name)
        if _has_text(legacy):
            _warn_legacy_once(legacy_name, name)
            return legacy
        return self.get(name, default)

    def _get_str(self, name: str, default: str) -> str:
        value = self.get(name, default)
        return default if value is None else value

    def _get_int(self, name: str, default: str) -> int:
        value = self.get(name, default)
        try:
            return int(str(value).strip())
        except ValueError:
            raise ConfigurationError(f"Setting [{name}] must be an integer, got '{value}'")

    def _get_bool(self, name: str, default: str) -> bool:
        return parse_bool(self._get_str(name, default))

    def _get_list(self, name: str) -> List[str]:
        value = self.get(name, "")
        return [item.strip() for item in str(value).split(",") if item.strip()]

    # --- Composition ---
    def copy(self) -> "PropertiesSettings":
        """Returns an independent snapshot of every visible key."""
        return PropertiesSettings(self.as_dict())

    def merge(self, overlay: Optional[Mapping[str, object]]) -> "Settings":
        """
        Writes every key of `overlay` into these settings (right-biased).

        Returns:
            Settings: `self`, to allow chaining.
        """
        if not overlay:
            return self
        for key, value in overlay.items():
            if value is None:
                continue
            self.set_property(str(key), str(value))
        return self

    def load(self, blob: Optional[str]) -> "Settings":
        """Merges a blob produced by `save()` into these settings."""
        if not blob:
            return self
        try:
            data = json.loads(blob)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Malformed settings blob, err: '{e}'") from e
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Settings blob must hold an object, got {type(data).__name__}"
            )
        return self.merge(data)

    def save(self) -> str:
        """Serializes every visible key into a flat string blob."""
        return json.dumps(self.as_dict(), sort_keys=True, separators=(",", ":"))

    def settings_view(self, prefix: str) -> "SettingsView":
        return SettingsView(self, prefix)

    def exclude_filter(self, prefix: str) -> "FilteredSettings":
        return FilteredSettings(self, prefix)

    # --- Connection ---
    @property
    def nodes(self) -> List[str]:
        return [
            node.strip()
            for node in str(self.get(opts.OPENSEARCH_NODES, opts.OPENSEARCH_NODES_DEFAULT)).split(",")
            if node.strip()
        ]

    @property
    def port(self) -> int:
        return self._get_int(opts.OPENSEARCH_PORT, opts.OPENSEARCH_PORT_DEFAULT)

    @property
    def nodes_path_prefix(self) -> str:
        return str(
            self.get(opts.OPENSEARCH_NODES_PATH_PREFIX, opts.OPENSEARCH_NODES_PATH_PREFIX_DEFAULT)
        )

    @property
    def nodes_wan_only(self) -> bool:
        return self._get_bool(opts.OPENSEARCH_NODES_WAN_ONLY, opts.OPENSEARCH_NODES_WAN_ONLY_DEFAULT)

    @property
    def nodes_client_only(self) -> bool:
        return self._get_bool(
            opts.OPENSEARCH_NODES_CLIENT_ONLY, opts.OPENSEARCH_NODES_CLIENT_ONLY_DEFAULT
        )

    @property
    def nodes_ingest_only(self) -> bool:
        return self._get_bool(
            opts.OPENSEARCH_NODES_INGEST_ONLY, opts.OPENSEARCH_NODES_INGEST_ONLY_DEFAULT
        )

    @property
    def nodes_discovery(self) -> bool:
        # unless set, follow the WAN setting: discovery makes no sense over WAN
        value = self.get(opts.OPENSEARCH_NODES_DISCOVERY)
        if value is None:
            return not self.nodes_wan_only
        return parse_bool(value)

    @property
    def nodes_resolve_hostnames(self) -> bool:
        value = self.get(opts.OPENSEARCH_NODES_RESOLVE_HOST_NAME)
        if value is None:
            return not self.nodes_wan_only
        return parse_bool(value)

    @property
    def nodes_data_only(self) -> bool:
        value = self.get(opts.OPENSEARCH_NODES_DATA_ONLY)
        if value is None:
            return not (self.nodes_wan_only or self.nodes_client_only or self.nodes_ingest_only)
        return parse_bool(value)

    @property
    def http_timeout(self) -> float:
        """Request timeout, in seconds."""
        return parse_time_value(
            self._get_str(opts.OPENSEARCH_HTTP_TIMEOUT, opts.OPENSEARCH_HTTP_TIMEOUT_DEFAULT)
        )

    @property
    def http_retries(self) -> int:
        return self._get_int(opts.OPENSEARCH_HTTP_RETRIES, opts.OPENSEARCH_HTTP_RETRIES_DEFAULT)

    @property
    def network_ssl_enabled(self) -> bool:
        return self._get_bool(opts.OPENSEARCH_NET_USE_SSL, opts.OPENSEARCH_NET_USE_SSL_DEFAULT)

    @property
    def network_ssl_accept_self_signed(self) -> bool:
        return self._get_bool(
            opts.OPENSEARCH_NET_SSL_CERT_ALLOW_SELF_SIGNED,
            opts.OPENSEARCH_NET_SSL_CERT_ALLOW_SELF_SIGNED_DEFAULT,
        )

    @property
    def opaque_id(self) -> Optional[str]:
        return self.get(opts.OPENSEARCH_NET_HTTP_HEADER_OPAQUE_ID)

    def set_opaque_id(self, opaque_id: str) -> "Settings":
        self.set_property(opts.OPENSEARCH_NET_HTTP_HEADER_OPAQUE_ID, _clean_header_value(opaque_id))
        return self

    def set_nodes(self, nodes: str) -> "Settings":
        self.set_property(opts.OPENSEARCH_NODES, nodes)
        return self

    def set_port(self, port: int) -> "Settings":
        self.set_property(opts.OPENSEARCH_PORT, str(port))
        return self

    # --- Security ---
    @property
    def http_auth_user(self) -> Optional[str]:
        return self.get(opts.OPENSEARCH_NET_HTTP_AUTH_USER)

    @property
    def http_auth_pass(self) -> Optional[str]:
        return self.get(opts.OPENSEARCH_NET_HTTP_AUTH_PASS)

    @property
    def security_user_provider_class(self) -> Optional[str]:
        return self.get(opts.OPENSEARCH_SECURITY_USER_PROVIDER_CLASS)

    @property
    def security_authentication_method(self) -> Optional[AuthenticationMethod]:
        """
        The explicitly configured authentication method.

        Falls back to `Basic` when only a user name is configured, and returns
        `None` when nothing is configured (the credential resolver then decides
        from the ambient identity).

        Raises:
            ConfigurationError: If the configured method is unknown.
        """
        value = self.get(opts.OPENSEARCH_SECURITY_AUTHENTICATION)
        if value is not None:
            try:
                return AuthenticationMethod(value.strip().lower())
            except ValueError:
                available = [m.value for m in AuthenticationMethod]
                raise ConfigurationError(
                    f"Could not determine auth mode. Property [{opts.OPENSEARCH_SECURITY_AUTHENTICATION}] "
                    f"was set to unknown mode [{value}]. Use a valid auth mode from the following: {available}"
                )
        if self.http_auth_user is not None:
            return AuthenticationMethod.Basic
        return None

    # --- Resources ---
    @property
    def resource(self) -> Optional[str]:
        return self.get(opts.OPENSEARCH_RESOURCE)

    @property
    def resource_read(self) -> Optional[str]:
        return self.get(opts.OPENSEARCH_RESOURCE_READ, self.resource)

    @property
    def resource_write(self) -> Optional[str]:
        return self.get(opts.OPENSEARCH_RESOURCE_WRITE, self.resource)

    @property
    def query(self) -> Optional[str]:
        return self.get(opts.OPENSEARCH_QUERY)

    @property
    def max_docs_per_partition(self) -> Optional[int]:
        if self.get(opts.OPENSEARCH_MAX_DOCS_PER_PARTITION) is None:
            return None
        value = self._get_int(opts.OPENSEARCH_MAX_DOCS_PER_PARTITION, "0")
        if value <= 0:
            raise ConfigurationError(
                f"Setting [{opts.OPENSEARCH_MAX_DOCS_PER_PARTITION}] must be positive, got {value}"
            )
        return value

    def set_resource_read(self, resource: str) -> "Settings":
        self.set_property(opts.OPENSEARCH_RESOURCE_READ, resource)
        return self

    def set_resource_write(self, resource: str) -> "Settings":
        self.set_property(opts.OPENSEARCH_RESOURCE_WRITE, resource)
        return self

    def set_query(self, query: Optional[str]) -> "Settings":
        self.set_property(opts.OPENSEARCH_QUERY, query or "")
        return self

    def set_max_docs_per_partition(self, size: int) -> "Settings":
        self.set_property(opts.OPENSEARCH_MAX_DOCS_PER_PARTITION, str(size))
        return self

    # --- Index ---
    @property
    def index_auto_create(self) -> bool:
        return self._get_bool(
            opts.OPENSEARCH_INDEX_AUTO_CREATE, opts.OPENSEARCH_INDEX_AUTO_CREATE_DEFAULT
        )

    @property
    def index_read_missing_as_empty(self) -> bool:
        return self._get_bool(
            opts.OPENSEARCH_INDEX_READ_MISSING_AS_EMPTY,
            opts.OPENSEARCH_INDEX_READ_MISSING_AS_EMPTY_DEFAULT,
        )

    @property
    def index_read_allow_red_status(self) -> bool:
        return self._get_bool(
            opts.OPENSEARCH_INDEX_READ_ALLOW_RED_STATUS,
            opts.OPENSEARCH_INDEX_READ_ALLOW_RED_STATUS_DEFAULT,
        )

    @property
    def index_read_health_threshold(self) -> HealthStatus:
        value = self.get(
            opts.OPENSEARCH_INDEX_READ_HEALTH_THRESHOLD,
            opts.OPENSEARCH_INDEX_READ_HEALTH_THRESHOLD_DEFAULT,
        )
        try:
            return HealthStatus(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError(
                f"Invalid health threshold [{value}] for [{opts.OPENSEARCH_INDEX_READ_HEALTH_THRESHOLD}]"
            )

    # --- Read ---
    @property
    def shard_preference(self) -> ShardPreference:
        value = self.get(
            opts.OPENSEARCH_READ_SHARD_PREFERENCE, opts.OPENSEARCH_READ_SHARD_PREFERENCE_DEFAULT
        )
        try:
            return ShardPreference(str(value).strip().lower())
        except ValueError:
            available = [p.value for p in ShardPreference]
            raise ConfigurationError(
                f"Unknown shard preference [{value}]; use one of {available}"
            )

    @property
    def scroll_keepalive(self) -> float:
        """Scroll context keep-alive, in seconds."""
        return parse_time_value(
            self._get_str(opts.OPENSEARCH_SCROLL_KEEPALIVE, opts.OPENSEARCH_SCROLL_KEEPALIVE_DEFAULT)
        )

    @property
    def scroll_size(self) -> int:
        return self._get_int(opts.OPENSEARCH_SCROLL_SIZE, opts.OPENSEARCH_SCROLL_SIZE_DEFAULT)

    @property
    def scroll_limit(self) -> int:
        """Maximum number of records read per partition; negative means unbounded."""
        return self._get_int(opts.OPENSEARCH_SCROLL_LIMIT, opts.OPENSEARCH_SCROLL_LIMIT_DEFAULT)

    @property
    def output_as_json(self) -> bool:
        return self._get_bool(opts.OPENSEARCH_OUTPUT_JSON, opts.OPENSEARCH_OUTPUT_JSON_DEFAULT)

    @property
    def read_metadata(self) -> bool:
        return self._get_bool(opts.OPENSEARCH_READ_METADATA, opts.OPENSEARCH_READ_METADATA_DEFAULT)

    @property
    def read_metadata_field(self) -> str:
        return str(
            self.get(opts.OPENSEARCH_READ_METADATA_FIELD, opts.OPENSEARCH_READ_METADATA_FIELD_DEFAULT)
        )

    @property
    def read_metadata_version(self) -> bool:
        return self._get_bool(
            opts.OPENSEARCH_READ_METADATA_VERSION, opts.OPENSEARCH_READ_METADATA_VERSION_DEFAULT
        )

    @property
    def read_field_include(self) -> List[str]:
        return self._get_list(opts.OPENSEARCH_READ_FIELD_INCLUDE)

    @property
    def read_field_exclude(self) -> List[str]:
        return self._get_list(opts.OPENSEARCH_READ_FIELD_EXCLUDE)

    @property
    def read_field_empty_as_null(self) -> bool:
        return parse_bool(
            self._get_legacy(
                opts.OPENSEARCH_READ_FIELD_EMPTY_AS_NULL_LEGACY,
                opts.OPENSEARCH_READ_FIELD_EMPTY_AS_NULL,
                opts.OPENSEARCH_READ_FIELD_EMPTY_AS_NULL_DEFAULT,
            )
        )

    @property
    def read_field_presence_validation(self) -> FieldPresenceValidation:
        value = self._get_legacy(
            opts.OPENSEARCH_READ_FIELD_VALIDATE_PRESENCE_LEGACY,
            opts.OPENSEARCH_READ_FIELD_VALIDATE_PRESENCE,
            opts.OPENSEARCH_READ_FIELD_VALIDATE_PRESENCE_DEFAULT,
        )
        try:
            return FieldPresenceValidation(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError(f"Unknown field presence validation [{value}]")

    @property
    def serializer_value_reader_class(self) -> Optional[str]:
        return self.get(opts.OPENSEARCH_SERIALIZATION_READER_VALUE_CLASS)

    @property
    def heartbeat_lead(self) -> float:
        """Safety margin before the host's stall timeout, in seconds."""
        return parse_time_value(
            self._get_str(opts.OPENSEARCH_HEART_BEAT_LEAD, opts.OPENSEARCH_HEART_BEAT_LEAD_DEFAULT)
        )

    # --- Write ---
    @property
    def batch_size_bytes(self) -> int:
        return parse_byte_size(
            self._get_str(opts.OPENSEARCH_BATCH_SIZE_BYTES, opts.OPENSEARCH_BATCH_SIZE_BYTES_DEFAULT)
        )

    @property
    def batch_size_entries(self) -> int:
        return self._get_int(
            opts.OPENSEARCH_BATCH_SIZE_ENTRIES, opts.OPENSEARCH_BATCH_SIZE_ENTRIES_DEFAULT
        )

    @property
    def batch_refresh_after_write(self) -> bool:
        return self._get_bool(
            opts.OPENSEARCH_BATCH_WRITE_REFRESH, opts.OPENSEARCH_BATCH_WRITE_REFRESH_DEFAULT
        )

    @property
    def batch_flush_manual(self) -> bool:
        return self._get_bool(
            opts.OPENSEARCH_BATCH_FLUSH_MANUAL, opts.OPENSEARCH_BATCH_FLUSH_MANUAL_DEFAULT
        )

    @property
    def batch_write_retry_count(self) -> int:
        return self._get_int(
            opts.OPENSEARCH_BATCH_WRITE_RETRY_COUNT, opts.OPENSEARCH_BATCH_WRITE_RETRY_COUNT_DEFAULT
        )

    @property
    def batch_write_retry_limit(self) -> int:
        return self._get_int(
            opts.OPENSEARCH_BATCH_WRITE_RETRY_LIMIT, opts.OPENSEARCH_BATCH_WRITE_RETRY_LIMIT_DEFAULT
        )

    @property
    def batch_write_retry_wait(self) -> float:
        """Pause between bulk retry rounds, in seconds."""
        return parse_time_value(
            self._get_str(
                opts.OPENSEARCH_BATCH_WRITE_RETRY_WAIT, opts.OPENSEARCH_BATCH_WRITE_RETRY_WAIT_DEFAULT
            )
        )

    @property
    def batch_write_retry_policy(self) -> BulkRetryPolicy:
        value = self.get(
            opts.OPENSEARCH_BATCH_WRITE_RETRY_POLICY, opts.OPENSEARCH_BATCH_WRITE_RETRY_POLICY_DEFAULT
        )
        try:
            return BulkRetryPolicy(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError(f"Unknown bulk retry policy [{value}]")

    @property
    def write_operation(self) -> WriteOperation:
        value = self.get(opts.OPENSEARCH_WRITE_OPERATION, opts.OPENSEARCH_WRITE_OPERATION_DEFAULT)
        try:
            return WriteOperation(str(value).strip().lower())
        except ValueError:
            available = [op.value for op in WriteOperation]
            raise ConfigurationError(f"Unknown write operation [{value}]; use one of {available}")

    @property
    def input_as_json(self) -> bool:
        return self._get_bool(opts.OPENSEARCH_INPUT_JSON, opts.OPENSEARCH_INPUT_JSON_DEFAULT)

    @property
    def mapping_id(self) -> Optional[str]:
        return self.get(opts.OPENSEARCH_MAPPING_ID)

    @property
    def mapping_routing(self) -> Optional[str]:
        return self.get(opts.OPENSEARCH_MAPPING_ROUTING)

    @property
    def ingest_pipeline(self) -> Optional[str]:
        return self.get(opts.OPENSEARCH_INGEST_PIPELINE)

    @property
    def update_retry_on_conflict(self) -> int:
        return self._get_int(
            opts.OPENSEARCH_UPDATE_RETRY_ON_CONFLICT, opts.OPENSEARCH_UPDATE_RETRY_ON_CONFLICT_DEFAULT
        )

    # --- Internal ---
    @property
    def cluster_name(self) -> Optional[str]:
        return self.get(opts.INTERNAL_OPENSEARCH_CLUSTER_NAME)

    @property
    def cluster_uuid(self) -> Optional[str]:
        return self.get(opts.INTERNAL_OPENSEARCH_CLUSTER_UUID)

    @property
    def internal_version(self) -> Optional[str]:
        return self.get(opts.INTERNAL_OPENSEARCH_VERSION)

    def internal_version_or_raise(self) -> str:
        """
        Returns the store version discovered at planning time.

        Raises:
            ConfigurationError: If the version marker is absent.
        """
        version = self.internal_version
        if version is None:
            raise ConfigurationError(
                f"OpenSearch version:[{opts.INTERNAL_OPENSEARCH_VERSION}] not present in configuration"
            )
        return version

    def set_internal_cluster_info(
        self, name: str, version: str, uuid: Optional[str] = None
    ) -> "Settings":
        self.set_property(opts.INTERNAL_OPENSEARCH_CLUSTER_NAME, name)
        if uuid is not None:
            self.set_property(opts.INTERNAL_OPENSEARCH_CLUSTER_UUID, uuid)
        self.set_property(opts.INTERNAL_OPENSEARCH_VERSION, version)
        return self

    @property
    def internal_shard_preference(self) -> Optional[str]:
        return self.get(opts.INTERNAL_OPENSEARCH_SHARD_PREFERENCE)

    def set_internal_shard_preference(self, preference: str) -> "Settings":
        self.set_property(opts.INTERNAL_OPENSEARCH_SHARD_PREFERENCE, preference)
        return self

    @property
    def internal_slice(self) -> Optional[Dict[str, int]]:
        """The `{"id", "max"}` scroll slice assigned by the planner, if any."""
        slice_id = self.get(opts.INTERNAL_OPENSEARCH_SLICE_ID)
        slice_max = self.get(opts.INTERNAL_OPENSEARCH_SLICE_MAX)
        if slice_id is None or slice_max is None:
            return None
        return {"id": int(slice_id), "max": int(slice_max)}

    def set_internal_slice(self, slice_id: int, slice_max: int) -> "Settings":
        self.set_property(opts.INTERNAL_OPENSEARCH_SLICE_ID, str(slice_id))
        self.set_property(opts.INTERNAL_OPENSEARCH_SLICE_MAX, str(slice_max))
        return self

    @property
    def table_location(self) -> Optional[str]:
        return self.get(opts.INTERNAL_OPENSEARCH_TABLE_LOCATION)

    def set_table_location(self, location: str) -> "Settings":
        self.set_property(opts.INTERNAL_OPENSEARCH_TABLE_LOCATION, location)
        return self

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.as_dict()})"


class PropertiesSettings(Settings):
    """
    Base settings backed by a plain dictionary.

    The dictionary passed at construction is copied once; from then on this
    object owns its store and every view created from it shares that store.
    """

    def __init__(self, properties: Optional[Mapping[str, object]] = None):
        self._props: Dict[str, str] = {}
        """The underlying mutable store"""
        self.merge(properties)

    def get_property(self, name: str) -> Optional[str]:
        return self._props.get(name)

    def set_property(self, name: str, value: str) -> None:
        self._props[name] = str(value)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._props)


class SettingsView(Settings):
    """
    Scoped view: key `k` is read from and written to `<prefix>.k` of the parent.
    """

    def __init__(self, parent: Settings, prefix: str):
        self._parent: Settings = parent
        """The settings this view reads through"""
        self._prefix: str = prefix.rstrip(".") + "."
        """The key qualifier, always dot-terminated"""

    def get_property(self, name: str) -> Optional[str]:
        return self._parent.get_property(self._prefix + name)

    def set_property(self, name: str, value: str) -> None:
        self._parent.set_property(self._prefix + name, value)

    def as_dict(self) -> Dict[str, str]:
        return {
            key[len(self._prefix):]: value
            for key, value in self._parent.as_dict().items()
            if key.startswith(self._prefix)
        }


class FilteredSettings(Settings):
    """
    View hiding every key starting with `prefix`.

    Writes are always forwarded to the parent, so a key written through this
    view under the excluded prefix lands in the base but stays hidden here.
    """

    def __init__(self, parent: Settings, prefix: str):
        self._parent: Settings = parent
        """The settings this view reads through"""
        self._prefix: str = prefix
        """The excluded key prefix"""

    def get_property(self, name: str) -> Optional[str]:
        if name.startswith(self._prefix):
            return None
        return self._parent.get_property(name)

    def set_property(self, name: str, value: str) -> None:
        self._parent.set_property(name, value)

    def as_dict(self) -> Dict[str, str]:
        return {
            key: value
            for key, value in self._parent.as_dict().items()
            if not key.startswith(self._prefix)
        }
