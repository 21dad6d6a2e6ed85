"""
ShardBridge SDK - parallel data movement between compute hosts and a sharded document store.

This module provides the main entry points:

- **ShardBridgeClient**: The primary client for planning reads and writing data.
- **Planning**: The partition planner mapping shards onto parallel work units.
- **Handlers**: Per-partition scroll readers, bulk writers and their helpers.
- **Settings**: The layered configuration store.

Example:
    >>> from shardbridge import ShardBridgeClient
    >>> with ShardBridgeClient.connect({"opensearch.resource": "logs"}) as client:
    ...     splits = client.splits()
"""

# --- Client ---
from .comm import (
    ShardBridgeClient as ShardBridgeClient,
    StoreClient as StoreClient,
    CredentialProvider as CredentialProvider,
    NoCredentials as NoCredentials,
    BasicCredentials as BasicCredentials,
)

# --- Settings ---
from .cfg import (
    Settings as Settings,
    PropertiesSettings as PropertiesSettings,
    SettingsView as SettingsView,
    FilteredSettings as FilteredSettings,
)

# --- Planning ---
from .planning import PartitionPlanner as PartitionPlanner

# --- Handlers ---
from .handlers import (
    Split as Split,
    FileSplit as FileSplit,
    ScrollReader as ScrollReader,
    BulkWriter as BulkWriter,
    Heartbeat as Heartbeat,
    ProgressSink as ProgressSink,
    CallbackProgressSink as CallbackProgressSink,
    ValueDecoder as ValueDecoder,
    RawJsonDecoder as RawJsonDecoder,
    MapDecoder as MapDecoder,
)

# --- Models ---
from .models import (
    PartitionDescriptor as PartitionDescriptor,
    Stats as Stats,
    BulkItemOutcome as BulkItemOutcome,
)

# --- Enums ---
from .enum import (
    ShardPreference as ShardPreference,
    HealthStatus as HealthStatus,
    AuthenticationMethod as AuthenticationMethod,
    WriteOperation as WriteOperation,
    BulkRetryPolicy as BulkRetryPolicy,
    FieldPresenceValidation as FieldPresenceValidation,
    ReaderState as ReaderState,
    OutcomeKind as OutcomeKind,
)

# --- Errors ---
from .errors import (
    ShardBridgeError as ShardBridgeError,
    ConfigurationError as ConfigurationError,
    ClusterHealthError as ClusterHealthError,
    NotFoundError as NotFoundError,
    StoreTransportError as StoreTransportError,
    DecodeError as DecodeError,
    BulkWriteFailure as BulkWriteFailure,
)

from .logging_config import (
    get_logger as get_logger,
    setup_sdk_logging as setup_sdk_logging,
)

__all__ = [
    # Client
    "ShardBridgeClient",
    "StoreClient",
    "CredentialProvider",
    "NoCredentials",
    "BasicCredentials",
    # Logging
    "get_logger",
    "setup_sdk_logging",
    # Settings
    "Settings",
    "PropertiesSettings",
    "SettingsView",
    "FilteredSettings",
    # Planning
    "PartitionPlanner",
    # Handlers
    "Split",
    "FileSplit",
    "ScrollReader",
    "BulkWriter",
    "Heartbeat",
    "ProgressSink",
    "CallbackProgressSink",
    "ValueDecoder",
    "RawJsonDecoder",
    "MapDecoder",
    # Models
    "PartitionDescriptor",
    "Stats",
    "BulkItemOutcome",
    # Enums
    "ShardPreference",
    "HealthStatus",
    "AuthenticationMethod",
    "WriteOperation",
    "BulkRetryPolicy",
    "FieldPresenceValidation",
    "ReaderState",
    "OutcomeKind",
    # Errors
    "ShardBridgeError",
    "ConfigurationError",
    "ClusterHealthError",
    "NotFoundError",
    "StoreTransportError",
    "DecodeError",
    "BulkWriteFailure",
]


# --- Set up the top-level logger for the SDK ---

from logging import NullHandler

logging_config = get_logger()
logging_config.addHandler(NullHandler())
