"""
Configuration keys and their documented defaults.

Keys are grouped by concern. Internal keys (prefixed `opensearch.internal.`)
are written by the SDK itself while planning and must not be set by users.
"""

# --- Connection ---
OPENSEARCH_NODES = "opensearch.nodes"
OPENSEARCH_NODES_DEFAULT = "localhost"

OPENSEARCH_PORT = "opensearch.port"
OPENSEARCH_PORT_DEFAULT = "9200"

OPENSEARCH_NODES_PATH_PREFIX = "opensearch.nodes.path.prefix"
OPENSEARCH_NODES_PATH_PREFIX_DEFAULT = ""

OPENSEARCH_NODES_DISCOVERY = "opensearch.nodes.discovery"
OPENSEARCH_NODES_WAN_ONLY = "opensearch.nodes.wan.only"
OPENSEARCH_NODES_WAN_ONLY_DEFAULT = "false"
OPENSEARCH_NODES_CLIENT_ONLY = "opensearch.nodes.client.only"
OPENSEARCH_NODES_CLIENT_ONLY_DEFAULT = "false"
OPENSEARCH_NODES_DATA_ONLY = "opensearch.nodes.data.only"
OPENSEARCH_NODES_INGEST_ONLY = "opensearch.nodes.ingest.only"
OPENSEARCH_NODES_INGEST_ONLY_DEFAULT = "false"
OPENSEARCH_NODES_RESOLVE_HOST_NAME = "opensearch.nodes.resolve.hostname"

OPENSEARCH_HTTP_TIMEOUT = "opensearch.http.timeout"
OPENSEARCH_HTTP_TIMEOUT_DEFAULT = "1m"

OPENSEARCH_HTTP_RETRIES = "opensearch.http.retries"
OPENSEARCH_HTTP_RETRIES_DEFAULT = "3"

OPENSEARCH_NET_USE_SSL = "opensearch.net.ssl"
OPENSEARCH_NET_USE_SSL_DEFAULT = "false"
OPENSEARCH_NET_SSL_CERT_ALLOW_SELF_SIGNED = "opensearch.net.ssl.cert.allow.self.signed"
OPENSEARCH_NET_SSL_CERT_ALLOW_SELF_SIGNED_DEFAULT = "false"

OPENSEARCH_NET_HTTP_HEADER_OPAQUE_ID = "opensearch.net.http.header.X-Opaque-ID"

# --- Security ---
OPENSEARCH_SECURITY_AUTHENTICATION = "opensearch.security.authentication"
OPENSEARCH_SECURITY_USER_PROVIDER_CLASS = "opensearch.security.user.provider.class"
OPENSEARCH_NET_HTTP_AUTH_USER = "opensearch.net.http.auth.user"
OPENSEARCH_NET_HTTP_AUTH_PASS = "opensearch.net.http.auth.pass"

# --- Resources & query ---
OPENSEARCH_RESOURCE = "opensearch.resource"
OPENSEARCH_RESOURCE_READ = "opensearch.resource.read"
OPENSEARCH_RESOURCE_WRITE = "opensearch.resource.write"
OPENSEARCH_QUERY = "opensearch.query"
OPENSEARCH_MAX_DOCS_PER_PARTITION = "opensearch.input.max.docs.per.partition"

# --- Index ---
OPENSEARCH_INDEX_AUTO_CREATE = "opensearch.index.auto.create"
OPENSEARCH_INDEX_AUTO_CREATE_DEFAULT = "yes"
OPENSEARCH_INDEX_READ_MISSING_AS_EMPTY = "opensearch.index.read.missing.as.empty"
OPENSEARCH_INDEX_READ_MISSING_AS_EMPTY_DEFAULT = "no"
OPENSEARCH_INDEX_READ_ALLOW_RED_STATUS = "opensearch.index.read.allow.red.status"
OPENSEARCH_INDEX_READ_ALLOW_RED_STATUS_DEFAULT = "false"
OPENSEARCH_INDEX_READ_HEALTH_THRESHOLD = "opensearch.index.read.health.threshold"
OPENSEARCH_INDEX_READ_HEALTH_THRESHOLD_DEFAULT = "yellow"

# --- Read ---
OPENSEARCH_READ_SHARD_PREFERENCE = "opensearch.read.shard.preference"
OPENSEARCH_READ_SHARD_PREFERENCE_DEFAULT = "local"

OPENSEARCH_SCROLL_KEEPALIVE = "opensearch.scroll.keepalive"
OPENSEARCH_SCROLL_KEEPALIVE_DEFAULT = "5m"
OPENSEARCH_SCROLL_SIZE = "opensearch.scroll.size"
OPENSEARCH_SCROLL_SIZE_DEFAULT = "1000"
OPENSEARCH_SCROLL_LIMIT = "opensearch.scroll.limit"
OPENSEARCH_SCROLL_LIMIT_DEFAULT = "-1"

OPENSEARCH_OUTPUT_JSON = "opensearch.output.json"
OPENSEARCH_OUTPUT_JSON_DEFAULT = "false"

OPENSEARCH_READ_METADATA = "opensearch.read.metadata"
OPENSEARCH_READ_METADATA_DEFAULT = "false"
OPENSEARCH_READ_METADATA_FIELD = "opensearch.read.metadata.field"
OPENSEARCH_READ_METADATA_FIELD_DEFAULT = "_metadata"
OPENSEARCH_READ_METADATA_VERSION = "opensearch.read.metadata.version"
OPENSEARCH_READ_METADATA_VERSION_DEFAULT = "false"

OPENSEARCH_READ_FIELD_INCLUDE = "opensearch.read.field.include"
OPENSEARCH_READ_FIELD_EXCLUDE = "opensearch.read.field.exclude"

OPENSEARCH_READ_FIELD_EMPTY_AS_NULL_LEGACY = "opensearch.field.read.empty.as.null"
OPENSEARCH_READ_FIELD_EMPTY_AS_NULL = "opensearch.read.field.empty.as.null"
OPENSEARCH_READ_FIELD_EMPTY_AS_NULL_DEFAULT = "yes"

OPENSEARCH_READ_FIELD_VALIDATE_PRESENCE_LEGACY = "opensearch.field.read.validate.presence"
OPENSEARCH_READ_FIELD_VALIDATE_PRESENCE = "opensearch.read.field.validate.presence"
OPENSEARCH_READ_FIELD_VALIDATE_PRESENCE_DEFAULT = "ignore"

OPENSEARCH_SERIALIZATION_READER_VALUE_CLASS = "opensearch.ser.reader.value.class"

OPENSEARCH_HEART_BEAT_LEAD = "opensearch.action.heart.beat.lead"
OPENSEARCH_HEART_BEAT_LEAD_DEFAULT = "15s"

# --- Write ---
OPENSEARCH_BATCH_SIZE_BYTES = "opensearch.batch.size.bytes"
OPENSEARCH_BATCH_SIZE_BYTES_DEFAULT = "1mb"
OPENSEARCH_BATCH_SIZE_ENTRIES = "opensearch.batch.size.entries"
OPENSEARCH_BATCH_SIZE_ENTRIES_DEFAULT = "1000"
OPENSEARCH_BATCH_WRITE_REFRESH = "opensearch.batch.write.refresh"
OPENSEARCH_BATCH_WRITE_REFRESH_DEFAULT = "true"
OPENSEARCH_BATCH_FLUSH_MANUAL = "opensearch.batch.flush.manual"
OPENSEARCH_BATCH_FLUSH_MANUAL_DEFAULT = "false"
OPENSEARCH_BATCH_WRITE_RETRY_COUNT = "opensearch.batch.write.retry.count"
OPENSEARCH_BATCH_WRITE_RETRY_COUNT_DEFAULT = "3"
OPENSEARCH_BATCH_WRITE_RETRY_LIMIT = "opensearch.batch.write.retry.limit"
OPENSEARCH_BATCH_WRITE_RETRY_LIMIT_DEFAULT = "50"
OPENSEARCH_BATCH_WRITE_RETRY_WAIT = "opensearch.batch.write.retry.wait"
OPENSEARCH_BATCH_WRITE_RETRY_WAIT_DEFAULT = "10s"
OPENSEARCH_BATCH_WRITE_RETRY_POLICY = "opensearch.batch.write.retry.policy"
OPENSEARCH_BATCH_WRITE_RETRY_POLICY_DEFAULT = "simple"

OPENSEARCH_WRITE_OPERATION = "opensearch.write.operation"
OPENSEARCH_WRITE_OPERATION_DEFAULT = "index"
OPENSEARCH_INPUT_JSON = "opensearch.input.json"
OPENSEARCH_INPUT_JSON_DEFAULT = "false"
OPENSEARCH_MAPPING_ID = "opensearch.mapping.id"
OPENSEARCH_MAPPING_ROUTING = "opensearch.mapping.routing"
OPENSEARCH_INGEST_PIPELINE = "opensearch.ingest.pipeline"
OPENSEARCH_UPDATE_RETRY_ON_CONFLICT = "opensearch.update.retry.on.conflict"
OPENSEARCH_UPDATE_RETRY_ON_CONFLICT_DEFAULT = "0"

# --- Internal (written by the planner, carried in partition overlays) ---
INTERNAL_OPENSEARCH_VERSION = "opensearch.internal.version"
INTERNAL_OPENSEARCH_CLUSTER_NAME = "opensearch.internal.cluster.name"
INTERNAL_OPENSEARCH_CLUSTER_UUID = "opensearch.internal.cluster.uuid"
INTERNAL_OPENSEARCH_SHARD_PREFERENCE = "opensearch.internal.read.preference"
INTERNAL_OPENSEARCH_SLICE_ID = "opensearch.internal.read.slice.id"
INTERNAL_OPENSEARCH_SLICE_MAX = "opensearch.internal.read.slice.max"
INTERNAL_OPENSEARCH_TABLE_LOCATION = "opensearch.internal.table.location"
