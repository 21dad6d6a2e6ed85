"""
Store Client Module.

Thin wrapper around `opensearchpy.OpenSearch` exposing exactly the round trips
the engine needs: cluster discovery, shard layout, counting, scrolling and
bulk indexing. Responses are returned as plain dictionaries; every transport
failure surfaces as a [`StoreTransportError`][shardbridge.errors.StoreTransportError].
"""

from typing import Any, Callable, Dict, Optional, TypeVar

from opensearchpy import OpenSearch
from opensearchpy.exceptions import OpenSearchException, TransportError

from ..cfg import Settings
from ..enum import HealthStatus
from ..errors import StoreTransportError
from ..helpers import _make_exception
from ..logging_config import get_logger
from .connection import build_client
from .credentials import CredentialProvider

# Set the hierarchical logger
logger = get_logger(__name__)

T = TypeVar("T")


def _time_param(seconds: float) -> str:
    """Formats a duration in seconds as a store time value (e.g. `300000ms`)."""
    return f"{int(round(seconds * 1000))}ms"


def _transport_error(action: str, e: OpenSearchException) -> StoreTransportError:
    """Maps an opensearch-py failure, keeping the HTTP status when there is one."""
    status = None
    if isinstance(e, TransportError) and isinstance(e.status_code, int):
        status = e.status_code
    return StoreTransportError(_make_exception(f"Store request '{action}' failed", e), status)


class StoreClient:
    """
    Request-level access to the document store.

    Important: Obtaining a Client
        Readers, writers and the planner obtain their client through
        `StoreClient.connect()`. Tests substitute any object exposing the same
        methods.
    """

    def __init__(self, client: OpenSearch):
        self._client: OpenSearch = client
        """The underlying opensearch-py client"""
        self._closed: bool = False
        """Set once `close()` has released the transport"""

    @classmethod
    def connect(
        cls, settings: Settings, credentials: CredentialProvider
    ) -> "StoreClient":
        """
        Opens a client against the nodes configured in `settings`.

        Raises:
            StoreTransportError: If node discovery at connect time cannot reach
                the cluster.
        """
        try:
            return cls(build_client(settings, credentials))
        except OpenSearchException as e:
            raise _transport_error("connect", e) from e

    def _call(self, action: str, fn: Callable[..., T], *args, **kwargs) -> T:
        try:
            return fn(*args, **kwargs)
        except OpenSearchException as e:
            raise _transport_error(action, e) from e

    # --- Discovery ---

    def cluster_info(self) -> Dict[str, str]:
        """Returns the cluster `name`, `uuid` and `version` (server version number)."""
        info = self._call("info", self._client.info)
        return {
            "name": info.get("cluster_name", ""),
            "uuid": info.get("cluster_uuid", ""),
            "version": info.get("version", {}).get("number", ""),
        }

    def index_exists(self, index: str) -> bool:
        return bool(self._call("indices.exists", self._client.indices.exists, index=index))

    def health(self, index: str) -> HealthStatus:
        response = self._call("cluster.health", self._client.cluster.health, index=index)
        return HealthStatus(response["status"])

    def search_shards(self, index: str) -> Dict[str, Any]:
        """
        Returns the raw `_search_shards` response: a `nodes` mapping and a
        `shards` list with one group of copies per shard.
        """
        return self._call("search_shards", self._client.search_shards, index=index)

    def http_nodes(self) -> Dict[str, str]:
        """Maps node ids to their published HTTP address (`host:port`)."""
        response = self._call("nodes.info", self._client.nodes.info, metric="http")
        addresses: Dict[str, str] = {}
        for node_id, node in response.get("nodes", {}).items():
            publish = node.get("http", {}).get("publish_address")
            if publish:
                # publish addresses may be reported as 'hostname/ip:port'
                addresses[node_id] = publish.rsplit("/", 1)[-1]
        return addresses

    def count(
        self, index: str, body: Dict[str, Any], preference: Optional[str] = None
    ) -> int:
        params: Dict[str, Any] = {}
        if preference:
            params["preference"] = preference
        response = self._call(
            "count",
            self._client.count,
            index=index,
            body={"query": body.get("query", {"match_all": {}})},
            **params,
        )
        return int(response["count"])

    # --- Scrolling ---

    def scroll_open(
        self,
        index: str,
        body: Dict[str, Any],
        *,
        keepalive: float,
        size: int,
        preference: Optional[str] = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"scroll": _time_param(keepalive), "size": size}
        if preference:
            params["preference"] = preference
        return self._call(
            "search", self._client.search, index=index, body=body, **params
        )

    def scroll_next(self, scroll_id: str, keepalive: float) -> Dict[str, Any]:
        return self._call(
            "scroll",
            self._client.scroll,
            body={"scroll_id": scroll_id, "scroll": _time_param(keepalive)},
        )

    def scroll_clear(self, scroll_id: str) -> None:
        self._call(
            "clear_scroll", self._client.clear_scroll, body={"scroll_id": [scroll_id]}
        )

    # --- Writing ---

    def bulk(
        self, index: str, payload: str, pipeline: Optional[str] = None
    ) -> Dict[str, Any]:
        """Sends an NDJSON bulk body and returns the raw response."""
        params: Dict[str, Any] = {}
        if pipeline:
            params["pipeline"] = pipeline
        return self._call("bulk", self._client.bulk, body=payload, index=index, **params)

    def refresh(self, index: str) -> None:
        self._call("indices.refresh", self._client.indices.refresh, index=index)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._client.close()
        except Exception as e:
            logger.warning(f"Error releasing store connection: '{e}'")
