"""
ShardBridge Client Entry Point.

This module provides the `ShardBridgeClient`, the primary interface for users
driving reads and writes directly from Python. It owns one store connection,
plans splits, and serves as a factory for partition readers and bulk writers.
"""

from typing import Any, Iterable, Iterator, List, Mapping, Optional, Union

from ..cfg import PropertiesSettings, Settings
from ..handlers import BulkWriter, ProgressSink, ScrollReader, Split, wrap
from ..handlers.bulk_writer import Document
from ..handlers.scroll_reader import Record
from ..logging_config import get_logger
from ..models import PartitionDescriptor, Stats
from ..planning import PartitionPlanner
from .credentials import CredentialProvider, resolve_credentials
from .store_client import StoreClient

# Set the hierarchical logger
logger = get_logger(__name__)


class ShardBridgeClient:
    """
    The gateway to a document store cluster.

    Tip: Context Manager Usage
        The `ShardBridgeClient` is best used as a context manager to ensure the
        connection is released.

        ```python
        from shardbridge import ShardBridgeClient

        with ShardBridgeClient.connect({"opensearch.resource": "logs"}) as client:
            for doc_id, doc in client.read():
                print(doc_id, doc)
        ```
    """

    # --- Private Sentinel Value ---
    # Used to ensure the constructor is only called via the `connect()` factory.
    _CONNECT_SENTINEL = object()

    def __init__(
        self,
        *,
        settings: Settings,
        store_client: Any,
        credentials: CredentialProvider,
        owns_client: bool,
        sentinel: object,
    ):
        """
        **Internal Constructor** (do not call this directly): use
        [`connect()`][shardbridge.comm.ShardBridgeClient.connect] instead.

        Raises:
            RuntimeError: If called without the private sentinel.
        """
        if sentinel is not ShardBridgeClient._CONNECT_SENTINEL:
            raise RuntimeError(
                "ShardBridgeClient must be instantiated using the classmethod ShardBridgeClient.connect()."
            )
        self._settings: Settings = settings
        """The host settings, shared by reference with the planner"""
        self._store = store_client
        """The connection used for planning, writing and shared reads"""
        self._credentials: CredentialProvider = credentials
        self._owns_client: bool = owns_client
        self._closed: bool = False

    @classmethod
    def connect(
        cls,
        settings: Union[Settings, Mapping[str, object]],
        *,
        credentials: Optional[CredentialProvider] = None,
        client: Optional[Any] = None,
    ) -> "ShardBridgeClient":
        """
        Connects to the store and discovers the cluster.

        Args:
            settings: A [`Settings`][shardbridge.cfg.Settings] object (kept by
                reference) or a plain mapping of configuration keys.
            credentials: Identity supplied by the host, used when the settings do
                not select an authentication method.
            client: An already connected store client to use instead of opening one.

        Returns:
            ShardBridgeClient: An initialized client.

        Raises:
            StoreTransportError: If the cluster cannot be reached.
            ConfigurationError: If the connection settings are invalid.
        """
        if not isinstance(settings, Settings):
            settings = PropertiesSettings(settings)
        resolved = resolve_credentials(settings, credentials)
        owns_client = client is None
        store = client if client is not None else StoreClient.connect(settings, resolved)

        try:
            info = store.cluster_info()
        except Exception:
            if owns_client:
                store.close()
            raise
        settings.set_internal_cluster_info(info["name"], info["version"], info.get("uuid") or None)
        logger.info(f"Connected to cluster '{info['name']}' version '{info['version']}'")

        return cls(
            settings=settings,
            store_client=store,
            credentials=resolved,
            owns_client=owns_client,
            sentinel=cls._CONNECT_SENTINEL,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    def _check_open(self):
        if self._closed:
            raise RuntimeError("ShardBridgeClient is closed")

    # --- Reading ---

    def plan_partitions(self) -> List[PartitionDescriptor]:
        """Plans the read partitions of the configured read resource."""
        self._check_open()
        return PartitionPlanner(
            self._settings, client=self._store, credentials=self._credentials
        ).plan()

    def splits(self) -> List[Split]:
        """Plans the read partitions and wraps each into a serializable split."""
        return [wrap(descriptor) for descriptor in self.plan_partitions()]

    def partition_reader(
        self,
        split: Union[Split, PartitionDescriptor],
        *,
        progress: Optional[ProgressSink] = None,
        shared_connection: bool = False,
    ) -> ScrollReader:
        """
        Opens a reader for one split.

        By default the reader opens its own connection, honoring the node the
        planner pinned the partition to. With `shared_connection` it reuses this
        client's connection instead.
        """
        self._check_open()
        return ScrollReader(
            split,
            self._settings,
            progress=progress,
            client=self._store if shared_connection else None,
            credentials=self._credentials,
        )

    def read(
        self,
        *,
        progress: Optional[ProgressSink] = None,
        shared_connection: bool = False,
    ) -> Iterator[Record]:
        """Reads every partition sequentially, yielding `(document id, value)` records."""
        for split in self.splits():
            with self.partition_reader(
                split, progress=progress, shared_connection=shared_connection
            ) as reader:
                yield from reader

    # --- Writing ---

    def bulk_writer(
        self,
        *,
        resource: Optional[str] = None,
        progress: Optional[ProgressSink] = None,
    ) -> BulkWriter:
        """
        Creates a bulk writer on this client's connection.

        Args:
            resource: Overrides the configured write resource.
            progress: Optional receiver of the writer statistics.
        """
        self._check_open()
        settings = self._settings
        if resource is not None:
            settings = settings.copy().set_resource_write(resource)
        return BulkWriter(
            settings, client=self._store, progress=progress, credentials=self._credentials
        )

    def save(
        self,
        documents: Iterable[Document],
        *,
        resource: Optional[str] = None,
        progress: Optional[ProgressSink] = None,
    ) -> Stats:
        """
        Writes every document and returns the writer statistics.

        Raises:
            BulkWriteFailure: If documents were permanently rejected.
        """
        with self.bulk_writer(resource=resource, progress=progress) as writer:
            for doc in documents:
                writer.write(doc)
        return writer.stats

    # --- Lifecycle ---

    def close(self):
        """Releases the connection. Idempotent."""
        if self._closed:
            return
        self._closed = True
        if self._owns_client:
            try:
                self._store.close()
            except Exception as e:
                logger.warning(f"Error releasing client connection: '{e}'")
        logger.info("ShardBridgeClient closed")

    def __enter__(self) -> "ShardBridgeClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    def __del__(self):
        if not getattr(self, "_closed", True):
            logger.warning(
                "ShardBridgeClient destroyed without calling close(). "
                "Resources may not have been released properly."
            )
