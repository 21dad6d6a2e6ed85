"""
Scroll Reading Module.

This module provides the `ScrollReader`, the per-partition iterator that streams
documents out of one shard (or shard slice) through the store's scroll API,
while a [`Heartbeat`][shardbridge.handlers.Heartbeat] keeps the host task alive.
"""

from typing import Any, Dict, Optional, Tuple, Union

import pyarrow as pa

from ..cfg import Settings
from ..comm.credentials import CredentialProvider, resolve_credentials
from ..comm.store_client import StoreClient
from ..enum import ReaderState
from ..errors import DecodeError, ShardBridgeError
from ..helpers import _make_exception, _parse_query
from ..logging_config import get_logger
from ..models import PartitionDescriptor, Stats
from .decoders import ValueDecoder, resolve_decoder
from .heartbeat import Heartbeat
from .internal.scroll_state import _ScrollState
from .progress import ProgressSink
from .split import Split

# Set the hierarchical logger
logger = get_logger(__name__)

Record = Tuple[Optional[str], Any]
"""A `(document id, decoded value)` pair."""


class ScrollReader:
    """
    Streams the documents of a single partition.

    The reader follows the lifecycle exposed by
    [`ReaderState`][shardbridge.enum.ReaderState]:

    * `Initialized` once the host settings and the partition overlay are merged
      (the overlay wins) and validated. No network traffic happens yet.
    * `Streaming` after the first pull opened the scroll. Pages are fetched one
      blocking round trip at a time, only when the previous page is consumed.
    * `Exhausted` when the store returns an empty page or the configured
      `opensearch.scroll.limit` is reached.
    * `Failed` when a round trip or a decode fails. The error is raised to the
      caller and never retried by the reader.
    * `Closed` after `close()`, which is reachable from every state.

    Each record is a `(document id, value)` pair whose value type depends on the
    configured [`ValueDecoder`][shardbridge.handlers.ValueDecoder].

    Note: Settings Ownership
        The reader works on its own copy of the settings. Mutating the caller's
        settings while the reader streams has no effect on it.

    Example:
        ```python
        for split in client.splits():
            with ScrollReader(split, settings, progress=sink) as reader:
                for doc_id, doc in reader:
                    process(doc_id, doc)
        ```
    """

    def __init__(
        self,
        split: Union[Split, PartitionDescriptor],
        settings: Settings,
        *,
        progress: Optional[ProgressSink] = None,
        client: Optional[Any] = None,
        credentials: Optional[CredentialProvider] = None,
    ):
        """
        Args:
            split: The split (or bare descriptor) to read.
            settings: The host configuration. It is copied, never modified.
            progress: Optional liveness and statistics receiver.
            client: An already connected store client. When omitted the reader
                opens its own on the first pull and closes it on `close()`.
            credentials: Identity supplied by the host, used when the settings
                do not select an authentication method.

        Raises:
            ConfigurationError: If the merged settings lack the cluster version
                marker or select an unusable decoder or credential provider.
        """
        self._state: ReaderState = ReaderState.Created
        """The lifecycle state"""
        self._descriptor: PartitionDescriptor = (
            split.descriptor if isinstance(split, Split) else split
        )
        """The partition being read"""

        merged = settings.copy()
        merged.merge(self._descriptor.overlay().as_dict())
        merged.internal_version_or_raise()
        self._settings: Settings = merged
        """The host settings with the partition overlay applied"""

        self._decoder: ValueDecoder = resolve_decoder(merged)
        """Turns hits into values"""
        self._credentials: CredentialProvider = resolve_credentials(merged, credentials)
        """Authentication for the connection opened on the first pull"""
        self._progress: Optional[ProgressSink] = progress
        self._client: Optional[Any] = client
        self._owns_client: bool = client is None
        """Whether `close()` must release the client"""
        self._heartbeat: Heartbeat = Heartbeat(
            progress, merged.heartbeat_lead, str(self._descriptor)
        )
        self._scroll: Optional[_ScrollState] = None
        self._stats = Stats()
        self._stats_reported: bool = False

        self._state = ReaderState.Initialized
        logger.debug(f"Reader initialized for {self._descriptor}")

    # --- Properties ---

    @property
    def state(self) -> ReaderState:
        return self._state

    @property
    def descriptor(self) -> PartitionDescriptor:
        return self._descriptor

    @property
    def settings(self) -> Settings:
        """The effective (merged) settings of this reader."""
        return self._settings

    @property
    def pos(self) -> int:
        """The number of records delivered so far."""
        return self._scroll.delivered if self._scroll is not None else 0

    def progress(self) -> float:
        """Returns the fraction of the partition consumed, in `[0, 1]`."""
        if self._state == ReaderState.Exhausted:
            return 1.0
        return self._scroll.progress() if self._scroll is not None else 0.0

    # --- Streaming ---

    def _search_body(self) -> Dict[str, Any]:
        settings = self._settings
        body = _parse_query(settings.query)
        body.setdefault("sort", ["_doc"])
        include, exclude = settings.read_field_include, settings.read_field_exclude
        if include or exclude:
            body["_source"] = {"includes": include, "excludes": exclude}
        if settings.read_metadata and settings.read_metadata_version:
            body["version"] = True
        slice_info = settings.internal_slice
        if slice_info is not None:
            body["slice"] = slice_info
        return body

    def _ensure_open(self) -> _ScrollState:
        if self._scroll is not None:
            return self._scroll

        self._heartbeat.start()
        if self._client is None:
            self._client = StoreClient.connect(self._settings, self._credentials)

        settings = self._settings
        scroll = _ScrollState(
            client=self._client,
            index=self._descriptor.index,
            body=self._search_body(),
            keepalive=settings.scroll_keepalive,
            size=settings.scroll_size,
            preference=settings.internal_shard_preference,
            limit=settings.scroll_limit,
        )
        self._scroll = scroll
        scroll.open()
        self._state = ReaderState.Streaming
        logger.debug(
            f"Scroll opened for {self._descriptor}, estimated total '{scroll.total}'"
        )
        return scroll

    def _check_readable(self):
        if self._state == ReaderState.Closed:
            raise RuntimeError(f"Reader for {self._descriptor} is closed")
        if self._state == ReaderState.Failed:
            raise RuntimeError(
                f"Reader for {self._descriptor} failed; close it and retry the partition"
            )

    def _fail(self, e: BaseException):
        self._state = ReaderState.Failed
        logger.error(f"Reader for {self._descriptor} failed: '{e}'")

    def _decode(self, hit: Dict[str, Any]) -> Record:
        try:
            return hit.get("_id"), self._decoder.decode(hit)
        except DecodeError:
            raise
        except Exception as e:
            raise DecodeError(
                _make_exception(f"Cannot decode document '{hit.get('_id')}'", e)
            ) from e

    def __iter__(self) -> "ScrollReader":
        """Returns self as iterator."""
        return self

    def __next__(self) -> Record:
        """
        Returns the next `(document id, value)` record.

        Raises:
            StopIteration: When the partition is exhausted.
            StoreTransportError: If a round trip to the store failed.
            DecodeError: If a document cannot be decoded.
            RuntimeError: If the reader is closed or already failed.
        """
        self._check_readable()
        if self._state == ReaderState.Exhausted:
            raise StopIteration

        try:
            hit = self._ensure_open().next_hit()
            if hit is None:
                self._state = ReaderState.Exhausted
                logger.debug(f"Reader for {self._descriptor} exhausted at '{self.pos}'")
                raise StopIteration
            return self._decode(hit)
        except ShardBridgeError as e:
            self._fail(e)
            raise

    def next(self) -> Optional[Record]:
        """
        Returns the next record or None if finished (Non-raising equivalent of __next__).
        """
        try:
            return self.__next__()
        except StopIteration:
            return None

    def _fetch_next_batch(self) -> Optional[pa.RecordBatch]:
        """
        Returns the rest of the current page as an Arrow `RecordBatch` with an
        `id` and a `value` column, pulling a new page if the current one is
        consumed.

        This is a library-internal bridge for columnar consumers.

        Returns:
            Optional[pa.RecordBatch]: The batch, or None if the partition is
                exhausted.

        Raises:
            DecodeError: If the decoded values of the page do not fit one
                Arrow column, e.g. a field that changes type between documents.

        Note:
            Calling this method advances the same cursor used by `next()`.
        """
        self._check_readable()
        if self._state == ReaderState.Exhausted:
            return None

        try:
            hits = self._ensure_open().drain_page()
            if not hits:
                self._state = ReaderState.Exhausted
                return None
            rows = [{"id": doc_id, "value": value} for doc_id, value in map(self._decode, hits)]
            try:
                return pa.RecordBatch.from_pylist(rows)
            except pa.ArrowException as e:
                raise DecodeError(
                    _make_exception(
                        f"Cannot build a record batch from page of {self._descriptor}", e
                    )
                ) from e
        except ShardBridgeError as e:
            self._fail(e)
            raise

    # --- Teardown ---

    def close(self):
        """
        Releases the reader. Idempotent and safe from every state.

        The heartbeat is stopped first, then the scroll is cleared (best-effort)
        and the connection released; finally the statistics are reported to the
        progress sink, exactly once.
        """
        if self._state == ReaderState.Closed:
            return

        self._heartbeat.stop()

        if self._scroll is not None:
            try:
                self._scroll.clear()
            except Exception as e:
                logger.warning(f"Unable to clear scroll for {self._descriptor}: '{e}'")
            self._stats.aggregate(self._scroll.stats)

        if self._owns_client and self._client is not None:
            try:
                self._client.close()
            except Exception as e:
                logger.warning(f"Error closing connection for {self._descriptor}: '{e}'")

        self._state = ReaderState.Closed
        self._report_stats()
        logger.info(f"Reader for {self._descriptor} closed after '{self.pos}' records")

    def _report_stats(self):
        if self._stats_reported or self._progress is None:
            return
        self._stats_reported = True
        try:
            self._progress.report(self._stats)
        except Exception as e:
            logger.warning(f"Progress sink rejected statistics: '{e}'")

    @property
    def stats(self) -> Stats:
        """The statistics collected so far (complete once closed)."""
        if self._state == ReaderState.Closed or self._scroll is None:
            return self._stats
        return Stats().aggregate(self._stats).aggregate(self._scroll.stats)

    def __enter__(self) -> "ScrollReader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    def __del__(self):
        state = getattr(self, "_state", ReaderState.Closed)
        if state not in (ReaderState.Closed, ReaderState.Created):
            logger.warning(
                f"ScrollReader for '{getattr(self, '_descriptor', '?')}' destroyed without "
                "calling close(). Resources may not have been released properly."
            )
