"""
Bulk Writing Module.

This module handles the buffered writing of documents to a single index.
It serializes documents into bulk NDJSON, flushes them when the batch limits
are reached, and re-sends the documents the store rejected as retryable.
"""

import json
import time
from typing import Any, Dict, List, Mapping, NoReturn, Optional, Tuple, Union

from ..cfg import Settings
from ..comm.credentials import CredentialProvider, resolve_credentials
from ..comm.store_client import StoreClient
from ..enum import OutcomeKind, WriteOperation
from ..errors import (
    BulkWriteFailure,
    ConfigurationError,
    NotFoundError,
    StoreTransportError,
)
from ..helpers import _make_exception
from ..logging_config import get_logger
from ..models import BulkEntry, BulkItemOutcome, Stats
from .config import WriterConfig
from .internal.bulk_batch import _BulkBatch, _RetryState
from .progress import ProgressSink

# Set the hierarchical logger
logger = get_logger(__name__)

Document = Union[Mapping[str, Any], str, bytes]


def _lookup(doc: Mapping[str, Any], path: str) -> Any:
    if path in doc:
        return doc[path]
    node: Any = doc
    for part in path.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return None
        node = node[part]
    return node


def _dumps(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


class BulkWriter:
    """
    Buffers documents and sends them to the store through the bulk API.

    Documents are accumulated in memory and flushed when **either** the byte
    threshold (`opensearch.batch.size.bytes`) or the entry threshold
    (`opensearch.batch.size.entries`) is reached, unless manual flushing is
    enabled.

    ### Partial failures
    A bulk response reports one outcome per document. Successful documents are
    done; documents rejected for back-pressure (429, 502, 503, 504, rejected
    execution) are re-sent in a new round containing only them, waiting
    `opensearch.batch.write.retry.wait` between rounds and for at most
    `opensearch.batch.write.retry.limit` rounds. A version conflict (409) is
    re-sent at most `opensearch.batch.write.retry.count` times. Every other
    rejection is permanent. Once the flush settles, the permanent failures are
    raised together as a [`BulkWriteFailure`][shardbridge.errors.BulkWriteFailure].
    If the store becomes unreachable after some documents were already rejected,
    the documents still pending are reported in the same failure.

    Example:
        ```python
        with BulkWriter(settings) as writer:
            for doc in documents:
                writer.write(doc)
        # Exiting the block flushes the remaining documents
        ```
    """

    def __init__(
        self,
        settings: Settings,
        *,
        client: Optional[Any] = None,
        progress: Optional[ProgressSink] = None,
        credentials: Optional[CredentialProvider] = None,
    ):
        """
        Args:
            settings: The host configuration. Only read at construction time.
            client: An already connected store client. When omitted the writer
                opens its own on the first flush and closes it on `close()`.
            progress: Optional receiver of the final statistics.
            credentials: Identity supplied by the host, used when the settings
                do not select an authentication method.

        Raises:
            ConfigurationError: If the write configuration is invalid.
        """
        self._settings: Settings = settings.copy()
        """A snapshot of the host settings"""
        self._config: WriterConfig = WriterConfig.from_settings(self._settings)
        """The config of the writer"""
        self._credentials: CredentialProvider = resolve_credentials(
            self._settings, credentials
        )
        self._client: Optional[Any] = client
        self._owns_client: bool = client is None
        self._progress: Optional[ProgressSink] = progress
        self._batch = _BulkBatch(
            max_bytes=self._config.max_batch_size_bytes,
            max_entries=self._config.max_batch_size_entries,
        )
        """The pending documents"""
        self._ordinal: int = 0
        """Ordinal assigned to the next written document"""
        self._index_checked: bool = False
        self._stats = Stats()
        self._closed: bool = False

    @property
    def config(self) -> WriterConfig:
        return self._config

    @property
    def stats(self) -> Stats:
        return self._stats

    @property
    def pending(self) -> int:
        """The number of documents waiting for the next flush."""
        return len(self._batch)

    # --- Serialization ---

    def _parse_document(self, doc: Document) -> Tuple[Optional[Mapping[str, Any]], str]:
        """Returns the parsed document (when needed) and its compact JSON source."""
        if isinstance(doc, (str, bytes)):
            if not self._config.input_as_json:
                raise TypeError(
                    "Got a JSON document but 'opensearch.input.json' is not enabled"
                )
            text = doc.decode("utf-8") if isinstance(doc, bytes) else doc
            needs_fields = self._config.mapping_id or self._config.mapping_routing
            if not needs_fields and "\n" not in text:
                return None, text.strip()
            try:
                parsed = json.loads(text)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON document: '{e}'") from e
            if not isinstance(parsed, dict):
                raise ValueError("JSON documents must be objects")
            return parsed, _dumps(parsed)
        if not isinstance(doc, Mapping):
            raise TypeError(f"Unsupported document type '{type(doc).__name__}'")
        return doc, _dumps(dict(doc))

    def _build_entry(self, doc: Document, doc_id: Optional[str]) -> BulkEntry:
        config = self._config
        parsed, source = self._parse_document(doc)

        if doc_id is None and config.mapping_id and parsed is not None:
            value = _lookup(parsed, config.mapping_id)
            doc_id = None if value is None else str(value)
        if doc_id is None and config.operation.requires_id:
            raise ConfigurationError(
                f"Operation '{config.operation.value}' requires a document id; pass one "
                "or configure 'opensearch.mapping.id'"
            )

        metadata: Dict[str, Any] = {}
        if doc_id is not None:
            metadata["_id"] = doc_id
        if config.mapping_routing and parsed is not None:
            routing = _lookup(parsed, config.mapping_routing)
            if routing is not None:
                metadata["routing"] = str(routing)

        operation = config.operation
        if operation in (WriteOperation.Update, WriteOperation.Upsert):
            if config.update_retry_on_conflict > 0:
                metadata["retry_on_conflict"] = config.update_retry_on_conflict
            action = _dumps({"update": metadata})
            upsert = ',"doc_as_upsert":true' if operation == WriteOperation.Upsert else ""
            body = f'{{"doc":{source}{upsert}}}'
            payload = f"{action}\n{body}\n"
        elif operation == WriteOperation.Delete:
            payload = _dumps({"delete": metadata}) + "\n"
        else:
            payload = f"{_dumps({operation.value: metadata})}\n{source}\n"

        entry = BulkEntry(ordinal=self._ordinal, doc_id=doc_id, payload=payload.encode("utf-8"))
        self._ordinal += 1
        return entry

    # --- Public API ---

    def write(self, doc: Document, doc_id: Optional[str] = None):
        """
        Adds a document to the pending batch, flushing when a threshold is reached.

        Args:
            doc: A mapping, or JSON text/bytes when `opensearch.input.json` is set.
            doc_id: The document id. Defaults to the `opensearch.mapping.id` field.

        Raises:
            RuntimeError: If the writer is closed, or the batch is full while
                manual flushing is enabled.
            BulkWriteFailure: If a triggered flush left permanently failed documents.
            StoreTransportError: If a triggered flush could not reach the store.
        """
        if self._closed:
            raise RuntimeError("BulkWriter is closed")
        if self._config.flush_manual and self._batch.is_full():
            raise RuntimeError(
                f"Bulk batch is full ({len(self._batch)} entries, {self._batch.size_bytes} bytes) "
                "and manual flushing is enabled; call flush() first"
            )

        self._batch.add(self._build_entry(doc, doc_id))

        if not self._config.flush_manual and self._batch.is_full():
            self.flush()

    def _ensure_client(self) -> Any:
        if self._client is None:
            self._client = StoreClient.connect(self._settings, self._credentials)
        return self._client

    def _ensure_index(self, client: Any):
        if self._index_checked:
            return
        if not self._config.auto_create and not client.index_exists(self._config.index):
            raise NotFoundError(
                f"Target index '{self._config.index}' is missing and "
                "'opensearch.index.auto.create' is disabled"
            )
        self._index_checked = True

    def _classify(
        self, retry: _RetryState, response: Dict[str, Any]
    ) -> Tuple[List[BulkEntry], List[Tuple[BulkEntry, str]]]:
        """Splits the pending entries into retryable and permanently failed ones."""
        pending = retry.pending
        if not response.get("errors"):
            self._stats.docs_accepted += len(pending)
            return [], []

        items = response.get("items") or []
        if len(items) != len(pending):
            raise StoreTransportError(
                f"Bulk response has {len(items)} items for {len(pending)} documents"
            )

        try:
            outcomes = [BulkItemOutcome.from_response_item(item) for item in items]
        except (ValueError, TypeError, AttributeError) as e:
            raise StoreTransportError(_make_exception("Malformed bulk response", e)) from e

        retryable: List[BulkEntry] = []
        failed: List[Tuple[BulkEntry, str]] = []
        for entry, outcome in zip(pending, outcomes):
            if outcome.kind == OutcomeKind.Success:
                self._stats.docs_accepted += 1
                continue
            if outcome.kind == OutcomeKind.Retryable and self._config.retries_enabled:
                if not outcome.is_conflict:
                    retryable.append(entry)
                    continue
                if retry.conflict_retries(entry) < self._config.retry_count:
                    retry.record_conflict(entry)
                    retryable.append(entry)
                    continue
            failed.append((entry, outcome.describe()))
        return retryable, failed

    def _failure(
        self, failed: List[Tuple[BulkEntry, str]], attempts: int
    ) -> BulkWriteFailure:
        failed.sort(key=lambda f: f[0].ordinal)
        self._stats.docs_failed += len(failed)
        return BulkWriteFailure(
            [(entry.identifier, reason) for entry, reason in failed], attempts
        )

    def _abandon(
        self,
        retry: _RetryState,
        failed: List[Tuple[BulkEntry, str]],
        e: StoreTransportError,
    ) -> NoReturn:
        """
        Gives up on the pending documents after a transport failure.

        Documents rejected in earlier rounds are reported together with the
        pending ones in a `BulkWriteFailure`; otherwise `e` is raised as is.
        """
        if not failed:
            self._stats.docs_failed += len(retry.pending)
            raise e
        failed.extend((entry, f"transport failure: {e}") for entry in retry.pending)
        raise self._failure(failed, retry.attempts) from e

    def _wait(self) -> float:
        wait = self._config.retry_wait
        if wait > 0:
            time.sleep(wait)
        return wait

    def flush(self):
        """
        Sends every pending document, retrying retryable rejections.

        Raises:
            BulkWriteFailure: If documents were permanently rejected, or still
                rejected when the retry budget ran out. Documents pending when
                the store became unreachable are included once earlier rounds
                rejected any.
            StoreTransportError: If the store stayed unreachable for the whole
                retry budget, or answered with a malformed response.
            NotFoundError: If the target index is missing and auto creation is off.
        """
        if len(self._batch) == 0:
            return
        config = self._config
        client = self._ensure_client()
        self._ensure_index(client)

        retry = _RetryState(self._batch.drain())
        failed: List[Tuple[BulkEntry, str]] = []
        while True:
            payload = b"".join(e.payload for e in retry.pending)
            retry.attempts += 1
            self._stats.bulk_total += 1
            self._stats.docs_sent += len(retry.pending)
            self._stats.bytes_sent += len(payload)
            try:
                response = client.bulk(
                    config.index, payload.decode("utf-8"), config.ingest_pipeline
                )
            except StoreTransportError as e:
                if not config.retries_enabled or retry.retries >= config.retry_limit:
                    self._abandon(retry, failed, e)
                logger.warning(
                    f"Bulk request to '{config.index}' failed, retrying "
                    f"{len(retry.pending)} documents ({retry.retries + 1}/{config.retry_limit}): '{e}'"
                )
                retryable = retry.pending
            else:
                try:
                    retryable, rejected = self._classify(retry, response)
                except StoreTransportError as e:
                    # the store may have applied part of the request
                    self._abandon(retry, failed, e)
                failed.extend(rejected)

            if not retryable:
                break
            if retry.retries >= config.retry_limit:
                failed.extend((entry, "retry limit exhausted") for entry in retryable)
                break

            retry.next_round(retryable, self._wait())
            self._stats.bulk_retries += 1
            self._stats.docs_retried += len(retryable)
            self._stats.bytes_retried += sum(e.size for e in retryable)

        if failed:
            raise self._failure(failed, retry.attempts)

        logger.debug(
            f"Flushed bulk to '{config.index}' in {retry.attempts} request(s), "
            f"waited {retry.waited}s"
        )
        if config.refresh_after_write:
            try:
                client.refresh(config.index)
            except Exception as e:
                logger.warning(f"Refresh of '{config.index}' after bulk failed: '{e}'")

    def close(self):
        """
        Flushes the remaining documents, releases the connection and reports the
        statistics. Idempotent.

        Raises:
            BulkWriteFailure: If the final flush left failed documents.
            StoreTransportError: If the final flush could not reach the store.
        """
        if self._closed:
            return
        self._closed = True
        try:
            self.flush()
        finally:
            if self._owns_client and self._client is not None:
                try:
                    self._client.close()
                except Exception as e:
                    logger.warning(f"Error closing connection for '{self._config.index}': '{e}'")
            if self._progress is not None:
                try:
                    self._progress.report(self._stats)
                except Exception as e:
                    logger.warning(f"Progress sink rejected statistics: '{e}'")
            logger.info(
                f"BulkWriter for '{self._config.index}' closed, "
                f"{self._stats.docs_accepted}/{self._ordinal} documents accepted"
            )

    def __enter__(self) -> "BulkWriter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False
