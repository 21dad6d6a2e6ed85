"""
Configuration Module.

This module defines the configuration structure used to control the behavior
of the bulk writing process: batching limits, retry policy and document mapping.
"""

from dataclasses import dataclass
from typing import Optional

from ..cfg import Settings
from ..enum import BulkRetryPolicy, WriteOperation
from ..errors import ConfigurationError
from ..helpers import _validate_index_name


@dataclass
class WriterConfig:
    """
    Operational parameters of a [`BulkWriter`][shardbridge.handlers.BulkWriter].

    Note: Internal Usage
        This is currently **not a user-facing class**. It is built from the
        settings by `WriterConfig.from_settings()` when a writer is created.
    """

    index: str
    """The target index (or alias) of every bulk request."""

    operation: WriteOperation
    """The bulk action emitted for every document."""

    max_batch_size_bytes: int
    """
    The size threshold in bytes of the pending NDJSON payload.

    A flush is triggered whenever **either** this limit or
    `max_batch_size_entries` is reached.
    """

    max_batch_size_entries: int
    """The threshold in document count before a batch is flushed."""

    flush_manual: bool = False
    """
    Disables threshold flushing. Writing into a full batch raises instead,
    and the caller is responsible for calling `flush()`.
    """

    refresh_after_write: bool = True
    """Requests an index refresh after every successful flush (best-effort)."""

    retry_policy: BulkRetryPolicy = BulkRetryPolicy.Simple
    """Whether retryable rejections are re-sent at all."""

    retry_count: int = 3
    """How many times a document rejected with a version conflict is re-sent."""

    retry_limit: int = 50
    """The maximum number of retry rounds after the initial bulk request."""

    retry_wait: float = 10.0
    """Seconds to wait between two retry rounds."""

    input_as_json: bool = False
    """Documents are given as JSON text (or bytes) rather than mappings."""

    mapping_id: Optional[str] = None
    """Document field holding the id, when the caller does not pass one."""

    mapping_routing: Optional[str] = None
    """Document field holding the routing value."""

    ingest_pipeline: Optional[str] = None
    """Ingest pipeline applied by the store to every document."""

    update_retry_on_conflict: int = 0
    """Server-side `retry_on_conflict` for update operations."""

    auto_create: bool = True
    """When false, a missing target index fails the first flush."""

    @property
    def retries_enabled(self) -> bool:
        return self.retry_policy != BulkRetryPolicy.Nothing and self.retry_limit > 0

    @classmethod
    def from_settings(cls, settings: Settings) -> "WriterConfig":
        """
        Captures the writer parameters of `settings`.

        Raises:
            ConfigurationError: If no write resource is configured or a value
                is invalid.
        """
        index = settings.resource_write
        if not index:
            raise ConfigurationError(
                "No write resource configured ('opensearch.resource.write' or 'opensearch.resource')"
            )
        _validate_index_name(index)

        max_bytes = settings.batch_size_bytes
        max_entries = settings.batch_size_entries
        if max_bytes <= 0 or max_entries <= 0:
            raise ConfigurationError(
                f"Batch limits must be positive, got '{max_bytes}' bytes and '{max_entries}' entries"
            )
        retry_count = settings.batch_write_retry_count
        retry_limit = settings.batch_write_retry_limit
        if retry_count < 0 or retry_limit < 0:
            raise ConfigurationError("Bulk retry count and limit must not be negative")

        return cls(
            index=index,
            operation=settings.write_operation,
            max_batch_size_bytes=max_bytes,
            max_batch_size_entries=max_entries,
            flush_manual=settings.batch_flush_manual,
            refresh_after_write=settings.batch_refresh_after_write,
            retry_policy=settings.batch_write_retry_policy,
            retry_count=retry_count,
            retry_limit=retry_limit,
            retry_wait=settings.batch_write_retry_wait,
            input_as_json=settings.input_as_json,
            mapping_id=settings.mapping_id,
            mapping_routing=settings.mapping_routing,
            ingest_pipeline=settings.ingest_pipeline,
            update_retry_on_conflict=settings.update_retry_on_conflict,
            auto_create=settings.index_auto_create,
        )
