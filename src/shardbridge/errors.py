"""
Error Taxonomy.

Every failure the engine raises on purpose derives from `ShardBridgeError`, so
host integrations can tell data-movement errors apart from bugs in user code.
Whether an error is worth retrying at the partition level is a decision left
to the host framework; the classes below only describe what went wrong.
"""

from typing import List, Optional, Tuple


class ShardBridgeError(Exception):
    """Base class for all errors raised by the SDK."""

    pass


class ConfigurationError(ShardBridgeError, ValueError):
    """A required setting is missing or invalid. Never retried."""

    pass


class ClusterHealthError(ShardBridgeError):
    """The target resource is in a health state below the allowed threshold."""

    pass


class NotFoundError(ShardBridgeError):
    """The target resource does not exist on the store."""

    pass


class StoreTransportError(ShardBridgeError, ConnectionError):
    """A network round trip to the store failed."""

    def __init__(self, msg: str, status_code: Optional[int] = None):
        super().__init__(msg)
        self.status_code = status_code
        """The HTTP status returned by the store, if any."""


class DecodeError(ShardBridgeError):
    """A document returned by the store could not be decoded."""

    pass


class BulkWriteFailure(ShardBridgeError):
    """
    One or more documents were permanently rejected by the store.

    Attributes:
        failures: `(document id, reason)` pairs, in the order the documents
            were written.
    """

    def __init__(self, failures: List[Tuple[str, str]], attempts: int):
        self.failures: List[Tuple[str, str]] = list(failures)
        self.attempts: int = attempts
        sample = "; ".join(f"[{doc_id}] {reason}" for doc_id, reason in failures[:5])
        more = f" (+{len(failures) - 5} more)" if len(failures) > 5 else ""
        super().__init__(
            f"Bulk write failed for {len(failures)} document(s) after {attempts} attempt(s): {sample}{more}"
        )

    @property
    def document_ids(self) -> List[str]:
        return [doc_id for doc_id, _ in self.failures]
