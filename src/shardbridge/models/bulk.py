"""
Bulk Write Models.

Value objects exchanged between the [`BulkWriter`][shardbridge.handlers.BulkWriter]
and the store: the serialized outgoing entry and the per-document outcome parsed
from a bulk response.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import pydantic

from ..enum import OutcomeKind

RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})
"""HTTP statuses for which a rejected document is sent again."""

RETRYABLE_ERROR_TYPES = frozenset(
    {"es_rejected_execution_exception", "opensearch_rejected_execution_exception"}
)
"""Error types signalling back-pressure rather than a bad document."""

CONFLICT_STATUS_CODE = 409


@dataclass
class BulkEntry:
    """
    One outgoing document, already serialized as NDJSON bulk lines.

    Attributes:
        ordinal: Position of the document in the writer's input stream (0-based).
        doc_id: The document id, when known.
        payload: The action line (and source line, if any), newline terminated.
    """

    ordinal: int
    doc_id: Optional[str]
    payload: bytes

    @property
    def size(self) -> int:
        return len(self.payload)

    @property
    def identifier(self) -> str:
        """The document id, or `#<ordinal>` for documents without one."""
        return self.doc_id if self.doc_id is not None else f"#{self.ordinal}"


class BulkItemOutcome(pydantic.BaseModel):
    """
    The store's verdict for a single document of a bulk request.

    Instances are factory-generated from bulk responses via
    `from_response_item()`; the `kind` applies the retry classification.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    kind: OutcomeKind
    status: int
    doc_id: Optional[str] = None
    error_type: Optional[str] = None
    reason: Optional[str] = None

    @property
    def is_conflict(self) -> bool:
        return self.status == CONFLICT_STATUS_CODE

    @classmethod
    def from_response_item(cls, item: Mapping[str, Any]) -> "BulkItemOutcome":
        """
        Parses one element of the `items` array of a bulk response.

        The element is a single-key object keyed by the action name
        (`index`, `create`, `update`, `delete`).

        Conflicts (409) are reported as `Retryable`; the writer downgrades them to
        permanent once the per-document conflict budget is spent.
        """
        if len(item) != 1:
            raise ValueError(f"Malformed bulk response item: {dict(item)}")
        body = next(iter(item.values()))
        status = int(body.get("status", 500))
        doc_id = body.get("_id")

        error = body.get("error")
        if status < 300 and error is None:
            return cls(kind=OutcomeKind.Success, status=status, doc_id=doc_id)

        error_type: Optional[str] = None
        reason: Optional[str] = None
        if isinstance(error, dict):
            error_type = error.get("type")
            reason = error.get("reason")
        elif error is not None:
            reason = str(error)

        retryable = (
            status in RETRYABLE_STATUS_CODES
            or status == CONFLICT_STATUS_CODE
            or error_type in RETRYABLE_ERROR_TYPES
        )
        return cls(
            kind=OutcomeKind.Retryable if retryable else OutcomeKind.Permanent,
            status=status,
            doc_id=doc_id,
            error_type=error_type,
            reason=reason or f"status {status}",
        )

    def describe(self) -> str:
        if self.error_type:
            return f"{self.status} {self.error_type}: {self.reason}"
        return f"{self.status}: {self.reason}"
