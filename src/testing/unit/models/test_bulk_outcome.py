import pytest

from shardbridge.enum import OutcomeKind
from shardbridge.models import BulkItemOutcome


def _item(status, error_type=None, action="index"):
    body = {"_id": "doc-1", "status": status}
    if error_type is not None:
        body["error"] = {"type": error_type, "reason": "boom"}
    return {action: body}


def test_success_statuses():
    assert BulkItemOutcome.from_response_item(_item(201)).kind == OutcomeKind.Success
    assert BulkItemOutcome.from_response_item(_item(200, action="update")).kind == OutcomeKind.Success


@pytest.mark.parametrize("status", [429, 502, 503, 504])
def test_backpressure_statuses_are_retryable(status):
    outcome = BulkItemOutcome.from_response_item(_item(status, "unavailable"))
    assert outcome.kind == OutcomeKind.Retryable
    assert not outcome.is_conflict


def test_rejected_execution_is_retryable_whatever_the_status():
    outcome = BulkItemOutcome.from_response_item(_item(500, "es_rejected_execution_exception"))
    assert outcome.kind == OutcomeKind.Retryable


def test_conflict_is_flagged():
    outcome = BulkItemOutcome.from_response_item(
        _item(409, "version_conflict_engine_exception")
    )
    assert outcome.kind == OutcomeKind.Retryable
    assert outcome.is_conflict


def test_other_failures_are_permanent():
    outcome = BulkItemOutcome.from_response_item(_item(400, "mapper_parsing_exception"))
    assert outcome.kind == OutcomeKind.Permanent
    assert outcome.describe() == "400 mapper_parsing_exception: boom"


def test_malformed_item():
    with pytest.raises(ValueError, match="Malformed bulk response item"):
        BulkItemOutcome.from_response_item({"index": {}, "create": {}})
