import pytest

from shardbridge.errors import BulkWriteFailure, NotFoundError
from shardbridge.handlers import BulkWriter
from testing.integration.config import INDEX_NAME
from testing.integration.helpers import make_settings


def test_update_and_upsert(_raw_client, _inject_documents):
    with BulkWriter(make_settings(**{"opensearch.write.operation": "update"})) as writer:
        writer.write({"key": "doc-1", "note": "patched"})

    with BulkWriter(make_settings(**{"opensearch.write.operation": "upsert"})) as writer:
        writer.write({"key": "doc-new", "n": -1})

    patched = _raw_client.get(index=INDEX_NAME, id="doc-1")["_source"]
    assert patched["note"] == "patched"
    assert patched["n"] == 1
    assert _raw_client.get(index=INDEX_NAME, id="doc-new")["_source"] == {"key": "doc-new", "n": -1}


def test_update_of_missing_document_fails(_inject_documents):
    writer = BulkWriter(make_settings(**{"opensearch.write.operation": "update"}))
    writer.write({"key": "doc-1", "note": "ok"})
    writer.write({"key": "no-such-doc", "note": "lost"})

    with pytest.raises(BulkWriteFailure) as excinfo:
        writer.close()
    assert excinfo.value.document_ids == ["no-such-doc"]
    assert writer.stats.docs_accepted == 1


def test_create_conflicts_are_permanent_once_budget_spent(_inject_documents):
    settings = make_settings(
        **{"opensearch.write.operation": "create", "opensearch.batch.write.retry.count": "1"}
    )
    writer = BulkWriter(settings)
    writer.write({"key": "doc-3"})
    writer.write({"key": "doc-fresh"})

    with pytest.raises(BulkWriteFailure) as excinfo:
        writer.close()

    assert excinfo.value.document_ids == ["doc-3"]
    assert excinfo.value.attempts == 2
    assert writer.stats.docs_retried == 1


def test_delete(_raw_client, _inject_documents):
    with BulkWriter(make_settings(**{"opensearch.write.operation": "delete"})) as writer:
        writer.write({"key": "doc-2"})

    assert not _raw_client.exists(index=INDEX_NAME, id="doc-2")


def test_missing_index_without_auto_create(_fresh_index):
    settings = make_settings(
        **{
            "opensearch.resource.write": "shardbridge-it-missing",
            "opensearch.index.auto.create": "no",
        }
    )
    writer = BulkWriter(settings)
    writer.write({"key": "doc-0"})
    with pytest.raises(NotFoundError):
        writer.close()
