import pytest
from opensearchpy import OpenSearch

from shardbridge import ShardBridgeClient
from shardbridge.errors import StoreTransportError
from testing.integration.config import INDEX_NAME, INDEX_SHARDS, STORE_NODES
from testing.integration.helpers import make_documents, make_settings


@pytest.fixture(scope="session")
def _raw_client():
    client = OpenSearch(hosts=[STORE_NODES])
    if not client.ping():
        pytest.skip(f"No store reachable at '{STORE_NODES}'")
    yield client
    client.close()


@pytest.fixture
def _fresh_index(_raw_client):
    _raw_client.indices.delete(index=INDEX_NAME, ignore_unavailable=True)
    _raw_client.indices.create(
        index=INDEX_NAME,
        body={"settings": {"number_of_shards": INDEX_SHARDS, "number_of_replicas": 0}},
    )
    yield INDEX_NAME
    _raw_client.indices.delete(index=INDEX_NAME, ignore_unavailable=True)


@pytest.fixture
def _client(_raw_client):
    try:
        client = ShardBridgeClient.connect(make_settings())
    except StoreTransportError as e:
        pytest.skip(f"Cannot connect to '{STORE_NODES}': {e}")
    yield client
    client.close()


@pytest.fixture
def _inject_documents(_client, _fresh_index):
    _client.save(make_documents())
    return _fresh_index
