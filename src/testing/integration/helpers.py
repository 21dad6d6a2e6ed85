from shardbridge.cfg import PropertiesSettings
from testing.integration.config import DOC_COUNT, INDEX_NAME, STORE_NODES


def make_settings(**props) -> PropertiesSettings:
    settings = PropertiesSettings(
        {
            "opensearch.nodes": STORE_NODES,
            # the published node addresses are not reachable from the test host
            "opensearch.nodes.wan.only": "true",
            "opensearch.resource": INDEX_NAME,
            "opensearch.mapping.id": "key",
            "opensearch.batch.write.retry.wait": "100ms",
        }
    )
    for key, value in props.items():
        settings.set_property(key, value)
    return settings


def make_documents(count: int = DOC_COUNT):
    return [
        {"key": f"doc-{n}", "n": n, "group": f"g{n % 4}", "note": "" if n % 5 else "fifth"}
        for n in range(count)
    ]
