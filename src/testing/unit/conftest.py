import logging
import threading
import time
from typing import List, Tuple

import pytest

from shardbridge import get_logger
from shardbridge.cfg import PropertiesSettings
from shardbridge.models import Stats
from testing.unit.fakes import FakeStore


class RecordingSink:
    """Progress sink remembering every call, safe to use from the heartbeat thread."""

    def __init__(self):
        self._lock = threading.Lock()
        self.ticks: List[Tuple[float, str]] = []
        self.reports: List[Stats] = []

    def progress(self, status: str) -> None:
        with self._lock:
            self.ticks.append((time.monotonic(), status))

    def report(self, stats: Stats) -> None:
        self.reports.append(stats)


@pytest.fixture(autouse=True)
def _reset_sdk_logger():
    # some tests install real handlers through setup_sdk_logging()
    yield
    logger = get_logger()
    logger.handlers.clear()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def store() -> FakeStore:
    docs = [{"n": i, "name": f"doc-{i}", "tag": "" if i % 2 else "even"} for i in range(10)]
    return FakeStore().add_index("logs", docs, shards=2, replicas=1)


@pytest.fixture
def settings() -> PropertiesSettings:
    return PropertiesSettings(
        {
            "opensearch.resource": "logs",
            "opensearch.scroll.size": "3",
            "opensearch.batch.write.retry.wait": "0",
        }
    )


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()
