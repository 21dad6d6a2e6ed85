"""
New-style host input API.

Adapts the planner and the [`ScrollReader`][shardbridge.handlers.ScrollReader]
to hosts driving their record readers through `initialize` /
`next_key_value` / `get_current_key` / `get_current_value`.
"""

from typing import Any, List, Optional

from ..cfg import Settings
from ..handlers import ProgressSink, ScrollReader, Split, wrap
from ..planning import PartitionPlanner


class ShardInputFormat:
    """Plans one split per shard (or shard slice) of the read resource."""

    def get_splits(self, settings: Settings, client: Optional[Any] = None) -> List[Split]:
        planner = PartitionPlanner(settings, client=client)
        return [wrap(descriptor) for descriptor in planner.plan()]

    def create_record_reader(self) -> "ShardRecordReader":
        return ShardRecordReader()


class ShardRecordReader:
    """
    Record reader holding a current key (the document id) and value.

    The reader is created empty and bound to a split by `initialize()`.
    """

    def __init__(self):
        self._reader: Optional[ScrollReader] = None
        self._current_key: Optional[str] = None
        self._current_value: Any = None

    def initialize(
        self,
        split: Split,
        settings: Settings,
        progress: Optional[ProgressSink] = None,
        client: Optional[Any] = None,
    ):
        if self._reader is not None:
            raise RuntimeError("Record reader already initialized")
        self._reader = ScrollReader(split, settings, progress=progress, client=client)

    def _require_reader(self) -> ScrollReader:
        if self._reader is None:
            raise RuntimeError("Record reader not initialized; call initialize() first")
        return self._reader

    def next_key_value(self) -> bool:
        """Advances to the next record. Returns False once the split is exhausted."""
        record = self._require_reader().next()
        if record is None:
            self._current_key, self._current_value = None, None
            return False
        self._current_key, self._current_value = record
        return True

    def get_current_key(self) -> Optional[str]:
        return self._current_key

    def get_current_value(self) -> Any:
        return self._current_value

    def get_progress(self) -> float:
        return self._reader.progress() if self._reader is not None else 0.0

    def close(self):
        if self._reader is not None:
            self._reader.close()
