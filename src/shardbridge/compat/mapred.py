"""
Old-style host input API.

Exposes `get_splits(num_splits)` and a pull-style `next()` record reader on top
of the planner and the [`ScrollReader`][shardbridge.handlers.ScrollReader].
When the host declares a table location (Hive-style hosts), splits are
[`FileSplit`][shardbridge.handlers.FileSplit] objects carrying that path.
"""

from typing import Any, List, Optional

from ..cfg import Settings
from ..handlers import FileSplit, ProgressSink, ScrollReader, Split, wrap
from ..handlers.scroll_reader import Record
from ..logging_config import get_logger
from ..planning import PartitionPlanner

# Set the hierarchical logger
logger = get_logger(__name__)


class ShardInputFormat:
    def get_splits(
        self, settings: Settings, num_splits: int = 0, client: Optional[Any] = None
    ) -> List[Split]:
        """
        Plans the splits of the read resource.

        `num_splits` is a host hint only: the number of splits always follows
        the shard layout (and slicing).
        """
        descriptors = PartitionPlanner(settings, client=client).plan()
        if num_splits and num_splits != len(descriptors):
            logger.debug(
                f"Ignoring split hint '{num_splits}'; planned {len(descriptors)} partition(s)"
            )
        location = settings.table_location
        if location:
            return [FileSplit(descriptor, location) for descriptor in descriptors]
        return [wrap(descriptor) for descriptor in descriptors]

    def get_record_reader(
        self,
        split: Split,
        settings: Settings,
        progress: Optional[ProgressSink] = None,
        client: Optional[Any] = None,
    ) -> "ShardRecordReader":
        return ShardRecordReader(split, settings, progress=progress, client=client)


class ShardRecordReader:
    """Pull-style reader returning `(key, value)` pairs, or None at the end."""

    def __init__(
        self,
        split: Split,
        settings: Settings,
        *,
        progress: Optional[ProgressSink] = None,
        client: Optional[Any] = None,
    ):
        self._reader = ScrollReader(split, settings, progress=progress, client=client)

    def next(self) -> Optional[Record]:
        return self._reader.next()

    def get_pos(self) -> int:
        return self._reader.pos

    def get_progress(self) -> float:
        return self._reader.progress()

    def close(self):
        self._reader.close()
