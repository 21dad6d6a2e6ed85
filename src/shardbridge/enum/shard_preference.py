from enum import Enum


class ShardPreference(Enum):
    """
    Policy used by the partition planner to choose which copy of a shard is read.
    """

    Primary = "primary"  # Read only the primary copy of every shard.
    Local = "local"  # Any started copy; pin the reader to the first candidate node.
    Any = "any"  # Any started copy; let the store route the request.
