"""
Partition Descriptor Module.

Defines the immutable unit of planned read work produced by the
[`PartitionPlanner`][shardbridge.planning.PartitionPlanner].
"""

from typing import Optional, Tuple

import pydantic

from ..cfg import PropertiesSettings


class PartitionDescriptor(pydantic.BaseModel):
    """
    Identifies one shard-read unit.

    A descriptor is created once at planning time and never mutated; it is owned
    by exactly one [`Split`][shardbridge.handlers.Split] for its whole lifetime.

    Attributes:
        resource: The logical resource (index, alias or pattern) being read.
        index: The concrete index holding the shard.
        shard_id: The shard number inside `index`.
        hosts: Candidate hostnames holding a copy of the shard, in preference order.
        settings_overlay: Serialized settings fragment applied on top of the host
            configuration by the reader (node pinning, preference, slice).
        slice_id: The slice of the shard read by this partition, when the shard
            was subdivided.
        slice_max: The total number of slices the shard was subdivided into.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    resource: str
    index: str
    shard_id: int
    hosts: Tuple[str, ...] = ()
    settings_overlay: str = ""
    slice_id: Optional[int] = None
    slice_max: Optional[int] = None

    @pydantic.model_validator(mode="after")
    def _check_slice(self) -> "PartitionDescriptor":
        if (self.slice_id is None) != (self.slice_max is None):
            raise ValueError("'slice_id' and 'slice_max' must be set together")
        if (
            self.slice_id is not None
            and self.slice_max is not None
            and not 0 <= self.slice_id < self.slice_max
        ):
            raise ValueError(
                f"'slice_id' {self.slice_id} out of range for 'slice_max' {self.slice_max}"
            )
        return self

    @property
    def is_sliced(self) -> bool:
        return self.slice_id is not None

    def overlay(self) -> PropertiesSettings:
        """Returns the settings overlay as a fresh, detached settings object."""
        settings = PropertiesSettings()
        settings.load(self.settings_overlay)
        return settings

    def __str__(self) -> str:
        slice_repr = f", slice={self.slice_id}/{self.slice_max}" if self.is_sliced else ""
        return (
            f"PartitionDescriptor(resource={self.resource}, index={self.index}, "
            f"shard={self.shard_id}{slice_repr}, hosts={list(self.hosts)})"
        )
