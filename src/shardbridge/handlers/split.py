"""
Split Adapter Module.

Wraps planned [`PartitionDescriptor`][shardbridge.models.PartitionDescriptor]
objects into the serializable work units handed to the host scheduler.
"""

import json
from typing import Any, Dict, Tuple, Union

import pydantic

from ..errors import ShardBridgeError
from ..models import PartitionDescriptor


class Split:
    """
    A serializable host work unit owning exactly one partition descriptor.

    Splits travel from the planning process to the workers, so
    `Split.deserialize(split.serialize())` always yields an equal split.
    """

    def __init__(self, descriptor: PartitionDescriptor):
        self._descriptor: PartitionDescriptor = descriptor
        """The wrapped partition"""

    @property
    def descriptor(self) -> PartitionDescriptor:
        return self._descriptor

    def get_locations(self) -> Tuple[str, ...]:
        """Returns the descriptor's candidate hosts verbatim, in preference order."""
        return self._descriptor.hosts

    def length(self) -> int:
        """
        Returns the nominal size of the split.

        Note:
            Shard sizes are not computed at planning time; every split reports
            `1`, so hosts should not rely on this value for scheduling.
        """
        return 1

    def _as_dict(self) -> Dict[str, Any]:
        return {"descriptor": self._descriptor.model_dump(mode="json")}

    def serialize(self) -> bytes:
        return json.dumps(self._as_dict(), sort_keys=True).encode("utf-8")

    @staticmethod
    def deserialize(data: Union[bytes, str]) -> "Split":
        """
        Rebuilds a split (or [`FileSplit`][shardbridge.handlers.FileSplit]) from
        the bytes produced by `serialize()`, or their text form.

        Raises:
            ShardBridgeError: If the payload is not a serialized split.
        """
        try:
            payload = json.loads(data)
            descriptor = PartitionDescriptor.model_validate(payload["descriptor"])
        except (ValueError, KeyError, TypeError, pydantic.ValidationError) as e:
            raise ShardBridgeError(f"Malformed serialized split: '{e}'") from e
        if "path" in payload:
            return FileSplit(descriptor, payload["path"])
        return Split(descriptor)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._as_dict() == other._as_dict()  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash(self._descriptor)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._descriptor})"


class FileSplit(Split):
    """
    A [`Split`][shardbridge.handlers.Split] that also carries a nominal file
    path, for hosts whose input contracts assume file-backed tables.
    """

    def __init__(self, descriptor: PartitionDescriptor, path: str):
        super().__init__(descriptor)
        self._path: str = path
        """The nominal table location"""

    @property
    def path(self) -> str:
        return self._path

    def _as_dict(self) -> Dict[str, Any]:
        data = super()._as_dict()
        data["path"] = self._path
        return data


def wrap(descriptor: PartitionDescriptor) -> Split:
    """Wraps a planned partition into a host split."""
    return Split(descriptor)
