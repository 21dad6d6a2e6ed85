"""
Transfer statistics collected by readers and writers and reported on close.
"""

from dataclasses import dataclass, fields
from typing import Dict


@dataclass
class Stats:
    """
    Aggregatable counters describing one partition's data movement.

    Byte counts are estimates computed from the serialized documents, not
    measured on the wire.
    """

    bytes_sent: int = 0
    docs_sent: int = 0
    docs_accepted: int = 0
    bulk_total: int = 0
    bulk_retries: int = 0
    docs_retried: int = 0
    bytes_retried: int = 0
    docs_failed: int = 0

    bytes_received: int = 0
    docs_received: int = 0
    scroll_total: int = 0
    scroll_reads: int = 0

    def aggregate(self, other: "Stats") -> "Stats":
        """Adds every counter of `other` into this instance and returns it."""
        for f in fields(self):
            setattr(self, f.name, getattr(self, f.name) + getattr(other, f.name))
        return self

    def as_dict(self) -> Dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
