from enum import Enum


class HealthStatus(Enum):
    """
    Health of a resource as reported by the store.

    Members are ordered: `Red < Yellow < Green`.
    """

    Red = "red"  # At least one primary shard is unassigned.
    Yellow = "yellow"  # All primaries assigned, some replicas missing.
    Green = "green"  # Every copy assigned.

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def __lt__(self, other: "HealthStatus") -> bool:
        if not isinstance(other, HealthStatus):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: "HealthStatus") -> bool:
        if not isinstance(other, HealthStatus):
            return NotImplemented
        return self.rank <= other.rank


_RANKS = {HealthStatus.Red: 0, HealthStatus.Yellow: 1, HealthStatus.Green: 2}
