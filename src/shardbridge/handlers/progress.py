"""
Progress Reporting Module.

Defines the sink through which readers and writers signal liveness and hand
over their final statistics to the host framework.
"""

from typing import Callable, Optional, Protocol, runtime_checkable

from ..models import Stats


@runtime_checkable
class ProgressSink(Protocol):
    """
    Host-side receiver of liveness signals and transfer statistics.

    `progress()` may be called from the heartbeat thread while the owning
    reader is blocked on a network round trip; implementations must be safe to
    call from a thread other than the one that created them.
    """

    def progress(self, status: str) -> None:
        """Signals that the task is alive. Called periodically."""
        ...

    def report(self, stats: Stats) -> None:
        """Receives the aggregated statistics of a closed reader or writer."""
        ...


class CallbackProgressSink:
    """
    Adapts plain callables to the [`ProgressSink`][shardbridge.handlers.ProgressSink]
    protocol.

    Example:
        ```python
        sink = CallbackProgressSink(
            on_progress=lambda status: task.keep_alive(),
            on_report=lambda stats: metrics.update(stats.as_dict()),
        )
        ```
    """

    def __init__(
        self,
        on_progress: Optional[Callable[[str], None]] = None,
        on_report: Optional[Callable[[Stats], None]] = None,
    ):
        self._on_progress = on_progress
        self._on_report = on_report

    def progress(self, status: str) -> None:
        if self._on_progress is not None:
            self._on_progress(status)

    def report(self, stats: Stats) -> None:
        if self._on_report is not None:
            self._on_report(stats)
