"""
Heartbeat Module.

Keeps a long-running partition task from being declared dead by the host
while the reader is blocked on a slow store round trip.
"""

import threading
from typing import Optional

from ..logging_config import get_logger
from .progress import ProgressSink

# Set the hierarchical logger
logger = get_logger(__name__)


class Heartbeat:
    """
    Periodically signals liveness to a [`ProgressSink`][shardbridge.handlers.ProgressSink]
    from a daemon thread.

    The tick interval is half the configured lead, so at least one signal is
    sent within every `lead` window regardless of how long the owning thread
    blocks. Each tick calls `sink.progress(status)` exactly once.

    The stop event is the only state shared with the owning thread: `stop()`
    sets it and joins the thread, so no tick happens after `stop()` returns.
    """

    def __init__(self, sink: Optional[ProgressSink], lead: float, status: str):
        """
        Args:
            sink: The liveness receiver. Without a sink the heartbeat is inert.
            lead: The host's liveness timeout, in seconds.
            status: The status text sent with every tick.
        """
        if lead <= 0:
            raise ValueError(f"Heartbeat lead must be positive, got '{lead}'")
        self._sink = sink
        self._interval: float = lead / 2
        """Seconds between two ticks"""
        self._status = status
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Starts ticking. A no-op without a sink or when already started."""
        if self._sink is None or self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._run,
            args=(self._sink,),
            name=f"shardbridge-heartbeat[{self._status}]",
            daemon=True,
        )
        self._thread.start()
        logger.debug(f"Heartbeat started for '{self._status}' every {self._interval}s")

    def _run(self, sink: ProgressSink) -> None:
        while not self._stop_event.wait(self._interval):
            try:
                sink.progress(self._status)
            except Exception as e:
                # keep ticking
                logger.warning(f"Heartbeat sink raised for '{self._status}': '{e}'")

    def stop(self) -> None:
        """Stops ticking and waits for the thread to exit. Idempotent."""
        self._stop_event.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
            logger.debug(f"Heartbeat stopped for '{self._status}'")
