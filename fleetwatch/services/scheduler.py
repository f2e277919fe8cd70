import logging
import threading
from typing import Optional

from fleetwatch.services.fleet_monitor import FleetMonitor

logger = logging.getLogger(__name__)


class PollingScheduler:
    """
    Background thread that runs a full probe cycle, sleeps, and repeats.

    The sleep is a wait on an Event so that stop() wakes the thread up
    immediately instead of after the remaining interval.
    """

    def __init__(self, monitor: FleetMonitor, interval_seconds: float = 10.0) -> None:
        self.monitor = monitor
        self.interval_seconds = interval_seconds
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._loop, name="fleetwatch-poller", daemon=True
        )
        self._thread.start()
        logger.info("Polling %d host(s) every %ss", len(self.monitor.hosts), self.interval_seconds)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _loop(self) -> None:
        while not self._stop.is_set():
            try:
                self.monitor.run_cycle()
            except Exception:
                logger.exception("Probe cycle failed")
            self._stop.wait(self.interval_seconds)
