import threading
from typing import Dict, Optional, Tuple

from fleetwatch.models.logs import LogObservation, LogStream

_SlotKey = Tuple[LogStream, Optional[str]]


class LogDeltaDetector:
    """
    Remembers the last snapshot of each log stream and reports appended lines.

    Snapshots are stored per (stream, host). Passing host=None for every call
    gives one slot per stream shared by all hosts. The first snapshot of a
    slot is stored silently; later ones are compared line by line against the
    stored content, which is then replaced.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshots: Dict[_SlotKey, str] = {}

    def observe(
        self,
        stream: LogStream,
        content: str,
        host: Optional[str] = None,
    ) -> LogObservation:
        key = (stream, host)
        with self._lock:
            previous = self._snapshots.get(key)
            self._snapshots[key] = content

        if previous is None:
            return LogObservation(first_observation=True)

        old_lines = set(previous.split("\n"))
        delta = [line for line in content.split("\n") if line not in old_lines]
        return LogObservation(
            delta_lines=delta,
            first_observation=False,
            unchanged=content == previous,
        )

    def is_initialized(self, stream: LogStream, host: Optional[str] = None) -> bool:
        with self._lock:
            return (stream, host) in self._snapshots

    def last_content(self, stream: LogStream, host: Optional[str] = None) -> Optional[str]:
        with self._lock:
            return self._snapshots.get((stream, host))

    def reset(self) -> None:
        with self._lock:
            self._snapshots.clear()
