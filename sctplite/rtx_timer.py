"""Retransmission timeout estimation and the retransmission timer (RFC 4960 sec 6.3)."""

import math
import threading
from typing import Optional, Protocol

RTO_INITIAL = 3.0 * 1000  # msec
RTO_MIN = 1.0 * 1000  # msec
RTO_MAX = 60.0 * 1000  # msec
RTO_ALPHA = 0.125
RTO_BETA = 0.25
MAX_INIT_RETRANS = 8
PATH_MAX_RETRANS = 5
NO_MAX_RETRANS = 0


class RTOManager:
    """Tracks smoothed RTT and its variation to derive the RTO, in milliseconds."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._srtt = 0.0
        self._rttvar = 0.0
        self._rto = RTO_INITIAL
        self._no_update = False

    @property
    def srtt(self) -> float:
        """The smoothed round-trip time."""
        with self._lock:
            return self._srtt

    @property
    def rttvar(self) -> float:
        """The round-trip time variation."""
        with self._lock:
            return self._rttvar

    def set_new_rtt(self, rtt: float) -> float:
        """Fold a newly measured RTT into the estimate; return the smoothed RTT."""
        with self._lock:
            if self._no_update:
                return self._srtt
            if self._srtt == 0:
                self._srtt = rtt
                self._rttvar = rtt / 2
            else:
                self._rttvar = (1 - RTO_BETA) * self._rttvar + RTO_BETA * abs(self._srtt - rtt)
                self._srtt = (1 - RTO_ALPHA) * self._srtt + RTO_ALPHA * rtt
            self._rto = min(max(self._srtt + 4 * self._rttvar, RTO_MIN), RTO_MAX)
            return self._srtt

    def rto(self) -> float:
        """The current retransmission timeout in milliseconds."""
        with self._lock:
            return self._rto

    def reset(self) -> None:
        """Return to the initial state, unless updates are frozen."""
        with self._lock:
            if self._no_update:
                return
            self._srtt = 0.0
            self._rttvar = 0.0
            self._rto = RTO_INITIAL

    def set_rto(self, rto: float, no_update: bool) -> None:
        """Force the RTO; with ``no_update`` later measurements and resets are ignored."""
        with self._lock:
            self._rto = rto
            self._no_update = no_update


class RtxTimerObserver(Protocol):
    """Receives timer events. Callbacks must not start or stop the timer."""

    def on_retransmission_timeout(self, timer_id: int, n_rtos: int) -> None:
        """Called on each expiry, with the number of expiries so far."""

    def on_retransmission_failure(self, timer_id: int) -> None:
        """Called once the maximum number of retransmissions is exceeded."""


def calculate_next_timeout(rto: float, n_rtos: int) -> float:
    """Back off ``rto`` by doubling per expiry, capped at RTO_MAX."""
    if n_rtos < 31:
        return min(rto * (1 << n_rtos), RTO_MAX)
    return RTO_MAX


class RtxTimer:
    """A backing-off retransmission timer running on its own thread.

    With ``max_retrans`` of 0 it keeps firing until stopped and never reports failure.
    """

    def __init__(self, timer_id: int, observer: RtxTimerObserver, max_retrans: int) -> None:
        self.timer_id = timer_id
        self.observer = observer
        self.max_retrans = max_retrans
        self._lock = threading.Lock()
        self._cancel: Optional[threading.Event] = None
        self._closed = False

    def start(self, rto: float) -> bool:
        """Start the timer with ``rto`` milliseconds; False if running or closed.

        The value is not clamped to RTO_MIN, so callers should pass
        ``RTOManager.rto()``.
        """
        with self._lock:
            if self._closed or self._cancel is not None:
                return False
            cancel = threading.Event()
            self._cancel = cancel
        thread = threading.Thread(target=self._run, args=(rto, cancel), daemon=True)
        thread.start()
        return True

    def _run(self, rto: float, cancel: threading.Event) -> None:
        n_rtos = 0
        while not cancel.wait(calculate_next_timeout(rto, n_rtos) / 1000.0):
            n_rtos += 1
            if self.max_retrans == 0 or n_rtos <= self.max_retrans:
                self.observer.on_retransmission_timeout(self.timer_id, n_rtos)
            else:
                self.stop()
                self.observer.on_retransmission_failure(self.timer_id)

    def stop(self) -> None:
        """Stop the timer; a no-op when it is not running."""
        with self._lock:
            if self._cancel is not None:
                self._cancel.set()
                self._cancel = None

    def close(self) -> None:
        """Stop the timer for good; later starts are refused."""
        with self._lock:
            if self._cancel is not None:
                self._cancel.set()
                self._cancel = None
            self._closed = True

    def is_running(self) -> bool:
        """Whether the timer is currently running."""
        with self._lock:
            return self._cancel is not None

    def __enter__(self) -> "RtxTimer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()