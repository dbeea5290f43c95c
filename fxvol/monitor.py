"""
Gateway connection monitor.

Polls the health endpoint on a fixed interval and keeps the latest
reachability flag. A failed poll just reports disconnected; the next
tick tries again. stop() cancels polling and waits for the thread.
"""

import logging
import threading
from typing import Callable, Optional

from . import config

logger = logging.getLogger(__name__)


class ConnectionMonitor:
    """
    Periodic health checker.

    Parameters
    ----------
    check : zero-arg callable returning True when the gateway is reachable,
            typically GatewayClient.check_connection
    interval : seconds between polls (default: config.HEALTH_POLL_INTERVAL)
    on_change : optional callback invoked with the new status on every transition
    """

    def __init__(
        self,
        check: Callable[[], bool],
        interval: float = None,
        on_change: Optional[Callable[[bool], None]] = None,
    ):
        self._check = check
        self.interval = interval if interval is not None else config.HEALTH_POLL_INTERVAL
        self._on_change = on_change
        self._connected = False
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def connected(self) -> bool:
        with self._lock:
            return self._connected

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def poll(self) -> bool:
        """
        Run one health check now and record the result.

        A check that raises counts as disconnected.
        """
        try:
            status = bool(self._check())
        except Exception as e:
            logger.debug(f"Health check raised: {e!r}")
            status = False

        with self._lock:
            changed = status != self._connected
            self._connected = status

        if changed:
            logger.info(f"Gateway {'connected' if status else 'disconnected'}")
            if self._on_change is not None:
                self._on_change(status)
        return status

    def _run(self) -> None:
        # first poll is immediate, then one per interval
        while not self._stop.is_set():
            self.poll()
            self._stop.wait(self.interval)

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="connection-monitor", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *exc_info):
        self.stop()
