import threading
import logging
from collections.abc import Callable

from .config import TICK_INTERVAL_SEC
from .logging_setup import get_logger


class BanTicker:
    """Calls ``tracker.ban_status()`` on a daemon thread, once per interval.

    The status check clears expired bans as a side effect; ``on_tick`` gets the
    resulting BanStatus so a display can refresh its countdown.
    """

    def __init__(
        self,
        tracker,
        on_tick: Callable | None = None,
        interval_sec: float = TICK_INTERVAL_SEC,
        logger: logging.Logger | None = None,
    ):
        self._tracker = tracker
        self._on_tick = on_tick
        self._interval = interval_sec
        self._logger = logger or get_logger()
        self._stop_event = threading.Event()
        self._thread = None

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name="BanTicker", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout if timeout is not None else self._interval * 2)
            if not self._thread.is_alive():
                self._thread = None
            else:
                self._logger.warning("Ban ticker did not stop within timeout")

    def tick(self):
        status = self._tracker.ban_status()
        if self._on_tick is not None:
            self._on_tick(status)
        return status

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.tick()
            except Exception:
                self._logger.exception("Ban tick failed")
            self._stop_event.wait(self._interval)
