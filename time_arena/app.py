import os

from .config import APP_TITLE, LOG_FILE, STATE_FILE, TICK_INTERVAL_SEC
from .utils import ensure_dir
from .logging_setup import setup_logger
from .store import JsonFileStore
from .tracker import ProgressTracker
from .ticker import BanTicker


class TimeArenaApp:
    """Process wiring: logger, state file, tracker and the ban ticker.

    A front end creates one app, calls ``start()``, reads ``app.tracker`` and
    calls its mutators, and calls ``stop()`` on exit.
    """

    def __init__(
        self,
        state_file: str = STATE_FILE,
        log_file: str = LOG_FILE,
        on_tick=None,
        tick_interval_sec: float = TICK_INTERVAL_SEC,
    ):
        ensure_dir(os.path.dirname(os.path.abspath(state_file)))

        self.logger = setup_logger(log_file)
        self.logger.info(f"{APP_TITLE} start")

        self.store = JsonFileStore(state_file, self.logger)
        self.tracker = ProgressTracker.from_store(self.store, logger=self.logger)
        self.ticker = BanTicker(self.tracker, on_tick=on_tick, interval_sec=tick_interval_sec, logger=self.logger)
        self._started = False

    def start(self, now=None) -> None:
        if self._started:
            return
        self.tracker.load()
        self.tracker.rollover(now)
        self.tracker.reconcile(now)
        self.ticker.start()
        self._started = True

    def stop(self) -> None:
        if not self._started:
            return
        self.ticker.stop()
        self.tracker.save()
        self._started = False
        self.logger.info(f"{APP_TITLE} stopped")

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()
