import os
import copy
import json
import logging
import threading

from .config import STATE_FILE, STORAGE_KEY
from .logging_setup import get_logger
from .utils import ensure_dir


class JsonFileStore:
    """One JSON file holding ``{storage_key: record}``."""

    def __init__(
        self,
        path: str = STATE_FILE,
        logger: logging.Logger | None = None,
        storage_key: str = STORAGE_KEY,
    ):
        self._path = path
        self._logger = logger or get_logger()
        self._key = storage_key
        self._lock = threading.Lock()

    def load(self) -> dict | None:
        if not os.path.exists(self._path):
            return None
        try:
            with self._lock:
                with open(self._path, "r", encoding="utf-8") as f:
                    data = json.load(f)
        except Exception:
            self._logger.exception("State load failed, starting fresh")
            return None
        if not isinstance(data, dict):
            self._logger.warning(f"State file {self._path} is not an object, ignoring")
            return None
        record = data.get(self._key)
        return record if isinstance(record, dict) else None

    def save(self, record: dict) -> None:
        ensure_dir(os.path.dirname(os.path.abspath(self._path)))
        tmp = self._path + ".tmp"
        try:
            with self._lock:
                with open(tmp, "w", encoding="utf-8") as f:
                    json.dump({self._key: record}, f, indent=2, ensure_ascii=False)
                os.replace(tmp, self._path)
        except Exception:
            self._logger.exception("State save failed")


class MemoryStore:
    def __init__(self, record: dict | None = None):
        self._record = copy.deepcopy(record)
        self.saves = 0

    def load(self) -> dict | None:
        return copy.deepcopy(self._record)

    def save(self, record: dict) -> None:
        self._record = copy.deepcopy(record)
        self.saves += 1

    @property
    def record(self) -> dict | None:
        return copy.deepcopy(self._record)
