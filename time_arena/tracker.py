import copy
import datetime
import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from .catalog import PENALTIES, Mission, Penalty, RewardKind, resolve_penalty
from .config import (
    DAILY_MESSAGES,
    IMPLICIT_MISSION_XP,
    MAJOR_PENALTY_DEBIT_MIN,
    MINOR_PENALTY_DEBIT_MIN,
    SAVE_ON_MUTATION,
    THEMES,
)
from .errors import RewardBlockedError
from .logging_setup import get_logger
from .record import Ban, Event, EventKind, ProgressRecord, is_expired
from .utils import day_key, days_between, ms_to_hms, now_ms


@dataclass(frozen=True)
class BanStatus:
    active: bool
    ban: Ban | None
    remaining_ms: int


class ProgressTracker:
    """Owns one ProgressRecord and applies every state change to it.

    ``load`` returns the stored record dict (or None) and ``save`` receives the
    full record dict after each mutation. Every public method takes an
    optional ``now`` (local datetime) so callers and tests control the clock.
    """

    def __init__(
        self,
        load: Callable[[], dict | None],
        save: Callable[[dict], None],
        logger: logging.Logger | None = None,
        penalties: Iterable[Penalty] = PENALTIES,
        save_on_mutation: bool = SAVE_ON_MUTATION,
    ):
        self._load = load
        self._save = save
        self._logger = logger or get_logger()
        self._penalties = tuple(penalties)
        self._save_on_mutation = save_on_mutation
        self._lock = threading.RLock()
        self._record = ProgressRecord()

    @classmethod
    def from_store(cls, store, **kwargs) -> "ProgressTracker":
        return cls(store.load, store.save, **kwargs)

    # -- persistence -------------------------------------------------------

    def load(self) -> ProgressRecord:
        data = self._load()
        record = ProgressRecord.from_dict(data)
        with self._lock:
            self._record = record
            record = copy.deepcopy(record)
        if data is None:
            self._logger.info("No stored record, using defaults")
        else:
            self._logger.info(
                f"Record loaded xp={record.xp} streak={record.streak} "
                f"minutes={record.minutes_earned}/{record.minutes_max}"
            )
        return record

    def save(self) -> None:
        with self._lock:
            data = self._record.to_dict()
        self._save(data)

    def _commit(self) -> None:
        if self._save_on_mutation:
            self.save()

    @property
    def record(self) -> ProgressRecord:
        """A copy of the current record; changes go through the tracker."""
        with self._lock:
            return copy.deepcopy(self._record)

    def _event(self, kind: EventKind, title: str, details: str, now) -> None:
        self._record.add_event(Event(now_ms(now), kind, title, details))

    # -- daily rollover ----------------------------------------------------

    def rollover(self, now: datetime.datetime | None = None) -> bool:
        today = day_key(now)
        with self._lock:
            r = self._record
            last = r.last_seen_day_key
            if last == today:
                return False

            if not last:
                r.streak = 1
            else:
                diff = days_between(last, today)
                if diff == 1:
                    r.streak = max(0, r.streak) + 1
                else:
                    if diff is not None and diff < 0:
                        self._logger.warning(
                            f"Clock moved backward last_seen={last} today={today}, streak reset"
                        )
                    r.streak = 1

            r.last_seen_day_key = today
            self._event(EventKind.SYSTEM, "New day", f"Streak: {r.streak}", now)
            self._commit()
            streak = r.streak

        self._logger.info(f"Rollover day={today} streak={streak}")
        return True

    # -- bans --------------------------------------------------------------

    def reconcile(self, now: datetime.datetime | None = None) -> Ban | None:
        """Clear the active ban if it has run out. Returns the cleared ban."""
        ts = now_ms(now)
        with self._lock:
            ban = self._record.active_ban
            if ban is None or not is_expired(ban, ts):
                return None
            self._event(EventKind.BAN, "Ban expired", ban.name, now)
            self._record.active_ban = None
            self._commit()
        self._logger.info(f"Ban expired name={ban.name}")
        return ban

    def is_ban_active(self, now: datetime.datetime | None = None) -> bool:
        return self.ban_status(now).active

    def ban_status(self, now: datetime.datetime | None = None) -> BanStatus:
        self.reconcile(now)
        ts = now_ms(now)
        with self._lock:
            ban = self._record.active_ban
        if ban is None:
            return BanStatus(False, None, 0)
        return BanStatus(True, ban, ban.remaining_ms(ts))

    def countdown_text(self, now: datetime.datetime | None = None) -> str:
        status = self.ban_status(now)
        if not status.active:
            return ""
        return f"Reactivation in: {ms_to_hms(status.remaining_ms)}"

    # -- missions ----------------------------------------------------------

    def apply_mission(self, mission, now: datetime.datetime | None = None) -> int:
        """Credit a mission's rewards and return the new level.

        Raises RewardBlockedError (after recording a ``blocked`` event) while
        a ban is active.
        """
        mission = Mission.coerce(mission)

        with self._lock:
            status = self.ban_status(now)
            r = self._record
            if status.active:
                self._event(EventKind.BLOCKED, "Reward blocked (ban active)", mission.title, now)
                self._commit()
                self._logger.info(f"Mission blocked title={mission.title!r} ban={status.ban.name!r}")
                raise RewardBlockedError(mission.title, status.ban)

            for reward in mission.rewards:
                if reward.kind is RewardKind.MINUTES:
                    r.minutes_earned += max(0, reward.amount)
                else:
                    r.xp += max(0, reward.amount)
            if not mission.grants_xp:
                r.xp += IMPLICIT_MISSION_XP
            r.clamp_minutes()

            self._event(EventKind.MISSION, mission.title, f"Reward: {mission.reward_label}", now)
            self._commit()
            level = r.level
            minutes, xp = r.minutes_earned, r.xp

        self._logger.info(
            f"Mission done title={mission.title!r} minutes={minutes} xp={xp} level={level}"
        )
        return level

    # -- penalties ---------------------------------------------------------

    def apply_penalty(self, key: str, now: datetime.datetime | None = None) -> Penalty:
        """Resolve a penalty by id or name and apply it.

        Raises PenaltyNotFoundError without touching the record when nothing
        matches.
        """
        p = resolve_penalty(self._penalties, key)
        ts = now_ms(now)

        with self._lock:
            r = self._record
            if p.duration_seconds > 0:
                r.active_ban = Ban(level=p.level, name=p.name, ends_at_ms=ts + p.duration_seconds * 1000)

            if p.level >= 2:
                r.minutes_earned -= MAJOR_PENALTY_DEBIT_MIN
            elif p.level == 1:
                r.minutes_earned -= MINOR_PENALTY_DEBIT_MIN
            r.clamp_minutes()

            self._event(EventKind.PENALTY, p.name, p.desc, now)
            self._commit()
            minutes = r.minutes_earned

        self._logger.info(
            f"Penalty applied name={p.name!r} level={p.level} ban_sec={p.duration_seconds} minutes={minutes}"
        )
        return p

    # -- misc mutators -----------------------------------------------------

    def reset_today(self, now: datetime.datetime | None = None) -> None:
        with self._lock:
            self._record.minutes_earned = 0
            self._event(EventKind.SYSTEM, "Day reset", "Earned minutes = 0", now)
            self._commit()
        self._logger.info("Earned minutes reset")

    def toggle_theme(self) -> str:
        with self._lock:
            r = self._record
            r.theme = THEMES[1] if r.theme == THEMES[0] else THEMES[0]
            self._commit()
            theme = r.theme
        self._logger.info(f"Theme set theme={theme}")
        return theme

    def set_user_name(self, name: str) -> str:
        name = (name or "").strip()
        with self._lock:
            if name:
                self._record.user_name = name
                self._commit()
            current = self._record.user_name
        if name:
            self._logger.info(f"User name set name={current!r}")
        return current

    # -- read side ---------------------------------------------------------

    @property
    def level(self) -> int:
        return self._record.level

    @property
    def locked_minutes(self) -> int:
        r = self._record
        return max(0, r.minutes_max - r.minutes_earned)

    @property
    def progress_percent(self) -> int:
        r = self._record
        return int(100 * r.minutes_earned / max(1, r.minutes_max) + 0.5)

    def daily_message(self, now: datetime.datetime | None = None) -> str:
        day = (now or datetime.datetime.now()).day
        return DAILY_MESSAGES[(day + self._record.streak) % len(DAILY_MESSAGES)]

    def snapshot(self, now: datetime.datetime | None = None) -> dict:
        status = self.ban_status(now)
        with self._lock:
            data = copy.deepcopy(self._record.to_dict())
        data["banActive"] = status.active
        data["banRemainingMs"] = status.remaining_ms
        data["lockedMinutes"] = self.locked_minutes
        data["progressPercent"] = self.progress_percent
        return data
