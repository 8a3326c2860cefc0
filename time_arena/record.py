import copy
import enum
from dataclasses import dataclass, field

from .config import (
    DEFAULT_MINUTES_MAX,
    DEFAULT_THEME,
    DEFAULT_USER_NAME,
    HISTORY_LIMIT,
    LEVEL_THRESHOLDS,
    MAX_LEVEL,
)


class EventKind(str, enum.Enum):
    SYSTEM = "system"
    MISSION = "mission"
    PENALTY = "penalty"
    BAN = "ban"
    BLOCKED = "blocked"


@dataclass(frozen=True)
class Event:
    timestamp: int
    kind: EventKind
    title: str
    details: str = ""

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "kind": self.kind.value,
            "title": self.title,
            "details": self.details,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Event":
        # "at" / "type" are the key names used by older saves
        ts = data.get("timestamp", data.get("at", 0))
        kind = data.get("kind", data.get("type"))
        return cls(
            timestamp=int(ts),
            kind=EventKind(kind),
            title=str(data.get("title", "")),
            details=str(data.get("details", "")),
        )


@dataclass(frozen=True)
class Ban:
    level: int
    name: str
    ends_at_ms: int

    def remaining_ms(self, now_ms: int) -> int:
        return max(0, self.ends_at_ms - now_ms)

    def to_dict(self) -> dict:
        return {"level": self.level, "name": self.name, "endsAtMs": self.ends_at_ms}

    @classmethod
    def from_dict(cls, data: dict) -> "Ban":
        return cls(
            level=int(data["level"]),
            name=str(data["name"]),
            ends_at_ms=int(data["endsAtMs"]),
        )


def is_expired(ban: Ban, now_ms: int) -> bool:
    return now_ms >= ban.ends_at_ms


def level_for_xp(xp: int) -> int:
    for ceiling, level in LEVEL_THRESHOLDS:
        if xp < ceiling:
            return level
    return MAX_LEVEL


def level_progress(xp: int) -> tuple[int, int, int | None, float]:
    """(level, xp floor of that level, xp ceiling or None at the top, fraction)."""
    level = level_for_xp(xp)
    floor = 0
    for ceiling, lvl in LEVEL_THRESHOLDS:
        if lvl == level:
            denom = max(1, ceiling - floor)
            prog = (xp - floor) / denom
            return level, floor, ceiling, min(1.0, max(0.0, prog))
        floor = ceiling
    return level, floor, None, 1.0


@dataclass
class ProgressRecord:
    minutes_max: int = DEFAULT_MINUTES_MAX
    minutes_earned: int = 0
    xp: int = 0
    streak: int = 0
    last_seen_day_key: str = ""
    history: list[Event] = field(default_factory=list)
    active_ban: Ban | None = None
    theme: str = DEFAULT_THEME
    user_name: str = DEFAULT_USER_NAME

    @property
    def level(self) -> int:
        return level_for_xp(self.xp)

    def clamp_minutes(self) -> None:
        self.minutes_earned = min(self.minutes_max, max(0, int(self.minutes_earned)))

    def add_event(self, event: Event) -> None:
        self.history.insert(0, event)
        del self.history[HISTORY_LIMIT:]

    def to_dict(self) -> dict:
        return {
            "userName": self.user_name,
            "minutesMax": self.minutes_max,
            "minutesEarned": self.minutes_earned,
            "xp": self.xp,
            "level": self.level,
            "streak": self.streak,
            "lastSeenDayKey": self.last_seen_day_key,
            "history": [e.to_dict() for e in self.history],
            "activeBan": self.active_ban.to_dict() if self.active_ban else None,
            "theme": self.theme,
        }

    @classmethod
    def from_dict(cls, data) -> "ProgressRecord":
        """Shallow merge of stored data over the defaults.

        Unknown keys are dropped, a stored ``level`` is ignored, and a field
        that cannot be read keeps its default.
        """
        record = cls()
        if not isinstance(data, dict):
            return record

        for key, attr in (
            ("minutesMax", "minutes_max"),
            ("minutesEarned", "minutes_earned"),
            ("xp", "xp"),
            ("streak", "streak"),
        ):
            if key in data:
                try:
                    setattr(record, attr, max(0, int(data[key])))
                except (TypeError, ValueError, OverflowError):
                    pass

        for key, attr in (
            ("lastSeenDayKey", "last_seen_day_key"),
            ("theme", "theme"),
            ("userName", "user_name"),
        ):
            value = data.get(key)
            if isinstance(value, str):
                setattr(record, attr, value)

        history = data.get("history")
        if isinstance(history, list):
            events: list[Event] = []
            for item in history:
                try:
                    events.append(Event.from_dict(item))
                except (AttributeError, KeyError, TypeError, ValueError, OverflowError):
                    continue
            record.history = events[:HISTORY_LIMIT]

        ban = data.get("activeBan")
        if isinstance(ban, dict):
            try:
                record.active_ban = Ban.from_dict(ban)
            except (KeyError, TypeError, ValueError, OverflowError):
                record.active_ban = None

        record.clamp_minutes()
        return record


def default_record_dict() -> dict:
    return copy.deepcopy(ProgressRecord().to_dict())
