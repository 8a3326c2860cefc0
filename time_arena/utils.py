import os
import time
import datetime


def ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def now_ms(now: datetime.datetime | None = None) -> int:
    if now is None:
        return int(time.time() * 1000)
    return int(now.timestamp() * 1000)


def day_key(now: datetime.datetime | None = None) -> str:
    """Local calendar date as YYYY-MM-DD."""
    if now is None:
        d = datetime.date.today()
    elif now.tzinfo is not None:
        d = now.astimezone().date()
    else:
        d = now.date()
    return d.isoformat()


def parse_day_key(key: str) -> datetime.date | None:
    try:
        return datetime.date.fromisoformat(key)
    except (TypeError, ValueError):
        return None


def days_between(earlier: str, later: str) -> int | None:
    """Whole calendar days from one day key to another, None if either is unreadable."""
    a = parse_day_key(earlier)
    b = parse_day_key(later)
    if a is None or b is None:
        return None
    return (b - a).days


def ms_to_hms(ms: float) -> str:
    seconds = max(0, int(ms // 1000))
    h, rest = divmod(seconds, 3600)
    m, s = divmod(rest, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"
