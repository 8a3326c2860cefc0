"""Static catalogs: missions, penalties, shop tickets and rules text.

Mission payouts are structured ``Reward`` tuples. ``parse_reward`` keeps the
old free-text format ("+15 min", "+20 XP") readable for callers that still
author rewards as strings.
"""

import re
import enum
from dataclasses import dataclass
from collections.abc import Iterable, Mapping

from .errors import PenaltyNotFoundError

_DIGITS = re.compile(r"\d+")


class RewardKind(str, enum.Enum):
    MINUTES = "minutes"
    XP = "xp"


@dataclass(frozen=True)
class Reward:
    kind: RewardKind
    amount: int

    def label(self) -> str:
        unit = "min" if self.kind is RewardKind.MINUTES else "XP"
        return f"+{self.amount} {unit}"


def _first_number(text: str) -> int:
    m = _DIGITS.search(text)
    return int(m.group()) if m else 0


def parse_reward(text: str) -> tuple[Reward, ...]:
    """Legacy reward strings.

    "min" anywhere gives a MINUTES reward, "XP" (any case) gives an XP reward.
    Both use the first run of digits in the string; no digits means 0.
    """
    text = text or ""
    rewards: list[Reward] = []
    if "min" in text:
        rewards.append(Reward(RewardKind.MINUTES, _first_number(text)))
    if "XP" in text.upper():
        rewards.append(Reward(RewardKind.XP, _first_number(text)))
    return tuple(rewards)


@dataclass(frozen=True)
class Mission:
    title: str
    rewards: tuple[Reward, ...] = ()
    label: str = ""

    @classmethod
    def from_text(cls, title: str, reward: str) -> "Mission":
        return cls(title=title, rewards=parse_reward(reward), label=reward)

    @classmethod
    def coerce(cls, value) -> "Mission":
        if isinstance(value, Mission):
            return value
        if isinstance(value, Mapping):
            return cls.from_text(str(value.get("title", "")), str(value.get("reward", "")))
        raise TypeError(f"cannot build a mission from {type(value).__name__}")

    @property
    def reward_label(self) -> str:
        if self.label:
            return self.label
        return " ".join(r.label() for r in self.rewards)

    @property
    def grants_xp(self) -> bool:
        return any(r.kind is RewardKind.XP for r in self.rewards)


@dataclass(frozen=True)
class Penalty:
    penalty_id: str
    name: str
    level: int
    duration_seconds: int
    desc: str = ""


@dataclass(frozen=True)
class ShopItem:
    item_id: str
    title: str
    cost_minutes: int
    desc: str = ""


def minutes(n: int) -> Reward:
    return Reward(RewardKind.MINUTES, n)


def xp(n: int) -> Reward:
    return Reward(RewardKind.XP, n)


MISSIONS: tuple[Mission, ...] = (
    Mission("Homework done before dinner", (minutes(15),)),
    Mission("Read 20 pages", (minutes(10),)),
    Mission("Room cleaned and bed made", (minutes(10),)),
    Mission("30 minutes of outdoor sport", (minutes(20),)),
    Mission("Helped with the dishes", (xp(20),)),
    Mission("Practiced an instrument", (xp(30),)),
    Mission("Screen off at bedtime", (minutes(5), xp(15))),
)

PENALTIES: tuple[Penalty, ...] = (
    Penalty(
        "scratch-damage",
        "Scratch Damage 🟡",
        1,
        0,
        "Minor slip: small time debit, no ban.",
    ),
    Penalty(
        "penalty-zone",
        "Penalty Zone 🟠",
        2,
        2 * 3600,
        "Rules broken: screens locked for 2 hours.",
    ),
    Penalty(
        "daily-ban",
        "Daily Ban 🔴",
        3,
        24 * 3600,
        "Serious breach: screens locked for 24 hours.",
    ),
    Penalty(
        "system-breach",
        "System Breach ⚫",
        4,
        72 * 3600,
        "Device used in secret: screens locked for 3 days.",
    ),
)

SHOP_ITEMS: tuple[ShopItem, ...] = (
    ShopItem("yt-15", "YouTube ticket", 15, "15 minutes of video."),
    ShopItem("game-30", "Game ticket", 30, "30 minutes of gaming."),
    ShopItem("movie-60", "Movie night ticket", 60, "One movie on the weekend."),
    ShopItem("friend-45", "Online with friends", 45, "45 minutes of online play."),
)

BAN_REDEMPTION = (
    "A ban can be shortened by completing the re-entry quest "
    "with no new penalties until it ends."
)

REENTRY_QUEST = (
    "Re-entry quest: write down what went wrong, agree on one fix, "
    "and complete two missions without screens."
)

RULES_TEXT = (
    "1. Time is earned through missions and spent through shop tickets.",
    "2. Earned time never exceeds the daily maximum.",
    "3. Penalties debit time; serious ones start a ban.",
    "4. While a ban is active, no rewards can be earned.",
    "5. Opening the arena every day keeps the streak alive.",
)


def find_penalty(penalties: Iterable[Penalty], key: str) -> Penalty | None:
    """Match by id, then exact name, then the legacy first-word heuristic."""
    penalties = tuple(penalties)
    for p in penalties:
        if p.penalty_id == key:
            return p
    for p in penalties:
        if p.name == key:
            return p
    # Legacy free-text callers pass names with missing or different markers.
    for p in penalties:
        tokens = p.name.split()
        if tokens and tokens[0] in key:
            return p
    return None


def resolve_penalty(penalties: Iterable[Penalty], key: str) -> Penalty:
    p = find_penalty(penalties, key)
    if p is None:
        raise PenaltyNotFoundError(key)
    return p


def find_shop_item(item_id: str) -> ShopItem | None:
    for item in SHOP_ITEMS:
        if item.item_id == item_id:
            return item
    return None
