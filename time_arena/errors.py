class TimeArenaError(Exception):
    """Base class for tracker errors."""


class PenaltyNotFoundError(TimeArenaError, KeyError):
    def __init__(self, key: str):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"penalty not found: {self.key!r}"


class RewardBlockedError(TimeArenaError):
    """A mission reward was attempted while a ban is active."""

    def __init__(self, mission_title: str, ban):
        super().__init__(f"reward for {mission_title!r} blocked by active ban {ban.name!r}")
        self.mission_title = mission_title
        self.ban = ban
