"""Tests for the persisted record shape and level derivation."""

from time_arena.config import HISTORY_LIMIT
from time_arena.record import (
    Ban,
    Event,
    EventKind,
    ProgressRecord,
    default_record_dict,
    is_expired,
    level_for_xp,
    level_progress,
)


def test_level_for_xp_matches_step_table_at_boundaries():
    cases = {
        0: 1,
        99: 1,
        100: 2,
        249: 2,
        250: 3,
        449: 3,
        450: 4,
        699: 4,
        700: 5,
        999: 5,
        1000: 6,
        50_000: 6,
    }
    for xp, level in cases.items():
        assert level_for_xp(xp) == level, xp


def test_level_progress_reports_band_and_fraction():
    assert level_progress(0) == (1, 0, 100, 0.0)
    assert level_progress(175) == (2, 100, 250, 0.5)
    level, floor, ceiling, frac = level_progress(1200)
    assert (level, floor, ceiling, frac) == (6, 1000, None, 1.0)


def test_default_record_dict_has_expected_defaults():
    d = default_record_dict()
    assert d["minutesMax"] == 120
    assert d["minutesEarned"] == 0
    assert d["xp"] == 0
    assert d["level"] == 1
    assert d["streak"] == 0
    assert d["lastSeenDayKey"] == ""
    assert d["history"] == []
    assert d["activeBan"] is None
    assert d["theme"] == "dark"


def test_from_dict_merges_partial_data_over_defaults():
    record = ProgressRecord.from_dict({"xp": 260, "streak": 3, "bogus": True})
    assert record.xp == 260
    assert record.streak == 3
    assert record.minutes_max == 120
    assert record.theme == "dark"
    assert "bogus" not in record.to_dict()


def test_from_dict_ignores_stored_level():
    record = ProgressRecord.from_dict({"xp": 120, "level": 6})
    assert record.level == 2
    assert record.to_dict()["level"] == 2


def test_from_dict_falls_back_for_non_dict_and_bad_fields():
    assert ProgressRecord.from_dict(None) == ProgressRecord()
    assert ProgressRecord.from_dict(["nope"]) == ProgressRecord()

    record = ProgressRecord.from_dict(
        {"xp": "lots", "theme": 7, "activeBan": {"name": "x"}, "history": "nope"}
    )
    assert record.xp == 0
    assert record.theme == "dark"
    assert record.active_ban is None
    assert record.history == []


def test_from_dict_clamps_minutes_into_range():
    record = ProgressRecord.from_dict({"minutesMax": 60, "minutesEarned": 500})
    assert record.minutes_earned == 60
    record = ProgressRecord.from_dict({"minutesEarned": -5})
    assert record.minutes_earned == 0


def test_from_dict_reads_legacy_event_keys_and_skips_broken_entries():
    record = ProgressRecord.from_dict(
        {
            "history": [
                {"at": 1700000000000, "type": "mission", "title": "Read", "details": "Reward: +10 min"},
                {"timestamp": 1, "kind": "unknown-kind", "title": "?"},
                "garbage",
                {"timestamp": 2, "kind": "ban", "title": "Ban expired", "details": "Daily Ban"},
            ]
        }
    )
    assert [e.kind for e in record.history] == [EventKind.MISSION, EventKind.BAN]
    assert record.history[0].timestamp == 1700000000000


def test_active_ban_round_trips_through_dict():
    ban = Ban(level=3, name="Daily Ban 🔴", ends_at_ms=5_000)
    record = ProgressRecord(active_ban=ban)
    assert record.to_dict()["activeBan"] == {"level": 3, "name": "Daily Ban 🔴", "endsAtMs": 5_000}
    assert ProgressRecord.from_dict(record.to_dict()).active_ban == ban


def test_is_expired_is_inclusive_at_end():
    ban = Ban(level=2, name="Penalty Zone", ends_at_ms=1_000)
    assert not is_expired(ban, 999)
    assert is_expired(ban, 1_000)
    assert is_expired(ban, 1_001)
    assert ban.remaining_ms(400) == 600
    assert ban.remaining_ms(2_000) == 0


def test_add_event_keeps_newest_first_and_caps_history():
    record = ProgressRecord()
    for i in range(HISTORY_LIMIT + 5):
        record.add_event(Event(i, EventKind.SYSTEM, f"e{i}"))
    assert len(record.history) == HISTORY_LIMIT
    assert record.history[0].title == f"e{HISTORY_LIMIT + 4}"
    assert record.history[-1].title == "e5"


def test_from_dict_treats_infinite_numbers_as_unreadable():
    record = ProgressRecord.from_dict(
        {
            "xp": float("inf"),
            "streak": 2,
            "history": [
                {"timestamp": 1e400, "kind": "system", "title": "New day"},
                {"timestamp": 5, "kind": "mission", "title": "Read"},
            ],
            "activeBan": {"level": 3, "name": "Daily Ban 🔴", "endsAtMs": float("inf")},
        }
    )
    assert record.xp == 0
    assert record.streak == 2
    assert [e.title for e in record.history] == ["Read"]
    assert record.active_ban is None
