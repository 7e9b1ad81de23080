"""Tests for the day-streak and points engine.

The engine is exercised against in-memory collaborators so the date math can
be checked without a database; the SQLAlchemy stores are covered separately.
"""

from __future__ import annotations

from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from fittrack.errors import FetchFailure, PersistFailure
from fittrack.services.streak_engine import (
    EMPTY_STREAK,
    StreakEngine,
    StreakSnapshot,
    compute_streak,
    distinct_dates,
)
from fittrack.session import UserSession

USER_ID = 7


def d(iso: str) -> date:
    return date.fromisoformat(iso)


class FakeWorkouts:
    def __init__(self, dates=()):
        self.rows = [SimpleNamespace(date=d(x)) for x in dates]
        self.calls = 0
        self.fail = False

    def add(self, iso: str):
        self.rows.append(SimpleNamespace(date=d(iso)))

    def list_workouts(self, user_id):
        self.calls += 1
        if self.fail:
            raise FetchFailure("workouts unavailable")
        return list(self.rows)


class FakeStreaks:
    def __init__(self, existing=None):
        self.records = {}
        if existing is not None:
            self.records[USER_ID] = existing
        self.writes = 0
        self.fail_writes = False

    def get_streak(self, user_id):
        return self.records.get(user_id)

    def upsert_streak(self, user_id, streak):
        if self.fail_writes:
            raise PersistFailure("write rejected")
        self.writes += 1
        self.records[user_id] = streak


def make_engine(dates=(), existing=None):
    workouts = FakeWorkouts(dates)
    streaks = FakeStreaks(existing)
    return StreakEngine(workouts, streaks), workouts, streaks


def session_on(iso: str) -> UserSession:
    return UserSession(user_id=USER_ID, today=d(iso))


class TestComputeStreak:
    """Pure streak math over a set of dates."""

    def test_three_consecutive_days_ending_today(self):
        result = compute_streak([d("2024-01-01"), d("2024-01-02"), d("2024-01-03")], d("2024-01-03"))
        assert result == StreakSnapshot(3, 3, d("2024-01-03"), 30)

    def test_gap_resets_run(self):
        result = compute_streak([d("2024-01-01"), d("2024-01-05")], d("2024-01-05"))
        assert result == StreakSnapshot(1, 1, d("2024-01-05"), 20)

    def test_stale_history_has_no_current_streak(self):
        result = compute_streak([d("2024-01-01"), d("2024-01-02")], d("2024-01-10"))
        assert result.current_streak == 0
        assert result.longest_streak == 2
        assert result.total_points == 20
        assert result.last_log_date == d("2024-01-02")

    def test_last_log_yesterday_keeps_streak_alive(self):
        result = compute_streak([d("2024-03-01"), d("2024-03-02")], d("2024-03-03"))
        assert result.current_streak == 2

    def test_last_log_two_days_ago_breaks_streak(self):
        result = compute_streak([d("2024-03-01"), d("2024-03-02")], d("2024-03-04"))
        assert result.current_streak == 0

    def test_empty_history(self):
        assert compute_streak([], d("2024-01-01")) == EMPTY_STREAK

    def test_longest_run_in_the_middle(self):
        dates = ["2024-01-01", "2024-01-02", "2024-01-03", "2024-01-04", "2024-01-10", "2024-01-11"]
        result = compute_streak([d(x) for x in dates], d("2024-01-11"))
        assert result.longest_streak == 4
        assert result.current_streak == 2

    def test_run_across_month_and_leap_day(self):
        dates = ["2024-02-28", "2024-02-29", "2024-03-01"]
        result = compute_streak([d(x) for x in dates], d("2024-03-01"))
        assert result.current_streak == 3

    def test_unsorted_input_is_sorted(self):
        result = compute_streak([d("2024-01-03"), d("2024-01-01"), d("2024-01-02")], d("2024-01-03"))
        assert result.current_streak == 3
        assert result.last_log_date == d("2024-01-03")

    def test_custom_points_per_day(self):
        result = compute_streak([d("2024-01-01"), d("2024-01-02")], d("2024-01-02"), points_per_day=25)
        assert result.total_points == 50

    @pytest.mark.parametrize(
        "dates",
        [
            ["2024-01-01"],
            ["2024-01-01", "2024-01-03", "2024-01-04"],
            ["2023-12-30", "2023-12-31", "2024-01-01", "2024-01-05"],
            ["2024-05-01", "2024-05-02", "2024-05-03", "2024-06-01"],
        ],
    )
    def test_longest_never_below_current(self, dates):
        days = [d(x) for x in dates]
        for offset in range(4):
            today = max(days) + timedelta(days=offset)
            result = compute_streak(days, today)
            assert result.longest_streak >= result.current_streak
            assert result.total_points == 10 * len(set(days))


class TestDistinctDates:
    def test_duplicates_collapse(self):
        rows = [SimpleNamespace(date=d("2024-01-02")), SimpleNamespace(date=d("2024-01-02"))]
        assert distinct_dates(rows) == [d("2024-01-02")]

    def test_accepts_mappings_and_iso_strings(self):
        rows = [{"date": "2024-01-02", "type": "Yoga"}, {"date": "2024-01-01T08:30:00"}]
        assert distinct_dates(rows) == [d("2024-01-01"), d("2024-01-02")]


class TestRecalculateFull:
    def test_empty_history_persists_zeros(self):
        engine, _, streaks = make_engine()
        result = engine.recalculate_full(session_on("2024-01-01"))

        assert result == EMPTY_STREAK
        assert streaks.records[USER_ID] == EMPTY_STREAK
        assert result.to_dict() == {
            "current_streak": 0,
            "longest_streak": 0,
            "last_log_date": None,
            "total_points": 0,
        }

    def test_empty_history_resets_existing_record(self):
        engine, _, streaks = make_engine(existing=StreakSnapshot(4, 9, d("2024-01-01"), 90))
        engine.recalculate_full(session_on("2024-01-02"))
        assert streaks.records[USER_ID] == EMPTY_STREAK

    def test_duplicate_workouts_count_once(self):
        engine, _, _ = make_engine(["2024-01-01", "2024-01-01", "2024-01-02", "2024-01-02"])
        result = engine.recalculate_full(session_on("2024-01-02"))
        assert result.total_points == 20
        assert result.current_streak == 2

    def test_idempotent(self):
        engine, _, streaks = make_engine(["2024-01-01", "2024-01-02", "2024-01-04"])
        first = engine.recalculate_full(session_on("2024-01-05"))
        second = engine.recalculate_full(session_on("2024-01-05"))

        assert first == second
        assert streaks.records[USER_ID] == second
        assert streaks.writes == 2

    def test_overwrites_drifted_record(self):
        engine, _, streaks = make_engine(
            ["2024-01-01", "2024-01-02"], existing=StreakSnapshot(12, 12, d("2024-01-09"), 500)
        )
        result = engine.recalculate_full(session_on("2024-01-02"))
        assert result == StreakSnapshot(2, 2, d("2024-01-02"), 20)
        assert streaks.records[USER_ID] == result

    def test_fetch_failure_propagates_without_writing(self):
        engine, workouts, streaks = make_engine(["2024-01-01"])
        workouts.fail = True

        with pytest.raises(FetchFailure):
            engine.recalculate_full(session_on("2024-01-01"))
        assert streaks.writes == 0
        assert USER_ID not in streaks.records

    def test_persist_failure_propagates(self):
        engine, _, streaks = make_engine(["2024-01-01"])
        streaks.fail_writes = True

        with pytest.raises(PersistFailure):
            engine.recalculate_full(session_on("2024-01-01"))
        assert USER_ID not in streaks.records


class TestRecordWorkout:
    def test_first_workout_creates_record(self):
        engine, workouts, streaks = make_engine(["2024-01-01"])
        result = engine.record_workout(session_on("2024-01-01"), d("2024-01-01"))

        assert result == StreakSnapshot(1, 1, d("2024-01-01"), 10)
        assert streaks.records[USER_ID] == result
        assert workouts.calls == 1

    def test_backdated_first_workout_is_not_a_current_streak(self):
        engine, _, _ = make_engine(["2024-01-01"])
        result = engine.record_workout(session_on("2024-01-05"), "2024-01-01")
        assert result.current_streak == 0
        assert result.longest_streak == 1

    def test_same_day_is_a_no_op(self):
        existing = StreakSnapshot(2, 2, d("2024-01-02"), 20)
        engine, workouts, streaks = make_engine(
            ["2024-01-01", "2024-01-02", "2024-01-02"], existing=existing
        )
        result = engine.record_workout(session_on("2024-01-02"), d("2024-01-02"))

        assert result == existing
        assert workouts.calls == 0
        assert streaks.writes == 0

    def test_next_day_extends_streak(self):
        existing = StreakSnapshot(2, 2, d("2024-01-02"), 20)
        engine, workouts, _ = make_engine(["2024-01-01", "2024-01-02"], existing=existing)
        workouts.add("2024-01-03")

        result = engine.record_workout(session_on("2024-01-03"), d("2024-01-03"))
        assert result == StreakSnapshot(3, 3, d("2024-01-03"), 30)

    def test_gap_restarts_streak_and_keeps_longest(self):
        existing = StreakSnapshot(3, 3, d("2024-01-03"), 30)
        engine, workouts, _ = make_engine(["2024-01-01", "2024-01-02", "2024-01-03"], existing=existing)
        workouts.add("2024-01-08")

        result = engine.record_workout(session_on("2024-01-08"), d("2024-01-08"))
        assert result.current_streak == 1
        assert result.longest_streak == 3
        assert result.total_points == 40

    def test_backfilled_day_joins_two_runs(self):
        existing = StreakSnapshot(1, 1, d("2024-01-03"), 20)
        engine, workouts, _ = make_engine(["2024-01-01", "2024-01-03"], existing=existing)
        workouts.add("2024-01-02")

        result = engine.record_workout(session_on("2024-01-03"), d("2024-01-02"))
        assert result == StreakSnapshot(3, 3, d("2024-01-03"), 30)

    def test_current_returns_zeros_without_record(self):
        engine, _, _ = make_engine()
        assert engine.current(session_on("2024-01-01")) == EMPTY_STREAK
