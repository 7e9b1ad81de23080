# backend/fittrack/services/streak_engine.py
"""
Day-streak and points bookkeeping.

The persisted streak record is a pure function of the set of distinct
calendar dates on which the user logged a workout, evaluated against the
session's "today". `recalculate_full` rebuilds it from scratch and is the
source of truth; `record_workout` only short-circuits the one case where the
answer is known without re-reading the whole history.
"""
import logging
from dataclasses import asdict, dataclass
from datetime import date, timedelta
from typing import Any, Iterable, List, Mapping, Optional, Protocol, Sequence

from ..session import UserSession

logger = logging.getLogger(__name__)

POINTS_PER_DAY = 10
ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class StreakSnapshot:
    current_streak: int = 0
    longest_streak: int = 0
    last_log_date: Optional[date] = None
    total_points: int = 0

    def to_dict(self):
        data = asdict(self)
        data["last_log_date"] = self.last_log_date.isoformat() if self.last_log_date else None
        return data


EMPTY_STREAK = StreakSnapshot()


class WorkoutSource(Protocol):
    def list_workouts(self, user_id: int) -> Sequence[Any]: ...


class StreakStore(Protocol):
    def get_streak(self, user_id: int) -> Optional[StreakSnapshot]: ...

    def upsert_streak(self, user_id: int, streak: StreakSnapshot) -> None: ...


def _as_date(value) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _workout_date(workout) -> date:
    if isinstance(workout, Mapping):
        return _as_date(workout["date"])
    return _as_date(workout.date)


def distinct_dates(workouts: Iterable[Any]) -> List[date]:
    """Sorted calendar days that carry at least one workout."""
    return sorted({_workout_date(w) for w in workouts})


def compute_streak(
    dates: Iterable[date],
    today: date,
    points_per_day: int = POINTS_PER_DAY,
) -> StreakSnapshot:
    days = sorted(set(dates))
    if not days:
        return EMPTY_STREAK

    longest = 0
    run = 0
    previous: Optional[date] = None
    for day in days:
        if previous is not None and day - previous == ONE_DAY:
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        previous = day

    last_log_date = days[-1]
    # yesterday still counts: the user may not have trained yet today
    if (today - last_log_date).days <= 1:
        current = run
    else:
        current = 0

    return StreakSnapshot(
        current_streak=current,
        longest_streak=longest,
        last_log_date=last_log_date,
        total_points=points_per_day * len(days),
    )


class StreakEngine:
    def __init__(
        self,
        workouts: WorkoutSource,
        streaks: StreakStore,
        points_per_day: int = POINTS_PER_DAY,
    ):
        self.workouts = workouts
        self.streaks = streaks
        self.points_per_day = points_per_day

    def current(self, session: UserSession) -> StreakSnapshot:
        """Persisted record, or zeros when the user never logged anything."""
        return self.streaks.get_streak(session.user_id) or EMPTY_STREAK

    def recalculate_full(self, session: UserSession) -> StreakSnapshot:
        rows = self.workouts.list_workouts(session.user_id)
        snapshot = compute_streak(distinct_dates(rows), session.today, self.points_per_day)

        self.streaks.upsert_streak(session.user_id, snapshot)
        logger.info(
            "streak recalculated user_id=%s current=%s longest=%s points=%s",
            session.user_id,
            snapshot.current_streak,
            snapshot.longest_streak,
            snapshot.total_points,
        )
        return snapshot

    def record_workout(self, session: UserSession, workout_date) -> StreakSnapshot:
        """
        Call after a workout is created.

        A second workout on the day already recorded as the last log leaves
        the distinct-date set unchanged, so the stored record is returned
        as is. Every other case is a full recompute; that includes the very
        first workout, which creates the record.
        """
        workout_date = _as_date(workout_date)
        existing = self.streaks.get_streak(session.user_id)

        if existing is not None and existing.last_log_date == workout_date:
            logger.debug("streak unchanged user_id=%s date=%s", session.user_id, workout_date)
            return existing

        return self.recalculate_full(session)
