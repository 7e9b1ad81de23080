# backend/fittrack/services/stores.py
"""SQLAlchemy-backed collaborators for the streak engine."""
import logging
from typing import List, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from .. import db
from ..errors import FetchFailure, PersistFailure
from ..models.streak import StreakInfo
from ..models.workout import Workout
from .streak_engine import StreakEngine, StreakSnapshot

logger = logging.getLogger(__name__)


class SQLAlchemyWorkoutStore:
    def list_workouts(self, user_id: int) -> List[Workout]:
        try:
            return Workout.query.filter_by(user_id=user_id).all()
        except SQLAlchemyError as e:
            logger.exception("listing workouts failed for user_id=%s", user_id)
            raise FetchFailure(f"could not load workouts for user {user_id}") from e


class SQLAlchemyStreakStore:
    def _row(self, user_id: int) -> Optional[StreakInfo]:
        try:
            return StreakInfo.query.filter_by(user_id=user_id).first()
        except SQLAlchemyError as e:
            logger.exception("loading streak failed for user_id=%s", user_id)
            raise FetchFailure(f"could not load streak for user {user_id}") from e

    def get_streak(self, user_id: int) -> Optional[StreakSnapshot]:
        row = self._row(user_id)
        if row is None:
            return None
        return StreakSnapshot(
            current_streak=row.current_streak or 0,
            longest_streak=row.longest_streak or 0,
            last_log_date=row.last_log_date,
            total_points=row.total_points or 0,
        )

    def upsert_streak(self, user_id: int, streak: StreakSnapshot) -> None:
        row = self._row(user_id)
        if row is None:
            row = StreakInfo(user_id=user_id)
            db.session.add(row)

        row.current_streak = streak.current_streak
        row.longest_streak = streak.longest_streak
        row.last_log_date = streak.last_log_date
        row.total_points = streak.total_points

        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception("saving streak failed for user_id=%s", user_id)
            raise PersistFailure(f"could not save streak for user {user_id}") from e


def get_streak_engine() -> StreakEngine:
    """Engine wired to the app database; call inside an app context."""
    return StreakEngine(
        SQLAlchemyWorkoutStore(),
        SQLAlchemyStreakStore(),
        points_per_day=current_app.config.get("POINTS_PER_DAY", 10),
    )
