# backend/fittrack/models/streak.py
from datetime import datetime
from .. import db


class StreakInfo(db.Model):
    """
    One row per user, owned by the streak engine.
    Created on first save, replaced on every recompute, never deleted.
    """
    __tablename__ = "streaks"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), unique=True, nullable=False)
    current_streak = db.Column(db.Integer, nullable=False, default=0)
    longest_streak = db.Column(db.Integer, nullable=False, default=0)
    last_log_date = db.Column(db.Date)
    total_points = db.Column(db.Integer, nullable=False, default=0)
    updated_at = db.Column(
        db.DateTime,
        nullable=False,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    user = db.relationship("User", backref=db.backref("streak", uselist=False))
