# backend/fittrack/models/daily_stats.py
from .. import db

MAX_SLEEP_HOURS = 24


class DailyStats(db.Model):
    __tablename__ = "daily_stats"
    __table_args__ = (db.UniqueConstraint("user_id", "stat_date", name="uq_daily_stats_user_date"),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    stat_date = db.Column(db.Date, nullable=False)
    water_intake = db.Column(db.Integer, default=0, nullable=False)  # glasses
    sleep_hours = db.Column(db.Float, default=0, nullable=False)

    user = db.relationship("User", backref=db.backref("daily_stats", cascade="all, delete-orphan"))

    def to_dict(self):
        return {
            "date": self.stat_date.isoformat(),
            "water_intake": self.water_intake or 0,
            "sleep_hours": float(self.sleep_hours or 0),
        }
