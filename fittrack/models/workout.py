# backend/fittrack/models/workout.py
from datetime import datetime
from .. import db

WORKOUT_TYPES = (
    "Running",
    "Walking",
    "Cycling",
    "Weightlifting",
    "Yoga",
    "HIIT",
    "Swimming",
    "Other",
)
# older clients send "Strength" for weightlifting
WORKOUT_TYPE_ALIASES = {"Strength": "Weightlifting"}

INTENSITIES = ("Low", "Medium", "High")
FEELINGS = ("Amazing", "Good", "Okay", "Tired", "Hurt")


class Workout(db.Model):
    __tablename__ = "workouts"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    date = db.Column(db.Date, nullable=False)
    time = db.Column(db.String(5), nullable=False, default="12:00")  # "HH:MM"

    type = db.Column(db.String(20), nullable=False, default="Other")
    duration_minutes = db.Column(db.Integer, nullable=False)
    distance_km = db.Column(db.Float, default=0)
    steps = db.Column(db.Integer, default=0)
    avg_heart_rate = db.Column(db.Integer, default=0)
    intensity = db.Column(db.String(10), nullable=False, default="Medium")
    feeling = db.Column(db.String(10), nullable=False, default="Good")
    rpe = db.Column(db.Integer, default=5)
    calories_burned = db.Column(db.Integer, default=0)
    notes = db.Column(db.Text)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    user = db.relationship("User", backref=db.backref("workouts", cascade="all, delete-orphan"))

    def to_dict(self):
        return {
            "id": self.id,
            "date": self.date.isoformat() if self.date else None,
            "time": self.time,
            "type": self.type,
            "duration_minutes": self.duration_minutes or 0,
            "distance_km": self.distance_km or 0,
            "steps": self.steps or 0,
            "avg_heart_rate": self.avg_heart_rate or 0,
            "intensity": self.intensity,
            "feeling": self.feeling,
            "rpe": self.rpe,
            "calories_burned": self.calories_burned or 0,
            "notes": self.notes,
        }
