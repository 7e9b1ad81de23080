# backend/fittrack/models/user.py
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from .. import db

GENDERS = ("Male", "Female", "Other")
ACTIVITY_LEVELS = ("Sedentary", "Light", "Moderate", "Active", "Very Active")

DEFAULT_GOAL_STEPS = 10000
DEFAULT_GOAL_CALORIES = 500


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)

    # profile
    name = db.Column(db.String(100))
    age = db.Column(db.Integer)
    gender = db.Column(db.Enum(*GENDERS, name="gender_enum"))
    height_cm = db.Column(db.Numeric(5, 2))
    weight_kg = db.Column(db.Numeric(5, 2))
    activity_level = db.Column(db.Enum(*ACTIVITY_LEVELS, name="activity_level_enum"))
    goal_steps = db.Column(db.Integer, default=DEFAULT_GOAL_STEPS)
    goal_calories = db.Column(db.Integer, default=DEFAULT_GOAL_CALORIES)
    joined_date = db.Column(db.Date)
    has_profile = db.Column(db.Boolean, default=False, nullable=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def clear_profile(self) -> None:
        self.name = None
        self.age = None
        self.gender = None
        self.height_cm = None
        self.weight_kg = None
        self.activity_level = None
        self.goal_steps = DEFAULT_GOAL_STEPS
        self.goal_calories = DEFAULT_GOAL_CALORIES
        self.joined_date = None
        self.has_profile = False

    def profile_dict(self):
        if not self.has_profile:
            return None
        return {
            "name": self.name,
            "age": self.age,
            "gender": self.gender,
            "height_cm": float(self.height_cm) if self.height_cm is not None else None,
            "weight_kg": float(self.weight_kg) if self.weight_kg is not None else None,
            "activity_level": self.activity_level,
            "goal_steps": self.goal_steps,
            "goal_calories": self.goal_calories,
            "joined_date": self.joined_date.isoformat() if self.joined_date else None,
        }

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "joined_at": self.created_at.isoformat() if self.created_at else None,
            "profile": self.profile_dict(),
        }
