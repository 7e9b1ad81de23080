# backend/fittrack/routes/workout_routes.py

import re
from datetime import date
from typing import Any, Dict, Optional, Tuple

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db
from ..models.user import User
from ..models.workout import FEELINGS, INTENSITIES, WORKOUT_TYPES, Workout
from ..services.health import estimate_calories, normalize_workout_type
from ..services.stores import get_streak_engine
from ..session import UserSession

workouts_bp = Blueprint("workouts", __name__)

TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
MIN_HEART_RATE = 30
MAX_HEART_RATE = 220


# ------------------------------
# Helpers
# ------------------------------
def _safe_int(v: Any, default: int = 0) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


def _safe_float(v: Any, default: float = 0.0) -> float:
    try:
        return float(v)
    except (TypeError, ValueError):
        return default


def _parse_date(v: Any) -> Optional[date]:
    if not v:
        return None
    try:
        return date.fromisoformat(str(v))
    except ValueError:
        return None


def _read_workout_fields(data: Dict[str, Any], existing: Optional[Workout] = None) -> Tuple[Dict[str, Any], Optional[str]]:
    """
    Merge the request body over the existing workout (if any) and validate.
    Returns (fields, error_message).
    """
    base = existing.to_dict() if existing else {}

    def pick(key, default=None):
        return data[key] if key in data else base.get(key, default)

    workout_date = _parse_date(pick("date"))
    if workout_date is None:
        return {}, "date is required (YYYY-MM-DD)"

    time_str = pick("time") or "12:00"
    if not TIME_RE.match(str(time_str)):
        return {}, "time must be HH:MM"

    workout_type = normalize_workout_type(pick("type", "Other"))
    if workout_type not in WORKOUT_TYPES:
        return {}, f"type must be one of {', '.join(WORKOUT_TYPES)}"

    duration = _safe_int(pick("duration_minutes"), 0)
    if duration <= 0:
        return {}, "duration_minutes must be greater than 0"

    steps = _safe_int(pick("steps"), 0)
    if steps < 0:
        return {}, "steps cannot be negative"

    distance = _safe_float(pick("distance_km"), 0.0)
    if distance < 0:
        return {}, "distance_km cannot be negative"

    heart_rate = _safe_int(pick("avg_heart_rate"), 0)
    if heart_rate and not (MIN_HEART_RATE <= heart_rate <= MAX_HEART_RATE):
        return {}, "avg_heart_rate must be between 30 and 220"

    rpe = _safe_int(pick("rpe"), 5) or 5
    if not (1 <= rpe <= 10):
        return {}, "rpe must be between 1 and 10"

    intensity = pick("intensity") or "Medium"
    if intensity not in INTENSITIES:
        return {}, "intensity must be Low, Medium or High"

    feeling = pick("feeling") or "Good"
    if feeling not in FEELINGS:
        return {}, f"feeling must be one of {', '.join(FEELINGS)}"

    return {
        "date": workout_date,
        "time": str(time_str),
        "type": workout_type,
        "duration_minutes": duration,
        "distance_km": distance,
        "steps": steps,
        "avg_heart_rate": heart_rate,
        "intensity": intensity,
        "feeling": feeling,
        "rpe": rpe,
        "notes": pick("notes"),
    }, None


def _calories_for(fields: Dict[str, Any], data: Dict[str, Any], user: User) -> int:
    # client-supplied value wins, otherwise estimate from the profile weight
    if data.get("calories_burned") is not None:
        return max(0, _safe_int(data.get("calories_burned"), 0))
    return estimate_calories(
        fields["type"],
        fields["duration_minutes"],
        fields["intensity"],
        user.weight_kg,
    )


# ------------------------------
# GET /api/workouts
# ------------------------------
@workouts_bp.route("", methods=["GET"])
@jwt_required()
def list_workouts():
    session = UserSession.from_request()

    rows = (
        Workout.query.filter_by(user_id=session.user_id)
        .order_by(Workout.date.desc(), Workout.time.desc())
        .all()
    )
    return jsonify({"workouts": [w.to_dict() for w in rows]}), 200


# ------------------------------
# POST /api/workouts
# ------------------------------
@workouts_bp.route("", methods=["POST"])
@jwt_required()
def create_workout():
    session = UserSession.from_request()
    user = db.session.get(User, session.user_id)
    if not user:
        return jsonify({"message": "user not found"}), 404

    data = request.get_json(silent=True) or {}
    fields, error = _read_workout_fields(data)
    if error:
        return jsonify({"message": error}), 400

    try:
        workout = Workout(user_id=user.id, **fields)
        workout.calories_burned = _calories_for(fields, data, user)
        db.session.add(workout)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"[workouts/create] {e}")
        return jsonify({"message": "Failed to save workout", "error": str(e)}), 500

    streak = get_streak_engine().record_workout(session, workout.date)

    return jsonify({"workout": workout.to_dict(), "streak": streak.to_dict()}), 201


# ------------------------------
# PUT /api/workouts/<id>
# ------------------------------
@workouts_bp.route("/<int:workout_id>", methods=["PUT"])
@jwt_required()
def update_workout(workout_id):
    session = UserSession.from_request()
    user = db.session.get(User, session.user_id)
    if not user:
        return jsonify({"message": "user not found"}), 404

    workout = Workout.query.filter_by(id=workout_id, user_id=user.id).first()
    if not workout:
        return jsonify({"message": "workout not found"}), 404

    data = request.get_json(silent=True) or {}
    fields, error = _read_workout_fields(data, existing=workout)
    if error:
        return jsonify({"message": error}), 400

    try:
        for key, value in fields.items():
            setattr(workout, key, value)
        workout.calories_burned = _calories_for(fields, data, user)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"[workouts/update] {e}")
        return jsonify({"message": "Failed to update workout", "error": str(e)}), 500

    # the old date may have dropped out of the history
    streak = get_streak_engine().recalculate_full(session)

    return jsonify({"workout": workout.to_dict(), "streak": streak.to_dict()}), 200


# ------------------------------
# DELETE /api/workouts/<id>
# ------------------------------
@workouts_bp.route("/<int:workout_id>", methods=["DELETE"])
@jwt_required()
def delete_workout(workout_id):
    session = UserSession.from_request()

    workout = Workout.query.filter_by(id=workout_id, user_id=session.user_id).first()
    if not workout:
        return jsonify({"message": "workout not found"}), 404

    try:
        db.session.delete(workout)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"[workouts/delete] {e}")
        return jsonify({"message": "Failed to delete workout", "error": str(e)}), 500

    streak = get_streak_engine().recalculate_full(session)

    return jsonify({"deleted": workout_id, "streak": streak.to_dict()}), 200


# ------------------------------
# POST /api/workouts/estimate-calories
# ------------------------------
@workouts_bp.route("/estimate-calories", methods=["POST"])
@jwt_required()
def estimate_workout_calories():
    """
    Expected body:
    {
      "type": "Running",
      "duration_minutes": 30,
      "intensity": "High",
      "weight_kg": 70        # optional, defaults to the profile weight
    }
    """
    session = UserSession.from_request()
    user = db.session.get(User, session.user_id)
    data = request.get_json(silent=True) or {}

    duration = _safe_int(data.get("duration_minutes"), 0)
    if duration <= 0:
        return jsonify({"message": "duration_minutes must be greater than 0"}), 400

    weight = data.get("weight_kg")
    if weight is None and user is not None:
        weight = user.weight_kg

    calories = estimate_calories(
        data.get("type") or "Other",
        duration,
        data.get("intensity") or "Medium",
        _safe_float(weight, 0.0) or None,
    )
    return jsonify({"calories_burned": calories}), 200
