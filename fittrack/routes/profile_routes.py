# backend/fittrack/routes/profile_routes.py
from datetime import date
from flask import Blueprint, current_app, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity
from .. import db
from ..models.user import ACTIVITY_LEVELS, GENDERS, User
from ..services.health import calculate_bmi
from ..session import UserSession

profile_bp = Blueprint("profile", __name__)


def _current_user():
    return db.session.get(User, int(get_jwt_identity()))


@profile_bp.route("", methods=["GET"])
@jwt_required()
def get_profile():
    user = _current_user()
    if not user:
        return jsonify({"message": "user not found"}), 404
    return jsonify({"profile": user.profile_dict()}), 200


@profile_bp.route("", methods=["PUT"])
@jwt_required()
def update_profile():
    user = _current_user()
    if not user:
        return jsonify({"message": "user not found"}), 404

    data = request.get_json(silent=True) or {}

    name = data.get("name")
    age = data.get("age")
    gender = data.get("gender")
    height_cm = data.get("height_cm")
    weight_kg = data.get("weight_kg")
    activity_level = data.get("activity_level")
    goal_steps = data.get("goal_steps")
    goal_calories = data.get("goal_calories")
    joined_date = data.get("joined_date")  # "YYYY-MM-DD"

    if gender is not None and gender not in GENDERS:
        return jsonify({"message": "invalid gender"}), 400
    if activity_level is not None and activity_level not in ACTIVITY_LEVELS:
        return jsonify({"message": "invalid activity_level"}), 400

    try:
        height = float(height_cm) if height_cm is not None else None
        weight = float(weight_kg) if weight_kg is not None else None
        age_val = int(age) if age is not None else None
        steps_val = int(goal_steps) if goal_steps is not None else None
        calories_val = int(goal_calories) if goal_calories is not None else None
    except (TypeError, ValueError):
        return jsonify({"message": "numeric fields must be numbers"}), 400

    if height is not None and height <= 0:
        return jsonify({"message": "height_cm must be positive"}), 400
    if weight is not None and weight <= 0:
        return jsonify({"message": "weight_kg must be positive"}), 400
    if age_val is not None and age_val <= 0:
        return jsonify({"message": "age must be positive"}), 400

    if joined_date:
        # JSON numbers and lists are not dates
        try:
            user.joined_date = date.fromisoformat(joined_date)
        except (TypeError, ValueError):
            return jsonify({"message": "invalid joined_date"}), 400
    elif user.joined_date is None:
        user.joined_date = UserSession.from_request().today

    if name is not None:
        user.name = str(name).strip()
    if age_val is not None:
        user.age = age_val
    if gender is not None:
        user.gender = gender
    if height is not None:
        user.height_cm = height
    if weight is not None:
        user.weight_kg = weight
    if activity_level is not None:
        user.activity_level = activity_level
    if steps_val is not None:
        user.goal_steps = max(0, steps_val)
    if calories_val is not None:
        user.goal_calories = max(0, calories_val)

    user.has_profile = True

    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Profile save error: {e}")
        return jsonify({"message": "Failed to save profile"}), 500

    return jsonify({"profile": user.profile_dict()}), 200


@profile_bp.route("", methods=["DELETE"])
@jwt_required()
def clear_profile():
    user = _current_user()
    if not user:
        return jsonify({"message": "user not found"}), 404

    try:
        user.clear_profile()
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Profile clear error: {e}")
        return jsonify({"message": "Failed to clear profile"}), 500

    return jsonify({"profile": None}), 200


@profile_bp.route("/bmi", methods=["GET"])
@jwt_required()
def profile_bmi():
    user = _current_user()
    if not user:
        return jsonify({"message": "user not found"}), 404
    return jsonify({"bmi": calculate_bmi(user.height_cm, user.weight_kg)}), 200
