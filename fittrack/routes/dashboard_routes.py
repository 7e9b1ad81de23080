# backend/fittrack/routes/dashboard_routes.py
from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db
from ..models.daily_stats import DailyStats
from ..models.user import User
from ..models.workout import Workout
from ..services import analytics
from ..services.health import calculate_bmi
from ..services.stores import get_streak_engine
from ..session import UserSession

# Blueprint for dashboard-related endpoints
dashboard_bp = Blueprint("dashboard", __name__)

MIN_YEAR = 1970
MAX_YEAR = 9998


# -------------------------
# DASHBOARD OVERVIEW
# -------------------------
@dashboard_bp.route("/overview", methods=["GET"])
@jwt_required()
def dashboard_overview():
    session = UserSession.from_request()
    user = db.session.get(User, session.user_id)
    if not user:
        return jsonify({"message": "user not found"}), 404

    # self-healing: every dashboard load rebuilds the streak from history
    streak = get_streak_engine().recalculate_full(session)

    workouts = Workout.query.filter_by(user_id=user.id).all()
    daily_stats = DailyStats.query.filter_by(user_id=user.id).all()

    return (
        jsonify(
            {
                "user": user.to_dict(),
                "bmi": calculate_bmi(user.height_cm, user.weight_kg),
                "today": analytics.today_summary(user, workouts, daily_stats, session.today),
                "last7days": analytics.weekly_series(workouts, daily_stats, session.today),
                "type_distribution": analytics.type_distribution(workouts),
                "intensity_distribution": analytics.intensity_distribution(workouts),
                "top_activities": analytics.calories_by_type(workouts),
                "streak": streak.to_dict(),
            }
        ),
        200,
    )


# -------------------------
# ACTIVITY HEATMAP
# -------------------------
@dashboard_bp.route("/heatmap", methods=["GET"])
@jwt_required()
def dashboard_heatmap():
    session = UserSession.from_request()

    year = request.args.get("year", type=int) or session.today.year
    if not (MIN_YEAR <= year <= MAX_YEAR):
        return jsonify({"message": "invalid year"}), 400

    workouts = Workout.query.filter_by(user_id=session.user_id).all()
    return (
        jsonify(
            {
                "heatmap": analytics.activity_heatmap(workouts, year),
                "available_years": analytics.available_years(workouts, session.today.year),
            }
        ),
        200,
    )
