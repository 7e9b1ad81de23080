# backend/fittrack/routes/report_routes.py
from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from .. import db
from ..models.daily_stats import DailyStats
from ..models.user import User
from ..models.workout import Workout
from ..services import analytics
from ..services.stores import get_streak_engine
from ..session import UserSession

report_bp = Blueprint("report", __name__)


@report_bp.route("/weekly", methods=["GET"])
@jwt_required()
def weekly_report():
    """
    Data for the printable weekly report: last-7-day totals and averages,
    a per-day calorie chart, the ten most recent workouts, streak and BMI.
    Rendering to PDF is left to the client.
    """
    session = UserSession.from_request()
    user = db.session.get(User, session.user_id)
    if not user:
        return jsonify({"message": "user not found"}), 404

    workouts = Workout.query.filter_by(user_id=user.id).all()
    daily_stats = DailyStats.query.filter_by(user_id=user.id).all()
    streak = get_streak_engine().current(session)

    report = analytics.weekly_report(user, workouts, daily_stats, streak.to_dict(), session.today)
    return jsonify({"report": report}), 200
