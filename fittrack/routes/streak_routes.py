# backend/fittrack/routes/streak_routes.py
from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from ..services.stores import get_streak_engine
from ..session import UserSession

streak_bp = Blueprint("streak", __name__)


@streak_bp.route("", methods=["GET"])
@jwt_required()
def get_streak():
    """
    Returns the stored record without recomputing:
    {
      "streak": {
        "current_streak": 3,
        "longest_streak": 7,
        "last_log_date": "2024-01-03",
        "total_points": 120
      }
    }
    """
    session = UserSession.from_request()
    streak = get_streak_engine().current(session)
    return jsonify({"streak": streak.to_dict()}), 200


@streak_bp.route("/recalculate", methods=["POST"])
@jwt_required()
def recalculate_streak():
    session = UserSession.from_request()
    streak = get_streak_engine().recalculate_full(session)
    return jsonify({"streak": streak.to_dict()}), 200
