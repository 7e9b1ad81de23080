# backend/fittrack/routes/daily_stats_routes.py
from datetime import date
from typing import Any, Optional

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db
from ..models.daily_stats import MAX_SLEEP_HOURS, DailyStats
from ..session import UserSession

daily_stats_bp = Blueprint("daily_stats", __name__)


def _parse_date(v: Any) -> Optional[date]:
    try:
        return date.fromisoformat(str(v))
    except ValueError:
        return None


def _empty(stat_date: date):
    return {"date": stat_date.isoformat(), "water_intake": 0, "sleep_hours": 0.0}


# ------------------------------
# GET /api/daily-stats
# ------------------------------
@daily_stats_bp.route("", methods=["GET"])
@jwt_required()
def list_daily_stats():
    session = UserSession.from_request()
    rows = (
        DailyStats.query.filter_by(user_id=session.user_id)
        .order_by(DailyStats.stat_date.asc())
        .all()
    )
    return jsonify({"daily_stats": [r.to_dict() for r in rows]}), 200


# ------------------------------
# GET /api/daily-stats/<YYYY-MM-DD>
# ------------------------------
@daily_stats_bp.route("/<stat_date>", methods=["GET"])
@jwt_required()
def get_daily_stats(stat_date):
    session = UserSession.from_request()
    day = _parse_date(stat_date)
    if day is None:
        return jsonify({"message": "invalid date"}), 400

    row = DailyStats.query.filter_by(user_id=session.user_id, stat_date=day).first()
    return jsonify({"daily_stats": row.to_dict() if row else _empty(day)}), 200


# ------------------------------
# PUT /api/daily-stats/<YYYY-MM-DD>
# ------------------------------
@daily_stats_bp.route("/<stat_date>", methods=["PUT"])
@jwt_required()
def save_daily_stats(stat_date):
    """
    Expected body (either key may be omitted):
    {
      "water_intake": 6,
      "sleep_hours": 7.5
    }
    """
    session = UserSession.from_request()
    day = _parse_date(stat_date)
    if day is None:
        return jsonify({"message": "invalid date"}), 400

    data = request.get_json(silent=True) or {}

    try:
        water = int(data["water_intake"]) if data.get("water_intake") is not None else None
        sleep = float(data["sleep_hours"]) if data.get("sleep_hours") is not None else None
    except (TypeError, ValueError):
        return jsonify({"message": "water_intake and sleep_hours must be numbers"}), 400

    if water is not None and water < 0:
        return jsonify({"message": "water_intake cannot be negative"}), 400
    if sleep is not None and not (0 <= sleep <= MAX_SLEEP_HOURS):
        return jsonify({"message": "sleep_hours must be between 0 and 24"}), 400

    row = DailyStats.query.filter_by(user_id=session.user_id, stat_date=day).first()
    created = row is None
    if created:
        row = DailyStats(user_id=session.user_id, stat_date=day, water_intake=0, sleep_hours=0)
        db.session.add(row)

    if water is not None:
        row.water_intake = water
    if sleep is not None:
        row.sleep_hours = sleep

    try:
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"[daily-stats/save] {e}")
        return jsonify({"message": "Failed to save daily stats", "error": str(e)}), 500

    return jsonify({"daily_stats": row.to_dict()}), 201 if created else 200
