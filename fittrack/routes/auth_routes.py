# backend/fittrack/routes/auth_routes.py

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import create_access_token, get_jwt_identity, jwt_required

from .. import db
from ..models.user import User

auth_bp = Blueprint("auth", __name__)

MIN_PASSWORD_LENGTH = 6


# -----------------------------
# Routes
# -----------------------------
@auth_bp.route("/register", methods=["POST"])
def register():
    data = request.get_json(silent=True) or {}

    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""  # do NOT strip passwords

    if not email or not password:
        return jsonify({"message": "email and password are required"}), 400

    if len(password) < MIN_PASSWORD_LENGTH:
        return jsonify({"message": "password must be at least 6 characters"}), 400

    if User.query.filter_by(email=email).first():
        return jsonify({"message": "user already exists"}), 400

    user = User(email=email)
    user.set_password(password)

    try:
        db.session.add(user)
        db.session.commit()

        access_token = create_access_token(identity=str(user.id))
        current_app.logger.info(f"[auth/register] user_id={user.id}")
        return jsonify({"token": access_token, "user": user.to_dict()}), 201

    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Registration Error: {e}")
        return jsonify({"message": "Internal server error"}), 500


@auth_bp.route("/login", methods=["POST"])
def login():
    """
    Accepts: { "email": "...", "password": "..." }
    """
    data = request.get_json(silent=True) or {}

    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""  # do NOT strip passwords

    if not email or not password:
        return jsonify({"message": "email and password are required"}), 400

    user = User.query.filter_by(email=email).first()

    if not user:
        current_app.logger.info(f"[auth/login] user NOT found for '{email}'")
        return jsonify({"message": "invalid credentials"}), 401

    if not user.check_password(password):
        current_app.logger.info(f"[auth/login] bad password for user_id={user.id}")
        return jsonify({"message": "invalid credentials"}), 401

    access_token = create_access_token(identity=str(user.id))
    return jsonify({"token": access_token, "user": user.to_dict()}), 200


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    user_id = int(get_jwt_identity())
    user = db.session.get(User, user_id)
    if not user:
        return jsonify({"message": "user not found"}), 404
    return jsonify({"user": user.to_dict()}), 200
