# backend/fittrack/__init__.py

from flask import Flask, jsonify
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager

from config import Config

db = SQLAlchemy()
jwt = JWTManager()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Init extensions
    db.init_app(app)
    jwt.init_app(app)

    # CORS: allow the web client (and others) to call /api/*
    CORS(app, resources={r"/api/*": {"origins": "*"}})

    # -----------------------------
    # JWT error handlers
    # -----------------------------
    @jwt.unauthorized_loader
    def unauthorized_callback(reason):
        return (
            jsonify(
                {
                    "message": "Missing or invalid auth token",
                    "error": reason,
                }
            ),
            401,
        )

    @jwt.invalid_token_loader
    def invalid_token_callback(reason):
        return (
            jsonify(
                {
                    "message": "Invalid auth token",
                    "error": reason,
                }
            ),
            422,
        )

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({"message": "Token has expired"}), 401

    # -----------------------------
    # Streak engine failures
    # -----------------------------
    from .errors import StreakError

    @app.errorhandler(StreakError)
    def streak_error_callback(err):
        app.logger.error(f"[streak] {err.__class__.__name__}: {err}")
        return (
            jsonify(
                {
                    "message": "Failed to update streak",
                    "error": str(err),
                }
            ),
            500,
        )

    # -----------------------------
    # IMPORT BLUEPRINTS (all routes)
    # -----------------------------
    from .routes.auth_routes import auth_bp
    from .routes.profile_routes import profile_bp
    from .routes.workout_routes import workouts_bp
    from .routes.daily_stats_routes import daily_stats_bp
    from .routes.streak_routes import streak_bp
    from .routes.dashboard_routes import dashboard_bp
    from .routes.report_routes import report_bp

    # -----------------------------
    # REGISTER BLUEPRINTS
    # -----------------------------
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(profile_bp, url_prefix="/api/profile")
    app.register_blueprint(workouts_bp, url_prefix="/api/workouts")
    app.register_blueprint(daily_stats_bp, url_prefix="/api/daily-stats")
    app.register_blueprint(streak_bp, url_prefix="/api/streak")
    app.register_blueprint(dashboard_bp, url_prefix="/api/dashboard")
    app.register_blueprint(report_bp, url_prefix="/api/report")

    @app.route("/api/health")
    def health():
        return {"status": "ok"}

    # -----------------------------
    # DB init
    # -----------------------------
    with app.app_context():
        from .models import user, workout, daily_stats, streak  # noqa: F401

        db.create_all()

    return app
