# backend/fitlog/__init__.py

import click
from flask import Flask, jsonify
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager

from config import Config

db = SQLAlchemy()
jwt = JWTManager()


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    from .logging_config import configure_logging

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Init extensions
    db.init_app(app)
    jwt.init_app(app)

    # CORS: allow the web / mobile clients to call /api/*
    CORS(app, resources={r"/api/*": {"origins": "*"}})

    # -----------------------------
    # Error reporting channel
    # -----------------------------
    from .errors import REPORTER_EXTENSION_KEY, ErrorReporter

    reporter = ErrorReporter()

    def log_failure(event):
        app.logger.warning(
            "Store failure: %s on %s (%s)", event.operation, event.path, event.kind
        )

    reporter.subscribe(log_failure)
    app.extensions[REPORTER_EXTENSION_KEY] = reporter

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
    # IMPORT BLUEPRINTS (all routes)
    # -----------------------------
    from .routes.workout_routes import workouts_bp
    from .routes.profile_routes import profile_bp
    from .routes.dashboard_routes import dashboard_bp
    from .routes.rewards_routes import rewards_bp
    from .routes.social_routes import social_bp
    from .routes.coach_routes import coach_bp

    # -----------------------------
    # REGISTER BLUEPRINTS
    # -----------------------------
    app.register_blueprint(workouts_bp, url_prefix="/api/workouts")
    app.register_blueprint(profile_bp, url_prefix="/api/profile")
    app.register_blueprint(dashboard_bp, url_prefix="/api/dashboard")
    app.register_blueprint(rewards_bp, url_prefix="/api/rewards")
    app.register_blueprint(social_bp, url_prefix="/api/social")
    app.register_blueprint(coach_bp, url_prefix="/api/coach")

    from .routes.common import BadPayload

    @app.errorhandler(BadPayload)
    def bad_payload(e):
        return e.response()

    @app.route("/api/health")
    def health():
        return {"status": "ok"}

    # -----------------------------
    # CLI
    # -----------------------------
    @app.cli.command("seed")
    def seed_command():
        """Insert the starter challenges and groups."""
        from .services.challenges import seed_challenges
        from .services.groups import seed_groups

        click.echo(f"challenges created: {seed_challenges()}")
        click.echo(f"groups created: {seed_groups()}")

    # -----------------------------
    # DB init
    # -----------------------------
    from . import models  # noqa: F401  (register tables)

    with app.app_context():
        db.create_all()

    return app
