# dietbuddy/__init__.py

import logging
from datetime import datetime

from flask import Flask, jsonify, request
from flask_cors import CORS
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from sqlalchemy.exc import SQLAlchemyError

from config import Config

db = SQLAlchemy()
jwt = JWTManager()


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))

    # Init extensions
    db.init_app(app)
    jwt.init_app(app)

    origins = [o.strip() for o in str(app.config.get("CORS_ORIGINS") or "*").split(",") if o.strip()]
    CORS(app, resources={r"/api/*": {"origins": origins or "*"}})

    from .data_source import select_data_source
    from .locks import UserLocks
    from .payments import RazorpayConfig, RazorpayGateway

    razorpay_config = RazorpayConfig.from_app_config(app.config)
    if not razorpay_config.has_valid_credentials:
        app.logger.warning("Razorpay credentials missing. Payment functionality will be limited.")

    app.extensions["dietbuddy.razorpay"] = RazorpayGateway(razorpay_config)
    app.extensions["dietbuddy.user_locks"] = UserLocks()

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
            401,
        )

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return jsonify({"message": "Token has expired"}), 401

    # -----------------------------
    # API error handlers
    # -----------------------------
    from .errors import ApiError

    @app.errorhandler(ApiError)
    def api_error(err):
        if err.status_code >= 500:
            app.logger.error(f"{request.method} {request.path} failed: {err.message}")
        return jsonify({"message": err.message}), err.status_code

    @app.errorhandler(SQLAlchemyError)
    def database_error(err):
        db.session.rollback()
        app.logger.exception(f"Database error on {request.method} {request.path}: {err}")
        return jsonify({"message": "Internal server error"}), 500

    @app.after_request
    def log_request(response):
        if request.path.endswith("/health"):
            return response
        app.logger.info("%s %s -> %s", request.method, request.path, response.status_code)
        return response

    # -----------------------------
    # IMPORT BLUEPRINTS (all routes)
    # -----------------------------
    from .routes.auth_routes import auth_bp
    from .routes.user_routes import users_bp
    from .routes.workout_routes import workouts_bp
    from .routes.meal_routes import meals_bp
    from .routes.progress_routes import progress_bp
    from .routes.rewards_routes import rewards_bp
    from .routes.community_routes import community_bp
    from .routes.payment_routes import payments_bp
    from .routes.journey_routes import journey_bp
    from .routes.progress_photo_routes import photos_bp
    from .routes.blog_routes import blogs_bp

    # -----------------------------
    # REGISTER BLUEPRINTS
    # -----------------------------
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(users_bp, url_prefix="/api/users")
    app.register_blueprint(workouts_bp, url_prefix="/api/workouts")
    app.register_blueprint(meals_bp, url_prefix="/api/meals")
    app.register_blueprint(progress_bp, url_prefix="/api/progress")
    app.register_blueprint(rewards_bp, url_prefix="/api/rewards")
    app.register_blueprint(community_bp, url_prefix="/api/community")
    app.register_blueprint(payments_bp, url_prefix="/api/payments")
    app.register_blueprint(journey_bp, url_prefix="/api/journey")
    app.register_blueprint(photos_bp, url_prefix="/api/progress-photos")
    app.register_blueprint(blogs_bp, url_prefix="/api/blogs")

    @app.route("/api/health")
    def health():
        source = app.extensions["dietbuddy.data_source"]
        return {
            "status": "ok",
            "time": datetime.utcnow().isoformat(),
            "dataSource": source.name,
        }

    # -----------------------------
    # DB init
    # -----------------------------
    from . import models  # noqa: F401  (register tables)

    source = select_data_source(app)
    app.extensions["dietbuddy.data_source"] = source
    if source.is_live:
        with app.app_context():
            db.create_all()

    return app
