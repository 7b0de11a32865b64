# dietbuddy/routes/auth_routes.py

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db
from ..auth import issue_token, load_current_user
from ..data_source import live_store_required
from ..errors import ValidationError
from ..models.user import FITNESS_GOALS, GENDERS, User

auth_bp = Blueprint("auth", __name__)

MIN_PASSWORD_LENGTH = 6


# -----------------------------
# Helpers
# -----------------------------
def _number_or_none(value, field, cast=float):
    if value is None or value == "":
        return None
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ValidationError(f"invalid {field}")


def apply_profile_update(user: User, data: dict) -> None:
    """Shared by PUT /api/auth/profile and PUT /api/users/me."""
    name = (data.get("name") or "").strip()
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""  # do NOT strip passwords
    fitness_goal = data.get("fitnessGoal")
    measurements = data.get("measurements") or {}

    if name:
        user.name = name

    if email and email != user.email:
        if User.query.filter(User.email == email, User.id != user.id).first():
            raise ValidationError("email already in use")
        user.email = email

    if fitness_goal:
        if fitness_goal not in FITNESS_GOALS:
            raise ValidationError(f"fitnessGoal must be one of: {', '.join(FITNESS_GOALS)}")
        user.fitness_goal = fitness_goal

    if password:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError("Password must be at least 6 characters long")
        user.set_password(password)

    if not isinstance(measurements, dict):
        raise ValidationError("measurements must be an object")
    if "age" in measurements:
        user.age = _number_or_none(measurements.get("age"), "age", int)
    if "height" in measurements:
        user.height = _number_or_none(measurements.get("height"), "height")
    if "weight" in measurements:
        user.weight = _number_or_none(measurements.get("weight"), "weight")
    gender = measurements.get("gender")
    if gender in GENDERS:
        user.gender = gender


# -----------------------------
# Routes
# -----------------------------
@auth_bp.route("/register", methods=["POST"])
@live_store_required
def register():
    data = request.get_json(silent=True) or {}

    name = (data.get("name") or "").strip()
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""  # do NOT strip passwords

    if not name or not email or not password:
        return jsonify({"message": "Please provide all required fields"}), 400

    if len(password) < MIN_PASSWORD_LENGTH:
        return jsonify({"message": "Password must be at least 6 characters long"}), 400

    if User.query.filter_by(email=email).first():
        return jsonify({"message": "User already exists"}), 400

    user = User(name=name, email=email, role="user")
    user.set_password(password)

    db.session.add(user)
    db.session.commit()
    current_app.logger.info(f"[auth/register] user_id={user.id} email='{email}'")

    return jsonify({"token": issue_token(user), "user": user.to_dict()}), 201


@auth_bp.route("/login", methods=["POST"])
@live_store_required
def login():
    data = request.get_json(silent=True) or {}

    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""

    if not email or not password:
        return jsonify({"message": "email and password are required"}), 400

    user = User.query.filter_by(email=email).first()
    if not user or not user.check_password(password):
        current_app.logger.info(f"[auth/login] rejected email='{email}'")
        return jsonify({"message": "Invalid credentials"}), 400

    return jsonify({"token": issue_token(user), "user": user.to_dict()}), 200


@auth_bp.route("/profile", methods=["GET"])
@jwt_required()
@live_store_required
def get_profile():
    user = load_current_user()
    return jsonify(user.to_profile_dict()), 200


@auth_bp.route("/profile", methods=["PUT"])
@jwt_required()
@live_store_required
def update_profile():
    user = load_current_user()
    apply_profile_update(user, request.get_json(silent=True) or {})
    db.session.commit()
    return jsonify(user.to_profile_dict()), 200
