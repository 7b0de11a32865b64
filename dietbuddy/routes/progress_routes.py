# dietbuddy/routes/progress_routes.py

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db
from ..auth import current_user_id
from ..data_source import live_store_required
from ..errors import ValidationError
from ..models.progress import BodyMeasurement, MealLog, WorkoutLog
from ..rewards import workout_streak_for

progress_bp = Blueprint("progress", __name__)

MEASUREMENT_FIELDS = {
    "weight": "weight",
    "bodyFat": "body_fat",
    "muscleMass": "muscle_mass",
    "chest": "chest",
    "waist": "waist",
    "hips": "hips",
    "thighs": "thighs",
    "arms": "arms",
}


def _optional_number(data, key, cast=int):
    value = data.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be a number")
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be a number")


# ------------------------------
# Workout history
# ------------------------------
@progress_bp.route("/workouts", methods=["POST"])
@jwt_required()
@live_store_required
def log_workout():
    data = request.get_json(silent=True) or {}
    workout_ref = data.get("workoutId")
    if workout_ref in (None, ""):
        return jsonify({"message": "workoutId is required"}), 400

    row = WorkoutLog(
        user_id=current_user_id(),
        workout_ref=str(workout_ref),
        workout_name=data.get("workoutName"),
        duration=_optional_number(data, "duration"),
        calories=_optional_number(data, "calories"),
        completed=bool(data.get("completed", True)),
    )
    db.session.add(row)
    db.session.commit()
    return jsonify(row.to_dict()), 201


@progress_bp.route("/workouts", methods=["GET"])
@jwt_required()
@live_store_required
def workout_history():
    rows = (
        WorkoutLog.query.filter_by(user_id=current_user_id())
        .order_by(WorkoutLog.logged_at.desc(), WorkoutLog.id.desc())
        .all()
    )
    return jsonify([r.to_dict() for r in rows]), 200


# ------------------------------
# Meal history
# ------------------------------
@progress_bp.route("/meals", methods=["POST"])
@jwt_required()
@live_store_required
def log_meal():
    data = request.get_json(silent=True) or {}
    meal_ref = data.get("mealId")
    if meal_ref in (None, ""):
        return jsonify({"message": "mealId is required"}), 400

    row = MealLog(
        user_id=current_user_id(),
        meal_ref=str(meal_ref),
        meal_name=data.get("mealName"),
        calories=_optional_number(data, "calories"),
        followed=bool(data.get("followed", True)),
    )
    db.session.add(row)
    db.session.commit()
    return jsonify(row.to_dict()), 201


@progress_bp.route("/meals", methods=["GET"])
@jwt_required()
@live_store_required
def meal_history():
    rows = (
        MealLog.query.filter_by(user_id=current_user_id())
        .order_by(MealLog.logged_at.desc(), MealLog.id.desc())
        .all()
    )
    return jsonify([r.to_dict() for r in rows]), 200


# ------------------------------
# Body measurements
# ------------------------------
@progress_bp.route("/measurements", methods=["POST"])
@jwt_required()
@live_store_required
def add_measurement():
    data = request.get_json(silent=True) or {}
    nested = data.get("measurements") if isinstance(data.get("measurements"), dict) else {}
    merged = {**nested, **{k: v for k, v in data.items() if k != "measurements"}}

    values = {attr: _optional_number(merged, key, float) for key, attr in MEASUREMENT_FIELDS.items()}
    if all(v is None for v in values.values()):
        return jsonify({"message": "At least one measurement is required"}), 400

    row = BodyMeasurement(user_id=current_user_id(), **values)
    db.session.add(row)
    db.session.commit()
    return jsonify(row.to_dict()), 201


@progress_bp.route("/measurements", methods=["GET"])
@jwt_required()
@live_store_required
def measurement_history():
    rows = (
        BodyMeasurement.query.filter_by(user_id=current_user_id())
        .order_by(BodyMeasurement.measured_at.desc(), BodyMeasurement.id.desc())
        .all()
    )
    return jsonify([r.to_dict() for r in rows]), 200


# ------------------------------
# Summary
# ------------------------------
@progress_bp.route("/summary", methods=["GET"])
@jwt_required()
@live_store_required
def progress_summary():
    user_id = current_user_id()

    completed = WorkoutLog.query.filter_by(user_id=user_id, completed=True).all()
    meals_tracked = MealLog.query.filter_by(user_id=user_id).count()

    weights = [
        m.weight
        for m in BodyMeasurement.query.filter_by(user_id=user_id)
        .order_by(BodyMeasurement.measured_at.asc(), BodyMeasurement.id.asc())
        .all()
        if m.weight is not None
    ]
    weight_change = round(weights[-1] - weights[0], 2) if len(weights) >= 2 else 0

    return jsonify({
        "workoutsCompleted": len(completed),
        "caloriesBurned": sum(w.calories or 0 for w in completed),
        "mealsTracked": meals_tracked,
        "weightChange": weight_change,
        "streak": workout_streak_for(user_id),
    }), 200
