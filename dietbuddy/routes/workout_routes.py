# dietbuddy/routes/workout_routes.py

from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db
from ..auth import admin_required, current_user_id, load_current_user, member_required
from ..data_source import get_data_source, live_store_required
from ..errors import ValidationError
from ..models.catalog import WORKOUT_CATEGORIES, WORKOUT_DIFFICULTIES, Workout

workouts_bp = Blueprint("workouts", __name__)

REQUIRED_FIELDS = ("name", "description", "category", "difficulty", "duration", "calories")

# Monday / Wednesday / Friday template handed to members
WORKOUT_PLAN_TEMPLATE = [
    {
        "day": "Monday",
        "exercises": [
            {"name": "Push-ups", "sets": 3, "reps": 12, "videoUrl": "https://youtube.com/watch?v=pushups"},
            {"name": "Squats", "sets": 3, "reps": 15, "videoUrl": "https://youtube.com/watch?v=squats"},
        ],
    },
    {
        "day": "Wednesday",
        "exercises": [
            {"name": "Pull-ups", "sets": 3, "reps": 8, "videoUrl": "https://youtube.com/watch?v=pullups"},
            {"name": "Lunges", "sets": 3, "reps": 12, "videoUrl": "https://youtube.com/watch?v=lunges"},
        ],
    },
    {
        "day": "Friday",
        "exercises": [
            {"name": "Plank", "sets": 3, "reps": 60, "videoUrl": "https://youtube.com/watch?v=plank"},
            {"name": "Burpees", "sets": 3, "reps": 10, "videoUrl": "https://youtube.com/watch?v=burpees"},
        ],
    },
]


# ------------------------------
# Helpers
# ------------------------------
def _safe_int(v: Any, field: str) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer")


def _apply_fields(workout: Workout, data: Dict[str, Any]) -> None:
    if "category" in data and data["category"] not in WORKOUT_CATEGORIES:
        raise ValidationError(f"category must be one of: {', '.join(WORKOUT_CATEGORIES)}")
    if "difficulty" in data and data["difficulty"] not in WORKOUT_DIFFICULTIES:
        raise ValidationError(f"difficulty must be one of: {', '.join(WORKOUT_DIFFICULTIES)}")

    simple = {
        "name": "name",
        "description": "description",
        "category": "category",
        "difficulty": "difficulty",
        "duration": "duration",
        "imageUrl": "image_url",
        "videoUrl": "video_url",
    }
    for key, attr in simple.items():
        if key in data:
            setattr(workout, attr, data[key])

    if "calories" in data:
        workout.calories = _safe_int(data["calories"], "calories")
    if "isFeatured" in data:
        workout.is_featured = bool(data["isFeatured"])
    if "exercises" in data:
        if not isinstance(data["exercises"], list):
            raise ValidationError("exercises must be a list")
        workout.exercises = data["exercises"]
    if "tags" in data:
        if not isinstance(data["tags"], list):
            raise ValidationError("tags must be a list")
        workout.tags = [str(t) for t in data["tags"]]


# ------------------------------
# Public catalog reads
# ------------------------------
@workouts_bp.route("", methods=["GET"])
def list_workouts():
    return jsonify(get_data_source().list_workouts()), 200


@workouts_bp.route("/featured", methods=["GET"])
def featured_workouts():
    return jsonify(get_data_source().list_workouts(featured=True)), 200


@workouts_bp.route("/search/<query>", methods=["GET"])
def search_workouts(query: str):
    return jsonify(get_data_source().search_workouts(query)), 200


@workouts_bp.route("/category/<category>", methods=["GET"])
def workouts_by_category(category: str):
    return jsonify(get_data_source().list_workouts(category=category)), 200


@workouts_bp.route("/difficulty/<difficulty>", methods=["GET"])
def workouts_by_difficulty(difficulty: str):
    return jsonify(get_data_source().list_workouts(difficulty=difficulty)), 200


@workouts_bp.route("/category/<category>/difficulty/<difficulty>", methods=["GET"])
def workouts_by_category_and_difficulty(category: str, difficulty: str):
    return jsonify(get_data_source().list_workouts(category=category, difficulty=difficulty)), 200


@workouts_bp.route("/difficulty-levels/<category>", methods=["GET"])
def difficulty_levels(category: str):
    if category not in WORKOUT_CATEGORIES:
        return jsonify({"message": "Invalid category", "validCategories": list(WORKOUT_CATEGORIES)}), 400
    return jsonify({"category": category, "difficulties": list(WORKOUT_DIFFICULTIES)}), 200


@workouts_bp.route("/<workout_id>", methods=["GET"])
def get_workout(workout_id: str):
    workout = get_data_source().get_workout(workout_id)
    if not workout:
        return jsonify({"message": "Workout not found"}), 404
    return jsonify(workout), 200


# ------------------------------
# Admin mutations
# ------------------------------
@workouts_bp.route("", methods=["POST"])
@jwt_required()
@live_store_required
@admin_required
def create_workout():
    data = request.get_json(silent=True) or {}
    missing = [f for f in REQUIRED_FIELDS if data.get(f) in (None, "")]
    if missing:
        return jsonify({"message": f"Missing required fields: {', '.join(missing)}"}), 400

    workout = Workout(created_by=current_user_id(), exercises=[], tags=[])
    _apply_fields(workout, data)
    db.session.add(workout)
    db.session.commit()
    current_app.logger.info(f"[workouts] created id={workout.id} by user_id={workout.created_by}")

    return jsonify(workout.to_dict()), 201


@workouts_bp.route("/<int:workout_id>", methods=["PUT"])
@jwt_required()
@live_store_required
@admin_required
def update_workout(workout_id: int):
    workout = Workout.query.get(workout_id)
    if not workout:
        return jsonify({"message": "Workout not found"}), 404

    _apply_fields(workout, request.get_json(silent=True) or {})
    db.session.commit()
    return jsonify(workout.to_dict()), 200


@workouts_bp.route("/<int:workout_id>", methods=["DELETE"])
@jwt_required()
@live_store_required
@admin_required
def delete_workout(workout_id: int):
    workout = Workout.query.get(workout_id)
    if not workout:
        return jsonify({"message": "Workout not found"}), 404

    db.session.delete(workout)
    db.session.commit()
    return jsonify({"message": "Workout deleted"}), 200


# ------------------------------
# Member plans
# ------------------------------
@workouts_bp.route("/plan", methods=["GET"])
@jwt_required()
@live_store_required
@member_required
def get_workout_plan():
    user = load_current_user()
    return jsonify({"workoutPlan": user.workout_plan}), 200


@workouts_bp.route("/plan/generate", methods=["POST"])
@jwt_required()
@live_store_required
@member_required
def generate_workout_plan():
    user = load_current_user()
    if not user.fitness_goal:
        return jsonify({"message": "Please set your fitness goal first"}), 400

    user.workout_plan = [
        {"day": day["day"], "exercises": [dict(e) for e in day["exercises"]]}
        for day in WORKOUT_PLAN_TEMPLATE
    ]
    db.session.commit()
    return jsonify({"workoutPlan": user.workout_plan}), 200
