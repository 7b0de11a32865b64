# dietbuddy/routes/user_routes.py
from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db
from ..auth import load_current_user
from ..data_source import live_store_required
from ..models.catalog import Meal, Workout
from .auth_routes import apply_profile_update

users_bp = Blueprint("users", __name__)


@users_bp.route("/me", methods=["GET"])
@jwt_required()
@live_store_required
def get_me():
    user = load_current_user()
    return jsonify(user.to_profile_dict()), 200


@users_bp.route("/me", methods=["PUT"])
@jwt_required()
@live_store_required
def update_me():
    user = load_current_user()
    apply_profile_update(user, request.get_json(silent=True) or {})
    db.session.commit()
    return jsonify(user.to_profile_dict()), 200


# ------------------------------
# Favourites
# ------------------------------
@users_bp.route("/favorites/workouts/<int:workout_id>", methods=["POST"])
@jwt_required()
@live_store_required
def add_favourite_workout(workout_id: int):
    user = load_current_user()
    workout = Workout.query.get(workout_id)
    if not workout:
        return jsonify({"message": "Workout not found"}), 404

    if workout not in user.favourite_workouts:
        user.favourite_workouts.append(workout)
        db.session.commit()

    return jsonify({"message": "Workout added to favorites"}), 200


@users_bp.route("/favorites/workouts/<int:workout_id>", methods=["DELETE"])
@jwt_required()
@live_store_required
def remove_favourite_workout(workout_id: int):
    user = load_current_user()
    workout = Workout.query.get(workout_id)
    if not workout:
        return jsonify({"message": "Workout not found"}), 404

    if workout in user.favourite_workouts:
        user.favourite_workouts.remove(workout)
        db.session.commit()

    return jsonify({"message": "Workout removed from favorites"}), 200


@users_bp.route("/favorites/meals/<int:meal_id>", methods=["POST"])
@jwt_required()
@live_store_required
def add_favourite_meal(meal_id: int):
    user = load_current_user()
    meal = Meal.query.get(meal_id)
    if not meal:
        return jsonify({"message": "Meal not found"}), 404

    if meal not in user.favourite_meals:
        user.favourite_meals.append(meal)
        db.session.commit()

    return jsonify({"message": "Meal added to favorites"}), 200


@users_bp.route("/favorites/meals/<int:meal_id>", methods=["DELETE"])
@jwt_required()
@live_store_required
def remove_favourite_meal(meal_id: int):
    user = load_current_user()
    meal = Meal.query.get(meal_id)
    if not meal:
        return jsonify({"message": "Meal not found"}), 404

    if meal in user.favourite_meals:
        user.favourite_meals.remove(meal)
        db.session.commit()

    return jsonify({"message": "Meal removed from favorites"}), 200
