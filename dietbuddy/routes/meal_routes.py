# dietbuddy/routes/meal_routes.py

from typing import Any, Dict, List

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db
from ..auth import admin_required, current_user_id, load_current_user, member_required
from ..data_source import get_data_source, live_store_required
from ..errors import ValidationError
from ..models.catalog import MEAL_CATEGORIES, MEAL_TYPES, Meal

meals_bp = Blueprint("meals", __name__)

REQUIRED_FIELDS = ("name", "description", "category", "type", "calories")

# used when the catalog has nothing for a slot
DEFAULT_PLAN_MEALS = {
    ("Monday", "breakfast"): {"name": "Oatmeal", "category": "breakfast", "calories": 300},
    ("Monday", "lunch"): {"name": "Vegetable Salad", "category": "lunch", "calories": 400},
    ("Monday", "dinner"): {"name": "Grilled Chicken", "category": "dinner", "calories": 500},
    ("Tuesday", "breakfast"): {"name": "Egg Sandwich", "category": "breakfast", "calories": 350},
    ("Tuesday", "lunch"): {"name": "Lentil Soup", "category": "lunch", "calories": 380},
    ("Tuesday", "dinner"): {"name": "Vegetable Stir Fry", "category": "dinner", "calories": 450},
    ("Wednesday", "breakfast"): {"name": "Fruit Smoothie", "category": "breakfast", "calories": 280},
    ("Wednesday", "lunch"): {"name": "Chicken Wrap", "category": "lunch", "calories": 420},
    ("Wednesday", "dinner"): {"name": "Bean Curry", "category": "dinner", "calories": 480},
}
PLAN_DAYS = ("Monday", "Tuesday", "Wednesday")
PLAN_SLOTS = ("breakfast", "lunch", "dinner")


# ------------------------------
# Helpers
# ------------------------------
def _string_list(value: Any, field: str) -> List[str]:
    if not isinstance(value, list):
        raise ValidationError(f"{field} must be a list")
    return [str(v) for v in value]


def _apply_fields(meal: Meal, data: Dict[str, Any]) -> None:
    if "category" in data and data["category"] not in MEAL_CATEGORIES:
        raise ValidationError(f"category must be one of: {', '.join(MEAL_CATEGORIES)}")
    if "type" in data and data["type"] not in MEAL_TYPES:
        raise ValidationError(f"type must be one of: {', '.join(MEAL_TYPES)}")

    simple = {
        "name": "name",
        "description": "description",
        "category": "category",
        "type": "type",
        "imageUrl": "image_url",
        "prepTime": "prep_time",
        "cookTime": "cook_time",
    }
    for key, attr in simple.items():
        if key in data:
            setattr(meal, attr, data[key])

    try:
        if "calories" in data:
            meal.calories = int(data["calories"])
        if "servings" in data:
            meal.servings = int(data["servings"]) if data["servings"] is not None else None
    except (TypeError, ValueError):
        raise ValidationError("calories and servings must be integers")

    if "isFeatured" in data:
        meal.is_featured = bool(data["isFeatured"])
    if "nutrients" in data:
        if not isinstance(data["nutrients"], dict):
            raise ValidationError("nutrients must be an object")
        meal.nutrients = data["nutrients"]
    if "ingredients" in data:
        meal.ingredients = _string_list(data["ingredients"], "ingredients")
    if "instructions" in data:
        meal.instructions = _string_list(data["instructions"], "instructions")
    if "tags" in data:
        meal.tags = _string_list(data["tags"], "tags")


def _build_meal_plan() -> List[Dict[str, Any]]:
    source = get_data_source()
    pools = {}
    for slot in PLAN_SLOTS:
        pool = source.list_meals(category=slot, meal_type="vegetarian")
        pool += source.list_meals(category=slot, meal_type="vegan")
        pool += source.list_meals(category=slot, meal_type="non-vegetarian")
        pools[slot] = pool

    plan = []
    for i, day in enumerate(PLAN_DAYS):
        meals = []
        for slot in PLAN_SLOTS:
            pool = pools[slot]
            meals.append(pool[i] if i < len(pool) else dict(DEFAULT_PLAN_MEALS[(day, slot)]))
        plan.append({"day": day, "meals": meals})
    return plan


# ------------------------------
# Public catalog reads
# ------------------------------
@meals_bp.route("", methods=["GET"])
def list_meals():
    return jsonify(get_data_source().list_meals()), 200


@meals_bp.route("/featured", methods=["GET"])
def featured_meals():
    return jsonify(get_data_source().list_meals(featured=True)), 200


@meals_bp.route("/search/<query>", methods=["GET"])
def search_meals(query: str):
    return jsonify(get_data_source().search_meals(query)), 200


@meals_bp.route("/category/<category>", methods=["GET"])
def meals_by_category(category: str):
    return jsonify(get_data_source().list_meals(category=category)), 200


@meals_bp.route("/type/<meal_type>", methods=["GET"])
def meals_by_type(meal_type: str):
    return jsonify(get_data_source().list_meals(meal_type=meal_type)), 200


@meals_bp.route("/category/<category>/type/<meal_type>", methods=["GET"])
def meals_by_category_and_type(category: str, meal_type: str):
    return jsonify(get_data_source().list_meals(category=category, meal_type=meal_type)), 200


@meals_bp.route("/<meal_id>", methods=["GET"])
def get_meal(meal_id: str):
    meal = get_data_source().get_meal(meal_id)
    if not meal:
        return jsonify({"message": "Meal not found"}), 404
    return jsonify(meal), 200


# ------------------------------
# Admin mutations
# ------------------------------
@meals_bp.route("", methods=["POST"])
@jwt_required()
@live_store_required
@admin_required
def create_meal():
    data = request.get_json(silent=True) or {}
    missing = [f for f in REQUIRED_FIELDS if data.get(f) in (None, "")]
    if missing:
        return jsonify({"message": f"Missing required fields: {', '.join(missing)}"}), 400

    meal = Meal(created_by=current_user_id(), nutrients={}, ingredients=[], instructions=[], tags=[])
    _apply_fields(meal, data)
    db.session.add(meal)
    db.session.commit()
    current_app.logger.info(f"[meals] created id={meal.id} by user_id={meal.created_by}")

    return jsonify(meal.to_dict()), 201


@meals_bp.route("/<int:meal_id>", methods=["PUT"])
@jwt_required()
@live_store_required
@admin_required
def update_meal(meal_id: int):
    meal = Meal.query.get(meal_id)
    if not meal:
        return jsonify({"message": "Meal not found"}), 404

    _apply_fields(meal, request.get_json(silent=True) or {})
    db.session.commit()
    return jsonify(meal.to_dict()), 200


@meals_bp.route("/<int:meal_id>", methods=["DELETE"])
@jwt_required()
@live_store_required
@admin_required
def delete_meal(meal_id: int):
    meal = Meal.query.get(meal_id)
    if not meal:
        return jsonify({"message": "Meal not found"}), 404

    db.session.delete(meal)
    db.session.commit()
    return jsonify({"message": "Meal deleted"}), 200


# ------------------------------
# Member plans
# ------------------------------
@meals_bp.route("/plan", methods=["GET"])
@jwt_required()
@live_store_required
@member_required
def get_meal_plan():
    user = load_current_user()
    return jsonify({"mealPlan": user.meal_plan}), 200


@meals_bp.route("/plan/generate", methods=["POST"])
@jwt_required()
@live_store_required
@member_required
def generate_meal_plan():
    user = load_current_user()
    if not user.fitness_goal:
        return jsonify({"message": "Please set your fitness goal first"}), 400

    user.meal_plan = _build_meal_plan()
    db.session.commit()
    return jsonify({"mealPlan": user.meal_plan}), 200
