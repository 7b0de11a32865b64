# dietbuddy/data_source.py
"""
Where catalog reads come from.

LiveDataSource queries the database; StaticFallbackDataSource serves a
small built-in sample catalog when the database is unreachable at
startup. Writes are refused (503) while the fallback is active.
"""
from functools import wraps
from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy import or_, text
from sqlalchemy.exc import SQLAlchemyError

from . import db
from .errors import StoreUnavailableError
from .models.catalog import Meal, Workout


FALLBACK_WORKOUTS = [
    {
        "id": 1,
        "name": "Full Body HIIT",
        "description": "High intensity interval training targeting all major muscle groups",
        "category": "hiit",
        "difficulty": "intermediate",
        "duration": "30 minutes",
        "calories": 350,
        "exercises": [
            {"name": "Jumping Jacks", "sets": 3, "reps": 20, "duration": "60 seconds"},
            {"name": "Push-Ups", "sets": 3, "reps": 15, "duration": "60 seconds"},
            {"name": "Mountain Climbers", "sets": 3, "reps": 20, "duration": "60 seconds"},
            {"name": "Burpees", "sets": 3, "reps": 10, "duration": "60 seconds"},
        ],
        "imageUrl": "https://images.unsplash.com/photo-1517836357463-d25dfeac3438",
        "videoUrl": "https://youtube.com/watch?v=ml6cT4AZdqI",
        "isFeatured": True,
        "tags": ["hiit", "cardio", "full body"],
        "createdBy": None,
        "createdAt": None,
    },
    {
        "id": 2,
        "name": "Core Crusher",
        "description": "Intense abdominal workout focusing on building core strength",
        "category": "strength",
        "difficulty": "beginner",
        "duration": "20 minutes",
        "calories": 200,
        "exercises": [
            {"name": "Crunches", "sets": 3, "reps": 20, "duration": "60 seconds"},
            {"name": "Planks", "sets": 3, "reps": 1, "duration": "60 seconds"},
            {"name": "Russian Twists", "sets": 3, "reps": 20, "duration": "60 seconds"},
            {"name": "Leg Raises", "sets": 3, "reps": 15, "duration": "60 seconds"},
        ],
        "imageUrl": "https://images.unsplash.com/photo-1517838277536-f5f99be501cd",
        "videoUrl": "https://youtube.com/watch?v=DHD1-2P94DI",
        "isFeatured": True,
        "tags": ["abs", "core", "strength"],
        "createdBy": None,
        "createdAt": None,
    },
    {
        "id": 3,
        "name": "Power Lifts",
        "description": "Basic compound movements for building strength and muscle",
        "category": "strength",
        "difficulty": "advanced",
        "duration": "45 minutes",
        "calories": 450,
        "exercises": [
            {"name": "Deadlifts", "sets": 5, "reps": 5, "duration": "120 seconds"},
            {"name": "Bench Press", "sets": 5, "reps": 5, "duration": "120 seconds"},
            {"name": "Squats", "sets": 5, "reps": 5, "duration": "120 seconds"},
            {"name": "Overhead Press", "sets": 5, "reps": 5, "duration": "120 seconds"},
        ],
        "imageUrl": "https://images.unsplash.com/photo-1534438327276-14e5300c3a48",
        "videoUrl": "https://youtube.com/watch?v=pRyytPjhXCo",
        "isFeatured": False,
        "tags": ["strength", "muscle", "powerlifting"],
        "createdBy": None,
        "createdAt": None,
    },
]

FALLBACK_MEALS = [
    {
        "id": 1,
        "name": "Vegetable Stir Fry",
        "description": "Quick stir fried seasonal vegetables with tofu",
        "category": "dinner",
        "type": "vegan",
        "calories": 320,
        "nutrients": {"protein": 18, "carbs": 35, "fat": 12, "fiber": 8},
        "ingredients": ["Tofu", "Broccoli", "Bell pepper", "Soy sauce", "Garlic"],
        "instructions": ["Press and cube the tofu", "Stir fry vegetables", "Add tofu and sauce"],
        "imageUrl": None,
        "prepTime": "10 minutes",
        "cookTime": "15 minutes",
        "servings": 2,
        "isFeatured": True,
        "tags": ["vegan", "quick"],
        "createdBy": None,
        "createdAt": None,
    },
    {
        "id": 2,
        "name": "Grilled Chicken Salad",
        "description": "Lean grilled chicken on mixed greens",
        "category": "lunch",
        "type": "non-vegetarian",
        "calories": 350,
        "nutrients": {"protein": 35, "carbs": 12, "fat": 15, "fiber": 5},
        "ingredients": ["Chicken breast", "Mixed greens", "Cherry tomatoes", "Olive oil"],
        "instructions": ["Grill the chicken", "Slice and toss with greens and dressing"],
        "imageUrl": None,
        "prepTime": "10 minutes",
        "cookTime": "15 minutes",
        "servings": 1,
        "isFeatured": True,
        "tags": ["high protein", "low carb"],
        "createdBy": None,
        "createdAt": None,
    },
    {
        "id": 3,
        "name": "Oatmeal with Fruits",
        "description": "Rolled oats cooked in milk topped with fresh fruit",
        "category": "breakfast",
        "type": "vegetarian",
        "calories": 280,
        "nutrients": {"protein": 9, "carbs": 48, "fat": 6, "fiber": 7},
        "ingredients": ["Rolled oats", "Milk", "Banana", "Berries", "Honey"],
        "instructions": ["Simmer oats in milk", "Top with fruit and honey"],
        "imageUrl": None,
        "prepTime": "5 minutes",
        "cookTime": "10 minutes",
        "servings": 1,
        "isFeatured": False,
        "tags": ["breakfast", "fiber"],
        "createdBy": None,
        "createdAt": None,
    },
]


def _matches(item: Dict[str, Any], query: str) -> bool:
    q = query.lower()
    if q in (item.get("name") or "").lower():
        return True
    if q in (item.get("description") or "").lower():
        return True
    return any(q in (tag or "").lower() for tag in item.get("tags") or [])


def _as_id(raw) -> Optional[int]:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


class DataSource:
    name = "base"
    is_live = False

    def list_workouts(self, category=None, difficulty=None, featured=None) -> List[Dict]:
        raise NotImplementedError

    def get_workout(self, workout_id) -> Optional[Dict]:
        raise NotImplementedError

    def search_workouts(self, query: str) -> List[Dict]:
        raise NotImplementedError

    def list_meals(self, category=None, meal_type=None, featured=None) -> List[Dict]:
        raise NotImplementedError

    def get_meal(self, meal_id) -> Optional[Dict]:
        raise NotImplementedError

    def search_meals(self, query: str) -> List[Dict]:
        raise NotImplementedError


class LiveDataSource(DataSource):
    name = "live"
    is_live = True

    def list_workouts(self, category=None, difficulty=None, featured=None):
        q = Workout.query
        if category:
            q = q.filter(Workout.category == category)
        if difficulty:
            q = q.filter(Workout.difficulty == difficulty)
        if featured is not None:
            q = q.filter(Workout.is_featured.is_(featured))
        rows = q.order_by(Workout.created_at.desc(), Workout.id.desc()).all()
        return [w.to_dict() for w in rows]

    def get_workout(self, workout_id):
        pk = _as_id(workout_id)
        workout = Workout.query.get(pk) if pk is not None else None
        return workout.to_dict() if workout else None

    def search_workouts(self, query):
        pattern = f"%{query}%"
        rows = (
            Workout.query.filter(
                or_(Workout.name.ilike(pattern), Workout.description.ilike(pattern))
            )
            .order_by(Workout.created_at.desc(), Workout.id.desc())
            .all()
        )
        found = {w.id: w.to_dict() for w in rows}
        # tags are JSON; match them in Python
        for w in Workout.query.all():
            if w.id not in found and _matches({"tags": w.tags}, query):
                found[w.id] = w.to_dict()
        return list(found.values())

    def list_meals(self, category=None, meal_type=None, featured=None):
        q = Meal.query
        if category:
            q = q.filter(Meal.category == category)
        if meal_type:
            q = q.filter(Meal.type == meal_type)
        if featured is not None:
            q = q.filter(Meal.is_featured.is_(featured))
        rows = q.order_by(Meal.created_at.desc(), Meal.id.desc()).all()
        return [m.to_dict() for m in rows]

    def get_meal(self, meal_id):
        pk = _as_id(meal_id)
        meal = Meal.query.get(pk) if pk is not None else None
        return meal.to_dict() if meal else None

    def search_meals(self, query):
        pattern = f"%{query}%"
        rows = (
            Meal.query.filter(or_(Meal.name.ilike(pattern), Meal.description.ilike(pattern)))
            .order_by(Meal.created_at.desc(), Meal.id.desc())
            .all()
        )
        found = {m.id: m.to_dict() for m in rows}
        for m in Meal.query.all():
            if m.id not in found and _matches({"tags": m.tags}, query):
                found[m.id] = m.to_dict()
        return list(found.values())


class StaticFallbackDataSource(DataSource):
    name = "fallback"
    is_live = False

    def __init__(self, workouts=None, meals=None):
        self.workouts = list(workouts if workouts is not None else FALLBACK_WORKOUTS)
        self.meals = list(meals if meals is not None else FALLBACK_MEALS)

    def list_workouts(self, category=None, difficulty=None, featured=None):
        return [
            dict(w)
            for w in self.workouts
            if (not category or w["category"] == category)
            and (not difficulty or w["difficulty"] == difficulty)
            and (featured is None or w["isFeatured"] == featured)
        ]

    def get_workout(self, workout_id):
        for w in self.workouts:
            if str(w["id"]) == str(workout_id):
                return dict(w)
        return None

    def search_workouts(self, query):
        return [dict(w) for w in self.workouts if _matches(w, query)]

    def list_meals(self, category=None, meal_type=None, featured=None):
        return [
            dict(m)
            for m in self.meals
            if (not category or m["category"] == category)
            and (not meal_type or m["type"] == meal_type)
            and (featured is None or m["isFeatured"] == featured)
        ]

    def get_meal(self, meal_id):
        for m in self.meals:
            if str(m["id"]) == str(meal_id):
                return dict(m)
        return None

    def search_meals(self, query):
        return [dict(m) for m in self.meals if _matches(m, query)]


# ------------------------------
# Selection
# ------------------------------
def _store_reachable(app) -> bool:
    try:
        with app.app_context():
            db.session.execute(text("SELECT 1"))
            db.session.remove()
        return True
    except SQLAlchemyError as e:
        app.logger.warning(f"[data_source] database unreachable: {e}")
        return False


def select_data_source(app) -> DataSource:
    mode = (app.config.get("DATA_SOURCE") or "auto").strip().lower()
    if mode == "fallback":
        source = StaticFallbackDataSource()
    elif mode == "live":
        source = LiveDataSource()
    else:
        source = LiveDataSource() if _store_reachable(app) else StaticFallbackDataSource()

    if source.is_live:
        app.logger.info("[data_source] using live database")
    else:
        app.logger.warning("[data_source] serving static fallback catalog; writes are disabled")
    return source


def get_data_source() -> DataSource:
    return current_app.extensions["dietbuddy.data_source"]


def live_store_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if not get_data_source().is_live:
            raise StoreUnavailableError()
        return fn(*args, **kwargs)

    return wrapper
