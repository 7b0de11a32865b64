# dietbuddy/models/catalog.py
from datetime import datetime
from .. import db

WORKOUT_CATEGORIES = ("cardio", "strength", "flexibility", "hiit", "yoga")
WORKOUT_DIFFICULTIES = ("beginner", "intermediate", "advanced")
MEAL_CATEGORIES = ("breakfast", "lunch", "dinner", "snack")
MEAL_TYPES = ("vegetarian", "non-vegetarian", "vegan")


class Workout(db.Model):
    __tablename__ = "workouts"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(30), nullable=False, index=True)
    difficulty = db.Column(db.String(30), nullable=False, index=True)
    duration = db.Column(db.String(50), nullable=False)
    calories = db.Column(db.Integer, nullable=False)
    # [{name, description, duration, sets, reps, calories, videoUrl, imageUrl}]
    exercises = db.Column(db.JSON, nullable=False, default=list)
    image_url = db.Column(db.String(255))
    video_url = db.Column(db.String(255))
    is_featured = db.Column(db.Boolean, nullable=False, default=False)
    tags = db.Column(db.JSON, nullable=False, default=list)
    created_by = db.Column(db.Integer, db.ForeignKey("users.id"))

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "difficulty": self.difficulty,
            "duration": self.duration,
            "calories": self.calories,
            "exercises": self.exercises or [],
            "imageUrl": self.image_url,
            "videoUrl": self.video_url,
            "isFeatured": bool(self.is_featured),
            "tags": self.tags or [],
            "createdBy": self.created_by,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


class Meal(db.Model):
    __tablename__ = "meals"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(30), nullable=False, index=True)
    type = db.Column(db.String(30), nullable=False, index=True)
    calories = db.Column(db.Integer, nullable=False)
    # {protein, carbs, fat, fiber}
    nutrients = db.Column(db.JSON, nullable=False, default=dict)
    ingredients = db.Column(db.JSON, nullable=False, default=list)
    instructions = db.Column(db.JSON, nullable=False, default=list)
    image_url = db.Column(db.String(255))
    prep_time = db.Column(db.String(50))
    cook_time = db.Column(db.String(50))
    servings = db.Column(db.Integer)
    is_featured = db.Column(db.Boolean, nullable=False, default=False)
    tags = db.Column(db.JSON, nullable=False, default=list)
    created_by = db.Column(db.Integer, db.ForeignKey("users.id"))

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "type": self.type,
            "calories": self.calories,
            "nutrients": self.nutrients or {},
            "ingredients": self.ingredients or [],
            "instructions": self.instructions or [],
            "imageUrl": self.image_url,
            "prepTime": self.prep_time,
            "cookTime": self.cook_time,
            "servings": self.servings,
            "isFeatured": bool(self.is_featured),
            "tags": self.tags or [],
            "createdBy": self.created_by,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
