# dietbuddy/models/progress.py
from datetime import datetime
from .. import db


class WorkoutLog(db.Model):
    __tablename__ = "workout_logs"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    workout_ref = db.Column(db.String(50), nullable=False)
    workout_name = db.Column(db.String(120))
    duration = db.Column(db.Integer)
    calories = db.Column(db.Integer)
    completed = db.Column(db.Boolean, nullable=False, default=True)
    logged_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "date": self.logged_at.isoformat(),
            "workoutId": self.workout_ref,
            "workoutName": self.workout_name,
            "duration": self.duration,
            "calories": self.calories,
            "workoutCompleted": bool(self.completed),
        }


class MealLog(db.Model):
    __tablename__ = "meal_logs"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    meal_ref = db.Column(db.String(50), nullable=False)
    meal_name = db.Column(db.String(120))
    calories = db.Column(db.Integer)
    followed = db.Column(db.Boolean, nullable=False, default=True)
    logged_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "date": self.logged_at.isoformat(),
            "mealId": self.meal_ref,
            "mealName": self.meal_name,
            "calories": self.calories,
            "mealPlanFollowed": bool(self.followed),
        }


class BodyMeasurement(db.Model):
    __tablename__ = "body_measurements"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    measured_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    weight = db.Column(db.Float)
    body_fat = db.Column(db.Float)
    muscle_mass = db.Column(db.Float)
    chest = db.Column(db.Float)
    waist = db.Column(db.Float)
    hips = db.Column(db.Float)
    thighs = db.Column(db.Float)
    arms = db.Column(db.Float)

    def to_dict(self):
        return {
            "id": self.id,
            "date": self.measured_at.isoformat(),
            "weight": self.weight,
            "bodyFat": self.body_fat,
            "muscleMass": self.muscle_mass,
            "measurements": {
                "chest": self.chest,
                "waist": self.waist,
                "hips": self.hips,
                "thighs": self.thighs,
                "arms": self.arms,
            },
        }
