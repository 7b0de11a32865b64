# dietbuddy/models/user.py
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from .. import db

FITNESS_GOALS = ("Strength Training", "Cardio", "HIIT", "Flexibility")
GENDERS = ("male", "female", "other")


favourite_workouts_table = db.Table(
    "user_favourite_workouts",
    db.Column("user_id", db.Integer, db.ForeignKey("users.id"), primary_key=True),
    db.Column("workout_id", db.Integer, db.ForeignKey("workouts.id"), primary_key=True),
)

favourite_meals_table = db.Table(
    "user_favourite_meals",
    db.Column("user_id", db.Integer, db.ForeignKey("users.id"), primary_key=True),
    db.Column("meal_id", db.Integer, db.ForeignKey("meals.id"), primary_key=True),
)


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)

    role = db.Column(db.Enum("user", "admin", name="user_role"), nullable=False, default="user")
    is_member = db.Column(db.Boolean, nullable=False, default=False)
    membership_expiry = db.Column(db.DateTime)

    fitness_goal = db.Column(db.String(50))
    age = db.Column(db.Integer)
    height = db.Column(db.Float)
    weight = db.Column(db.Float)
    gender = db.Column(db.Enum(*GENDERS, name="gender_enum"))

    workout_plan = db.Column(db.JSON)
    meal_plan = db.Column(db.JSON)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    favourite_workouts = db.relationship("Workout", secondary=favourite_workouts_table, backref="favourited_by")
    favourite_meals = db.relationship("Meal", secondary=favourite_meals_table, backref="favourited_by")

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "isMember": bool(self.is_member),
            "membershipExpiry": self.membership_expiry.isoformat() if self.membership_expiry else None,
            "fitnessGoal": self.fitness_goal,
            "measurements": {
                "age": self.age,
                "height": self.height,
                "weight": self.weight,
                "gender": self.gender,
            },
        }

    def to_profile_dict(self):
        data = self.to_dict()
        data["favouriteWorkouts"] = [w.to_dict() for w in self.favourite_workouts]
        data["favouriteMeals"] = [m.to_dict() for m in self.favourite_meals]
        data["createdAt"] = self.created_at.isoformat() if self.created_at else None
        data["updatedAt"] = self.updated_at.isoformat() if self.updated_at else None
        return data
