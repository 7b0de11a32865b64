# dietbuddy/models/activity.py
from .. import db


class ActivityEntry(db.Model):
    """One tracked calendar day for a user (workout / meal plan / steps)."""

    __tablename__ = "activity_entries"
    __table_args__ = (
        db.UniqueConstraint("user_id", "entry_date", name="uq_activity_user_day"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    entry_date = db.Column(db.Date, nullable=False)
    workout_completed = db.Column(db.Boolean, nullable=False, default=False)
    meal_plan_followed = db.Column(db.Boolean, nullable=False, default=False)
    steps = db.Column(db.Integer, nullable=False, default=0)

    user = db.relationship("User", backref=db.backref("progress", lazy="dynamic"))

    def to_dict(self):
        return {
            "date": self.entry_date.isoformat(),
            "workoutCompleted": bool(self.workout_completed),
            "mealPlanFollowed": bool(self.meal_plan_followed),
            "steps": int(self.steps or 0),
        }
