# dietbuddy/models/journey.py
from datetime import datetime
from .. import db


def calculate_bmi(weight: float, height_cm: float) -> float:
    return round(weight / ((height_cm / 100) ** 2), 2)


class JourneyRecord(db.Model):
    """A weigh-in: weight (kg), height (cm) and the BMI derived from them."""

    __tablename__ = "journey_records"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    recorded_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    weight = db.Column(db.Float, nullable=False)
    height = db.Column(db.Float, nullable=False)
    bmi = db.Column(db.Float, nullable=False)
    # {chest, waist, hips, arms, thighs}
    measurements = db.Column(db.JSON, nullable=False, default=dict)
    notes = db.Column(db.Text)

    def refresh_bmi(self) -> None:
        self.bmi = calculate_bmi(self.weight, self.height)

    def to_dict(self):
        return {
            "id": self.id,
            "user": self.user_id,
            "date": self.recorded_at.isoformat() if self.recorded_at else None,
            "weight": self.weight,
            "height": self.height,
            "bmi": self.bmi,
            "measurements": self.measurements or {},
            "notes": self.notes,
        }
