# dietbuddy/models/reward.py
from datetime import datetime
from .. import db


class RewardAccount(db.Model):
    __tablename__ = "reward_accounts"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), unique=True, nullable=False)
    coin_balance = db.Column(db.Integer, nullable=False, default=0)
    # bumped on every UPDATE; a stale write raises StaleDataError
    version = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    activities = db.relationship(
        "RewardActivity",
        back_populates="account",
        order_by="RewardActivity.id",
        cascade="all, delete-orphan",
    )

    __mapper_args__ = {"version_id_col": version}

    def to_dict(self):
        return {
            "user": self.user_id,
            "coins": int(self.coin_balance or 0),
            "activities": [a.to_dict() for a in self.activities],
        }


class RewardActivity(db.Model):
    """Immutable coin ledger row; positive coins earn, negative coins spend."""

    __tablename__ = "reward_activities"

    id = db.Column(db.Integer, primary_key=True)
    account_id = db.Column(db.Integer, db.ForeignKey("reward_accounts.id"), nullable=False, index=True)
    type = db.Column(db.String(40), nullable=False)
    coins = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    description = db.Column(db.String(255))

    account = db.relationship("RewardAccount", back_populates="activities")

    def to_dict(self):
        return {
            "id": self.id,
            "type": self.type,
            "coins": self.coins,
            "date": self.created_at.isoformat() if self.created_at else None,
            "description": self.description,
        }
