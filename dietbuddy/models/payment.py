# dietbuddy/models/payment.py
from datetime import datetime
from .. import db


class Payment(db.Model):
    __tablename__ = "payments"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    razorpay_order_id = db.Column(db.String(100), nullable=False, index=True)
    razorpay_payment_id = db.Column(db.String(100))
    razorpay_signature = db.Column(db.String(255))
    amount = db.Column(db.Integer, nullable=False)
    currency = db.Column(db.String(10), nullable=False, default="INR")
    plan_type = db.Column(
        db.Enum("monthly", "premium", name="payment_plan_type"),
        nullable=False,
        default="premium",
    )
    status = db.Column(
        db.Enum("created", "attempted", "failed", "successful", name="payment_status"),
        nullable=False,
        default="created",
        index=True,
    )
    is_dummy = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    verified_at = db.Column(db.DateTime)
    membership_expiry = db.Column(db.DateTime)

    user = db.relationship("User", backref="payments")

    def to_dict(self):
        return {
            "id": self.id,
            "orderId": self.razorpay_order_id,
            "paymentId": self.razorpay_payment_id,
            "amount": self.amount,
            "currency": self.currency,
            "planType": self.plan_type,
            "status": self.status,
            "isDummyOrder": bool(self.is_dummy),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "verifiedAt": self.verified_at.isoformat() if self.verified_at else None,
        }
