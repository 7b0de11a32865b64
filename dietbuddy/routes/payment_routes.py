# dietbuddy/routes/payment_routes.py

import time
from datetime import datetime, timedelta

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db
from ..auth import load_current_user
from ..data_source import live_store_required
from ..errors import UpstreamError
from ..models.payment import Payment

payments_bp = Blueprint("payments", __name__)


def _gateway():
    return current_app.extensions["dietbuddy.razorpay"]


def _now_ms() -> int:
    return int(time.time() * 1000)


def _grant_membership(user) -> datetime:
    days = int(current_app.config.get("MEMBERSHIP_DURATION_DAYS", 365))
    user.is_member = True
    user.membership_expiry = datetime.utcnow() + timedelta(days=days)
    return user.membership_expiry


@payments_bp.route("/get-key", methods=["GET"])
@jwt_required()
def get_key():
    return jsonify({"keyId": _gateway().key_id}), 200


@payments_bp.route("/create-order", methods=["POST"])
@jwt_required()
@live_store_required
def create_order():
    user = load_current_user()
    amount = int(current_app.config["MEMBERSHIP_PRICE"])
    currency = current_app.config["MEMBERSHIP_CURRENCY"]
    receipt = f"order_{user.id}_{_now_ms()}"

    try:
        order = _gateway().create_order(amount, currency, receipt)
    except UpstreamError as e:
        if not current_app.config.get("ALLOW_DUMMY_PAYMENTS"):
            current_app.logger.error(f"[payments] order creation failed user_id={user.id}: {e.message}")
            raise
        current_app.logger.warning(f"[payments] gateway unavailable ({e.message}); issuing dummy order")
        order = {"id": f"dummy_order_{_now_ms()}", "amount": amount, "currency": currency}
        is_dummy = True
    else:
        is_dummy = False

    payment = Payment(
        user_id=user.id,
        razorpay_order_id=order["id"],
        amount=int(order["amount"]),
        currency=order["currency"],
        plan_type="premium",
        status="created",
        is_dummy=is_dummy,
    )
    db.session.add(payment)
    db.session.commit()
    current_app.logger.info(f"[payments] order={order['id']} user_id={user.id} dummy={is_dummy}")

    body = {
        "orderId": order["id"],
        "amount": int(order["amount"]),
        "currency": order["currency"],
        "keyId": _gateway().key_id,
    }
    if is_dummy:
        body["isDummyOrder"] = True
    return jsonify(body), 200


@payments_bp.route("/verify", methods=["POST"])
@jwt_required()
@live_store_required
def verify_payment():
    user = load_current_user()
    data = request.get_json(silent=True) or {}

    order_id = data.get("razorpay_order_id")
    payment_id = data.get("razorpay_payment_id")
    signature = data.get("razorpay_signature")

    if not order_id:
        return jsonify({"message": "razorpay_order_id is required"}), 400

    payment = Payment.query.filter_by(user_id=user.id, razorpay_order_id=order_id).first()

    if data.get("isDummyOrder"):
        dummy_ok = (
            current_app.config.get("ALLOW_DUMMY_PAYMENTS")
            and str(order_id).startswith("dummy_order_")
            and (payment is None or payment.is_dummy)
        )
        if not dummy_ok:
            return jsonify({"message": "Dummy orders are not accepted"}), 400
        valid = True
    else:
        valid = _gateway().verify_signature(order_id, payment_id, signature)

    if payment is not None:
        payment.razorpay_payment_id = payment_id
        payment.razorpay_signature = signature
        payment.verified_at = datetime.utcnow()

    if not valid:
        if payment is not None:
            payment.status = "failed"
            db.session.commit()
        current_app.logger.warning(f"[payments] signature mismatch order={order_id} user_id={user.id}")
        return jsonify({"message": "Invalid signature"}), 400

    expiry = _grant_membership(user)
    if payment is not None:
        payment.status = "successful"
        payment.membership_expiry = expiry
    db.session.commit()
    current_app.logger.info(f"[payments] membership granted user_id={user.id} until {expiry.isoformat()}")

    return jsonify({
        "message": "Payment verified successfully",
        "user": user.to_dict(),
    }), 200


@payments_bp.route("/test-upgrade", methods=["POST"])
@jwt_required()
@live_store_required
def test_upgrade():
    if current_app.config.get("ENV") in ("prod", "production"):
        return jsonify({"message": "Not available in production"}), 403

    user = load_current_user()
    _grant_membership(user)
    db.session.commit()
    current_app.logger.info(f"[payments] test upgrade user_id={user.id}")
    return jsonify({"message": "User upgraded to premium", "user": user.to_dict()}), 200
