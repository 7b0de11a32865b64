# dietbuddy/routes/journey_routes.py

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db, rewards
from ..auth import current_user_id
from ..data_source import live_store_required
from ..errors import ValidationError
from ..models.journey import JourneyRecord

journey_bp = Blueprint("journey", __name__)

PROGRESS_COINS = 3
MEASUREMENT_KEYS = ("chest", "waist", "hips", "arms", "thighs")


def _positive_number(data, key):
    value = data.get(key)
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be a number")
    if number <= 0:
        raise ValidationError(f"{key} must be positive")
    return number


def _measurements(data):
    raw = data.get("measurements")
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ValidationError("measurements must be an object")
    out = {}
    for key in MEASUREMENT_KEYS:
        if raw.get(key) not in (None, ""):
            out[key] = _positive_number(raw, key)
    return out


def _own_record(record_id: int, action: str):
    record = JourneyRecord.query.get(record_id)
    if not record:
        return None, (jsonify({"message": "Progress record not found"}), 404)
    if record.user_id != current_user_id():
        return None, (jsonify({"message": f"Not authorized to {action} this record"}), 401)
    return record, None


def _newest_first():
    return JourneyRecord.query.filter_by(user_id=current_user_id()).order_by(
        JourneyRecord.recorded_at.desc(), JourneyRecord.id.desc()
    )


@journey_bp.route("", methods=["GET"])
@jwt_required()
@live_store_required
def list_records():
    return jsonify([r.to_dict() for r in _newest_first().all()]), 200


@journey_bp.route("/latest", methods=["GET"])
@jwt_required()
@live_store_required
def latest_record():
    record = _newest_first().first()
    if not record:
        return jsonify({"message": "No progress records found"}), 404
    return jsonify(record.to_dict()), 200


@journey_bp.route("", methods=["POST"])
@jwt_required()
@live_store_required
def add_record():
    user_id = current_user_id()
    data = request.get_json(silent=True) or {}
    weight = _positive_number(data, "weight")
    height = _positive_number(data, "height")
    if not weight or not height:
        return jsonify({"message": "Weight and height are required"}), 400

    record = JourneyRecord(
        user_id=user_id,
        weight=weight,
        height=height,
        measurements=_measurements(data) or {},
        notes=data.get("notes"),
    )
    record.refresh_bmi()
    db.session.add(record)
    db.session.commit()
    current_app.logger.info(f"[journey] record id={record.id} bmi={record.bmi} user_id={user_id}")

    rewards.award_best_effort(
        user_id, "progress", PROGRESS_COINS, f"Earned {PROGRESS_COINS} coins for tracking progress"
    )
    return jsonify(record.to_dict()), 201


@journey_bp.route("/<int:record_id>", methods=["PUT"])
@jwt_required()
@live_store_required
def update_record(record_id: int):
    record, error = _own_record(record_id, "update")
    if error:
        return error

    data = request.get_json(silent=True) or {}
    weight = _positive_number(data, "weight")
    height = _positive_number(data, "height")
    measurements = _measurements(data)

    if weight:
        record.weight = weight
    if height:
        record.height = height
    if weight or height:
        record.refresh_bmi()
    if measurements is not None:
        record.measurements = measurements
    if data.get("notes"):
        record.notes = data["notes"]
    db.session.commit()
    return jsonify(record.to_dict()), 200


@journey_bp.route("/<int:record_id>", methods=["DELETE"])
@jwt_required()
@live_store_required
def delete_record(record_id: int):
    record, error = _own_record(record_id, "delete")
    if error:
        return error

    db.session.delete(record)
    db.session.commit()
    return jsonify({"message": "Progress record removed"}), 200


@journey_bp.route("/summary", methods=["GET"])
@jwt_required()
@live_store_required
def summary():
    records = (
        JourneyRecord.query.filter_by(user_id=current_user_id())
        .order_by(JourneyRecord.recorded_at.asc(), JourneyRecord.id.asc())
        .all()
    )
    if not records:
        return jsonify({"message": "No progress records found"}), 404

    first, last = records[0], records[-1]
    weight_change = 0
    bmi_change = 0
    if len(records) > 1:
        weight_change = round(last.weight - first.weight, 1)
        bmi_change = round(last.bmi - first.bmi, 2)

    return jsonify(
        {
            "dates": [r.recorded_at.isoformat() for r in records],
            "weights": [r.weight for r in records],
            "bmis": [r.bmi for r in records],
            "weightChange": weight_change,
            "bmiChange": bmi_change,
            "currentWeight": last.weight,
            "currentBMI": last.bmi,
        }
    ), 200
