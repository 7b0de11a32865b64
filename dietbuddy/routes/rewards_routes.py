# dietbuddy/routes/rewards_routes.py

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from .. import rewards
from ..auth import current_user_id
from ..data_source import live_store_required

rewards_bp = Blueprint("rewards", __name__)


@rewards_bp.route("", methods=["GET"])
@jwt_required()
@live_store_required
def get_rewards():
    return jsonify(rewards.get_account(current_user_id())), 200


@rewards_bp.route("/add", methods=["POST"])
@jwt_required()
@live_store_required
def add_reward():
    data = request.get_json(silent=True) or {}
    account = rewards.add_manual_activity(
        current_user_id(),
        data.get("type"),
        data.get("coins"),
        data.get("description"),
    )
    return jsonify(account), 200


@rewards_bp.route("/activities", methods=["GET"])
@jwt_required()
@live_store_required
def reward_activities():
    return jsonify({"activities": rewards.list_activities(current_user_id())}), 200


@rewards_bp.route("/track-activity", methods=["POST"])
@jwt_required()
@live_store_required
def track_activity():
    data = request.get_json(silent=True) or {}
    result = rewards.record_daily_activity(
        current_user_id(),
        day=data.get("date"),
        workout_completed=data.get("workoutCompleted"),
        meal_plan_followed=data.get("mealPlanFollowed"),
    )
    return jsonify(result), 200


@rewards_bp.route("/streaks", methods=["GET"])
@jwt_required()
@live_store_required
def streaks():
    return jsonify(rewards.get_streaks_and_badges(current_user_id())), 200


@rewards_bp.route("/steps", methods=["POST"])
@jwt_required()
@live_store_required
def steps():
    data = request.get_json(silent=True) or {}
    return jsonify(rewards.record_steps(current_user_id(), data.get("steps"))), 200


@rewards_bp.route("/spend", methods=["POST"])
@jwt_required()
@live_store_required
def spend():
    data = request.get_json(silent=True) or {}
    return jsonify(rewards.spend_coins(current_user_id(), data.get("amount"), data.get("item"))), 200
