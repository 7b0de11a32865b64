# dietbuddy/rewards.py
"""
Coin ledger, daily activity tracking and streak/badge queries.

Every mutation runs inside `_serialized`: the user's lock is held for the
whole read-modify-write, and a stale RewardAccount version (another
process got there first) re-runs the unit of work from scratch.
"""
from datetime import date
from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from . import db
from .errors import (
    ApiError,
    ConflictError,
    InsufficientBalanceError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from .models.activity import ActivityEntry
from .models.reward import RewardAccount, RewardActivity
from .models.user import User
from . import reward_core


# ------------------------------
# Helpers
# ------------------------------
def _user_locks():
    return current_app.extensions["dietbuddy.user_locks"]


def _serialized(user_id: int, unit_of_work):
    attempts = int(current_app.config.get("REWARD_WRITE_ATTEMPTS", 3))
    with _user_locks().hold(user_id):
        for attempt in range(1, attempts + 1):
            try:
                result = unit_of_work()
                db.session.commit()
                return result
            except (StaleDataError, IntegrityError) as e:
                db.session.rollback()
                current_app.logger.warning(
                    "[rewards] write conflict user_id=%s attempt=%s/%s: %s",
                    user_id, attempt, attempts, e.__class__.__name__,
                )
            except ApiError:
                db.session.rollback()
                raise
            except SQLAlchemyError as e:
                db.session.rollback()
                current_app.logger.exception(f"[rewards] persistence failure user_id={user_id}: {e}")
                raise PersistenceError() from e
    raise ConflictError()


def _require_user(user_id: int) -> User:
    user = User.query.get(user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def _find_account(user_id: int) -> Optional[RewardAccount]:
    return RewardAccount.query.filter_by(user_id=user_id).first()


def _get_or_create_account(user_id: int) -> RewardAccount:
    account = _find_account(user_id)
    if account is None:
        account = RewardAccount(user_id=user_id, coin_balance=0)
        db.session.add(account)
        db.session.flush()
    return account


def _post(account: RewardAccount, activity_type: str, coins: int, description: str) -> RewardActivity:
    activity = RewardActivity(type=activity_type, coins=int(coins), description=description)
    account.activities.append(activity)
    account.coin_balance = int(account.coin_balance or 0) + int(coins)
    return activity


def _entries_for(user_id: int) -> List[ActivityEntry]:
    return ActivityEntry.query.filter_by(user_id=user_id).all()


def _entry_for_day(user_id: int, day: date) -> ActivityEntry:
    entry = ActivityEntry.query.filter_by(user_id=user_id, entry_date=day).first()
    if entry is None:
        entry = ActivityEntry(
            user_id=user_id,
            entry_date=day,
            workout_completed=False,
            meal_plan_followed=False,
            steps=0,
        )
        db.session.add(entry)
    return entry


def _whole_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if isinstance(value, float) and value != number:
        return None
    return number


def _positive_int(value: Any) -> Optional[int]:
    number = _whole_int(value)
    return number if number is not None and number > 0 else None


def _optional_flag(value: Any, field: str) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    raise ValidationError(f"{field} must be a boolean")


# ------------------------------
# Account
# ------------------------------
def get_account(user_id: int) -> Dict[str, Any]:
    """Return the user's reward account, creating an empty one if needed."""
    def _work():
        return _get_or_create_account(user_id).to_dict()

    return _serialized(user_id, _work)


def list_activities(user_id: int) -> List[Dict[str, Any]]:
    account = _find_account(user_id)
    if account is None:
        return []
    rows = sorted(account.activities, key=lambda a: (a.created_at, a.id), reverse=True)
    return [a.to_dict() for a in rows]


def add_manual_activity(user_id: int, activity_type: str, coins: Any, description: Optional[str] = None) -> Dict[str, Any]:
    activity_type = (activity_type or "").strip() if isinstance(activity_type, str) else None
    amount = _whole_int(coins)
    if not activity_type or not amount:
        raise ValidationError("Activity type and coins are required")

    def _work():
        account = _get_or_create_account(user_id)
        _post(
            account,
            activity_type,
            amount,
            description or f"Earned {amount} coins for {activity_type}",
        )
        db.session.flush()
        return account.to_dict()

    return _serialized(user_id, _work)


def award_best_effort(user_id: int, activity_type: str, coins: int, description: str) -> bool:
    """
    Coins for a side action (post, comment, weigh-in). The action itself is
    already committed, so a failed award is logged and swallowed.
    """
    try:
        add_manual_activity(user_id, activity_type, coins, description)
    except ApiError as e:
        current_app.logger.exception(
            f"[rewards] could not award {coins} coins ({activity_type}) to user_id={user_id}: {e.message}"
        )
        return False
    return True


def spend_coins(user_id: int, amount: Any, item: Any) -> Dict[str, Any]:
    cost = _positive_int(amount)
    label = item.strip() if isinstance(item, str) else None
    if not cost or not label:
        raise ValidationError("Amount and item are required")

    def _work():
        account = _find_account(user_id)
        if account is None:
            raise NotFoundError("No reward record found")
        if cost > int(account.coin_balance or 0):
            raise InsufficientBalanceError("Not enough coins")
        _post(account, "redeem", -cost, f"Spent {cost} coins on {label}")
        db.session.flush()
        return {
            "message": "Coins spent successfully",
            "remainingCoins": int(account.coin_balance),
        }

    return _serialized(user_id, _work)


# ------------------------------
# Daily tracking
# ------------------------------
def record_daily_activity(
    user_id: int,
    day: Any = None,
    workout_completed: Any = None,
    meal_plan_followed: Any = None,
) -> Dict[str, Any]:
    """
    Upsert the user's ActivityEntry for `day`, recompute streaks and
    award coins/badges for this call.
    """
    workout_completed = _optional_flag(workout_completed, "workoutCompleted")
    meal_plan_followed = _optional_flag(meal_plan_followed, "mealPlanFollowed")
    if workout_completed is None and meal_plan_followed is None:
        raise ValidationError("At least one tracking parameter is required")

    try:
        day = reward_core.normalize_day(day)
    except ValueError:
        raise ValidationError("date must be an ISO-8601 date")

    _require_user(user_id)

    def _work():
        entry = _entry_for_day(user_id, day)
        if workout_completed is not None:
            entry.workout_completed = workout_completed
        if meal_plan_followed is not None:
            entry.meal_plan_followed = meal_plan_followed
        db.session.flush()

        entries = _entries_for(user_id)
        workout_streak = reward_core.compute_streak(entries, "workout_completed")
        meal_streak = reward_core.compute_streak(entries, "meal_plan_followed")

        account = _find_account(user_id)
        consistency_awarded = account is not None and any(
            a.type == "achievement" and a.description == reward_core.CONSISTENCY_DESCRIPTION
            for a in account.activities
        )
        reward = reward_core.compute_daily_reward(
            workout_completed,
            meal_plan_followed,
            workout_streak,
            meal_streak,
            consistency_awarded,
        )

        # the account only comes into being on the first call that earns coins
        if reward.coins or reward.achievement_coins:
            account = _get_or_create_account(user_id)
        if reward.achievement_coins:
            _post(
                account,
                "achievement",
                reward.achievement_coins,
                reward_core.CONSISTENCY_DESCRIPTION,
            )
        if reward.coins:
            _post(account, reward.activity_type, reward.coins, reward.description)
        db.session.flush()

        badges = reward_core.record_badges(len(entries), workout_streak)
        return {
            "success": True,
            "dateRecorded": day.isoformat(),
            "workoutCompleted": workout_completed,
            "mealPlanFollowed": meal_plan_followed,
            "streaks": {"workout": workout_streak, "meal": meal_streak},
            "rewardsEarned": reward.coins + reward.achievement_coins,
            "rewardMessage": reward.message,
            "badges": badges or None,
        }

    result = _serialized(user_id, _work)
    if result["rewardsEarned"]:
        current_app.logger.info(
            "[rewards] user_id=%s earned %s coins (%s)",
            user_id, result["rewardsEarned"], result["rewardMessage"],
        )
    return result


def record_steps(user_id: int, steps: Any, day: Any = None) -> Dict[str, Any]:
    count = _positive_int(steps)
    if not count:
        raise ValidationError("Steps count is required")

    coins = reward_core.coins_for_steps(count)
    if coins <= 0:
        # success with nothing earned; no write
        return {"message": "Not enough steps for rewards", "coinsEarned": 0}

    try:
        day = reward_core.normalize_day(day)
    except ValueError:
        raise ValidationError("date must be an ISO-8601 date")

    _require_user(user_id)

    def _work():
        account = _get_or_create_account(user_id)
        _post(account, "steps", coins, f"Earned {coins} coins for {count} steps")

        entry = _entry_for_day(user_id, day)
        entry.steps = count
        db.session.flush()
        return {
            "message": "Reward added for steps",
            "coinsEarned": coins,
            "totalCoins": int(account.coin_balance),
        }

    return _serialized(user_id, _work)


# ------------------------------
# Read-only queries
# ------------------------------
def get_streaks_and_badges(user_id: int) -> Dict[str, Any]:
    entries = _entries_for(user_id)
    workout_streak = reward_core.compute_streak(entries, "workout_completed")
    meal_streak = reward_core.compute_streak(entries, "meal_plan_followed")

    account = _find_account(user_id)
    achievements = []
    if account is not None:
        achievements = [a.description for a in account.activities if a.type == "achievement"]

    return {
        "streaks": {"workout": workout_streak, "meal": meal_streak},
        "loginCount": len(entries),
        "badges": reward_core.unlocked_badges(
            len(entries), workout_streak, meal_streak, achievements
        ),
    }


def workout_streak_for(user_id: int) -> int:
    return reward_core.compute_streak(_entries_for(user_id), "workout_completed")
