# dietbuddy/reward_core.py
"""
Streak, coin and badge rules.

Pure functions over plain values so they can be exercised without a
database. The persistence side lives in dietbuddy/rewards.py.
"""
from collections import namedtuple
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

DAILY_WORKOUT_COINS = 5
DAILY_MEAL_COINS = 5

# streak length -> bonus coins (exact match only)
STREAK_MILESTONES = {3: 10, 7: 25, 30: 100}

CONSISTENCY_STREAK = 7
CONSISTENCY_COINS = 50
CONSISTENCY_DESCRIPTION = "Consistency King Badge"

STEPS_PER_COIN = 1000


def _badge(badge_id, name, description):
    return {"id": badge_id, "name": name, "description": description}


# (threshold, badge)
DAY_COUNT_BADGES = [
    (1, _badge("day1", "First Day!", "Completed your first day")),
    (5, _badge("day5", "High Five!", "Logged 5 days of activity")),
    (10, _badge("day10", "Perfect 10!", "Logged 10 days of activity")),
    (30, _badge("day30", "Monthly Master!", "Logged 30 days of activity")),
    (50, _badge("day50", "Half Century!", "Logged 50 days of activity")),
]

WORKOUT_STREAK_BADGES = [
    (3, _badge("streak3", "Workout Warrior", "3-day workout streak")),
    (7, _badge("streak7", "Workout Champion", "7-day workout streak")),
    (30, _badge("streak30", "Workout Legend", "30-day workout streak")),
]

MEAL_STREAK_BADGES = [
    (3, _badge("meal3", "Nutrition Novice", "3-day meal plan streak")),
    (7, _badge("meal7", "Nutrition Pro", "7-day meal plan streak")),
    (10, _badge("meal10", "Nutrition Nerd", "Followed meal plan for 10 days")),
]

CONSISTENCY_BADGE = _badge(
    "consistency",
    "Consistency King",
    "Completing all workouts and meals for 7 straight days",
)

# Shown only when an "achievement" ledger entry mentions the marker.
# Nothing in this service writes these entries.
ACHIEVEMENT_BADGES = [
    ("Comeback Kid", _badge(
        "comeback",
        "Comeback Kid",
        "Breaking a missed streak but returning for another consistent 3 days",
    )),
    ("Early Bird", _badge(
        "earlybird",
        "Early Bird",
        "Logging in before 7 AM for 5 consecutive days",
    )),
]

# the record path only ever reports these day-count tiers
_RECORD_DAY_THRESHOLDS = (1, 5, 10, 30)


DailyReward = namedtuple(
    "DailyReward",
    ["activity_type", "coins", "description", "achievement_coins", "message"],
)


def normalize_day(value=None) -> date:
    """
    Strip time-of-day. Accepts None (today), date, datetime or an
    ISO-8601 string ("2025-03-01" or "2025-03-01T18:30:00Z").
    Raises ValueError for anything else.
    """
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            return date.fromisoformat(text[:10])
    raise ValueError(f"unsupported date value: {value!r}")


def compute_streak(entries: Iterable, flag: str) -> int:
    """
    Count entries with `flag` set, walking from the most recent day
    backwards and stopping at the first entry without it.
    """
    ordered = sorted(entries, key=lambda e: e.entry_date, reverse=True)
    streak = 0
    for entry in ordered:
        if not getattr(entry, flag):
            break
        streak += 1
    return streak


def coins_for_steps(steps: int) -> int:
    return steps // STEPS_PER_COIN


def compute_daily_reward(
    workout_completed: Optional[bool],
    meal_plan_followed: Optional[bool],
    workout_streak: int,
    meal_streak: int,
    consistency_awarded: bool,
) -> DailyReward:
    """
    Coins for one track-activity call.

    `coins`/`description`/`activity_type` describe the daily ledger entry
    (coins == 0 means no daily entry). `achievement_coins` is the one-time
    Consistency King bonus, logged as its own entry. `message` is the
    text returned to the caller.
    """
    coins = 0
    activity_type = None
    suffixes = []

    if workout_completed:
        coins += DAILY_WORKOUT_COINS
        activity_type = "workout_completed"
        bonus = STREAK_MILESTONES.get(workout_streak)
        if bonus:
            coins += bonus
            suffixes.append(f"{workout_streak} Day Streak achieved!")

    if meal_plan_followed:
        coins += DAILY_MEAL_COINS
        activity_type = "daily_activities" if activity_type else "meal_followed"
        bonus = STREAK_MILESTONES.get(meal_streak)
        if bonus:
            coins += bonus
            suffixes.append(f"{meal_streak} Day Meal Streak achieved!")

    if activity_type == "daily_activities":
        headline = "Completed workout and followed meal plan"
    elif activity_type == "meal_followed":
        headline = "Followed meal plan"
    elif activity_type == "workout_completed":
        headline = "Completed today's workout"
    else:
        headline = None

    description = " - ".join([headline] + suffixes) if headline else None

    achievement_coins = 0
    message_parts = [description] if description else []
    if (
        workout_streak >= CONSISTENCY_STREAK
        and meal_streak >= CONSISTENCY_STREAK
        and not consistency_awarded
    ):
        achievement_coins = CONSISTENCY_COINS
        message_parts.append("Consistency King Badge earned!")

    message = " - ".join(message_parts) or None
    return DailyReward(activity_type, coins, description, achievement_coins, message)


def record_badges(day_count: int, workout_streak: int) -> List[Dict]:
    """Badges reported by the track-activity call: exact threshold hits only."""
    badges = [
        dict(badge)
        for threshold, badge in DAY_COUNT_BADGES
        if threshold in _RECORD_DAY_THRESHOLDS and day_count == threshold
    ]
    badges.extend(
        dict(badge)
        for threshold, badge in WORKOUT_STREAK_BADGES
        if workout_streak == threshold
    )
    return badges


def unlocked_badges(
    day_count: int,
    workout_streak: int,
    meal_streak: int,
    achievement_descriptions: Iterable[str] = (),
) -> List[Dict]:
    """Badges reported on read: every threshold reached so far."""
    badges = [dict(b) for threshold, b in DAY_COUNT_BADGES if day_count >= threshold]
    badges.extend(dict(b) for threshold, b in WORKOUT_STREAK_BADGES if workout_streak >= threshold)
    badges.extend(dict(b) for threshold, b in MEAL_STREAK_BADGES if meal_streak >= threshold)

    if workout_streak >= CONSISTENCY_STREAK and meal_streak >= CONSISTENCY_STREAK:
        badges.append(dict(CONSISTENCY_BADGE))

    descriptions = [d or "" for d in achievement_descriptions]
    for marker, badge in ACHIEVEMENT_BADGES:
        if any(marker in d for d in descriptions):
            badges.append(dict(badge))
    return badges
