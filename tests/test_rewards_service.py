import threading
from datetime import date, timedelta

import pytest
from sqlalchemy import text

from dietbuddy import db, rewards
from dietbuddy.auth import issue_token
from dietbuddy.errors import InsufficientBalanceError, NotFoundError, ValidationError
from dietbuddy.models.activity import ActivityEntry
from dietbuddy.models.reward import RewardAccount
from dietbuddy.models.user import User

START = date(2025, 3, 1)


def _day(n):
    return (START + timedelta(days=n - 1)).isoformat()


def _balance(user_id):
    account = RewardAccount.query.filter_by(user_id=user_id).first()
    return account.coin_balance if account else 0


def _ledger_sum(user_id):
    account = RewardAccount.query.filter_by(user_id=user_id).first()
    return sum(a.coins for a in account.activities) if account else 0


# ------------------------------
# Streaks
# ------------------------------
def test_streak_equals_consecutive_true_days(app, user):
    user_id, _ = user
    with app.app_context():
        for n in range(1, 6):
            result = rewards.record_daily_activity(user_id, _day(n), workout_completed=True)
        assert result["streaks"]["workout"] == 5


def test_false_day_resets_to_trailing_run(app, user):
    user_id, _ = user
    with app.app_context():
        flags = [True, True, True, False, True, True]
        for n, flag in enumerate(flags, start=1):
            result = rewards.record_daily_activity(user_id, _day(n), workout_completed=flag)
        assert result["streaks"]["workout"] == 2


def test_backdated_edit_counts_from_most_recent_entry(app, user):
    user_id, _ = user
    with app.app_context():
        rewards.record_daily_activity(user_id, _day(1), workout_completed=True)
        rewards.record_daily_activity(user_id, _day(3), workout_completed=True)
        result = rewards.record_daily_activity(user_id, _day(2), workout_completed=False)
        assert result["dateRecorded"] == _day(2)
        assert result["streaks"]["workout"] == 1


def test_omitted_flag_keeps_prior_value(app, user):
    user_id, _ = user
    with app.app_context():
        rewards.record_daily_activity(user_id, _day(1), meal_plan_followed=True)
        rewards.record_daily_activity(user_id, _day(1), workout_completed=True)
        entry = ActivityEntry.query.filter_by(user_id=user_id).one()
        assert entry.workout_completed is True
        assert entry.meal_plan_followed is True


# ------------------------------
# Coins and milestones
# ------------------------------
def test_three_day_bonus_only_at_three(app, user):
    user_id, _ = user
    earned = []
    with app.app_context():
        for n in range(1, 11):
            earned.append(rewards.record_daily_activity(user_id, _day(n), workout_completed=True)["rewardsEarned"])
    assert earned[2] == 15
    assert earned.count(15) == 1
    assert earned[6] == 30
    assert all(e == 5 for i, e in enumerate(earned) if i not in (2, 6))


def test_end_to_end_three_days(app, user):
    user_id, _ = user
    with app.app_context():
        first = rewards.record_daily_activity(user_id, _day(1), workout_completed=True)
        second = rewards.record_daily_activity(user_id, _day(2), workout_completed=True)
        third = rewards.record_daily_activity(user_id, _day(3), workout_completed=True)

    assert [b["id"] for b in first["badges"]] == ["day1"]
    assert second["badges"] is None
    assert third["streaks"]["workout"] == 3
    assert third["rewardsEarned"] == 15
    assert "3 Day Streak achieved!" in third["rewardMessage"]
    assert [b["id"] for b in third["badges"]] == ["streak3"]


def test_combined_entry_when_both_flags(app, user):
    user_id, _ = user
    with app.app_context():
        result = rewards.record_daily_activity(
            user_id, _day(1), workout_completed=True, meal_plan_followed=True
        )
        assert result["rewardsEarned"] == 10
        assert result["rewardMessage"] == "Completed workout and followed meal plan"
        account = RewardAccount.query.filter_by(user_id=user_id).one()
        assert [(a.type, a.coins) for a in account.activities] == [("daily_activities", 10)]


def test_consistency_king_awarded_once(app, user):
    user_id, _ = user
    with app.app_context():
        results = [
            rewards.record_daily_activity(
                user_id, _day(n), workout_completed=True, meal_plan_followed=True
            )
            for n in range(1, 11)
        ]
        account = RewardAccount.query.filter_by(user_id=user_id).one()
        kings = [a for a in account.activities if a.description == "Consistency King Badge"]
        assert len(kings) == 1
        assert kings[0].type == "achievement"
        assert kings[0].coins == 50
        assert _balance(user_id) == _ledger_sum(user_id)

    assert results[6]["rewardsEarned"] == 5 + 25 + 5 + 25 + 50
    assert results[6]["rewardMessage"].endswith("Consistency King Badge earned!")
    assert all("Consistency King" not in (r["rewardMessage"] or "") for r in results[7:])


def test_tracking_needs_a_flag(app, user):
    user_id, _ = user
    with app.app_context():
        with pytest.raises(ValidationError):
            rewards.record_daily_activity(user_id, _day(1))
        with pytest.raises(ValidationError):
            rewards.record_daily_activity(user_id, "not-a-date", workout_completed=True)


def test_tracking_unknown_user(app):
    with app.app_context():
        with pytest.raises(NotFoundError):
            rewards.record_daily_activity(9999, _day(1), workout_completed=True)


# ------------------------------
# Steps and spending
# ------------------------------
def test_steps_below_threshold_writes_nothing(app, user):
    user_id, _ = user
    with app.app_context():
        result = rewards.record_steps(user_id, 500)
        assert result == {"message": "Not enough steps for rewards", "coinsEarned": 0}
        assert RewardAccount.query.filter_by(user_id=user_id).first() is None


def test_steps_award_and_overwrite_todays_entry(app, user):
    user_id, _ = user
    with app.app_context():
        assert rewards.record_steps(user_id, 2500)["coinsEarned"] == 2
        result = rewards.record_steps(user_id, 1200)
        assert result["totalCoins"] == 3
        entry = ActivityEntry.query.filter_by(user_id=user_id, entry_date=date.today()).one()
        assert entry.steps == 1200


@pytest.mark.parametrize("steps", [None, 0, -5, "lots", True])
def test_steps_requires_positive_count(app, user, steps):
    user_id, _ = user
    with app.app_context():
        with pytest.raises(ValidationError):
            rewards.record_steps(user_id, steps)


def test_overspend_leaves_balance(app, user):
    user_id, _ = user
    with app.app_context():
        rewards.add_manual_activity(user_id, "bonus", 10)
        with pytest.raises(InsufficientBalanceError):
            rewards.spend_coins(user_id, 11, "Water bottle")
        assert _balance(user_id) == 10

        result = rewards.spend_coins(user_id, 4, "Sticker")
        assert result["remainingCoins"] == 6
        assert _ledger_sum(user_id) == 6


def test_spend_without_account(app, user):
    user_id, _ = user
    with app.app_context():
        with pytest.raises(NotFoundError):
            rewards.spend_coins(user_id, 1, "Sticker")


def test_manual_activity_default_description(app, user):
    user_id, _ = user
    with app.app_context():
        account = rewards.add_manual_activity(user_id, "post", 5)
        assert account["coins"] == 5
        assert account["activities"][0]["description"] == "Earned 5 coins for post"
        with pytest.raises(ValidationError):
            rewards.add_manual_activity(user_id, "", 5)


def test_manual_activity_rejects_fractional_coins(app, user):
    user_id, _ = user
    with app.app_context():
        with pytest.raises(ValidationError):
            rewards.add_manual_activity(user_id, "bonus", 2.7)
        with pytest.raises(ValidationError):
            rewards.add_manual_activity(user_id, "bonus", True)
        assert rewards.add_manual_activity(user_id, "bonus", 2.0)["coins"] == 2
        assert rewards.add_manual_activity(user_id, "penalty", -1)["coins"] == 1


def test_tracking_without_earnings_creates_no_account(app, user):
    user_id, _ = user
    with app.app_context():
        result = rewards.record_daily_activity(user_id, _day(1), workout_completed=False)
        assert result["rewardsEarned"] == 0
        assert RewardAccount.query.filter_by(user_id=user_id).first() is None
        assert ActivityEntry.query.filter_by(user_id=user_id).count() == 1

        rewards.record_daily_activity(user_id, _day(2), meal_plan_followed=True)
        assert _balance(user_id) == 5


# ------------------------------
# Read path
# ------------------------------
def test_fresh_user_has_no_streaks_or_badges(app, user):
    user_id, _ = user
    with app.app_context():
        assert rewards.get_streaks_and_badges(user_id) == {
            "streaks": {"workout": 0, "meal": 0},
            "loginCount": 0,
            "badges": [],
        }


def test_read_badges_are_cumulative(app, user):
    user_id, _ = user
    with app.app_context():
        for n in range(1, 12):
            rewards.record_daily_activity(user_id, _day(n), workout_completed=True)
        result = rewards.get_streaks_and_badges(user_id)
    ids = [b["id"] for b in result["badges"]]
    assert result["loginCount"] == 11
    assert ids == ["day1", "day5", "day10", "streak3", "streak7"]


def test_get_account_creates_lazily(app, user):
    user_id, _ = user
    with app.app_context():
        assert rewards.get_account(user_id) == {"user": user_id, "coins": 0, "activities": []}
        rewards.get_account(user_id)
        assert RewardAccount.query.filter_by(user_id=user_id).count() == 1


# ------------------------------
# Concurrency
# ------------------------------
def _seed_user(app, name="Runner"):
    with app.app_context():
        u = User(name=name, email=f"{name.lower()}@example.com")
        u.set_password("secret123")
        db.session.add(u)
        db.session.commit()
        return u.id, {"Authorization": f"Bearer {issue_token(u)}"}


def _bump_version_elsewhere(user_id):
    # a second connection commits its own update of the account row
    with db.engine.connect() as conn:
        conn.execute(
            text("UPDATE reward_accounts SET version = version + 1 WHERE user_id = :u"),
            {"u": user_id},
        )
        conn.commit()


def _run_together(app, calls):
    barrier = threading.Barrier(len(calls))
    statuses = []

    def worker(method, path, body, headers):
        client = app.test_client()
        barrier.wait()
        r = client.open(path, method=method, json=body, headers=headers)
        statuses.append(r.status_code)

    threads = [threading.Thread(target=worker, args=call) for call in calls]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return statuses


def test_concurrent_steps_never_lose_coins(file_app):
    user_id, headers = _seed_user(file_app)

    k = 8
    statuses = _run_together(
        file_app, [("POST", "/api/rewards/steps", {"steps": 2000}, headers)] * k
    )

    assert statuses == [200] * k
    with file_app.app_context():
        assert _balance(user_id) == k * 2
        assert _ledger_sum(user_id) == k * 2


def test_tracking_racing_spending_keeps_ledger_consistent(file_app):
    user_id, headers = _seed_user(file_app)
    with file_app.app_context():
        rewards.add_manual_activity(user_id, "bonus", 100)

    calls = []
    for n in range(1, 5):
        calls.append(("POST", "/api/rewards/track-activity", {"workoutCompleted": True, "date": _day(n)}, headers))
        calls.append(("POST", "/api/rewards/spend", {"amount": 10, "item": f"Item {n}"}, headers))

    statuses = _run_together(file_app, calls)

    assert statuses == [200] * len(calls)
    with file_app.app_context():
        # 100 seeded, 4 tracked days (5 each, +10 when a streak of 3 lands), 4 spends of 10
        assert _balance(user_id) == _ledger_sum(user_id)
        assert _balance(user_id) >= 100 + 4 * 5 - 4 * 10
        assert ActivityEntry.query.filter_by(user_id=user_id).count() == 4


def test_stale_account_write_is_retried(file_app, monkeypatch):
    user_id, _ = _seed_user(file_app)
    original_post = rewards._post
    attempts = []

    def post_after_foreign_update(account, *args):
        attempts.append(account.version)
        if len(attempts) == 1:
            _bump_version_elsewhere(user_id)
        return original_post(account, *args)

    with file_app.app_context():
        rewards.add_manual_activity(user_id, "bonus", 10)
        monkeypatch.setattr(rewards, "_post", post_after_foreign_update)

        account = rewards.add_manual_activity(user_id, "bonus", 7)

        assert len(attempts) == 2
        assert attempts[1] == attempts[0] + 1
        assert account["coins"] == 17
        assert _balance(user_id) == 17
        assert _ledger_sum(user_id) == 17


def test_write_gives_up_after_repeated_conflicts(file_app, monkeypatch):
    user_id, headers = _seed_user(file_app)
    original_post = rewards._post
    attempts = []

    def always_stale(account, *args):
        attempts.append(account.version)
        _bump_version_elsewhere(user_id)
        return original_post(account, *args)

    with file_app.app_context():
        rewards.add_manual_activity(user_id, "bonus", 10)
    monkeypatch.setattr(rewards, "_post", always_stale)

    r = file_app.test_client().post("/api/rewards/add", json={"type": "bonus", "coins": 5}, headers=headers)

    assert r.status_code == 409
    assert r.get_json()["message"] == "Concurrent update, please retry"
    assert len(attempts) == file_app.config["REWARD_WRITE_ATTEMPTS"]
    with file_app.app_context():
        assert _balance(user_id) == 10
        assert _ledger_sum(user_id) == 10
