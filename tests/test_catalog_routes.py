import pytest

from config import TestConfig
from dietbuddy import create_app

WORKOUT = {
    "name": "Morning Run",
    "description": "Easy paced outdoor run",
    "category": "cardio",
    "difficulty": "beginner",
    "duration": "30 minutes",
    "calories": 250,
    "tags": ["outdoor", "running"],
    "isFeatured": True,
}

MEAL = {
    "name": "Paneer Wrap",
    "description": "Whole wheat wrap with grilled paneer",
    "category": "lunch",
    "type": "vegetarian",
    "calories": 420,
    "ingredients": ["Paneer", "Wrap"],
    "instructions": ["Grill paneer", "Roll"],
}


@pytest.fixture
def admin(make_user):
    return make_user(name="Admin", role="admin")


@pytest.fixture
def fallback_client():
    class FallbackConfig(TestConfig):
        DATA_SOURCE = "fallback"

    return create_app(FallbackConfig).test_client()


# ------------------------------
# Live catalog
# ------------------------------
def test_admin_creates_and_reads_workout(client, admin):
    _, headers = admin
    r = client.post("/api/workouts", json=WORKOUT, headers=headers)
    assert r.status_code == 201
    workout_id = r.get_json()["id"]

    assert [w["name"] for w in client.get("/api/workouts").get_json()] == ["Morning Run"]
    assert client.get(f"/api/workouts/{workout_id}").get_json()["calories"] == 250
    assert len(client.get("/api/workouts/featured").get_json()) == 1
    assert len(client.get("/api/workouts/category/cardio").get_json()) == 1
    assert client.get("/api/workouts/category/strength").get_json() == []
    assert len(client.get("/api/workouts/category/cardio/difficulty/beginner").get_json()) == 1
    assert len(client.get("/api/workouts/search/outdoor").get_json()) == 1
    assert len(client.get("/api/workouts/search/RUN").get_json()) == 1


def test_workout_mutations_require_admin(client, user, admin):
    _, headers = user
    r = client.post("/api/workouts", json=WORKOUT, headers=headers)
    assert r.status_code == 403
    assert r.get_json()["message"] == "Access denied. Admin privileges required."

    _, admin_headers = admin
    r = client.post("/api/workouts", json={"name": "Half"}, headers=admin_headers)
    assert r.status_code == 400
    assert r.get_json()["message"].startswith("Missing required fields")


def test_update_and_delete_workout(client, admin):
    _, headers = admin
    workout_id = client.post("/api/workouts", json=WORKOUT, headers=headers).get_json()["id"]

    r = client.put(f"/api/workouts/{workout_id}", json={"calories": 300}, headers=headers)
    assert r.get_json()["calories"] == 300

    r = client.put(f"/api/workouts/{workout_id}", json={"difficulty": "legendary"}, headers=headers)
    assert r.status_code == 400

    assert client.delete(f"/api/workouts/{workout_id}", headers=headers).status_code == 200
    assert client.get(f"/api/workouts/{workout_id}").status_code == 404


def test_difficulty_levels(client):
    assert client.get("/api/workouts/difficulty-levels/yoga").status_code == 200
    assert client.get("/api/workouts/difficulty-levels/juggling").status_code == 400


def test_meal_catalog(client, admin):
    _, headers = admin
    r = client.post("/api/meals", json=MEAL, headers=headers)
    assert r.status_code == 201
    meal_id = r.get_json()["id"]

    assert len(client.get("/api/meals/type/vegetarian").get_json()) == 1
    assert len(client.get("/api/meals/category/lunch/type/vegetarian").get_json()) == 1
    assert client.get("/api/meals/category/dinner").get_json() == []
    assert client.get(f"/api/meals/{meal_id}").get_json()["ingredients"] == ["Paneer", "Wrap"]
    assert client.get("/api/meals/999").status_code == 404


def test_favourites(client, user, admin):
    _, admin_headers = admin
    workout_id = client.post("/api/workouts", json=WORKOUT, headers=admin_headers).get_json()["id"]
    _, headers = user

    r = client.post(f"/api/users/favorites/workouts/{workout_id}", headers=headers)
    assert r.get_json()["message"] == "Workout added to favorites"
    assert [w["id"] for w in client.get("/api/users/me", headers=headers).get_json()["favouriteWorkouts"]] == [workout_id]

    client.delete(f"/api/users/favorites/workouts/{workout_id}", headers=headers)
    assert client.get("/api/users/me", headers=headers).get_json()["favouriteWorkouts"] == []

    assert client.post("/api/users/favorites/meals/42", headers=headers).status_code == 404


# ------------------------------
# Member plans
# ------------------------------
def test_plans_require_membership(client, user):
    _, headers = user
    r = client.get("/api/workouts/plan", headers=headers)
    assert r.status_code == 403
    assert r.get_json()["message"] == "This feature requires a premium membership."


def test_member_generates_plans(client, make_user, admin):
    _, admin_headers = admin
    client.post("/api/meals", json=MEAL, headers=admin_headers)
    _, headers = make_user(name="Member", is_member=True)

    r = client.post("/api/workouts/plan/generate", headers=headers)
    assert r.status_code == 400
    assert r.get_json()["message"] == "Please set your fitness goal first"

    client.put("/api/users/me", json={"fitnessGoal": "HIIT"}, headers=headers)

    plan = client.post("/api/workouts/plan/generate", headers=headers).get_json()["workoutPlan"]
    assert [d["day"] for d in plan] == ["Monday", "Wednesday", "Friday"]

    plan = client.post("/api/meals/plan/generate", headers=headers).get_json()["mealPlan"]
    assert [d["day"] for d in plan] == ["Monday", "Tuesday", "Wednesday"]
    assert plan[0]["meals"][1]["name"] == "Paneer Wrap"
    assert plan[1]["meals"][1]["name"] == "Lentil Soup"

    assert client.get("/api/meals/plan", headers=headers).get_json()["mealPlan"] == plan


# ------------------------------
# Static fallback
# ------------------------------
def test_fallback_serves_sample_catalog(fallback_client):
    workouts = fallback_client.get("/api/workouts").get_json()
    assert [w["name"] for w in workouts] == ["Full Body HIIT", "Core Crusher", "Power Lifts"]
    assert len(fallback_client.get("/api/workouts/featured").get_json()) == 2
    assert fallback_client.get("/api/workouts/3").get_json()["difficulty"] == "advanced"
    assert len(fallback_client.get("/api/workouts/category/strength").get_json()) == 2
    assert fallback_client.get("/api/meals/type/vegan").get_json()[0]["name"] == "Vegetable Stir Fry"
    assert fallback_client.get("/api/health").get_json()["dataSource"] == "fallback"


def test_fallback_refuses_writes(fallback_client):
    r = fallback_client.post("/api/auth/register", json={"name": "A", "email": "a@b.c", "password": "secret123"})
    assert r.status_code == 503
    assert r.get_json()["message"] == "Database unavailable. Please try again later."
