from __future__ import annotations

from unittest.mock import patch

from dinner_spinner.errors import StoreError
from dinner_spinner.store import repository
from dinner_spinner.store.migrations import SAMPLE_MEALS

SAMPLE_NAMES = {name for name, _ in SAMPLE_MEALS}


# ── Listing ──────────────────────────────────────────────────────────────


def test_seeded_meals_listed_by_name(client):
    resp = client.get("/api/meals")
    assert resp.status_code == 200
    names = [m["name"] for m in resp.json()]
    assert names == sorted(SAMPLE_NAMES)
    assert set(resp.json()[0]) == {"id", "name", "ingredients", "created_at"}


def test_list_carries_etag(client):
    resp = client.get("/api/meals")
    assert resp.headers["etag"]
    assert resp.headers["cache-control"] == "no-cache"


def test_list_not_modified_until_mutation(admin_client):
    etag = admin_client.get("/api/meals").headers["etag"]
    resp = admin_client.get("/api/meals", headers={"If-None-Match": etag})
    assert resp.status_code == 304

    admin_client.post("/api/meals", json={"name": "Pancakes", "ingredients": "Flour, eggs, milk"})
    resp = admin_client.get("/api/meals", headers={"If-None-Match": etag})
    assert resp.status_code == 200
    assert resp.headers["etag"] != etag
    assert "Pancakes" in [m["name"] for m in resp.json()]


def test_list_read_during_a_mutation_is_not_served_stale(app, admin_client):
    real_list_meals = repository.list_meals

    def list_then_add(db):
        rows = real_list_meals(db)
        repository.create_meal(db, "Pancakes", "Flour, eggs, milk")
        app.state.list_cache.invalidate("meals")
        return rows

    with patch("dinner_spinner.store.repository.list_meals", side_effect=list_then_add):
        first = admin_client.get("/api/meals")
    assert "Pancakes" not in [m["name"] for m in first.json()]

    resp = admin_client.get("/api/meals", headers={"If-None-Match": first.headers["etag"]})
    assert resp.status_code == 200
    assert "Pancakes" in [m["name"] for m in resp.json()]
    assert "Pancakes" in [m["name"] for m in admin_client.get("/api/meals").json()]


# ── Spin ─────────────────────────────────────────────────────────────────


def test_spin_three_distinct_meals(client):
    resp = client.post("/api/spin", json={"count": 3})
    assert resp.status_code == 200
    meals = resp.json()
    assert len(meals) == 3
    assert len({m["id"] for m in meals}) == 3
    assert {m["name"] for m in meals} <= SAMPLE_NAMES


def test_spin_clamps_to_five(client):
    meals = client.post("/api/spin", json={"count": 10}).json()
    assert len(meals) == 5
    assert {m["name"] for m in meals} == SAMPLE_NAMES


def test_spin_clamps_low_counts_to_one(client):
    assert len(client.post("/api/spin", json={"count": 0}).json()) == 1
    assert len(client.post("/api/spin", json={"count": -4}).json()) == 1


def test_spin_defaults_to_one(client):
    assert len(client.post("/api/spin").json()) == 1
    assert len(client.post("/api/spin", json={}).json()) == 1


def test_spin_clamps_to_stored_count(admin_client):
    ids = [m["id"] for m in admin_client.get("/api/meals").json()]
    for meal_id in ids[2:]:
        admin_client.delete(f"/api/meals/{meal_id}")
    meals = admin_client.post("/api/spin", json={"count": 5}).json()
    assert sorted(m["id"] for m in meals) == sorted(ids[:2])


def test_spin_with_no_meals_is_empty(admin_client):
    for meal in admin_client.get("/api/meals").json():
        admin_client.delete(f"/api/meals/{meal['id']}")
    resp = admin_client.post("/api/spin", json={"count": 2})
    assert resp.status_code == 200
    assert resp.json() == []


def test_spin_rejects_non_integer_count(client):
    resp = client.post("/api/spin", json={"count": "lots"})
    assert resp.status_code == 400
    assert resp.json()["field"] == "count"


# ── Admin CRUD ───────────────────────────────────────────────────────────


def test_create_meal_trims_fields(admin_client):
    resp = admin_client.post("/api/meals", json={"name": "  Chili  ", "ingredients": " Beans "})
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Meal added successfully"
    created = [m for m in admin_client.get("/api/meals").json() if m["id"] == body["id"]]
    assert created[0]["name"] == "Chili"
    assert created[0]["ingredients"] == "Beans"


def test_create_meal_rejects_blank_name(admin_client):
    resp = admin_client.post("/api/meals", json={"name": "   ", "ingredients": "Beans"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "name is required", "field": "name"}


def test_create_meal_rejects_malformed_json(admin_client):
    resp = admin_client.post(
        "/api/meals",
        content="{bad",
        headers={"Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["error"]
    assert body.get("field") is None


def test_create_meal_rejects_missing_ingredients(admin_client):
    resp = admin_client.post("/api/meals", json={"name": "Chili"})
    assert resp.status_code == 400
    assert resp.json()["field"] == "ingredients"


def test_update_meal(admin_client):
    meal_id = admin_client.get("/api/meals").json()[0]["id"]
    resp = admin_client.put(f"/api/meals/{meal_id}", json={"name": "Chili", "ingredients": "Beans"})
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Meal updated successfully"}
    updated = [m for m in admin_client.get("/api/meals").json() if m["id"] == meal_id]
    assert updated[0]["name"] == "Chili"


def test_update_missing_meal_is_404(admin_client):
    resp = admin_client.put("/api/meals/9999", json={"name": "Chili", "ingredients": "Beans"})
    assert resp.status_code == 404
    assert resp.json() == {"error": "Meal not found"}


def test_delete_twice_reports_not_found(admin_client):
    meal_id = admin_client.get("/api/meals").json()[0]["id"]
    first = admin_client.delete(f"/api/meals/{meal_id}")
    second = admin_client.delete(f"/api/meals/{meal_id}")
    assert first.status_code == 200
    assert first.json() == {"success": True, "message": "Meal deleted successfully"}
    assert second.status_code == 404
    assert meal_id not in [m["id"] for m in admin_client.get("/api/meals").json()]


# ── Wheel layout ─────────────────────────────────────────────────────────


def test_meal_wheel_layout(client):
    resp = client.get("/api/meals/wheel")
    assert resp.status_code == 200
    body = resp.json()
    assert body["kind"] == "meal"
    assert body["sector_count"] == 5
    assert body["angle_per_sector"] == 72.0
    assert body["duration"] == 2.0
    assert (body["min_turns"], body["max_turns"]) == (3, 6)
    listed = [m["id"] for m in client.get("/api/meals").json()]
    assert [s["item_id"] for s in body["sectors"]] == listed


# ── Store failures ───────────────────────────────────────────────────────


def test_store_error_is_generic_500(client):
    with patch("dinner_spinner.store.repository.list_meals", side_effect=StoreError()):
        resp = client.post("/api/spin", json={"count": 1})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Database error"}
