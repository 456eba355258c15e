"""Goal CRUD and the active-goals filter."""

from datetime import datetime, timedelta


def create_goal(client, headers, **overrides):
    payload = {"name": "Emergency fund", "targetAmount": 1000}
    payload.update(overrides)
    response = client.post("/api/goals", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def credit(client, headers, goal_id, amount):
    response = client.post(
        "/api/transactions",
        json={
            "type": "income",
            "amount": amount,
            "category": "salary",
            "date": datetime.utcnow().date().isoformat(),
            "goalId": goal_id,
        },
        headers=headers,
    )
    assert response.status_code == 200, response.text


def test_create_goal_defaults(client, alice):
    goal = create_goal(client, alice, description="Three months of rent", targetDate="2099-01-31")

    assert goal["currentSaved"] == 0
    assert goal["completed"] is False
    assert goal["targetAmount"] == 1000
    assert goal["targetDate"] == "2099-01-31"
    assert goal["description"] == "Three months of rent"


def test_create_goal_accepts_timestamp_target_date(client, alice):
    goal = create_goal(client, alice, targetDate="2099-05-01T00:00:00.000Z")
    assert goal["targetDate"] == "2099-05-01"


def test_create_goal_validation(client, alice):
    response = client.post("/api/goals", json={"name": "", "targetAmount": 0}, headers=alice)
    assert response.status_code == 400
    fields = {error["field"] for error in response.json()["errors"]}
    assert {"name", "targetAmount"} <= fields


def test_goal_names_are_stripped_and_must_not_be_blank(client, alice):
    blank = client.post("/api/goals", json={"name": "   ", "targetAmount": 100}, headers=alice)
    assert blank.status_code == 400
    assert blank.json()["errors"][0]["field"] == "name"

    goal = create_goal(client, alice, name="  Vacation  ")
    assert goal["name"] == "Vacation"

    rename = client.patch(f"/api/goals/{goal['id']}", json={"name": " \t "}, headers=alice)
    assert rename.status_code == 400
    assert client.get(f"/api/goals/{goal['id']}", headers=alice).json()["name"] == "Vacation"


def test_list_goals_newest_first(client, alice, bob):
    older = create_goal(client, alice, name="Older")
    newer = create_goal(client, alice, name="Newer")
    create_goal(client, bob, name="Bob's")

    goals = client.get("/api/goals", headers=alice).json()
    assert [g["id"] for g in goals] == [newer["id"], older["id"]]


def test_active_goals_excludes_funded_and_expired(client, alice):
    today = datetime.utcnow().date()
    open_ended = create_goal(client, alice, name="Open ended")
    due_today = create_goal(client, alice, name="Due today", targetDate=today.isoformat())
    create_goal(client, alice, name="Expired", targetDate=(today - timedelta(days=1)).isoformat())
    funded = create_goal(client, alice, name="Funded", targetAmount=100)
    credit(client, alice, funded["id"], 100)

    active = client.get("/api/goals/active", headers=alice).json()

    assert [g["id"] for g in active] == [due_today["id"], open_ended["id"]]


def test_partially_funded_goal_stays_active(client, alice):
    goal = create_goal(client, alice, targetAmount=100)
    credit(client, alice, goal["id"], 99.99)

    assert [g["id"] for g in client.get("/api/goals/active", headers=alice).json()] == [goal["id"]]


def test_funded_goal_is_not_auto_completed(client, alice):
    goal = create_goal(client, alice, targetAmount=50)
    credit(client, alice, goal["id"], 80)

    refreshed = client.get(f"/api/goals/{goal['id']}", headers=alice).json()
    assert refreshed["currentSaved"] == 80
    assert refreshed["completed"] is False


def test_update_goal_partial(client, alice):
    goal = create_goal(client, alice, description="keep me", targetDate="2099-01-01")

    response = client.patch(
        f"/api/goals/{goal['id']}",
        json={"name": "Renamed", "targetAmount": "1500", "completed": True},
        headers=alice,
    )

    assert response.status_code == 200
    updated = response.json()
    assert updated["name"] == "Renamed"
    assert updated["targetAmount"] == 1500
    assert updated["completed"] is True
    assert updated["description"] == "keep me"
    assert updated["targetDate"] == "2099-01-01"


def test_update_goal_can_clear_target_date(client, alice):
    goal = create_goal(client, alice, targetDate="2099-01-01")

    updated = client.patch(f"/api/goals/{goal['id']}", json={"targetDate": None}, headers=alice).json()

    assert updated["targetDate"] is None


def test_update_goal_ignores_null_for_required_fields(client, alice):
    goal = create_goal(client, alice)

    updated = client.patch(f"/api/goals/{goal['id']}", json={"name": None}, headers=alice).json()

    assert updated["name"] == "Emergency fund"


def test_goal_ownership(client, alice, bob):
    goal = create_goal(client, alice)
    url = f"/api/goals/{goal['id']}"

    assert client.get(url, headers=bob).status_code == 403
    assert client.patch(url, json={"name": "Mine now"}, headers=bob).status_code == 403
    assert client.delete(url, headers=bob).status_code == 403

    assert client.delete(url, headers=alice).status_code == 204
    assert client.get(url, headers=alice).status_code == 404
    assert client.patch(url, json={"name": "Gone"}, headers=alice).status_code == 404
