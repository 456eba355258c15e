"""Profile, password, stats and account deletion."""

import asyncio

from sqlalchemy import func, select

from app.models import Category, Goal, Transaction, User
from conftest import bearer, register, today_iso


def test_get_profile(client, alice):
    profile = client.get("/api/user/profile", headers=alice).json()
    assert profile["email"] == "alice@example.com"
    assert profile["firstName"] == "Alice"
    assert set(profile) == {"id", "email", "firstName", "lastName"}


def test_update_profile_partial(client, alice):
    response = client.patch("/api/user/profile", json={"firstName": "Alicia"}, headers=alice)

    assert response.status_code == 200
    assert response.json()["firstName"] == "Alicia"
    assert response.json()["lastName"] == "Smith"


def test_update_profile_rejects_blank_names(client, alice):
    response = client.patch("/api/user/profile", json={"firstName": "   "}, headers=alice)
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "firstName"

    trimmed = client.patch("/api/user/profile", json={"lastName": "  Jones "}, headers=alice).json()
    assert trimmed["lastName"] == "Jones"
    assert trimmed["firstName"] == "Alice"


def test_update_profile_email_conflict(client, alice, bob):
    response = client.patch("/api/user/profile", json={"email": "bob@example.com"}, headers=alice)
    assert response.status_code == 400

    unchanged = client.patch("/api/user/profile", json={"email": "alice@example.com"}, headers=alice)
    assert unchanged.status_code == 200


def test_change_password(client):
    token = register(client)["token"]

    wrong = client.patch(
        "/api/user/password",
        json={"currentPassword": "not-it", "newPassword": "brand-new-1"},
        headers=bearer(token),
    )
    assert wrong.status_code == 400
    assert wrong.json()["message"] == "Current password is incorrect"

    ok = client.patch(
        "/api/user/password",
        json={"currentPassword": "secret123", "newPassword": "brand-new-1"},
        headers=bearer(token),
    )
    assert ok.status_code == 200

    old_login = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "secret123"})
    new_login = client.post("/api/auth/login", json={"email": "alice@example.com", "password": "brand-new-1"})
    assert old_login.status_code == 401
    assert new_login.status_code == 200


def test_change_password_enforces_length(client, alice):
    response = client.patch(
        "/api/user/password",
        json={"currentPassword": "secret123", "newPassword": "123"},
        headers=alice,
    )
    assert response.status_code == 400


def test_user_stats(client, alice):
    for category in ("transport", "utilities"):
        client.post(
            "/api/transactions",
            json={"type": "expense", "amount": 200, "category": category, "date": "2023-05-01"},
            headers=alice,
        )

    stats = client.get("/api/user/stats", headers=alice).json()

    # 40 + 50 of eco impact
    assert stats == {"totalTransactions": 2, "accountAge": 0, "ecoRating": "A"}


def test_delete_account_removes_owned_rows(client, session_factory, alice, bob):
    client.post(
        "/api/transactions",
        json={"type": "expense", "amount": 10, "category": "food", "date": today_iso()},
        headers=alice,
    )
    client.post("/api/categories", json={"name": "Food", "type": "expense"}, headers=alice)
    client.post("/api/goals", json={"name": "Trip", "targetAmount": 300}, headers=alice)
    client.post("/api/categories", json={"name": "Bob's", "type": "expense"}, headers=bob)

    response = client.delete("/api/user", headers=alice)
    assert response.status_code == 204

    async def _counts():
        async with session_factory() as session:
            counts = {}
            for model in (User, Transaction, Category, Goal):
                counts[model.__tablename__] = (await session.execute(select(func.count()).select_from(model))).scalar_one()
            return counts

    assert asyncio.run(_counts()) == {"users": 1, "transactions": 0, "categories": 1, "goals": 0}
    assert client.get("/api/user/profile", headers=alice).status_code == 401


def test_token_of_deleted_account_cannot_create_rows(client, session_factory, alice):
    assert client.delete("/api/user", headers=alice).status_code == 204

    attempts = [
        client.post("/api/categories", json={"name": "Food", "type": "expense"}, headers=alice),
        client.post(
            "/api/transactions",
            json={"type": "expense", "amount": 10, "category": "food", "date": today_iso()},
            headers=alice,
        ),
        client.post("/api/goals", json={"name": "Trip", "targetAmount": 300}, headers=alice),
    ]
    for response in attempts:
        assert response.status_code == 401
        assert response.json() == {"message": "User no longer exists"}

    async def _orphans():
        async with session_factory() as session:
            total = 0
            for model in (Transaction, Category, Goal):
                total += (await session.execute(select(func.count()).select_from(model))).scalar_one()
            return total

    assert asyncio.run(_orphans()) == 0
