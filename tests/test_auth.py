from datetime import timedelta

from sqlalchemy import func, select

from bitacora.app.api.deps import get_user_repository
from bitacora.app.models import User
from bitacora.app.security.jwt import TokenService
from conftest import PASSWORD, auth, register


async def test_register_then_login(client):
    registered = await register(client, "Alice", "Alice@Example.com")
    assert registered["success"] is True
    assert registered["user"]["email"] == "alice@example.com"
    assert registered["user"]["role"] == "user"
    assert "password" not in registered["user"]
    assert "passwordHash" not in registered["user"]

    response = await client.post("/api/auth/login", json={"email": "alice@example.com", "password": PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["token"]
    assert body["user"]["id"] == registered["user"]["id"]
    assert body["user"]["lastLogin"] is not None


async def test_duplicate_email_is_rejected_once(client, database):
    await register(client, "Alice", "alice@example.com")

    response = await client.post(
        "/api/auth/register",
        json={"name": "Other Alice", "email": "ALICE@example.com", "password": PASSWORD},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "A user with this email already exists"
    async with database.session() as session:
        assert await session.scalar(select(func.count(User.id))) == 1


async def test_register_validation_errors_list_fields(client):
    response = await client.post("/api/auth/register", json={"name": "A", "email": "nope", "password": "123"})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Invalid input data"
    fields = {detail["field"] for detail in body["details"]}
    assert {"name", "email", "password"} <= fields


async def test_login_with_wrong_password(client):
    await register(client, "Alice", "alice@example.com")

    response = await client.post("/api/auth/login", json={"email": "alice@example.com", "password": "wrong-one"})

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid email or password"


async def test_profile_requires_token(client):
    response = await client.get("/api/auth/profile")

    assert response.status_code == 401
    assert response.json()["error"] == "Access token required"


async def test_profile_with_invalid_token(client):
    response = await client.get("/api/auth/profile", headers=auth("garbage.token.value"))

    assert response.status_code == 403
    assert response.json()["error"] == "Invalid token"


async def test_profile_with_expired_token(client, settings, alice):
    issued_long_ago = TokenService(
        settings.SECRET_KEY,
        ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
        clock=lambda: 1_000_000,
    ).issue(alice["id"])

    response = await client.get("/api/auth/profile", headers=auth(issued_long_ago))

    assert response.status_code == 403
    assert response.json()["error"] == "Token expired"


async def test_token_for_unknown_user(client, app):
    token = app.state.token_service.issue("65f1c0de0000000000000099")

    response = await client.get("/api/auth/profile", headers=auth(token))

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid or inactive user"


async def test_get_and_update_profile(client, alice):
    response = await client.get("/api/auth/profile", headers=alice["headers"])
    assert response.status_code == 200
    assert response.json()["user"]["name"] == "Alice"

    response = await client.put(
        "/api/auth/profile",
        headers=alice["headers"],
        json={"name": "  Alice Liddell  ", "profileImage": "https://img.example.com/a.png"},
    )

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["name"] == "Alice Liddell"
    assert user["profileImage"] == "https://img.example.com/a.png"
    assert user["email"] == "alice@example.com"


class BrokenUserStore:
    async def get_by_id(self, user_id):
        raise RuntimeError("connection reset by database")


async def test_unexpected_failure_during_auth_is_a_generic_500(client, app, alice):
    app.dependency_overrides[get_user_repository] = BrokenUserStore

    response = await client.get("/api/auth/profile", headers=alice["headers"])

    assert response.status_code == 500
    assert response.json()["success"] is False
    assert response.json()["error"] == "Internal server error"
