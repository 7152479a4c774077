import pytest
from httpx import ASGITransport, AsyncClient

from bitacora.app.core.config import Settings
from bitacora.app.db.session import Database
from bitacora.app.main import create_app
from bitacora.app.models import User
from bitacora.app.models.user import ROLE_ADMIN

PASSWORD = "secret123"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        ENVIRONMENT="test",
        SECRET_KEY="test-secret-key",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'bitacora-test.db'}",
        RATE_LIMIT_ENABLED=False,
        CORS_ORIGINS="http://localhost:5173",
        FRONTEND_URL=None,
    )


@pytest.fixture
async def database(settings):
    db = Database(settings)
    await db.connect()
    yield db
    await db.disconnect()


@pytest.fixture
def app(settings, database):
    return create_app(settings, database)


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def register(client: AsyncClient, name: str, email: str, password: str = PASSWORD) -> dict:
    response = await client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()


async def make_admin(database: Database, user_id: str) -> None:
    async with database.session() as session:
        user = await session.get(User, user_id)
        user.role = ROLE_ADMIN
        await session.commit()


@pytest.fixture
async def alice(client):
    body = await register(client, "Alice", "alice@example.com")
    return {"id": body["user"]["id"], "token": body["token"], "headers": auth(body["token"])}


@pytest.fixture
async def bob(client):
    body = await register(client, "Bob", "bob@example.com")
    return {"id": body["user"]["id"], "token": body["token"], "headers": auth(body["token"])}
