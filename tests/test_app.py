import logging

from httpx import ASGITransport, AsyncClient

from bitacora.app.core.logging_config import ReadableFormatter
from bitacora.app.core.middleware import SECURITY_HEADERS
from bitacora.app.main import create_app


async def test_health(client):
    response = await client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["database"] == "connected"


async def test_security_headers_on_every_response(client):
    for path in ("/api/health", "/api/does-not-exist"):
        response = await client.get(path)
        for header, value in SECURITY_HEADERS.items():
            assert response.headers[header] == value


async def test_unknown_route_uses_error_envelope(client):
    response = await client.get("/api/does-not-exist")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Route GET /api/does-not-exist not found"
    assert "timestamp" in body


async def test_wrong_method_uses_error_envelope(client):
    response = await client.patch("/api/health")

    assert response.status_code == 405
    assert response.json()["success"] is False


async def test_cors_preflight_allows_configured_origin(client):
    response = await client.options(
        "/api/posts",
        headers={"Origin": "http://localhost:5173", "Access-Control-Request-Method": "POST"},
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"


async def test_invalid_pagination_is_a_validation_error(client):
    response = await client.get("/api/posts", params={"limit": 500})

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "limit"


async def test_rate_limit_returns_429_envelope(settings, database):
    limited = create_app(settings.model_copy(update={"RATE_LIMIT": "2/minute", "RATE_LIMIT_ENABLED": True}), database)

    async with AsyncClient(transport=ASGITransport(app=limited), base_url="http://test") as client:
        statuses = [(await client.get("/api/health")).status_code for _ in range(3)]
        blocked = await client.get("/api/health")

    assert statuses == [200, 200, 429]
    assert blocked.json()["success"] is False
    assert blocked.json()["error"] == "Too many requests from this IP, please try again later"


async def test_rate_limit_counts_unknown_routes_too(settings, database):
    limited = create_app(settings.model_copy(update={"RATE_LIMIT": "1/minute", "RATE_LIMIT_ENABLED": True}), database)

    async with AsyncClient(transport=ASGITransport(app=limited), base_url="http://test") as client:
        assert (await client.get("/api/nowhere")).status_code == 404
        blocked = await client.get("/api/posts")

    assert blocked.status_code == 429
    assert blocked.headers["X-Frame-Options"] == "DENY"


async def test_fault_logs_carry_request_context(client, caplog):
    with caplog.at_level(logging.INFO, logger="bitacora.app.core.errors"):
        response = await client.get("/api/posts/not-an-id")

    assert response.status_code == 400
    record = next(r for r in caplog.records if r.getMessage() == "BadRequest: Invalid post id")
    assert record.method == "GET"
    assert record.url == "http://test/api/posts/not-an-id"
    assert record.ip == "127.0.0.1"

    line = ReadableFormatter().format(record)
    assert line.endswith("BadRequest: Invalid post id | GET http://test/api/posts/not-an-id from 127.0.0.1")


def test_readable_format_without_request_context():
    record = logging.LogRecord("bitacora.app.main", logging.INFO, __file__, 1, "Bitacora started", None, None)

    assert ReadableFormatter().format(record).endswith("| Bitacora started")


def failing_app(settings, database, environment):
    app = create_app(settings.model_copy(update={"ENVIRONMENT": environment}), database)

    @app.get("/api/explode")
    async def explode():
        raise RuntimeError("disk quota exceeded")

    return app


async def test_unhandled_error_message_is_hidden_outside_development(settings, database):
    app = failing_app(settings, database, "production")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/explode")

    assert response.status_code == 500
    assert response.json()["success"] is False
    assert response.json()["error"] == "Internal server error"


async def test_unhandled_error_message_is_shown_in_development(settings, database):
    app = failing_app(settings, database, "development")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/explode")

    assert response.status_code == 500
    assert response.json()["error"] == "disk quota exceeded"
