import tempfile

import pytest
from fastapi import Depends, FastAPI
from httpx import ASGITransport, AsyncClient
from starlette import formparsers

from bitacora.app.core.errors import register_exception_handlers
from bitacora.app.security.upload import IMAGE_TYPES, AcceptedUpload, UploadPolicy, to_data_uri

MAX_SIZE = 1024
BOUNDARY = "bitacora-test-boundary"


def policy_app(settings, max_size: int = MAX_SIZE) -> FastAPI:
    policy = UploadPolicy("test", IMAGE_TYPES, max_size, field_name="image")
    app = FastAPI()
    register_exception_handlers(app, settings)

    @app.post("/upload")
    async def receive(upload: AcceptedUpload = Depends(policy)):
        return {"name": upload.filename, "size": upload.size, "fields": upload.fields}

    return app


@pytest.fixture
async def policy_client(settings):
    async with AsyncClient(transport=ASGITransport(app=policy_app(settings)), base_url="http://test") as ac:
        yield ac


async def test_accepts_file_at_the_size_limit(policy_client):
    response = await policy_client.post(
        "/upload",
        files={"image": ("edge.png", b"x" * MAX_SIZE, "image/png")},
        data={"description": "hola"},
    )

    assert response.status_code == 200
    assert response.json() == {"name": "edge.png", "size": MAX_SIZE, "fields": {"description": "hola"}}


async def test_rejects_one_byte_over(policy_client):
    response = await policy_client.post("/upload", files={"image": ("big.png", b"x" * (MAX_SIZE + 1), "image/png")})

    assert response.status_code == 400
    assert response.json()["error"].startswith("File is too large")


async def test_rejects_unexpected_field(policy_client):
    response = await policy_client.post("/upload", files={"avatar": ("a.png", b"x", "image/png")})

    assert response.status_code == 400
    assert response.json()["error"] == "Unexpected file field"


async def test_rejects_more_than_one_file(policy_client):
    response = await policy_client.post(
        "/upload",
        files=[("image", ("a.png", b"x", "image/png")), ("image", ("b.png", b"y", "image/png"))],
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Too many files. Only one file is allowed"


async def test_rejects_missing_file(policy_client):
    response = await policy_client.post("/upload", data={"description": "sin archivo"})
    assert response.status_code == 400
    assert response.json()["error"] == "No file was provided"

    response = await policy_client.post("/upload", json={"image": "not multipart"})
    assert response.status_code == 400
    assert response.json()["error"] == "No file was provided"


async def test_rejects_disallowed_type(policy_client):
    response = await policy_client.post("/upload", files={"image": ("doc.pdf", b"%PDF", "application/pdf")})

    assert response.status_code == 400
    assert "image/png" in response.json()["error"]


def test_data_uri_encoding():
    assert to_data_uri("text/plain", b"hola") == "data:text/plain;base64,aG9sYQ=="


def multipart_head(filename: str = "big.png", mime: str = "image/png") -> bytes:
    return (
        f"--{BOUNDARY}\r\n"
        f'Content-Disposition: form-data; name="image"; filename="{filename}"\r\n'
        f"Content-Type: {mime}\r\n\r\n"
    ).encode()


async def test_large_upload_is_never_spooled_to_disk(settings, monkeypatch):
    def no_temp_files(*args, **kwargs):
        raise AssertionError("upload bytes were written to a temporary file")

    monkeypatch.setattr(tempfile, "SpooledTemporaryFile", no_temp_files)
    monkeypatch.setattr(formparsers, "SpooledTemporaryFile", no_temp_files)
    three_megabytes = b"\x00" * (3 * 1024 * 1024)

    app = policy_app(settings, max_size=5 * 1024 * 1024)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.post("/upload", files={"image": ("big.png", three_megabytes, "image/png")})

    assert response.status_code == 200
    assert response.json()["size"] == len(three_megabytes)


async def test_declared_length_over_the_limit_is_refused_unread(policy_client):
    pulled = []

    async def body():
        pulled.append(1)
        yield multipart_head() + b"x" * 16

    response = await policy_client.post(
        "/upload",
        content=body(),
        headers={
            "Content-Type": f"multipart/form-data; boundary={BOUNDARY}",
            "Content-Length": str(10 * 1024 * 1024),
        },
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("File is too large")
    assert pulled == []


async def test_streamed_body_is_cut_off_at_the_limit(policy_client):
    pulled = []

    async def body():
        yield multipart_head()
        for _ in range(500):
            pulled.append(1)
            yield b"x" * MAX_SIZE
        yield f"\r\n--{BOUNDARY}--\r\n".encode()

    response = await policy_client.post(
        "/upload",
        content=body(),
        headers={"Content-Type": f"multipart/form-data; boundary={BOUNDARY}"},
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("File is too large")
    assert len(pulled) < 5


async def test_truncated_body_is_rejected(policy_client):
    response = await policy_client.post(
        "/upload",
        content=multipart_head() + b"\x89PNG",
        headers={"Content-Type": f"multipart/form-data; boundary={BOUNDARY}"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid multipart body"
