ACTIVITY = {
    "title": "Taller de fotografía",
    "description": "Notas y material del taller de los sábados.",
    "links": ["https://example.com/taller"],
    "category": "creative",
    "difficulty": "intermediate",
    "estimatedTime": 90,
}


async def create_activity(client, headers, **overrides):
    response = await client.post("/api/activities", headers=headers, json={**ACTIVITY, **overrides})
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def test_minimal_activity_gets_defaults(client, alice):
    response = await client.post(
        "/api/activities",
        headers=alice["headers"],
        json={"title": "Leer más", "description": "Un libro por mes durante el año."},
    )

    assert response.status_code == 201
    activity = response.json()["data"]
    assert activity["character"] == "/12.png"
    assert activity["category"] == "academic"
    assert activity["difficulty"] == "beginner"
    assert activity["links"] == []
    assert activity["documents"] == []
    assert activity["estimatedTime"] is None


async def test_links_must_be_absolute_http_urls(client, alice):
    response = await client.post(
        "/api/activities",
        headers=alice["headers"],
        json={**ACTIVITY, "links": ["ftp://example.com/file"]},
    )

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "links"


async def test_unknown_category_is_rejected(client, alice):
    response = await client.post("/api/activities", headers=alice["headers"], json={**ACTIVITY, "category": "sports"})
    assert response.status_code == 400

    response = await client.get("/api/activities", params={"category": "sports"})
    assert response.status_code == 400


async def test_list_filters_by_category(client, alice, bob):
    await create_activity(client, alice["headers"])
    await create_activity(client, alice["headers"], category="academic")
    await create_activity(client, bob["headers"], category="creative")

    creative = await client.get("/api/activities", params={"category": "creative"})
    assert creative.json()["pagination"]["total"] == 2

    alices_creative = await client.get("/api/activities", params={"category": "creative", "userId": alice["id"]})
    assert alices_creative.json()["pagination"]["total"] == 1

    searched = await client.get("/api/activities", params={"search": "Sábados"})
    assert searched.json()["pagination"]["total"] == 3


async def test_categories(client):
    response = await client.get("/api/activities/categories")

    assert response.status_code == 200
    assert response.json()["data"] == ["academic", "personal", "professional", "creative", "other"]


async def test_get_update_delete(client, alice, bob):
    activity = await create_activity(client, alice["headers"])
    url = f"/api/activities/{activity['id']}"

    response = await client.get(url)
    assert response.json()["data"]["author"]["email"] == "alice@example.com"

    response = await client.put(url, headers=bob["headers"], json=ACTIVITY)
    assert response.status_code == 404
    assert response.json()["error"] == "Activity not found or not authorized"

    response = await client.put(url, headers=alice["headers"], json={**ACTIVITY, "title": "Taller avanzado"})
    assert response.status_code == 200
    assert response.json()["data"]["title"] == "Taller avanzado"
    assert response.json()["data"]["estimatedTime"] == 90

    response = await client.delete(url, headers=alice["headers"])
    assert response.status_code == 200
    assert (await client.get(url)).status_code == 404


async def test_document_uploads_are_capped(client, alice):
    activity = await create_activity(client, alice["headers"])
    url = f"/api/activities/{activity['id']}/upload-document"

    uploaded = []
    for i in range(3):
        response = await client.post(
            url, headers=alice["headers"], files={"document": (f"doc{i}.pdf", b"%PDF-1.4 test", "application/pdf")}
        )
        assert response.status_code == 201
        uploaded.append(response.json()["data"])

    response = await client.post(
        url, headers=alice["headers"], files={"document": ("doc3.pdf", b"%PDF-1.4 test", "application/pdf")}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "An activity cannot have more than 3 documents"

    assert uploaded[0]["name"] == "doc0.pdf"
    assert uploaded[0]["mimeType"] == "application/pdf"
    assert uploaded[0]["size"] == len(b"%PDF-1.4 test")
    assert uploaded[0]["data"].startswith("data:application/pdf;base64,")

    response = await client.delete(
        f"/api/activities/{activity['id']}/documents/{uploaded[0]['id']}", headers=alice["headers"]
    )
    assert response.status_code == 200

    detail = (await client.get(f"/api/activities/{activity['id']}")).json()["data"]
    assert [doc["name"] for doc in detail["documents"]] == ["doc1.pdf", "doc2.pdf"]


async def test_image_upload_uses_image_policy(client, alice):
    activity = await create_activity(client, alice["headers"])
    url = f"/api/activities/{activity['id']}/upload-image"

    response = await client.post(url, headers=alice["headers"], files={"image": ("a.pdf", b"%PDF", "application/pdf")})
    assert response.status_code == 400
    assert response.json()["error"].startswith("File type not allowed")

    response = await client.post(url, headers=alice["headers"], files={"image": ("a.jpg", b"\xff\xd8\xff", "image/jpeg")})
    assert response.status_code == 201
    image_id = response.json()["data"]["id"]

    # Deleting through the documents route doesn't touch images
    response = await client.delete(f"/api/activities/{activity['id']}/documents/{image_id}", headers=alice["headers"])
    assert response.status_code == 404

    response = await client.delete(f"/api/activities/{activity['id']}/images/{image_id}", headers=alice["headers"])
    assert response.status_code == 200


async def test_uploads_to_someone_elses_activity(client, alice, bob):
    activity = await create_activity(client, alice["headers"])

    response = await client.post(
        f"/api/activities/{activity['id']}/upload-document",
        headers=bob["headers"],
        files={"document": ("x.txt", b"hi", "text/plain")},
    )

    assert response.status_code == 404
