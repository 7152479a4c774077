from conftest import PASSWORD, make_admin

MISSING_ID = "65f1c0de00000000000000ff"


async def test_directory_lists_active_users_with_counts(client, alice, bob):
    post = {"title": "Hola mundo", "content": "Mi primera entrada del blog."}
    activity = {"title": "Correr", "description": "Entrenamiento para la media maratón."}
    await client.post("/api/posts", headers=alice["headers"], json=post)
    await client.post("/api/posts", headers=alice["headers"], json=post)
    await client.post("/api/activities", headers=alice["headers"], json=activity)

    response = await client.get("/api/users")

    assert response.status_code == 200
    users = {user["name"]: user for user in response.json()["data"]}
    assert users["Alice"]["postsCount"] == 2
    assert users["Alice"]["activitiesCount"] == 1
    assert users["Bob"]["postsCount"] == 0
    assert "passwordHash" not in users["Alice"]


async def test_get_single_user(client, alice):
    response = await client.get(f"/api/users/{alice['id']}")
    assert response.status_code == 200
    assert response.json()["data"]["email"] == "alice@example.com"

    assert (await client.get(f"/api/users/{MISSING_ID}")).status_code == 404
    assert (await client.get("/api/users/xyz")).status_code == 400


async def test_status_change_requires_admin(client, alice, bob):
    response = await client.put(f"/api/users/{alice['id']}/status", headers=bob["headers"], json={"isActive": False})

    assert response.status_code == 403
    assert response.json()["error"] == "Access denied. Administrator privileges required"


async def test_admin_disables_user(client, database, alice, bob):
    await make_admin(database, alice["id"])

    response = await client.put(f"/api/users/{bob['id']}/status", headers=alice["headers"], json={"isActive": False})
    assert response.status_code == 200
    assert response.json()["data"]["id"] == bob["id"]

    # Existing tokens stop working and login is refused
    response = await client.get("/api/auth/profile", headers=bob["headers"])
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid or inactive user"

    response = await client.post("/api/auth/login", json={"email": "bob@example.com", "password": PASSWORD})
    assert response.status_code == 401
    assert response.json()["error"] == "Account is disabled"

    names = [user["name"] for user in (await client.get("/api/users")).json()["data"]]
    assert names == ["Alice"]
    assert (await client.get(f"/api/users/{bob['id']}")).status_code == 404

    response = await client.put(f"/api/users/{bob['id']}/status", headers=alice["headers"], json={"isActive": True})
    assert response.status_code == 200
    assert (await client.get("/api/auth/profile", headers=bob["headers"])).status_code == 200


async def test_admin_cannot_disable_self(client, database, alice):
    await make_admin(database, alice["id"])

    response = await client.put(f"/api/users/{alice['id']}/status", headers=alice["headers"], json={"isActive": False})

    assert response.status_code == 400
