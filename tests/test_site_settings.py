from bitacora.app.models.site_settings import DEFAULT_HERO_DESCRIPTION, DEFAULT_HERO_TITLE


async def test_public_settings_fall_back_to_defaults(client, alice):
    for params in ({}, {"userId": "not-an-id"}, {"userId": alice["id"]}):
        response = await client.get("/api/site-settings/public", params=params)

        assert response.status_code == 200
        assert response.json()["data"] == {
            "heroTitle": DEFAULT_HERO_TITLE,
            "heroDescription": DEFAULT_HERO_DESCRIPTION,
        }


async def test_settings_are_created_on_first_read(client, alice):
    response = await client.get("/api/site-settings", headers=alice["headers"])

    assert response.status_code == 200
    settings = response.json()["data"]
    assert settings["userId"] == alice["id"]
    assert settings["heroTitle"] == DEFAULT_HERO_TITLE

    again = await client.get("/api/site-settings", headers=alice["headers"])
    assert again.json()["data"]["id"] == settings["id"]


async def test_update_is_partial_and_public(client, alice):
    response = await client.put(
        "/api/site-settings",
        headers=alice["headers"],
        json={"heroTitle": "  El blog de Alice  "},
    )

    assert response.status_code == 200
    assert response.json()["data"]["heroTitle"] == "El blog de Alice"
    assert response.json()["data"]["heroDescription"] == DEFAULT_HERO_DESCRIPTION

    public = await client.get("/api/site-settings/public", params={"userId": alice["id"]})
    assert public.json()["data"]["heroTitle"] == "El blog de Alice"


async def test_update_validates_lengths(client, alice):
    response = await client.put("/api/site-settings", headers=alice["headers"], json={"heroTitle": "x" * 101})

    assert response.status_code == 400


async def test_settings_require_auth(client):
    assert (await client.get("/api/site-settings")).status_code == 401
    assert (await client.put("/api/site-settings", json={"heroTitle": "x"})).status_code == 401
