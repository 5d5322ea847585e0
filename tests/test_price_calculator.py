from bunyod_tour.services.price_calculator_service import DEFAULT_COMPONENTS


def test_initialize_is_idempotent(client):
    first = client.post("/api/price-calculator/initialize").json()
    assert first["created"] == len(DEFAULT_COMPONENTS)
    assert first["skipped"] == 0

    second = client.post("/api/price-calculator/initialize").json()
    assert second["created"] == 0
    assert second["skipped"] == len(DEFAULT_COMPONENTS)
    assert len(second["data"]) == len(DEFAULT_COMPONENTS)


def test_calculate_total(client):
    client.post("/api/price-calculator/initialize")
    response = client.post(
        "/api/price-calculator/calculate?lang=en",
        json={
            "components": [
                {"key": "guide_local", "quantity": 2},
                {"key": "meal_hb", "quantity": 3},
                {"key": "unknown_component", "quantity": 10},
            ]
        },
    )
    data = response.json()["data"]
    assert data["totalPrice"] == 1210.0
    assert data["currency"] == "TJS"
    assert [line["key"] for line in data["calculation"]] == ["guide_local", "meal_hb"]
    assert data["calculation"][0]["component"] == "Tour Guide, local"
    assert data["calculation"][0]["total"] == 1000.0


def test_get_component_by_key(client):
    client.post("/api/price-calculator/initialize")
    data = client.get("/api/price-calculator/permit_gbao?lang=en").json()["data"]
    assert data["name"] == "GBAO Entry Permit"
    assert data["price"] == 250.0
    assert client.get("/api/price-calculator/missing").status_code == 404


def test_create_update_delete_component(client):
    created = client.post(
        "/api/price-calculator",
        json={
            "key": "horse_riding",
            "category": "activities",
            "name": {"ru": "Верховая езда"},
            "nameEn": "Horse riding",
            "price": 300,
            "unit": "человек",
        },
    )
    assert created.status_code == 201
    component = created.json()["data"]
    assert component["name"] == "Верховая езда"

    duplicate = client.post(
        "/api/price-calculator",
        json={"key": "horse_riding", "category": "activities", "name": "x", "price": 1, "unit": "x"},
    )
    assert duplicate.status_code == 409

    updated = client.put(f"/api/price-calculator/{component['id']}", json={"price": 350})
    assert updated.json()["data"]["price"] == 350

    assert client.delete(f"/api/price-calculator/{component['id']}").status_code == 200
    assert client.get(f"/api/price-calculator/id/{component['id']}").status_code == 404


def test_negative_price_is_rejected(client):
    response = client.post(
        "/api/price-calculator",
        json={"key": "free", "category": "misc", "name": "x", "price": -1, "unit": "x"},
    )
    assert response.status_code == 400


def test_tour_services_are_enriched_from_catalogue(client, published_tour):
    client.post("/api/price-calculator/initialize")
    client.put(
        f"/api/tours/{published_tour}",
        json={"services": [{"key": "meal_fb", "quantity": 2}, {"name": "Сувенир"}]},
    )
    services = client.get(f"/api/tours/{published_tour}?lang=en").json()["data"]["services"]
    assert services[0]["price"] == 130.0
    assert services[0]["quantity"] == 2
    assert services[0]["name"] == "Meals, Lunch & Dinner, FB"
    assert services[1] == {"name": "Сувенир"}


def test_plain_description_is_not_treated_as_multilingual(client):
    created = client.post(
        "/api/price-calculator",
        json={
            "key": "porter",
            "category": "staff",
            "name": {"ru": "Носильщик", "en": "Porter"},
            "price": 150,
            "unit": "день",
            "description": "Per day fee",
        },
    ).json()["data"]
    assert created["description"] == "Per day fee"

    raw = client.get("/api/price-calculator/porter?includeRaw=true&lang=en").json()["data"]
    assert raw["name"] == {"ru": "Носильщик", "en": "Porter"}
    assert raw["description"] == "Per day fee"
    assert raw["_localized"] == {"name": "Porter"}

    # the admin panel sends the raw payload back unchanged
    response = client.put(
        f"/api/price-calculator/{created['id']}",
        json={"name": raw["name"], "description": raw["description"], "price": 175},
    )
    assert response.status_code == 200
    assert response.json()["data"]["description"] == "Per day fee"
    assert response.json()["data"]["price"] == 175
