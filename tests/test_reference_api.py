from bunyod_tour.models import TourHotel


class TestCountriesAndCities:
    def test_countries_include_cities(self, client, geography):
        data = client.get("/api/countries?lang=en").json()["data"]
        assert [country["name"] for country in data] == ["Tajikistan", "Uzbekistan"]
        assert [city["name"] for city in data[0]["cities"]] == ["Dushanbe", "Khujand"]

    def test_countries_without_cities(self, client, geography):
        data = client.get("/api/countries?includeCities=false").json()["data"]
        assert "cities" not in data[0]

    def test_cities_by_country(self, client, geography):
        data = client.get(f"/api/cities/country/{geography['uzbekistan']}").json()["data"]
        assert [city["name"] for city in data] == ["Самарканд"]

    def test_city_list_filter(self, client, geography):
        data = client.get(f"/api/cities?countryId={geography['tajikistan']}&lang=en").json()["data"]
        assert [city["name"] for city in data] == ["Dushanbe", "Khujand"]
        assert data[0]["country"]["name"] == "Tajikistan"

    def test_create_city_requires_country(self, client, geography):
        response = client.post("/api/cities", json={"name": {"ru": "Бохтар", "en": "Bokhtar"}})
        assert response.status_code == 400
        assert response.json()["error"] == "Country id is required"

    def test_create_city_with_unknown_country(self, client):
        response = client.post(
            "/api/cities", json={"name": {"ru": "Бохтар", "en": "Bokhtar"}, "countryId": 9999}
        )
        assert response.status_code == 400
        assert response.json()["error"] == "Country not found"

    def test_create_update_delete_country(self, client):
        created = client.post(
            "/api/countries", json={"name": {"ru": "Киргизия", "en": "Kyrgyzstan"}, "code": "KG"}
        )
        assert created.status_code == 201
        country_id = created.json()["data"]["id"]

        updated = client.put(
            f"/api/countries/{country_id}?includeRaw=true",
            json={"name": {"ru": "Кыргызстан", "en": "Kyrgyzstan"}},
        )
        assert updated.json()["data"]["name"] == {"ru": "Кыргызстан", "en": "Kyrgyzstan"}
        assert updated.json()["data"]["code"] == "KG"

        assert client.delete(f"/api/countries/{country_id}").status_code == 200
        assert client.get(f"/api/countries/{country_id}").status_code == 404

    def test_duplicate_country_code_conflicts(self, client, geography):
        response = client.post("/api/countries", json={"name": "Tajikistan", "code": "TJ"})
        assert response.status_code == 409
        assert response.json()["success"] is False

    def test_legacy_plain_string_name(self, client):
        response = client.post("/api/countries?includeRaw=true", json={"name": "Казахстан", "code": "KZ"})
        assert response.json()["data"]["name"] == {"ru": "Казахстан", "en": "Казахстан"}


class TestCategories:
    def test_filter_by_type(self, client, categories):
        data = client.get("/api/categories?type=hotel&lang=en").json()["data"]
        assert [category["name"] for category in data] == ["Hotels"]

    def test_invalid_type_filter(self, client, categories):
        assert client.get("/api/categories?type=cruise").status_code == 400

    def test_invalid_type_on_create(self, client):
        response = client.post("/api/categories", json={"name": "Круизы", "type": "cruise"})
        assert response.status_code == 400

    def test_missing_category(self, client):
        response = client.get("/api/categories/9999")
        assert response.status_code == 404
        assert response.json()["error"] == "Category not found"


class TestHotels:
    def test_hotels_for_tour_include_nightly_price(self, client, db_session, published_tour, geography):
        hotel = client.post(
            "/api/hotels",
            json={
                "name": {"ru": "Гостиница Душанбе", "en": "Dushanbe Hotel"},
                "stars": 4,
                "countryId": geography["tajikistan"],
                "cityId": geography["dushanbe"],
                "amenities": ["wifi", "breakfast"],
            },
        ).json()["data"]
        assert hotel["amenities"] == ["wifi", "breakfast"]

        client.put(f"/api/tours/{published_tour}", json={"hotelIds": [hotel["id"]]})
        link = db_session.query(TourHotel).filter(TourHotel.tour_id == published_tour).one()
        assert link.is_default is False
        link.price_per_night = 85.0
        db_session.commit()

        data = client.get(f"/api/hotels?tourId={published_tour}&lang=en").json()["data"]
        assert data[0]["name"] == "Dushanbe Hotel"
        assert data[0]["pricePerNight"] == 85.0
        assert data[0]["isDefault"] is False

    def test_filter_by_city(self, client, geography):
        client.post(
            "/api/hotels",
            json={"name": "Samarkand Plaza", "countryId": geography["uzbekistan"], "cityId": geography["samarkand"]},
        )
        assert client.get(f"/api/hotels?cityId={geography['dushanbe']}").json()["data"] == []
        assert len(client.get(f"/api/hotels?cityId={geography['samarkand']}").json()["data"]) == 1


class TestTourBlocks:
    def test_block_tours_lists_published_tours(self, client, published_tour, draft_tour):
        block = client.post(
            "/api/tour-blocks",
            json={"title": {"ru": "Популярные туры", "en": "Popular tours"}, "slug": "popular"},
        ).json()["data"]

        client.put(f"/api/tours/{published_tour}", json={"tourBlockIds": [block["id"]]})
        client.put(f"/api/tours/{draft_tour}", json={"tourBlockId": block["id"]})

        data = client.get(f"/api/tour-blocks/{block['id']}/tours").json()["data"]
        assert [tour["id"] for tour in data] == [published_tour]

    def test_blocks_are_sorted(self, client):
        client.post("/api/tour-blocks", json={"title": "Второй", "sortOrder": 2})
        client.post("/api/tour-blocks", json={"title": "Первый", "sortOrder": 1})
        data = client.get("/api/tour-blocks").json()["data"]
        assert [block["title"] for block in data] == ["Первый", "Второй"]


def test_guides_and_drivers(client):
    guide = client.post(
        "/api/guides", json={"name": {"ru": "Фарход", "en": "Farhod"}, "languages": ["ru", "en"]}
    )
    driver = client.post("/api/drivers", json={"name": "Саид", "vehicleType": "4WD"})
    assert guide.status_code == 201
    assert driver.status_code == 201
    assert client.get("/api/guides?lang=en").json()["data"][0]["languages"] == ["ru", "en"]
    assert client.get("/api/drivers").json()["data"][0]["vehicleType"] == "4WD"
