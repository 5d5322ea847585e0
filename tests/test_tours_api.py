import pytest


class TestListAndGet:
    def test_get_tour_localized_in_russian_by_default(self, client, published_tour):
        response = client.get(f"/api/tours/{published_tour}")
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["title"] == "Обзорный тур по Душанбе"
        assert body["data"]["country"]["name"] == "Таджикистан"
        assert body["data"]["isActive"] is True

    def test_get_tour_in_english(self, client, published_tour):
        body = client.get(f"/api/tours/{published_tour}?lang=en").json()
        assert body["data"]["title"] == "Dushanbe city tour"
        assert body["language"] == "en"

    def test_unsupported_language_falls_back_to_russian(self, client, published_tour):
        body = client.get(f"/api/tours/{published_tour}?lang=de").json()
        assert body["data"]["title"] == "Обзорный тур по Душанбе"

    def test_include_raw_returns_objects(self, client, published_tour):
        body = client.get(f"/api/tours/{published_tour}?includeRaw=true&lang=en").json()
        assert body["data"]["title"] == {"ru": "Обзорный тур по Душанбе", "en": "Dushanbe city tour"}
        assert body["data"]["_localized"]["title"] == "Dushanbe city tour"

    def test_missing_tour_returns_404(self, client):
        response = client.get("/api/tours/9999")
        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": "Tour not found",
            "code": "TOUR_NOT_FOUND",
            "details": [{"field": "id", "value": 9999}],
        }

    def test_list_view_omits_images(self, client, published_tour):
        body = client.get("/api/tours").json()
        assert [tour["id"] for tour in body["data"]] == [published_tour]
        assert "images" not in body["data"][0]
        assert body["data"][0]["hasImages"] is False

    def test_status_filter(self, client, published_tour, draft_tour):
        published = client.get("/api/tours?status=published").json()["data"]
        drafts = client.get("/api/tours?status=draft").json()["data"]
        assert [tour["id"] for tour in published] == [published_tour]
        assert [tour["id"] for tour in drafts] == [draft_tour]

    def test_scalar_ids_mirror_primary_rows(self, client, published_tour, geography, categories):
        data = client.get(f"/api/tours/{published_tour}").json()["data"]
        assert data["countryId"] == geography["tajikistan"]
        assert data["countriesIds"] == [geography["tajikistan"]]
        assert data["cityId"] == geography["dushanbe"]
        assert data["categoryId"] == categories["city"]


class TestCreate:
    def test_create_published_tour(self, client, tour_payload, geography, categories):
        response = client.post("/api/tours", json=tour_payload)
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["isDraft"] is False
        assert data["isActive"] is True
        assert data["priceType"] == "per_person"
        assert data["categoryId"] == categories["mountain"]
        assert data["citiesIds"] == [geography["dushanbe"], geography["khujand"]]
        assert data["cityId"] == geography["dushanbe"]
        assert [row["isPrimary"] for row in data["tourCities"]] == [True, False]

    def test_create_draft_skips_validation(self, client):
        response = client.post("/api/tours", json={"isDraft": True, "title": {"ru": "Идея"}})
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["isDraft"] is True
        assert data["isActive"] is False

    def test_create_draft_without_title(self, client):
        response = client.post("/api/tours?includeRaw=true", json={"isDraft": True})
        assert response.status_code == 201
        assert response.json()["data"]["title"] == {"ru": "", "en": ""}

    def test_published_tour_needs_both_languages(self, client, tour_payload):
        tour_payload["title"] = {"ru": "Только русский"}
        response = client.post("/api/tours", json=tour_payload)
        assert response.status_code == 400
        assert response.json()["error"] == "Title must include both Russian and English"

    def test_published_tour_needs_category(self, client, tour_payload):
        del tour_payload["categoryId"]
        response = client.post("/api/tours", json=tour_payload)
        assert response.status_code == 400
        assert response.json()["error"] == "Category is required"

    def test_malformed_body_is_a_client_error(self, client, tour_payload):
        tour_payload["price"] = "cheap"
        response = client.post("/api/tours", json=tour_payload)
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"].startswith("price")

    def test_unknown_country_is_rejected(self, client, tour_payload):
        tour_payload["countriesIds"] = [9999]
        response = client.post("/api/tours", json=tour_payload)
        assert response.status_code == 400
        assert "countriesIds" in response.json()["error"]
        assert client.get("/api/tours").json()["data"] == []


class TestUpdate:
    def test_partial_update_keeps_other_fields(self, client, published_tour, geography):
        response = client.put(f"/api/tours/{published_tour}", json={"price": 150})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["price"] == 150
        assert data["title"] == "Обзорный тур по Душанбе"
        assert data["countriesIds"] == [geography["tajikistan"]]

    def test_scalar_only_updates_primary(self, client, published_tour, geography):
        client.put(
            f"/api/tours/{published_tour}",
            json={"citiesIds": [geography["dushanbe"], geography["khujand"]]},
        )
        data = client.put(
            f"/api/tours/{published_tour}", json={"cityId": geography["khujand"]}
        ).json()["data"]
        assert data["cityId"] == geography["khujand"]
        assert data["citiesIds"] == [geography["khujand"]]

    def test_empty_array_clears_cities(self, client, published_tour):
        data = client.put(f"/api/tours/{published_tour}", json={"citiesIds": []}).json()["data"]
        assert data["citiesIds"] == []
        assert data["cityId"] is None
        assert data["city"] is None

    def test_city_outside_country_is_accepted_with_warning(self, client, published_tour, geography):
        response = client.put(
            f"/api/tours/{published_tour}", json={"citiesIds": [geography["samarkand"]]}
        )
        assert response.status_code == 200
        assert response.json()["data"]["cityId"] == geography["samarkand"]

    def test_null_title_is_ignored(self, client, draft_tour):
        response = client.put(f"/api/tours/{draft_tour}", json={"title": None, "price": 10})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["title"] == "Черновик"
        assert data["price"] == 10

    def test_null_flags_keep_stored_values(self, client, published_tour):
        response = client.put(
            f"/api/tours/{published_tour}",
            json={"isFeatured": None, "discountPercent": None, "rating": None},
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["isFeatured"] is False
        assert data["discountPercent"] == 0
        assert data["rating"] == 0

    def test_unset_multilingual_fields_are_empty_strings(self, client, published_tour):
        data = client.get(f"/api/tours/{published_tour}").json()["data"]
        assert data["shortDesc"] == ""
        assert data["highlights"] == ""
        assert data["pickupInfo"] == ""

    def test_update_missing_tour(self, client):
        response = client.put("/api/tours/9999", json={"price": 1})
        assert response.status_code == 404
        assert response.json()["error"] == "Tour not found"


class TestSearchAndDelete:
    def test_search_by_text_and_country(self, client, published_tour, geography):
        body = client.get("/api/tours/search?query=capital&lang=en").json()
        assert body["count"] == 1
        assert body["data"][0]["title"] == "Dushanbe city tour"

        none = client.get(f"/api/tours/search?countryId={geography['uzbekistan']}").json()
        assert none["data"] == []

    def test_search_ignores_drafts(self, client, draft_tour):
        assert client.get("/api/tours/search?query=Черновик").json()["data"] == []

    def test_search_by_duration(self, client, published_tour):
        assert len(client.get("/api/tours/search?duration=1").json()["data"]) == 1
        assert client.get("/api/tours/search?duration=6%2B").json()["data"] == []

    def test_delete(self, client, published_tour):
        response = client.delete(f"/api/tours/{published_tour}")
        assert response.status_code == 200
        assert client.get(f"/api/tours/{published_tour}").status_code == 404


class TestMainImage:
    def test_redirects_to_first_gallery_image(self, client, published_tour):
        client.put(
            f"/api/tours/{published_tour}",
            json={"images": ["https://cdn.example.com/dushanbe.jpg"]},
        )
        response = client.get(f"/api/tours/{published_tour}/main-image", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "https://cdn.example.com/dushanbe.jpg"

    def test_tour_without_images(self, client, published_tour):
        response = client.get(f"/api/tours/{published_tour}/main-image", follow_redirects=False)
        assert response.status_code == 404


class TestTourDetails:
    @pytest.fixture
    def details(self):
        return {
            "includes": {"ru": "Трансфер, гид", "en": "Transfer, guide"},
            "excluded": "Авиабилеты",
            "pickupInfo": "Из отеля в 8:00",
            "pickupInfoEn": "From the hotel at 8:00",
            "startTimeOptions": ["08:00", "09:30"],
            "languages": ["ru", "en"],
            "availableMonths": [5, 6, 7],
            "availableDays": ["mon", "thu"],
            "startDate": "2026-06-01",
            "endDate": "2026-09-30",
            "isPromotion": True,
            "discountPercent": 15,
        }

    def test_details_are_stored(self, client, tour_payload, details):
        tour_payload.update(details)
        response = client.post("/api/tours?includeRaw=true&lang=en", json=tour_payload)
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["included"] == {"ru": "Трансфер, гид", "en": "Transfer, guide"}
        assert data["excluded"] == {"ru": "Авиабилеты", "en": "Авиабилеты"}
        assert data["pickupInfo"] == {"ru": "Из отеля в 8:00", "en": "From the hotel at 8:00"}
        assert data["_localized"]["pickupInfo"] == "From the hotel at 8:00"
        assert data["startTimeOptions"] == ["08:00", "09:30"]
        assert data["languages"] == ["ru", "en"]
        assert data["availableMonths"] == [5, 6, 7]
        assert data["availableDays"] == ["mon", "thu"]
        assert data["startDate"] == "2026-06-01"
        assert data["endDate"] == "2026-09-30"
        assert data["isPromotion"] is True
        assert data["discountPercent"] == 15

    def test_partial_update_of_details(self, client, published_tour):
        data = client.put(
            f"/api/tours/{published_tour}",
            json={"included": {"ru": "Обед", "en": "Lunch"}, "availableMonths": [9]},
        ).json()["data"]
        assert data["included"] == "Обед"
        assert data["availableMonths"] == [9]
        assert data["isPromotion"] is False

    def test_search_by_promotion(self, client, published_tour, tour_payload, details):
        tour_payload.update(details)
        promo_id = client.post("/api/tours", json=tour_payload).json()["data"]["id"]
        data = client.get("/api/tours/search?isPromotion=true").json()["data"]
        assert [tour["id"] for tour in data] == [promo_id]

    def test_duplicate_copies_details(self, client, tour_payload, details):
        tour_payload.update(details)
        tour_id = client.post("/api/tours", json=tour_payload).json()["data"]["id"]
        copy = client.post(f"/api/tours/{tour_id}/duplicate?includeRaw=true").json()["data"]
        assert copy["pickupInfo"] == {"ru": "Из отеля в 8:00", "en": "From the hotel at 8:00"}
        assert copy["availableMonths"] == [5, 6, 7]
        assert copy["isPromotion"] is True
        assert copy["discountPercent"] == 15

    def test_discount_must_be_a_percentage(self, client, published_tour):
        response = client.put(f"/api/tours/{published_tour}", json={"discountPercent": 150})
        assert response.status_code == 400
        assert response.json()["error"].startswith("discountPercent")


class TestSuggestions:
    def test_matches_tours_and_cities(self, client, published_tour, geography):
        body = client.get("/api/tours/suggestions?query=Душ").json()
        assert body["data"] == [
            {"text": "Обзорный тур по Душанбе", "textEn": "Dushanbe city tour", "type": "тур", "id": published_tour},
            {"text": "Душанбе", "textEn": "Dushanbe", "type": "город", "id": geography["dushanbe"]},
        ]

    def test_english_matches(self, client, published_tour, geography):
        data = client.get("/api/tours/suggestions?query=dushanbe").json()["data"]
        assert [(item["text"], item["type"]) for item in data] == [
            ("Dushanbe city tour", "тур"),
            ("Dushanbe", "город"),
        ]

    def test_drafts_are_not_suggested(self, client, draft_tour):
        assert client.get("/api/tours/suggestions?query=черн").json()["data"] == []

    def test_tour_types(self, client):
        data = client.get("/api/tours/suggestions?query=group").json()["data"]
        assert [item["text"] for item in data] == ["Private Group", "Shared Group"]
        assert all(item["type"] == "тип тура" and item["id"] is None for item in data)

    def test_short_query(self, client, published_tour):
        body = client.get("/api/tours/suggestions?query=д").json()
        assert body["data"] == []
        assert body["message"] == "Query too short"

    def test_query_is_required(self, client):
        response = client.get("/api/tours/suggestions")
        assert response.status_code == 400
        assert response.json()["error"] == "Query parameter is required"
