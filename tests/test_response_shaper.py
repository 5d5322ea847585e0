from bunyod_tour.serializers import PRICE_COMPONENT_FIELDS
from bunyod_tour.utils.localization import ResponseMode, normalize_language
from bunyod_tour.utils.response_shaper import shape_entity, shape_response

TOUR = {
    "id": 1,
    "title": {"ru": "Памир", "en": "Pamir"},
    "description": '{"ru": "Горы", "en": "Mountains"}',
    "shortDesc": None,
    "price": 950.0,
    "country": {"id": 3, "name": "Таджикистан", "code": "TJ"},
    "categories": [{"id": 2, "name": {"ru": "Горные туры", "en": "Mountain tours"}}],
}


class TestNormalizeLanguage:
    def test_supported(self):
        assert normalize_language("en") == "en"
        assert normalize_language(" EN ") == "en"

    def test_unsupported_falls_back_to_russian(self):
        assert normalize_language(None) == "ru"
        assert normalize_language("") == "ru"
        assert normalize_language("de") == "ru"


class TestPublicMode:
    def test_multilingual_fields_become_strings(self):
        shaped = shape_entity(TOUR, "en")
        assert shaped["title"] == "Pamir"
        assert shaped["description"] == "Mountains"
        assert shaped["price"] == 950.0
        assert "_localized" not in shaped

    def test_nested_entities_are_shaped(self):
        shaped = shape_entity(TOUR, "en")
        assert shaped["country"]["name"] == "Таджикистан"
        assert shaped["categories"][0]["name"] == "Mountain tours"

    def test_null_becomes_empty_string(self):
        assert shape_entity(TOUR, "ru")["shortDesc"] == ""

    def test_input_is_not_mutated(self):
        shape_entity(TOUR, "en")
        assert TOUR["title"] == {"ru": "Памир", "en": "Pamir"}


class TestRawMode:
    def test_keeps_objects_and_adds_localized(self):
        shaped = shape_entity(TOUR, "en", include_raw=True)
        assert shaped["title"] == {"ru": "Памир", "en": "Pamir"}
        assert shaped["description"] == {"ru": "Горы", "en": "Mountains"}
        assert shaped["_localized"] == {
            "title": "Pamir",
            "description": "Mountains",
            "shortDesc": "",
        }
        assert shaped["shortDesc"] == {"ru": "", "en": ""}
        assert shaped["categories"][0]["_localized"] == {"name": "Mountain tours"}

    def test_entity_without_multilingual_fields_has_no_localized(self):
        assert shape_entity({"id": 1, "price": 5}, "ru", include_raw=True) == {"id": 1, "price": 5}


class TestIdempotence:
    def test_raw_mode(self):
        once = shape_entity(TOUR, "en", include_raw=True)
        assert shape_entity(once, "en", include_raw=True) == once

    def test_public_mode(self):
        once = shape_entity(TOUR, "ru")
        assert shape_entity(once, "ru") == once


def test_shape_response_lists():
    data = shape_response([TOUR, TOUR], ResponseMode(language="en"))
    assert [item["title"] for item in data] == ["Pamir", "Pamir"]


class TestFieldSets:
    COMPONENT = {"key": "porter", "name": {"ru": "Носильщик", "en": "Porter"}, "description": "Per day fee"}

    def test_excluded_key_is_left_as_is(self):
        shaped = shape_entity(self.COMPONENT, "en", include_raw=True, fields=PRICE_COMPONENT_FIELDS)
        assert shaped["description"] == "Per day fee"
        assert shaped["_localized"] == {"name": "Porter"}

    def test_default_fields_would_shape_it(self):
        shaped = shape_entity(self.COMPONENT, "en", include_raw=True)
        assert shaped["description"] == {"ru": "Per day fee", "en": "Per day fee"}

    def test_tour_extras_are_localized(self):
        shaped = shape_entity(
            {"highlights": {"ru": "Озёра", "en": "Lakes"}, "pickupInfo": None, "included": "Трансфер"},
            "en",
        )
        assert shaped == {"highlights": "Lakes", "pickupInfo": "", "included": "Трансфер"}


def test_public_mode_reparses_localized_json_text():
    # a translation that is itself JSON object text is read as stored JSON on a second pass
    entity = {"title": {"ru": '{"ru": "a", "en": "b"}', "en": ""}}
    once = shape_entity(entity, "en")
    assert once["title"] == '{"ru": "a", "en": "b"}'
    assert shape_entity(once, "en")["title"] == "b"
