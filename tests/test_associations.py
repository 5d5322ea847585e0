import logging

import pytest

from bunyod_tour.exceptions import ValidationError
from bunyod_tour.models import Tour, TourCity, TourCountry
from bunyod_tour.services.association_service import (
    CITIES,
    COUNTRIES,
    check_city_membership,
    reconcile_association,
    reconcile_tour_associations,
)


@pytest.fixture
def tour(db_session):
    tour = Tour(title={"ru": "Тур", "en": "Tour"}, is_draft=True)
    db_session.add(tour)
    db_session.flush()
    return tour


def _country_rows(db_session, tour):
    rows = (
        db_session.query(TourCountry)
        .filter(TourCountry.tour_id == tour.id)
        .order_by(TourCountry.is_primary.desc(), TourCountry.id)
        .all()
    )
    return [(row.country_id, row.is_primary) for row in rows]


class TestArrayReplace:
    def test_index_zero_becomes_primary(self, db_session, tour, geography):
        reconcile_association(
            db_session, tour, COUNTRIES, ids=[geography["uzbekistan"], geography["tajikistan"]]
        )
        assert _country_rows(db_session, tour) == [
            (geography["uzbekistan"], True),
            (geography["tajikistan"], False),
        ]
        assert tour.country_id == geography["uzbekistan"]

    def test_array_replaces_existing_rows(self, db_session, tour, geography):
        reconcile_association(db_session, tour, COUNTRIES, ids=[geography["tajikistan"]])
        reconcile_association(db_session, tour, COUNTRIES, ids=[geography["uzbekistan"]])
        assert _country_rows(db_session, tour) == [(geography["uzbekistan"], True)]

    def test_empty_array_clears(self, db_session, tour, geography):
        reconcile_association(db_session, tour, COUNTRIES, ids=[geography["tajikistan"]])
        reconcile_association(db_session, tour, COUNTRIES, ids=[])
        assert _country_rows(db_session, tour) == []
        assert tour.country_id is None

    def test_duplicates_are_collapsed(self, db_session, tour, geography):
        tj = geography["tajikistan"]
        reconcile_association(db_session, tour, COUNTRIES, ids=[tj, tj])
        assert _country_rows(db_session, tour) == [(tj, True)]

    def test_array_wins_over_scalar(self, db_session, tour, geography):
        reconcile_association(
            db_session,
            tour,
            COUNTRIES,
            scalar_id=geography["uzbekistan"],
            ids=[geography["tajikistan"]],
        )
        assert _country_rows(db_session, tour) == [(geography["tajikistan"], True)]

    def test_unknown_ids_are_rejected(self, db_session, tour):
        with pytest.raises(ValidationError) as exc_info:
            reconcile_association(db_session, tour, COUNTRIES, ids=[9999])
        assert "countriesIds" in exc_info.value.message


class TestScalarUpsert:
    def test_creates_primary_row(self, db_session, tour, geography):
        reconcile_association(db_session, tour, COUNTRIES, scalar_id=geography["tajikistan"])
        assert _country_rows(db_session, tour) == [(geography["tajikistan"], True)]

    def test_updates_primary_and_keeps_secondary_rows(self, db_session, tour, geography):
        reconcile_association(
            db_session, tour, CITIES, ids=[geography["dushanbe"], geography["khujand"]]
        )
        reconcile_association(db_session, tour, CITIES, scalar_id=geography["samarkand"])

        rows = (
            db_session.query(TourCity)
            .filter(TourCity.tour_id == tour.id)
            .order_by(TourCity.is_primary.desc(), TourCity.id)
            .all()
        )
        assert [(row.city_id, row.is_primary) for row in rows] == [
            (geography["samarkand"], True),
            (geography["khujand"], False),
        ]
        assert tour.city_id == geography["samarkand"]

    def test_promotes_existing_secondary_row(self, db_session, tour, geography):
        reconcile_association(db_session, tour, COUNTRIES, ids=[geography["tajikistan"]])
        # drop the primary flag to simulate rows written before flags existed
        db_session.query(TourCountry).update({"is_primary": False})
        db_session.flush()

        reconcile_association(db_session, tour, COUNTRIES, scalar_id=geography["tajikistan"])
        assert _country_rows(db_session, tour) == [(geography["tajikistan"], True)]


class TestNoOp:
    def test_neither_key_leaves_rows_untouched(self, db_session, tour, geography):
        reconcile_association(db_session, tour, COUNTRIES, ids=[geography["tajikistan"]])
        reconcile_tour_associations(db_session, tour, {"title": {"ru": "Новое", "en": "New"}})
        assert _country_rows(db_session, tour) == [(geography["tajikistan"], True)]

    def test_explicit_null_is_treated_as_absent(self, db_session, tour, geography):
        reconcile_association(db_session, tour, COUNTRIES, ids=[geography["tajikistan"]])
        reconcile_tour_associations(
            db_session, tour, {"country_id": None, "countries_ids": None}
        )
        assert _country_rows(db_session, tour) == [(geography["tajikistan"], True)]


class TestCityMembership:
    def test_mismatch_is_logged_and_kept(self, db_session, tour, geography, caplog):
        payload = {
            "countries_ids": [geography["tajikistan"]],
            "cities_ids": [geography["dushanbe"], geography["samarkand"]],
        }
        with caplog.at_level(logging.WARNING, logger="bunyod_tour"):
            reconcile_tour_associations(db_session, tour, payload)

        assert tour.city_id == geography["dushanbe"]
        assert [row.city_id for row in tour.tour_cities] == [
            geography["dushanbe"],
            geography["samarkand"],
        ]
        assert any("outside countries" in record.getMessage() for record in caplog.records)

    def test_reject_policy_raises(self, db_session, tour, geography):
        payload = {
            "countries_ids": [geography["tajikistan"]],
            "cities_ids": [geography["samarkand"]],
        }
        with pytest.raises(ValidationError) as exc_info:
            reconcile_tour_associations(db_session, tour, payload, policy="reject")
        assert exc_info.value.details[0]["cities"] == [geography["samarkand"]]

    def test_matching_cities_pass(self, db_session, tour, geography):
        reconcile_association(db_session, tour, COUNTRIES, ids=[geography["tajikistan"]])
        reconcile_association(db_session, tour, CITIES, ids=[geography["khujand"]])
        assert check_city_membership(db_session, tour, "reject") == []


def test_city_nights_are_stored(db_session, tour, geography):
    reconcile_tour_associations(
        db_session,
        tour,
        {
            "cities_ids": [geography["dushanbe"], geography["khujand"]],
            "city_nights": {str(geography["dushanbe"]): 2, str(geography["khujand"]): 3},
        },
    )
    nights = {row.city_id: row.nights_count for row in tour.tour_cities}
    assert nights == {geography["dushanbe"]: 2, geography["khujand"]: 3}
