import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient

from bunyod_tour.config import Settings
from bunyod_tour.database import Database
from bunyod_tour.main import create_app
from bunyod_tour.models import Category, City, Country, Tour, TourCategoryAssignment, TourCity, TourCountry
from bunyod_tour.services.email_service import EmailService


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url="sqlite://",
        mail_username="",
        mail_password="",
        admin_email="",
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture
def database(settings):
    db = Database(settings.database_url)
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def db_session(database):
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def app(settings, database):
    return create_app(settings, database, EmailService(settings))


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def geography(db_session):
    """Tajikistan (Dushanbe, Khujand) and Uzbekistan (Samarkand)"""
    tajikistan = Country(name={"ru": "Таджикистан", "en": "Tajikistan"}, code="TJ")
    uzbekistan = Country(name={"ru": "Узбекистан", "en": "Uzbekistan"}, code="UZ")
    db_session.add_all([tajikistan, uzbekistan])
    db_session.flush()

    dushanbe = City(name={"ru": "Душанбе", "en": "Dushanbe"}, country_id=tajikistan.id)
    khujand = City(name={"ru": "Худжанд", "en": "Khujand"}, country_id=tajikistan.id)
    samarkand = City(name={"ru": "Самарканд", "en": "Samarkand"}, country_id=uzbekistan.id)
    db_session.add_all([dushanbe, khujand, samarkand])
    db_session.flush()

    ids = {
        "tajikistan": tajikistan.id,
        "uzbekistan": uzbekistan.id,
        "dushanbe": dushanbe.id,
        "khujand": khujand.id,
        "samarkand": samarkand.id,
    }
    db_session.commit()
    return ids


@pytest.fixture
def categories(db_session):
    city_tours = Category(name={"ru": "Городские туры", "en": "City tours"}, type="tour")
    mountain = Category(name={"ru": "Горные туры", "en": "Mountain tours"}, type="tour")
    hotels = Category(name={"ru": "Гостиницы", "en": "Hotels"}, type="hotel")
    db_session.add_all([city_tours, mountain, hotels])
    db_session.flush()
    ids = {"city": city_tours.id, "mountain": mountain.id, "hotel": hotels.id}
    db_session.commit()
    return ids


@pytest.fixture
def published_tour(db_session, geography, categories):
    """Published tour in Dushanbe, Tajikistan"""
    tour = Tour(
        title={"ru": "Обзорный тур по Душанбе", "en": "Dushanbe city tour"},
        description={"ru": "Прогулка по столице", "en": "A walk around the capital"},
        price=120.0,
        price_type="per_person",
        duration_days=1,
        is_draft=False,
    )
    db_session.add(tour)
    db_session.flush()
    db_session.add_all(
        [
            TourCategoryAssignment(tour_id=tour.id, category_id=categories["city"], is_primary=True),
            TourCountry(tour_id=tour.id, country_id=geography["tajikistan"], is_primary=True),
            TourCity(tour_id=tour.id, city_id=geography["dushanbe"], is_primary=True),
        ]
    )
    tour_id = tour.id
    db_session.commit()
    return tour_id


@pytest.fixture
def draft_tour(db_session):
    tour = Tour(title={"ru": "Черновик", "en": ""}, description={"ru": "", "en": ""}, is_draft=True)
    db_session.add(tour)
    db_session.flush()
    tour_id = tour.id
    db_session.commit()
    return tour_id


@pytest.fixture
def tour_payload(geography, categories):
    return {
        "title": {"ru": "Памир за 7 дней", "en": "Pamir in 7 days"},
        "description": {"ru": "Высокогорный маршрут", "en": "High mountain route"},
        "price": 950,
        "priceType": "за человека",
        "durationDays": 7,
        "categoryId": categories["mountain"],
        "countriesIds": [geography["tajikistan"]],
        "citiesIds": [geography["dushanbe"], geography["khujand"]],
    }
