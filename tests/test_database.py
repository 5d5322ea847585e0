import logging

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from bunyod_tour.database import Database, db_transaction, with_retry
from bunyod_tour.exceptions import DatabaseError
from bunyod_tour.models import Country
from bunyod_tour.services.reference_service import COUNTRIES, ReferenceService


def _operational_error():
    return OperationalError("SELECT 1", {}, Exception("server closed the connection"))


class FlakyOperation:
    def __init__(self, failures):
        self.failures = failures
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise _operational_error()
        return "ok"


class TestWithRetry:
    def test_succeeds_after_transient_errors_with_linear_backoff(self):
        waits = []
        operation = FlakyOperation(failures=2)
        assert with_retry(operation, max_retries=3, delay=0.5, sleep=waits.append) == "ok"
        assert operation.calls == 3
        assert waits == [0.5, 1.0]

    def test_gives_up_after_max_retries(self):
        waits = []
        operation = FlakyOperation(failures=5)
        with pytest.raises(OperationalError):
            with_retry(operation, max_retries=3, delay=1.0, sleep=waits.append)
        assert operation.calls == 3
        assert waits == [1.0, 2.0]

    def test_other_errors_are_not_retried(self):
        calls = []

        def operation():
            calls.append(1)
            raise ValueError("bad input")

        with pytest.raises(ValueError):
            with_retry(operation, sleep=lambda _: None)
        assert len(calls) == 1

    def test_logs_each_retry(self, caplog):
        with caplog.at_level(logging.WARNING, logger="bunyod_tour"):
            with_retry(FlakyOperation(failures=2), delay=0.25, sleep=lambda _: None)
        messages = [
            record.getMessage()
            for record in caplog.records
            if record.getMessage().startswith("Transient database error")
        ]
        assert len(messages) == 2
        assert "attempt 1/3" in messages[0]
        assert "retrying in 0.25s" in messages[0]
        assert "retrying in 0.5s" in messages[1]

    def test_rolls_back_session_between_attempts(self):
        class FakeSession:
            rollbacks = 0

            def rollback(self):
                self.rollbacks += 1

        session = FakeSession()
        with_retry(FlakyOperation(failures=1), db=session, sleep=lambda _: None)
        assert session.rollbacks == 1


class TestTransaction:
    def test_commits_on_success(self, database):
        session = database.session()
        with db_transaction(session):
            session.add(Country(name={"ru": "Таджикистан", "en": "Tajikistan"}, code="TJ"))
        session.close()

        check = database.session()
        assert check.query(Country).count() == 1
        check.close()

    def test_rolls_back_and_reraises(self, database):
        session = database.session()
        with db_transaction(session):
            session.add(Country(name="Tajikistan", code="TJ"))

        with pytest.raises(IntegrityError):
            with db_transaction(session):
                session.add(Country(name="Tajikistan again", code="TJ"))
        assert session.query(Country).count() == 1
        session.close()


def test_check_connection():
    database = Database("sqlite://")
    ok, message = database.check_connection()
    assert ok is True
    assert message == "Database connection successful"
    database.dispose()


def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "healthy"
    assert data["email"] == "not configured"


def test_request_id_header(client):
    response = client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"


def test_unknown_route_uses_envelope(client):
    response = client.get("/api/unknown")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Not Found", "code": "NOT_FOUND"}


def test_reference_reads_give_up_with_database_error():
    class UnreachableSession:
        queries = 0

        def query(self, *args):
            self.queries += 1
            raise _operational_error()

        def rollback(self):
            pass

    session = UnreachableSession()
    service = ReferenceService(session, COUNTRIES, retry_attempts=2, retry_delay=0)
    with pytest.raises(DatabaseError) as exc_info:
        service.get_all()
    assert exc_info.value.status_code == 500
    assert session.queries == 2
