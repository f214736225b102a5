import pytest
from fastapi.testclient import TestClient

from app.database import Database
from app.main import create_app
from app.services import entities


@pytest.fixture
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'campus_events.db'}")
    db.create_tables()
    yield db
    db.dispose()


@pytest.fixture
def session(database):
    with database.session(write=True) as db:
        yield db


@pytest.fixture
def client(database):
    with TestClient(create_app(database)) as test_client:
        yield test_client


@pytest.fixture
def count_rows(database):
    """Count rows of a model through a fresh read session."""
    def _count(model):
        with database.session() as db:
            return db.query(model).count()
    return _count


@pytest.fixture
def hack_day(session):
    """One event and two students, both registered for it."""
    event_id = entities.create_event(session, college_id=1, title="Hack Day", event_type="Hackathon")
    s1 = entities.create_student(session, college_id=1, name="Asha", email="a@x.com", year=2, department="CSE")
    s2 = entities.create_student(session, college_id=1, name="Ben", email="b@x.com", year=3, department="ECE")
    r1 = entities.create_registration(session, student_id=s1, event_id=event_id)
    r2 = entities.create_registration(session, student_id=s2, event_id=event_id)
    return {"event": event_id, "students": (s1, s2), "registrations": (r1, r2)}
