from datetime import datetime

import pytest
from sqlalchemy import inspect

from app.errors import ConflictError, ReferentialError, ValidationError
from app.models import Feedback, Registration, Student
from app.services import entities


def test_create_event_returns_increasing_ids(session):
    first = entities.create_event(session, college_id=1, title="Hack Day")
    second = entities.create_event(session, college_id=1, title="Career Fair",
                                   start_date=datetime(2025, 9, 10, 9, 0))

    assert second > first
    events = entities.list_events(session)
    assert [e.title for e in events] == ["Hack Day", "Career Fair"]
    assert events[1].start_date == datetime(2025, 9, 10, 9, 0)


@pytest.mark.parametrize("missing", ["college_id", "title"])
def test_create_event_requires_fields(session, missing):
    kwargs = {"college_id": 1, "title": "Hack Day"}
    kwargs[missing] = None

    with pytest.raises(ValidationError) as exc_info:
        entities.create_event(session, **kwargs)

    assert exc_info.value.field == missing


def test_blank_title_counts_as_missing(session):
    with pytest.raises(ValidationError):
        entities.create_event(session, college_id=1, title="   ")


@pytest.mark.parametrize("missing", ["college_id", "name", "email"])
def test_create_student_requires_fields(session, missing):
    kwargs = {"college_id": 1, "name": "Asha", "email": "a@x.com"}
    kwargs[missing] = None

    with pytest.raises(ValidationError) as exc_info:
        entities.create_student(session, **kwargs)

    assert exc_info.value.field == missing


def test_duplicate_email_conflicts(session, count_rows):
    entities.create_student(session, college_id=1, name="Asha", email="a@x.com")

    with pytest.raises(ConflictError) as exc_info:
        entities.create_student(session, college_id=2, name="Other Asha", email="a@x.com")

    assert exc_info.value.constraint == "uq_students_email"
    assert count_rows(Student) == 1


def test_email_is_normalized_before_uniqueness_check(session):
    student_id = entities.create_student(session, college_id=1, name="Asha", email="  Asha@X.com ")

    with pytest.raises(ConflictError):
        entities.create_student(session, college_id=1, name="Asha", email="asha@x.com")

    assert session.get(Student, student_id).email == "asha@x.com"


def test_duplicate_registration_conflicts(hack_day, session, count_rows):
    s1, _ = hack_day["students"]

    with pytest.raises(ConflictError) as exc_info:
        entities.create_registration(session, student_id=s1, event_id=hack_day["event"])

    assert exc_info.value.constraint == "uq_registrations_student_event"
    assert count_rows(Registration) == 2


def test_registration_for_unknown_student_is_referential_error(session, count_rows):
    event_id = entities.create_event(session, college_id=1, title="Hack Day")

    with pytest.raises(ReferentialError) as exc_info:
        entities.create_registration(session, student_id=999, event_id=event_id)

    assert exc_info.value.entity == "students"
    assert exc_info.value.value == 999
    assert count_rows(Registration) == 0


def test_registration_for_unknown_event_is_referential_error(session):
    student_id = entities.create_student(session, college_id=1, name="Asha", email="a@x.com")

    with pytest.raises(ReferentialError) as exc_info:
        entities.create_registration(session, student_id=student_id, event_id=42)

    assert exc_info.value.entity == "events"


def test_registration_requires_both_ids(session):
    with pytest.raises(ValidationError) as exc_info:
        entities.create_registration(session, student_id=1, event_id=None)

    assert exc_info.value.field == "event_id"


def test_n_distinct_registrations_produce_n_rows(session, count_rows):
    events = [entities.create_event(session, college_id=1, title=f"Event {i}") for i in range(3)]
    students = [
        entities.create_student(session, college_id=1, name=f"S{i}", email=f"s{i}@x.com")
        for i in range(4)
    ]

    ids = [
        entities.create_registration(session, student_id=s, event_id=e)
        for s in students for e in events
    ]

    assert len(set(ids)) == len(ids) == 12
    assert count_rows(Registration) == 12


def test_feedback_allows_several_entries_per_registration(hack_day, session, count_rows):
    r1, _ = hack_day["registrations"]

    first = entities.submit_feedback(session, registration_id=r1, rating=5, comments="Loved it")
    second = entities.submit_feedback(session, registration_id=r1, rating=3)

    assert first != second
    assert count_rows(Feedback) == 2


def test_feedback_for_unknown_registration_is_referential_error(session, count_rows):
    with pytest.raises(ReferentialError):
        entities.submit_feedback(session, registration_id=7, rating=4)

    assert count_rows(Feedback) == 0


def test_feedback_requires_rating(hack_day, session):
    r1, _ = hack_day["registrations"]

    with pytest.raises(ValidationError) as exc_info:
        entities.submit_feedback(session, registration_id=r1, rating=None)

    assert exc_info.value.field == "rating"


def test_student_registrations_join_event_details(hack_day, session):
    other = entities.create_event(session, college_id=1, title="Workshop", event_type="Workshop",
                                  start_date=datetime(2025, 10, 1), end_date=datetime(2025, 10, 2))
    s1, _ = hack_day["students"]
    entities.create_registration(session, student_id=s1, event_id=other)

    rows = entities.list_student_registrations(session, s1)

    assert [r["title"] for r in rows] == ["Hack Day", "Workshop"]
    assert rows[1]["event_type"] == "Workshop"
    assert rows[1]["start_date"] == datetime(2025, 10, 1)
    assert set(rows[0]) == {"registration_id", "title", "event_type", "start_date", "end_date"}


def test_events_with_counts_include_zero(hack_day, session):
    empty = entities.create_event(session, college_id=1, title="Quiet Talk")

    rows = entities.list_events_with_registration_counts(session)

    counts = {r["event_id"]: r["total_registrations"] for r in rows}
    assert counts == {hack_day["event"]: 2, empty: 0}


def test_event_registrants_report_unmarked_attendance_as_none(hack_day, session):
    rows = entities.list_event_registrants(session, hack_day["event"])

    assert [r["name"] for r in rows] == ["Asha", "Ben"]
    assert rows[0]["department"] == "CSE"
    assert rows[0]["year"] == "2"
    assert all(r["attended"] is None for r in rows)


def test_schema_has_six_relations(database):
    inspector = inspect(database.engine)

    assert set(inspector.get_table_names()) == {
        "colleges", "events", "students", "registrations", "attendance", "feedback",
    }
    unique_names = {u["name"] for u in inspector.get_unique_constraints("attendance")}
    assert "uq_attendance_registration" in unique_names
