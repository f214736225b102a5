from app.services import attendance, entities, reporting


def _student(session, name):
    return entities.create_student(session, college_id=1, name=name, email=f"{name.lower()}@x.com")


def test_hack_day_scenario(hack_day, session):
    r1, _ = hack_day["registrations"]
    attendance.mark_attendance(session, registration_id=r1, attended=True)

    popular = reporting.popular_events(session)
    participation = reporting.student_participation(session)

    assert [(r["title"], r["total_registrations"]) for r in popular] == [("Hack Day", 2)]
    assert [(r["name"], r["events_attended"]) for r in participation] == [("Asha", 1)]


def test_popular_events_ranked_with_zero_counts(session):
    quiet = entities.create_event(session, college_id=1, title="Quiet Talk")
    busy = entities.create_event(session, college_id=1, title="Busy Fest")
    medium = entities.create_event(session, college_id=1, title="Workshop")
    students = [_student(session, n) for n in ("Asha", "Ben", "Chen")]
    for s in students:
        entities.create_registration(session, student_id=s, event_id=busy)
    entities.create_registration(session, student_id=students[0], event_id=medium)

    rows = reporting.popular_events(session)

    assert [r["event_id"] for r in rows] == [busy, medium, quiet]
    counts = [r["total_registrations"] for r in rows]
    assert counts == [3, 1, 0]
    assert counts == sorted(counts, reverse=True)


def test_popular_events_ties_break_on_event_id(session):
    later_title_first = entities.create_event(session, college_id=1, title="Zeta")
    second = entities.create_event(session, college_id=1, title="Alpha")

    rows = reporting.popular_events(session)

    assert [r["event_id"] for r in rows] == [later_title_first, second]


def test_participation_excludes_students_without_attended_checkins(hack_day, session):
    r1, r2 = hack_day["registrations"]
    _student(session, "Chen")
    attendance.mark_attendance(session, registration_id=r1, attended=True)
    attendance.mark_attendance(session, registration_id=r2, attended=False)

    rows = reporting.student_participation(session)

    assert [r["name"] for r in rows] == ["Asha"]


def test_participation_counts_only_attended_rows(session):
    events = [entities.create_event(session, college_id=1, title=f"E{i}") for i in range(3)]
    asha = _student(session, "Asha")
    ben = _student(session, "Ben")
    for e in events:
        reg = entities.create_registration(session, student_id=ben, event_id=e)
        attendance.mark_attendance(session, registration_id=reg, attended=True)
    for i, e in enumerate(events):
        reg = entities.create_registration(session, student_id=asha, event_id=e)
        attendance.mark_attendance(session, registration_id=reg, attended=(i == 0))

    rows = reporting.student_participation(session)

    assert [(r["name"], r["events_attended"]) for r in rows] == [("Ben", 3), ("Asha", 1)]


def test_top_students_is_prefix_of_participation(session):
    event_ids = [entities.create_event(session, college_id=1, title=f"E{i}") for i in range(4)]
    names = ["Asha", "Ben", "Chen", "Dana", "Eli"]
    # Asha attends 4, Ben 3, Chen 2, Dana 2, Eli 1
    attended_counts = [4, 3, 2, 2, 1]
    student_ids = []
    for name, count in zip(names, attended_counts):
        student_id = _student(session, name)
        student_ids.append(student_id)
        for event_id in event_ids[:count]:
            reg = entities.create_registration(session, student_id=student_id, event_id=event_id)
            attendance.mark_attendance(session, registration_id=reg, attended=True)

    participation = reporting.student_participation(session)
    top = reporting.top_students(session)

    assert len(top) == reporting.TOP_STUDENTS_LIMIT
    assert top == participation[:3]
    assert [r["name"] for r in top] == ["Asha", "Ben", "Chen"]
    # Chen and Dana tie on 2; the lower student_id ranks first
    assert [r["name"] for r in participation[2:4]] == ["Chen", "Dana"]


def test_top_students_shorter_than_limit(hack_day, session):
    r1, _ = hack_day["registrations"]
    attendance.mark_attendance(session, registration_id=r1, attended=True)

    assert [r["name"] for r in reporting.top_students(session)] == ["Asha"]


def test_reports_on_empty_store(session):
    assert reporting.popular_events(session) == []
    assert reporting.student_participation(session) == []
    assert reporting.top_students(session) == []
