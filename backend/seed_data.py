"""
Data Seeding Script - Loads a small demo dataset into the platform via API.

Creates a few events and students, registers them, checks some of them in,
collects feedback, then prints the popular-events report.

Usage:
    python seed_data.py                              # Uses default URL
    python seed_data.py http://localhost:8000         # Custom API URL
"""

import os
import sys

import httpx

COLLEGE_ID = 1

EVENTS = [
    {"college_id": COLLEGE_ID, "title": "Hack Day", "event_type": "Hackathon",
     "start_date": "2025-09-10T09:00:00", "end_date": "2025-09-10T21:00:00"},
    {"college_id": COLLEGE_ID, "title": "Intro to Rust", "event_type": "Workshop",
     "start_date": "2025-09-12T14:00:00", "end_date": "2025-09-12T17:00:00"},
    {"college_id": COLLEGE_ID, "title": "Cultural Fest", "event_type": "Fest",
     "start_date": "2025-09-20", "end_date": "2025-09-21"},
]

STUDENTS = [
    {"college_id": COLLEGE_ID, "name": "Asha Rao", "email": "asha@campus.edu", "year": 2, "department": "CSE"},
    {"college_id": COLLEGE_ID, "name": "Ben Okafor", "email": "ben@campus.edu", "year": 3, "department": "ECE"},
    {"college_id": COLLEGE_ID, "name": "Chen Li", "email": "chen@campus.edu", "year": 1, "department": "ME"},
]

# (student index, event index, attended)
REGISTRATIONS = [
    (0, 0, True),
    (1, 0, True),
    (2, 0, False),
    (0, 1, True),
    (1, 2, None),
]


def post_json(client, path, data):
    resp = client.post(path, json=data)
    resp.raise_for_status()
    return resp.json()


def seed(client) -> dict:
    """
    Create the demo dataset through `client`, any httpx-compatible client
    whose base URL points at the API. Returns a summary of created ids.
    """
    event_ids = [post_json(client, "/events", e)["event_id"] for e in EVENTS]
    student_ids = [post_json(client, "/students", s)["student_id"] for s in STUDENTS]

    registration_ids = []
    for student_idx, event_idx, attended in REGISTRATIONS:
        registration_id = post_json(client, "/register", {
            "student_id": student_ids[student_idx],
            "event_id": event_ids[event_idx],
        })["registration_id"]
        registration_ids.append(registration_id)

        if attended is not None:
            post_json(client, "/admin/attendance", {
                "registration_id": registration_id,
                "attended": attended,
            })
        if attended:
            post_json(client, "/feedback", {
                "registration_id": registration_id,
                "rating": 4,
                "comments": "Great session",
            })

    return {
        "events": event_ids,
        "students": student_ids,
        "registrations": registration_ids,
    }


def main():
    api_url = sys.argv[1] if len(sys.argv) > 1 else os.getenv("API_URL", "http://localhost:8000")

    print(f"Seeding demo data into: {api_url}")
    with httpx.Client(base_url=api_url, timeout=30.0) as client:
        summary = seed(client)
        resp = client.get("/reports/popular-events")
        resp.raise_for_status()
        report = resp.json()

    print("=" * 60)
    print("SEED SUMMARY")
    print("=" * 60)
    print(f"  Events:        {len(summary['events'])}")
    print(f"  Students:      {len(summary['students'])}")
    print(f"  Registrations: {len(summary['registrations'])}")
    print("=" * 60)
    print()
    print("Popular events:")
    for row in report:
        print(f"  {row['total_registrations']:>3}  {row['title']}")


if __name__ == "__main__":
    main()
